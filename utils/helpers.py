"""
Helper utility functions
"""
from datetime import datetime, date
from typing import Optional, Union
from uuid import uuid4

from config import settings


def format_currency(amount: float) -> str:
    """Format a number as rupees"""
    symbol = settings.CURRENCY_SYMBOL
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_amount(amount: float) -> str:
    """Format an amount without decimals when it is whole (7500.0 -> '7500')"""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


def parse_month(month_str: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse various month formats to the first day of that month
    Examples: "2026-02", "Feb 2026", "02/2026", date(2026, 2, 14)
    """
    if not month_str:
        return None

    if isinstance(month_str, date):
        return date(month_str.year, month_str.month, 1)

    formats = [
        "%Y-%m",  # 2026-02
        "%b %Y",  # Feb 2026
        "%B %Y",  # February 2026
        "%m/%Y",  # 02/2026
        "%Y/%m",  # 2026/02
    ]

    for fmt in formats:
        try:
            dt = datetime.strptime(str(month_str).strip(), fmt)
            return date(dt.year, dt.month, 1)
        except ValueError:
            continue

    return None


def parse_date(date_str: Union[str, date, None]) -> Optional[date]:
    """
    Parse various date formats to a date object
    """
    if not date_str:
        return None

    if isinstance(date_str, datetime):
        return date_str.date()

    if isinstance(date_str, date):
        return date_str

    formats = [
        settings.DATE_FORMAT,  # 2026-02-01
        "%d/%m/%Y",  # 01/02/2026
        "%Y/%m/%d",  # 2026/02/01
        "%d %b %Y",  # 01 Feb 2026
    ]

    for fmt in formats:
        try:
            return datetime.strptime(str(date_str).strip(), fmt).date()
        except ValueError:
            continue

    # Stored timestamps ("2026-02-01T10:00:00") are accepted as dates too
    try:
        return datetime.fromisoformat(str(date_str).strip()).date()
    except ValueError:
        return None


def parse_timestamp(value: Union[str, datetime, date]) -> datetime:
    """Parse an ISO-8601 timestamp"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))


def year_month(value: Union[date, datetime]) -> str:
    """Get the YYYY-MM key of a date (e.g., '2026-02')"""
    return value.strftime(settings.MONTH_FORMAT)


def same_month(value: Union[date, datetime], month_start: date) -> bool:
    """Check whether a date falls within the calendar month starting at month_start"""
    return value.year == month_start.year and value.month == month_start.month


def get_month_name(month_date: date) -> str:
    """Get month name from date (e.g., 'Feb 2026')"""
    if not month_date:
        return ""
    return month_date.strftime("%b %Y")


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID"""
    unique = uuid4().hex[:9].upper()
    if prefix:
        return f"{prefix}-{unique}"
    return unique
