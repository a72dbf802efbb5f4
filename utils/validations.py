"""
Input validation utilities
"""
import math
import re
from datetime import date
from typing import Iterable, Optional

from models.errors import ValidationError
from utils.helpers import parse_date


def require_text(value, field_name: str) -> str:
    """Return the stripped value, or raise if it is blank"""
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_positive_amount(value, field_name: str) -> float:
    """Return the value as a float, or raise if it is not a positive number"""
    try:
        amount = float(value)
    except (ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number")

    if not math.isfinite(amount):
        raise ValidationError(f"{field_name} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return amount


def require_positive_int(value, field_name: str) -> int:
    """Return the value as an int, or raise if it is not a positive whole number"""
    try:
        number = int(str(value).strip())
    except (ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a whole number")

    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def require_choice(value, choices: Iterable[str], field_name: str) -> str:
    """Return the value if it is one of choices, else raise"""
    choices = list(choices)
    if value not in choices:
        raise ValidationError(f"{field_name} must be one of {', '.join(choices)}")
    return value


def validate_contact_number(contact_number) -> str:
    """Validate a phone number: digits with optional leading +, spaces or dashes"""
    text = require_text(contact_number, "Contact number")
    if not re.match(r'^\+?[0-9][0-9\s\-]{5,}$', text):
        raise ValidationError(f"Contact number '{text}' is not a valid phone number")
    return text


def validate_date(value, field_name: str, required: bool = False) -> Optional[date]:
    """Parse a date; blank gives None unless required, anything unparseable raises"""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f"{field_name} '{value}' is not a valid date")
    return parsed


def require_bool(value, field_name: str) -> bool:
    """Return the value if it is True or False; strings and numbers raise"""
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value
