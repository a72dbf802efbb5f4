"""
Reporting aggregator - financial summaries and monthly settlement reports
"""
from datetime import date, datetime
from typing import List, Optional, Union

import pandas as pd

from config import settings
from models.entities import Resident, Expense
from models.errors import ValidationError
from utils.helpers import get_month_name, parse_month, same_month, year_month


class ReportingAggregator:
    """
    Derives read-only views from residents and expenses. Nothing here
    mutates the inputs; every call recomputes from them.
    """

    def __init__(self, residents: List[Resident], expenses: Optional[List[Expense]] = None):
        self.residents = residents
        self.expenses = expenses or []

    def summary_stats(self) -> dict:
        """
        Point-in-time totals based on each resident's live payment status.
        Returns: {'occupancy', 'collected', 'pending', 'expenses', 'profit'}
        """
        collected = sum(r.rent for r in self.residents if r.is_paid)
        pending = sum(r.rent for r in self.residents if not r.is_paid)
        total_expenses = sum(e.amount for e in self.expenses)

        return {
            'occupancy': len(self.residents),
            'collected': collected,
            'pending': pending,
            'expenses': total_expenses,
            'profit': collected - total_expenses,
        }

    def monthly_settlement_report(self, month: Union[str, date, datetime]) -> dict:
        """
        Settlement snapshot for one calendar month, based only on dated
        payment entries. A resident who is PAID now but has no entry in the
        month shows as not paid for that month.

        Returns:
            {'month', 'label', 'rows', 'collected', 'pending', 'paid_count', 'due_count'}
        """
        month_start = parse_month(month)
        if month_start is None:
            raise ValidationError(f"Unrecognised month: {month}")

        rows = []
        for resident in self.residents:
            payments = [p for p in resident.payment_history if same_month(p.date, month_start)]
            rows.append({
                'resident_id': resident.id,
                'name': resident.full_name,
                'hostel_name': resident.hostel_name,
                'room_number': resident.room_number,
                'rent': resident.rent,
                'has_paid_this_month': bool(payments),
                'amount_paid_this_month': sum(p.amount for p in payments),
                'payments': payments,
            })

        paid_rows = [row for row in rows if row['has_paid_this_month']]
        due_rows = [row for row in rows if not row['has_paid_this_month']]

        return {
            'month': year_month(month_start),
            'label': get_month_name(month_start),
            'rows': rows,
            'collected': sum(row['amount_paid_this_month'] for row in rows),
            'pending': sum(row['rent'] for row in due_rows),
            'paid_count': len(paid_rows),
            'due_count': len(due_rows),
        }

    def filter_residents(
        self,
        status: str = settings.FILTER_ALL,
        room_type: str = settings.FILTER_ALL,
    ) -> List[Resident]:
        """
        Filter by payment status (ALL, PAID, UNPAID) and room type (ALL, AC, NON_AC).
        UNPAID matches every resident who is not PAID.
        """
        filtered = self.residents

        if status == settings.STATUS_PAID:
            filtered = [r for r in filtered if r.is_paid]
        elif status == settings.STATUS_UNPAID:
            filtered = [r for r in filtered if not r.is_paid]

        if room_type != settings.FILTER_ALL:
            filtered = [r for r in filtered if r.room_type == room_type]

        return filtered

    def search_residents(self, query: str) -> List[Resident]:
        """Case-insensitive match on first name, last name or room number"""
        if not query:
            return list(self.residents)

        q = query.lower()
        return [
            r for r in self.residents
            if q in r.first_name.lower() or q in r.last_name.lower() or q in r.room_number.lower()
        ]

    @staticmethod
    def report_to_dataframe(report: dict) -> pd.DataFrame:
        """Monthly report rows as a DataFrame (payments column dropped)"""
        if not report.get('rows'):
            return pd.DataFrame()

        df = pd.DataFrame(report['rows']).drop(columns=['payments'])
        df['status'] = df['has_paid_this_month'].map({True: 'Paid', False: 'Due'})
        return df
