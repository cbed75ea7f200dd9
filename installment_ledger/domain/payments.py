"""Partial payment reconciliation against a month's due total"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from installment_ledger.domain.models import NetPosition, PaymentRecord
from installment_ledger.utils.date_utils import format_month, parse_month
from installment_ledger.utils.money import ZERO


def filter_payment_records(
    records: Iterable[PaymentRecord],
    user_id: Optional[str] = None,
    month: str | date | None = None,
) -> List[PaymentRecord]:
    """Records for the given user and/or month, in input order"""
    month_key = format_month(parse_month(month)) if month is not None else None
    return [
        r for r in records
        if (user_id is None or r.user_id == user_id)
        and (month_key is None or r.month == month_key)
    ]


def total_paid(
    records: Iterable[PaymentRecord],
    user_id: Optional[str] = None,
    month: str | date | None = None,
) -> Decimal:
    return sum((r.amount for r in filter_payment_records(records, user_id, month)), ZERO)


def residual_for_user_month(
    month_due_total: Decimal,
    records: Iterable[PaymentRecord],
    user_id: Optional[str] = None,
    month: str | date | None = None,
) -> Decimal:
    """
    What is left of a month's due total after partial payments.

    Only nets against the month's own due amount, never the outstanding
    debt. A negative result is a credit from overpaying.

    Example:
        due 500, payments 200 + 400 → -100
    """
    return month_due_total - total_paid(records, user_id, month)


def net_position(
    outstanding_debt: Decimal,
    records: Iterable[PaymentRecord],
    user_id: Optional[str] = None,
) -> NetPosition:
    """Derived debt-minus-payments view across every recorded month"""
    paid = total_paid(records, user_id)
    return NetPosition(outstanding_debt=outstanding_debt, total_paid=paid, net=outstanding_debt - paid)
