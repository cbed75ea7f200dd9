"""Outstanding debt and remaining installments as of a reference month"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from installment_ledger.domain.installments import get_installment_for_month
from installment_ledger.domain.models import Purchase, PurchaseProgress
from installment_ledger.utils.date_utils import month_diff, parse_month
from installment_ledger.utils.money import ZERO, round2


def _paid_installments(purchase: Purchase, month_start: date) -> int:
    """
    Installments settled before `month_start`.

    The reference month itself always counts as unpaid: an installment due
    in that month is still debt. Single payments dated on or after the
    first day of the month are unpaid, earlier ones are paid.
    """
    if purchase.installment_count == 1:
        return 1 if purchase.first_installment_date < month_start else 0

    months_elapsed = month_diff(month_start, purchase.first_installment_date)
    if months_elapsed < 0:
        return 0
    return min(months_elapsed, purchase.installment_count)


def _remaining_balance(purchase: Purchase, paid: int) -> Decimal:
    if paid == 0:
        return purchase.total_amount
    if paid >= purchase.installment_count:
        return ZERO
    # Unrounded per-installment amount; only the balance is rounded
    installment_amount = purchase.total_amount / purchase.installment_count
    return round2(purchase.total_amount - installment_amount * paid)


def outstanding_for_purchase(purchase: Purchase, reference_month: str | date) -> Decimal:
    """Balance of one purchase still owed at the start of `reference_month`"""
    paid = _paid_installments(purchase, parse_month(reference_month))
    return _remaining_balance(purchase, paid)


def total_outstanding_debt(purchases: Iterable[Purchase], reference_month: str | date) -> Decimal:
    """
    Total still owed at the start of `reference_month`.

    The installment due in the reference month is included, so the figure
    answers "what is left to pay, counting this month's statement".

    Example:
        1200.00 over 12 months from 2024-01:
        "2024-01" → 1200.00, "2024-02" → 1100.00, "2025-01" → 0
    """
    month_start = parse_month(reference_month)
    total = ZERO
    for purchase in purchases:
        total += _remaining_balance(purchase, _paid_installments(purchase, month_start))
    return total


def remaining_installment_count(purchases: Iterable[Purchase], reference_month: str | date) -> int:
    """Installments not yet paid at the start of `reference_month`"""
    month_start = parse_month(reference_month)
    return sum(
        max(0, purchase.installment_count - _paid_installments(purchase, month_start))
        for purchase in purchases
    )


def purchase_progress(purchase: Purchase, reference_month: str | date) -> PurchaseProgress:
    """Paid/remaining breakdown of one purchase, anchored like the debt totals"""
    month_start = parse_month(reference_month)
    paid = _paid_installments(purchase, month_start)
    remaining = max(0, purchase.installment_count - paid)
    remaining_amount = _remaining_balance(purchase, paid)

    return PurchaseProgress(
        purchase=purchase,
        installment_amount=round2(purchase.total_amount / purchase.installment_count),
        paid_installments=paid,
        remaining_installments=remaining,
        paid_amount=purchase.total_amount - remaining_amount,
        remaining_amount=remaining_amount,
        current_line=get_installment_for_month(purchase, month_start),
    )
