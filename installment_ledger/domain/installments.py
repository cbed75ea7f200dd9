"""Monthly installment schedule resolution for purchases"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from installment_ledger.domain.models import InstallmentLine, Purchase, ScheduledInstallment
from installment_ledger.utils.date_utils import add_months, format_month, month_diff, parse_month
from installment_ledger.utils.money import round2


def base_installment_amount(purchase: Purchase) -> Decimal:
    """Rounded amount of every installment except the last"""
    return round2(purchase.total_amount / purchase.installment_count)


def last_installment_amount(purchase: Purchase) -> Decimal:
    """Last installment absorbs the rounding remainder"""
    previous_total = base_installment_amount(purchase) * (purchase.installment_count - 1)
    return round2(purchase.total_amount - previous_total)


def installment_number_for_month(purchase: Purchase, month: str | date) -> Optional[int]:
    """1-based installment index due in `month`, or None outside the schedule"""
    target = parse_month(month)
    number = month_diff(target, purchase.first_installment_date) + 1
    if 1 <= number <= purchase.installment_count:
        return number
    return None


def resolve_installment(purchase: Purchase, target_month: str | date) -> Optional[Decimal]:
    """
    Amount of `purchase` due in `target_month`.

    Requirements:
    - Single payment: the full amount falls in the month of the first
      installment date
    - Installment k of n falls k-1 months after that month
    - Installments 1..n-1 are round2(total / n)
    - Installment n absorbs the rounding remainder so the schedule sums to
      exactly total_amount

    Returns:
        Amount due, or None when no installment falls in the month

    Example:
        100.00 over 3 months → 33.33, 33.33, 33.34
    """
    number = installment_number_for_month(purchase, target_month)
    if number is None:
        return None

    if number == purchase.installment_count:
        return last_installment_amount(purchase)
    return base_installment_amount(purchase)


def generate_installment_schedule(purchase: Purchase) -> List[ScheduledInstallment]:
    """Every installment of a purchase with its due month and amount"""
    first_month = parse_month(purchase.first_installment_date)
    base_amount = base_installment_amount(purchase)
    last_amount = last_installment_amount(purchase)

    schedule = []
    for i in range(purchase.installment_count):
        number = i + 1
        schedule.append(
            ScheduledInstallment(
                number=number,
                month=format_month(add_months(first_month, i)),
                amount=last_amount if number == purchase.installment_count else base_amount,
            )
        )
    return schedule


def get_installment_for_month(purchase: Purchase, target_month: str | date) -> Optional[InstallmentLine]:
    """Statement line for the installment due in the month, if any is owed"""
    amount = resolve_installment(purchase, target_month)
    if amount is None or amount == 0:
        return None

    return InstallmentLine(
        purchase_id=purchase.id,
        user_id=purchase.user_id,
        card_id=purchase.card_id,
        amount=amount,
        installment_number=installment_number_for_month(purchase, target_month),
        total_installments=purchase.installment_count,
        description=purchase.label,
    )
