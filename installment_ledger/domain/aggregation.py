"""Month aggregation across purchase collections"""

from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Sequence

from installment_ledger.domain.debt import remaining_installment_count, total_outstanding_debt
from installment_ledger.domain.installments import get_installment_for_month, resolve_installment
from installment_ledger.domain.models import (
    Card,
    InstallmentLine,
    PartySummary,
    Purchase,
    SummaryTotals,
    User,
)
from installment_ledger.utils.date_utils import parse_month
from installment_ledger.utils.money import ZERO


def monthly_total(purchases: Iterable[Purchase], target_month: str | date) -> Decimal:
    """Sum of installments due in `target_month` across the given purchases"""
    month_start = parse_month(target_month)
    total = ZERO
    for purchase in purchases:
        amount = resolve_installment(purchase, month_start)
        if amount is not None:
            total += amount
    return total


def installments_due_in_month(purchases: Iterable[Purchase], target_month: str | date) -> List[InstallmentLine]:
    """Statement lines for the month, in purchase order"""
    month_start = parse_month(target_month)
    lines = []
    for purchase in purchases:
        line = get_installment_for_month(purchase, month_start)
        if line is not None:
            lines.append(line)
    return lines


def _summarize(
    party_id: str,
    name: str,
    color: str,
    purchases: Sequence[Purchase],
    month_start: date,
) -> PartySummary:
    return PartySummary(
        party_id=party_id,
        name=name,
        color=color,
        month_total=monthly_total(purchases, month_start),
        total_debt=total_outstanding_debt(purchases, month_start),
        remaining_installments=remaining_installment_count(purchases, month_start),
        total_spending=sum((p.total_amount for p in purchases), ZERO),
    )


def _has_balance(summary: PartySummary) -> bool:
    return summary.month_total > 0 or summary.total_debt > 0


def summarize_by_user(
    users: Iterable[User],
    purchases: Sequence[Purchase],
    target_month: str | date,
    card_id: Optional[str] = None,
) -> List[PartySummary]:
    """
    Per-user figures for the month.

    Purchases can be narrowed to one card first. Inactive users and users
    with nothing due this month and no outstanding debt are left out.
    """
    month_start = parse_month(target_month)
    scoped = _filter(purchases, lambda p: card_id is None or p.card_id == card_id)

    summaries = []
    for user in users:
        if not user.is_active:
            continue
        owned = _filter(scoped, lambda p: p.user_id == user.id)
        summary = _summarize(user.id, user.name, user.color, owned, month_start)
        if _has_balance(summary):
            summaries.append(summary)
    return summaries


def summarize_by_card(
    cards: Iterable[Card],
    purchases: Sequence[Purchase],
    target_month: str | date,
    user_id: Optional[str] = None,
) -> List[PartySummary]:
    """Per-card figures for the month, optionally narrowed to one user"""
    month_start = parse_month(target_month)
    scoped = _filter(purchases, lambda p: user_id is None or p.user_id == user_id)

    summaries = []
    for card in cards:
        if not card.is_active:
            continue
        charged = _filter(scoped, lambda p: p.card_id == card.id)
        summary = _summarize(card.id, card.name, card.color, charged, month_start)
        if _has_balance(summary):
            summaries.append(summary)
    return summaries


def summarize_totals(summaries: Iterable[PartySummary]) -> SummaryTotals:
    month_total = total_debt = total_spending = ZERO
    for summary in summaries:
        month_total += summary.month_total
        total_debt += summary.total_debt
        total_spending += summary.total_spending
    return SummaryTotals(month_total=month_total, total_debt=total_debt, total_spending=total_spending)


def _filter(purchases: Iterable[Purchase], predicate: Callable[[Purchase], bool]) -> List[Purchase]:
    return [p for p in purchases if predicate(p)]
