"""GET /v1/summary - Per-user and per-card figures for a month"""

import time
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from installment_ledger.api.dependencies import (
    get_card_repository,
    get_purchase_repository,
    get_request_id,
    get_selected_month,
    get_user_repository,
)
from installment_ledger.api.v1.schemas import PartySummarySchema, SummaryResponse, TotalsSchema
from installment_ledger.domain.aggregation import summarize_by_card, summarize_by_user, summarize_totals
from installment_ledger.domain.exceptions import InvalidRecordError
from installment_ledger.domain.models import PartySummary, SummaryTotals
from installment_ledger.infrastructure.database.repositories import (
    CardRepository,
    PurchaseRepository,
    UserRepository,
)
from installment_ledger.infrastructure.observability.logging import log_summary_computed
from installment_ledger.infrastructure.observability.metrics import record_summary

router = APIRouter()


def to_party_schemas(summaries: List[PartySummary]) -> List[PartySummarySchema]:
    return [
        PartySummarySchema(
            id=s.party_id,
            name=s.name,
            color=s.color,
            month_total=s.month_total,
            total_debt=s.total_debt,
            remaining_installments=s.remaining_installments,
            total_spending=s.total_spending,
        )
        for s in summaries
    ]


def to_totals_schema(totals: SummaryTotals) -> TotalsSchema:
    return TotalsSchema(
        month_total=totals.month_total,
        total_debt=totals.total_debt,
        total_spending=totals.total_spending,
    )


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    request: Request,
    month: str = Depends(get_selected_month),
    card_id: Optional[str] = Query(None, description="Only count purchases on this card in the user figures"),
    user_id: Optional[str] = Query(None, description="Only count this user's purchases in the card figures"),
    users: UserRepository = Depends(get_user_repository),
    cards: CardRepository = Depends(get_card_repository),
    purchases: PurchaseRepository = Depends(get_purchase_repository),
):
    """
    Dashboard figures for the selected month.

    Returns:
        Users and cards with something due this month or still owed, each
        with month total, outstanding debt and remaining installments
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot = purchases.list_purchases()
    except InvalidRecordError as e:
        logging.warning(f"Invalid stored record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    user_summaries = summarize_by_user(users.list_users(), snapshot, month, card_id=card_id)
    if user_id is not None:
        user_summaries = [s for s in user_summaries if s.party_id == user_id]
    card_summaries = summarize_by_card(cards.list_cards(), snapshot, month, user_id=user_id)

    duration = time.time() - start_time
    record_summary("summary", duration)
    log_summary_computed(request_id, "summary", month, len(snapshot), len(user_summaries), duration * 1000)

    return SummaryResponse(
        month=month,
        users=to_party_schemas(user_summaries),
        user_totals=to_totals_schema(summarize_totals(user_summaries)),
        cards=to_party_schemas(card_summaries),
        card_totals=to_totals_schema(summarize_totals(card_summaries)),
    )
