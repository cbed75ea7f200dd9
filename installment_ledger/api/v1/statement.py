"""GET /v1/statement - Installments due in a month"""

import time
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from installment_ledger.api.dependencies import get_purchase_repository, get_request_id, get_selected_month
from installment_ledger.api.v1.schemas import InstallmentLineSchema, StatementResponse
from installment_ledger.domain.aggregation import installments_due_in_month
from installment_ledger.domain.exceptions import InvalidRecordError
from installment_ledger.domain.models import InstallmentLine
from installment_ledger.infrastructure.database.repositories import PurchaseRepository
from installment_ledger.infrastructure.observability.logging import log_summary_computed
from installment_ledger.infrastructure.observability.metrics import record_summary
from installment_ledger.utils.money import ZERO

router = APIRouter()


def to_line_schemas(lines: List[InstallmentLine]) -> List[InstallmentLineSchema]:
    return [
        InstallmentLineSchema(
            purchase_id=line.purchase_id,
            user_id=line.user_id,
            card_id=line.card_id,
            amount=line.amount,
            installment_number=line.installment_number,
            total_installments=line.total_installments,
            description=line.description,
        )
        for line in lines
    ]


@router.get("/statement", response_model=StatementResponse)
def get_statement(
    request: Request,
    month: str = Depends(get_selected_month),
    user_id: Optional[str] = Query(None, description="Only this user's installments"),
    card_id: Optional[str] = Query(None, description="Only installments charged to this card"),
    purchases: PurchaseRepository = Depends(get_purchase_repository),
):
    """
    Statement lines for the selected month.

    Returns:
        Each installment due with its number out of the purchase's total
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot = purchases.list_purchases(user_id=user_id, card_id=card_id)
    except InvalidRecordError as e:
        logging.warning(f"Invalid stored record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    lines = installments_due_in_month(snapshot, month)

    duration = time.time() - start_time
    record_summary("statement", duration)
    log_summary_computed(request_id, "statement", month, len(snapshot), len(lines), duration * 1000, user_id)

    return StatementResponse(
        month=month,
        total=sum((line.amount for line in lines), ZERO),
        lines=to_line_schemas(lines),
    )
