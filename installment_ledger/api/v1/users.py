"""GET /v1/users/{user_id} - Per-user statement detail and upcoming schedule"""

import time
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from installment_ledger.api.dependencies import (
    get_payment_record_repository,
    get_purchase_repository,
    get_request_id,
    get_selected_month,
    get_user_repository,
)
from installment_ledger.api.v1.schemas import (
    NetPositionSchema,
    PaymentRecordSchema,
    PurchaseProgressSchema,
    ScheduleMonthSchema,
    ScheduleResponse,
    UserDetailResponse,
)
from installment_ledger.api.v1.statement import to_line_schemas
from installment_ledger.config import settings
from installment_ledger.domain.aggregation import installments_due_in_month, monthly_total
from installment_ledger.domain.debt import purchase_progress, remaining_installment_count, total_outstanding_debt
from installment_ledger.domain.exceptions import InvalidMonthError, InvalidRecordError, NotFoundError
from installment_ledger.domain.models import User
from installment_ledger.domain.payments import filter_payment_records, net_position, residual_for_user_month, total_paid
from installment_ledger.infrastructure.database.repositories import (
    PaymentRecordRepository,
    PurchaseRepository,
    UserRepository,
)
from installment_ledger.infrastructure.observability.logging import log_summary_computed
from installment_ledger.infrastructure.observability.metrics import record_summary
from installment_ledger.utils.date_utils import current_month, future_months

router = APIRouter()


def _require_user(users: UserRepository, user_id: str) -> User:
    user = users.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id!r} not found")
    return user


@router.get("/users/{user_id}", response_model=UserDetailResponse)
def get_user_detail(
    user_id: str,
    request: Request,
    month: str = Depends(get_selected_month),
    card_id: Optional[str] = Query(None, description="Only purchases charged to this card"),
    users: UserRepository = Depends(get_user_repository),
    purchases: PurchaseRepository = Depends(get_purchase_repository),
    payments: PaymentRecordRepository = Depends(get_payment_record_repository),
):
    """
    Statement detail for one user.

    Outstanding debt and payments are reported side by side. The month
    residual nets payments against this month's due total only; the net
    position is a separate, derived figure over all recorded payments.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        user = _require_user(users, user_id)
        snapshot = purchases.list_purchases(user_id=user_id, card_id=card_id)
        records = payments.list_payment_records(user_id=user_id)
    except NotFoundError as e:
        logging.warning(f"User lookup failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRecordError as e:
        logging.warning(f"Invalid stored record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    month_total = monthly_total(snapshot, month)
    total_debt = total_outstanding_debt(snapshot, month)
    month_records = filter_payment_records(records, month=month)
    lines = installments_due_in_month(snapshot, month)
    position = net_position(total_debt, records)

    progress = [purchase_progress(p, month) for p in snapshot]

    duration = time.time() - start_time
    record_summary("user_detail", duration)
    log_summary_computed(request_id, "user_detail", month, len(snapshot), len(lines), duration * 1000, user_id)

    return UserDetailResponse(
        user_id=user.id,
        name=user.name,
        month=month,
        month_total=month_total,
        total_debt=total_debt,
        remaining_installments=remaining_installment_count(snapshot, month),
        month_paid=total_paid(month_records),
        month_residual=residual_for_user_month(month_total, month_records),
        payments=[
            PaymentRecordSchema(
                id=r.id,
                month=r.month,
                amount=r.amount,
                payment_date=r.payment_date,
                description=r.description,
            )
            for r in month_records
        ],
        net_position=NetPositionSchema(
            outstanding_debt=position.outstanding_debt,
            total_paid=position.total_paid,
            net=position.net,
        ),
        installments=to_line_schemas(lines),
        purchases=[
            PurchaseProgressSchema(
                purchase_id=p.purchase.id,
                description=p.purchase.label,
                card_id=p.purchase.card_id,
                total_amount=p.purchase.total_amount,
                installment_count=p.purchase.installment_count,
                first_installment_date=p.purchase.first_installment_date,
                installment_amount=p.installment_amount,
                paid_installments=p.paid_installments,
                remaining_installments=p.remaining_installments,
                paid_amount=p.paid_amount,
                remaining_amount=p.remaining_amount,
                current_installment=to_line_schemas([p.current_line])[0] if p.current_line else None,
            )
            for p in progress
        ],
    )


@router.get("/users/{user_id}/schedule", response_model=ScheduleResponse)
def get_user_schedule(
    user_id: str,
    request: Request,
    start: Optional[str] = Query(None, description="First month as YYYY-MM, defaults to the current month"),
    count: Optional[int] = Query(None, ge=1, le=120, description="Number of months"),
    users: UserRepository = Depends(get_user_repository),
    purchases: PurchaseRepository = Depends(get_purchase_repository),
):
    """
    Monthly due totals for the coming months.

    Returns:
        One entry per month with the amount due and how many installments
        make it up
    """
    start_time = time.time()
    request_id = get_request_id(request)
    first_month = get_selected_month(start) if start is not None else current_month()

    try:
        months = future_months(first_month, count or settings.schedule_months)
        _require_user(users, user_id)
        snapshot = purchases.list_purchases(user_id=user_id)
    except NotFoundError as e:
        logging.warning(f"User lookup failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidMonthError as e:
        logging.warning(f"Schedule range rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidRecordError as e:
        logging.warning(f"Invalid stored record: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    entries = [
        ScheduleMonthSchema(
            month=m,
            total=monthly_total(snapshot, m),
            line_count=len(installments_due_in_month(snapshot, m)),
        )
        for m in months
    ]

    duration = time.time() - start_time
    record_summary("schedule", duration)
    log_summary_computed(request_id, "schedule", first_month, len(snapshot), len(entries), duration * 1000, user_id)

    return ScheduleResponse(user_id=user_id, months=entries)
