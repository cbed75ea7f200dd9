"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from installment_ledger.domain.exceptions import InvalidMonthError
from installment_ledger.infrastructure.database.repositories import (
    CardRepository,
    PaymentRecordRepository,
    PurchaseRepository,
    UserRepository,
)
from installment_ledger.infrastructure.database.session import get_db
from installment_ledger.utils.date_utils import current_month, format_month, parse_month


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_selected_month(
    month: str | None = Query(None, description="Statement month as YYYY-MM, defaults to the current month"),
) -> str:
    """Validated statement month, normalised to YYYY-MM"""
    if month is None:
        return current_month()
    try:
        return format_month(parse_month(month))
    except InvalidMonthError as e:
        raise HTTPException(status_code=422, detail=str(e))


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_card_repository(db: Session = Depends(get_db)) -> CardRepository:
    return CardRepository(db)


def get_purchase_repository(db: Session = Depends(get_db)) -> PurchaseRepository:
    return PurchaseRepository(db)


def get_payment_record_repository(db: Session = Depends(get_db)) -> PaymentRecordRepository:
    return PaymentRecordRepository(db)
