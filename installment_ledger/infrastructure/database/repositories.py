"""Data access layer returning validated domain snapshots"""

import uuid
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session

from installment_ledger.domain.models import Card, PaymentRecord, Purchase, User
from installment_ledger.domain.parsing import parse_payment_record, parse_purchase
from installment_ledger.infrastructure.database.models import (
    LedgerCard,
    LedgerUser,
    PaymentRecordRow,
    PurchaseRow,
)


PURCHASE_EDITABLE_FIELDS = frozenset(
    {
        "user_id",
        "card_id",
        "store_name",
        "product_name",
        "description",
        "total_amount",
        "installment_count",
        "first_installment_date",
        "currency",
    }
)
PAYMENT_EDITABLE_FIELDS = frozenset({"month", "amount", "payment_date", "description"})


def _user_from_row(row: LedgerUser) -> User:
    return User(id=row.id, name=row.name, color=row.color, note=row.note, is_active=row.is_active)


def _card_from_row(row: LedgerCard) -> Card:
    return Card(id=row.id, name=row.name, color=row.color, note=row.note, is_active=row.is_active)


def _purchase_fields(row: PurchaseRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "user_id": row.user_id,
        "card_id": row.card_id,
        "store_name": row.store_name,
        "product_name": row.product_name,
        "description": row.description,
        "total_amount": row.total_amount,
        "installment_count": row.installment_count,
        "first_installment_date": row.first_installment_date,
        "currency": row.currency,
    }


def _payment_fields(row: PaymentRecordRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "user_id": row.user_id,
        "month": row.month,
        "amount": row.amount,
        "payment_date": row.payment_date,
        "description": row.description,
    }


def _apply_profile(row: Any, name: Optional[str], color: Optional[str], note: Optional[str]) -> None:
    if name is not None:
        if not name.strip():
            raise ValueError("Name must not be blank")
        row.name = name.strip()
    if color is not None:
        row.color = color
    if note is not None:
        row.note = note or None


def _check_editable(changes: Dict[str, Any], editable: FrozenSet[str]) -> None:
    unknown = sorted(set(changes) - editable)
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(unknown)}")


def _apply_fields(row: Any, fields: Dict[str, Any]) -> None:
    for key, value in fields.items():
        setattr(row, key, value)


class UserRepository:
    """Repository for users"""

    def __init__(self, db: Session):
        self.db = db

    def add_user(self, name: str, color: str = "#3B82F6", note: Optional[str] = None) -> User:
        row = LedgerUser(id=uuid.uuid4().hex, name=name, color=color, note=note, is_active=True)
        self.db.add(row)
        self.db.flush()
        return _user_from_row(row)

    def get_user(self, user_id: str) -> Optional[User]:
        row = self.db.get(LedgerUser, user_id)
        return _user_from_row(row) if row else None

    def list_users(self, include_inactive: bool = False) -> List[User]:
        query = self.db.query(LedgerUser)
        if not include_inactive:
            query = query.filter(LedgerUser.is_active.is_(True))
        return [_user_from_row(row) for row in query.order_by(LedgerUser.name).all()]

    def update_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Optional[User]:
        """Change the given fields; returns None for an unknown user"""
        row = self.db.get(LedgerUser, user_id)
        if row is None:
            return None
        _apply_profile(row, name, color, note)
        self.db.flush()
        return _user_from_row(row)

    def deactivate_user(self, user_id: str) -> bool:
        """Soft delete: keeps the user's purchases in history"""
        row = self.db.get(LedgerUser, user_id)
        if row is None:
            return False
        row.is_active = False
        self.db.flush()
        return True


class CardRepository:
    """Repository for card accounts"""

    def __init__(self, db: Session):
        self.db = db

    def add_card(self, name: str, color: str = "#10B981", note: Optional[str] = None) -> Card:
        row = LedgerCard(id=uuid.uuid4().hex, name=name, color=color, note=note, is_active=True)
        self.db.add(row)
        self.db.flush()
        return _card_from_row(row)

    def list_cards(self, include_inactive: bool = False) -> List[Card]:
        query = self.db.query(LedgerCard)
        if not include_inactive:
            query = query.filter(LedgerCard.is_active.is_(True))
        return [_card_from_row(row) for row in query.order_by(LedgerCard.name).all()]

    def update_card(
        self,
        card_id: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Optional[Card]:
        row = self.db.get(LedgerCard, card_id)
        if row is None:
            return None
        _apply_profile(row, name, color, note)
        self.db.flush()
        return _card_from_row(row)

    def deactivate_card(self, card_id: str) -> bool:
        row = self.db.get(LedgerCard, card_id)
        if row is None:
            return False
        row.is_active = False
        self.db.flush()
        return True


class PurchaseRepository:
    """Repository for installment purchases"""

    def __init__(self, db: Session):
        self.db = db

    def add_purchase(
        self,
        user_id: str,
        total_amount: Decimal | str | int | float,
        installment_count: int,
        first_installment_date: date | str,
        card_id: Optional[str] = None,
        store_name: Optional[str] = None,
        product_name: Optional[str] = None,
        description: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> Purchase:
        """
        Validate and store a purchase.

        Raises:
            InvalidPurchaseError: If the fields do not form a valid purchase
        """
        raw = {
            "id": uuid.uuid4().hex,
            "user_id": user_id,
            "card_id": card_id,
            "store_name": store_name,
            "product_name": product_name,
            "description": description,
            "total_amount": total_amount,
            "installment_count": installment_count,
            "first_installment_date": first_installment_date,
        }
        if currency:
            raw["currency"] = currency
        purchase = parse_purchase(raw)

        self.db.add(
            PurchaseRow(
                id=purchase.id,
                user_id=purchase.user_id,
                card_id=purchase.card_id,
                store_name=purchase.store_name,
                product_name=purchase.product_name,
                description=purchase.description,
                total_amount=purchase.total_amount,
                installment_count=purchase.installment_count,
                first_installment_date=purchase.first_installment_date,
                currency=purchase.currency,
            )
        )
        self.db.flush()
        return purchase

    def list_purchases(self, user_id: Optional[str] = None, card_id: Optional[str] = None) -> List[Purchase]:
        """
        Load a validated snapshot of purchases, newest first.

        Raises:
            InvalidPurchaseError: If a stored row fails validation
        """
        query = self.db.query(PurchaseRow)
        if user_id is not None:
            query = query.filter(PurchaseRow.user_id == user_id)
        if card_id is not None:
            query = query.filter(PurchaseRow.card_id == card_id)
        rows = query.order_by(PurchaseRow.created_at.desc(), PurchaseRow.id).all()
        return [parse_purchase(_purchase_fields(row)) for row in rows]

    def update_purchase(self, purchase_id: str, **changes: Any) -> Optional[Purchase]:
        """
        Edit a stored purchase. The edited record is validated in full before
        the row changes; returns None for an unknown purchase.

        Raises:
            InvalidPurchaseError: If the edited fields do not form a valid purchase
        """
        _check_editable(changes, PURCHASE_EDITABLE_FIELDS)
        row = self.db.get(PurchaseRow, purchase_id)
        if row is None:
            return None

        purchase = parse_purchase({**_purchase_fields(row), **changes})
        _apply_fields(row, asdict(purchase))
        self.db.flush()
        return purchase

    def delete_purchase(self, purchase_id: str) -> bool:
        row = self.db.get(PurchaseRow, purchase_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True


class PaymentRecordRepository:
    """Repository for partial payment records"""

    def __init__(self, db: Session):
        self.db = db

    def add_payment_record(
        self,
        user_id: str,
        month: str,
        amount: Decimal | str | int | float,
        payment_date: date | str,
        description: Optional[str] = None,
    ) -> PaymentRecord:
        """
        Validate and store a payment record.

        Raises:
            InvalidPaymentRecordError: If the fields do not form a valid record
        """
        record = parse_payment_record(
            {
                "id": uuid.uuid4().hex,
                "user_id": user_id,
                "month": month,
                "amount": amount,
                "payment_date": payment_date,
                "description": description,
            }
        )
        self.db.add(
            PaymentRecordRow(
                id=record.id,
                user_id=record.user_id,
                month=record.month,
                amount=record.amount,
                payment_date=record.payment_date,
                description=record.description,
            )
        )
        self.db.flush()
        return record

    def update_payment_record(self, record_id: str, **changes: Any) -> Optional[PaymentRecord]:
        """
        Edit a stored payment record; returns None for an unknown record.

        Raises:
            InvalidPaymentRecordError: If the edited fields do not form a valid record
        """
        _check_editable(changes, PAYMENT_EDITABLE_FIELDS)
        row = self.db.get(PaymentRecordRow, record_id)
        if row is None:
            return None

        record = parse_payment_record({**_payment_fields(row), **changes})
        _apply_fields(row, asdict(record))
        self.db.flush()
        return record

    def delete_payment_record(self, record_id: str) -> bool:
        row = self.db.get(PaymentRecordRow, record_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True

    def list_payment_records(self, user_id: Optional[str] = None, month: Optional[str] = None) -> List[PaymentRecord]:
        """Load payment records, most recent payment first"""
        query = self.db.query(PaymentRecordRow)
        if user_id is not None:
            query = query.filter(PaymentRecordRow.user_id == user_id)
        if month is not None:
            query = query.filter(PaymentRecordRow.month == month)
        rows = query.order_by(PaymentRecordRow.payment_date.desc(), PaymentRecordRow.id).all()
        return [parse_payment_record(_payment_fields(row)) for row in rows]
