"""SQLAlchemy ORM models for users, cards, purchases and payment records"""

import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class LedgerUser(Base):
    """Person sharing the cards (soft-deleted via is_active)"""

    __tablename__ = "ledger_user"

    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    color = Column(String(16), nullable=False, default="#3B82F6")
    note = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    purchases = relationship("PurchaseRow", back_populates="user")


class LedgerCard(Base):
    """Card account (soft-deleted via is_active)"""

    __tablename__ = "ledger_card"

    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    color = Column(String(16), nullable=False, default="#10B981")
    note = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PurchaseRow(Base):
    """Installment purchase; hard-deleted, never soft-deleted"""

    __tablename__ = "purchase"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(String(64), ForeignKey("ledger_user.id"), nullable=False, index=True)
    card_id = Column(String(64), ForeignKey("ledger_card.id"), nullable=True, index=True)
    store_name = Column(Text, nullable=True)
    product_name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    installment_count = Column(Integer, nullable=False)
    first_installment_date = Column(Date, nullable=False)
    currency = Column(String(3), nullable=False, default="TRY")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("LedgerUser", back_populates="purchases")


class PaymentRecordRow(Base):
    """Partial payment toward a user's month balance"""

    __tablename__ = "payment_record"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(String(64), ForeignKey("ledger_user.id"), nullable=False, index=True)
    month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
