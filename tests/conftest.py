"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from installment_ledger.api.main import create_app
from installment_ledger.infrastructure.database.models import Base
from installment_ledger.infrastructure.database.repositories import (
    CardRepository,
    PaymentRecordRepository,
    PurchaseRepository,
    UserRepository,
)
from installment_ledger.infrastructure.database.session import get_db
from installment_ledger.domain.models import PaymentRecord, Purchase


# In-memory database shared by every connection of the test engine
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_purchase() -> Callable[..., Purchase]:
    """Factory for purchases with sensible defaults"""
    counter = {"next": 0}

    def _make(
        total_amount: str = "1200.00",
        installment_count: int = 12,
        first_installment_date: date = date(2024, 1, 1),
        user_id: str = "alice",
        card_id: str | None = None,
        **kwargs,
    ) -> Purchase:
        counter["next"] += 1
        return Purchase(
            id=kwargs.pop("id", f"p{counter['next']}"),
            user_id=user_id,
            card_id=card_id,
            total_amount=Decimal(total_amount),
            installment_count=installment_count,
            first_installment_date=first_installment_date,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_payment() -> Callable[..., PaymentRecord]:
    """Factory for payment records"""
    counter = {"next": 0}

    def _make(amount: str, month: str = "2024-03", user_id: str = "alice") -> PaymentRecord:
        counter["next"] += 1
        return PaymentRecord(
            id=f"pay{counter['next']}",
            user_id=user_id,
            month=month,
            amount=Decimal(amount),
            payment_date=date(2024, 3, 10),
        )

    return _make


@pytest.fixture
def seeded(db: Session) -> Dict[str, str]:
    """
    Two active users, one inactive user, two cards and a mix of purchases.

    alice: 1200.00 / 12 from 2024-01 on the gold card,
           100.00 / 3 from 2024-02 on the blue card
    bob:   250.00 single payment on 2024-03-20 on the gold card
    """
    users = UserRepository(db)
    cards = CardRepository(db)
    purchases = PurchaseRepository(db)
    payments = PaymentRecordRepository(db)

    alice = users.add_user("Alice", color="#EF4444")
    bob = users.add_user("Bob", color="#22C55E")
    carol = users.add_user("Carol")
    gold = cards.add_card("Gold")
    blue = cards.add_card("Blue")

    phone = purchases.add_purchase(
        user_id=alice.id,
        card_id=gold.id,
        store_name="Tech Store",
        product_name="Phone",
        total_amount="1200",
        installment_count=12,
        first_installment_date="2024-01-01",
    )
    shoes = purchases.add_purchase(
        user_id=alice.id,
        card_id=blue.id,
        description="Shoes",
        total_amount="100.00",
        installment_count=3,
        first_installment_date="2024-02-05",
    )
    purchases.add_purchase(
        user_id=bob.id,
        card_id=gold.id,
        store_name="Market",
        total_amount=Decimal("250.00"),
        installment_count=1,
        first_installment_date=date(2024, 3, 20),
    )
    purchases.add_purchase(
        user_id=carol.id,
        total_amount="80.00",
        installment_count=2,
        first_installment_date="2024-03-01",
    )
    users.deactivate_user(carol.id)

    payments.add_payment_record(alice.id, "2024-03", "100.00", "2024-03-10", description="Cash")
    payments.add_payment_record(alice.id, "2024-03", "50.00", "2024-03-15")
    payments.add_payment_record(alice.id, "2024-02", "133.33", "2024-02-20")
    db.commit()

    return {
        "alice": alice.id,
        "bob": bob.id,
        "carol": carol.id,
        "gold": gold.id,
        "blue": blue.id,
        "phone": phone.id,
        "shoes": shoes.id,
    }
