"""Validation boundary turning raw records into typed domain models"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from installment_ledger.config import settings
from installment_ledger.domain.exceptions import InvalidPaymentRecordError, InvalidPurchaseError
from installment_ledger.domain.models import PaymentRecord, Purchase
from installment_ledger.infrastructure.observability.metrics import invalid_record_counter
from installment_ledger.utils.date_utils import format_month, parse_month
from installment_ledger.utils.money import round2, to_decimal


def _coerce_date(value: Any) -> Any:
    # Stored timestamps are compared by calendar day only
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value.strip()) > 10:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    return value


def _coerce_amount(value: Any) -> Decimal:
    return round2(to_decimal(value))


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class _RecordIn(BaseModel):
    """Accepts both camelCase (stored documents) and snake_case keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PurchaseIn(_RecordIn):
    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    card_id: Optional[str] = None
    total_amount: Decimal = Field(..., gt=0)
    installment_count: int = Field(..., ge=1)
    first_installment_date: date
    store_name: Optional[str] = None
    product_name: Optional[str] = None
    description: Optional[str] = None
    currency: str = Field(default_factory=lambda: settings.default_currency)

    @field_validator("id", "user_id", "card_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> Decimal:
        return _coerce_amount(v)

    @field_validator("first_installment_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        return _coerce_date(v)

    @field_validator("card_id", "store_name", "product_name", "description", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_domain(self) -> Purchase:
        return Purchase(
            id=self.id,
            user_id=self.user_id,
            card_id=self.card_id,
            total_amount=self.total_amount,
            installment_count=self.installment_count,
            first_installment_date=self.first_installment_date,
            store_name=self.store_name,
            product_name=self.product_name,
            description=self.description,
            currency=self.currency,
        )


class PaymentRecordIn(_RecordIn):
    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    month: str
    amount: Decimal = Field(..., gt=0)
    payment_date: date
    description: Optional[str] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("month", mode="before")
    @classmethod
    def _month(cls, v: Any) -> str:
        # InvalidMonthError is a ValueError, so pydantic reports it as a field error
        return format_month(parse_month(v))

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> Decimal:
        return _coerce_amount(v)

    @field_validator("payment_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        return _coerce_date(v)

    @field_validator("description", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_domain(self) -> PaymentRecord:
        return PaymentRecord(
            id=self.id,
            user_id=self.user_id,
            month=self.month,
            amount=self.amount,
            payment_date=self.payment_date,
            description=self.description,
        )


def parse_purchase(raw: Mapping[str, Any]) -> Purchase:
    """
    Validate a raw purchase record.

    Raises:
        InvalidPurchaseError: On a non-positive or non-finite amount, an
            installment count below 1, or an unparseable first installment date
    """
    try:
        return PurchaseIn.model_validate(raw).to_domain()
    except ValidationError as e:
        invalid_record_counter.labels(kind="purchase").inc()
        raise InvalidPurchaseError(f"Invalid purchase {raw.get('id')!r}: {e}") from e


def parse_payment_record(raw: Mapping[str, Any]) -> PaymentRecord:
    """
    Validate a raw payment record.

    Raises:
        InvalidPaymentRecordError: On a malformed month, non-positive amount
            or unparseable payment date
    """
    try:
        return PaymentRecordIn.model_validate(raw).to_domain()
    except ValidationError as e:
        invalid_record_counter.labels(kind="payment_record").inc()
        raise InvalidPaymentRecordError(f"Invalid payment record {raw.get('id')!r}: {e}") from e


def parse_purchases(raws: Iterable[Mapping[str, Any]]) -> List[Purchase]:
    return [parse_purchase(raw) for raw in raws]


def parse_payment_records(raws: Iterable[Mapping[str, Any]]) -> List[PaymentRecord]:
    return [parse_payment_record(raw) for raw in raws]
