"""Pydantic schemas for API responses"""

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, PlainSerializer

# Money goes over the wire as a two-decimal string, never a float
Money = Annotated[Decimal, PlainSerializer(lambda v: f"{v:.2f}", return_type=str)]


class InstallmentLineSchema(BaseModel):
    """Installment of one purchase due in the selected month"""

    purchase_id: str
    user_id: str
    card_id: Optional[str] = None
    amount: Money
    installment_number: int
    total_installments: int
    description: str


class PartySummarySchema(BaseModel):
    """Month figures for one user or card"""

    id: str
    name: str
    color: str
    month_total: Money
    total_debt: Money
    remaining_installments: int
    total_spending: Money


class TotalsSchema(BaseModel):
    month_total: Money
    total_debt: Money
    total_spending: Money


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    month: str
    users: List[PartySummarySchema]
    user_totals: TotalsSchema
    cards: List[PartySummarySchema]
    card_totals: TotalsSchema


class StatementResponse(BaseModel):
    """Response for GET /v1/statement"""

    month: str
    total: Money
    lines: List[InstallmentLineSchema]


class PaymentRecordSchema(BaseModel):
    id: str
    month: str
    amount: Money
    payment_date: date
    description: Optional[str] = None


class PurchaseProgressSchema(BaseModel):
    """Paid/remaining breakdown of one purchase"""

    purchase_id: str
    description: str
    card_id: Optional[str] = None
    total_amount: Money
    installment_count: int
    first_installment_date: date
    installment_amount: Money
    paid_installments: int
    remaining_installments: int
    paid_amount: Money
    remaining_amount: Money
    current_installment: Optional[InstallmentLineSchema] = None


class NetPositionSchema(BaseModel):
    """Derived: outstanding debt minus all recorded payments"""

    outstanding_debt: Money
    total_paid: Money
    net: Money


class UserDetailResponse(BaseModel):
    """Response for GET /v1/users/{user_id}"""

    user_id: str
    name: str
    month: str
    month_total: Money
    total_debt: Money
    remaining_installments: int
    month_paid: Money
    month_residual: Money
    payments: List[PaymentRecordSchema]
    net_position: NetPositionSchema
    installments: List[InstallmentLineSchema]
    purchases: List[PurchaseProgressSchema]


class ScheduleMonthSchema(BaseModel):
    month: str
    total: Money
    line_count: int


class ScheduleResponse(BaseModel):
    """Response for GET /v1/users/{user_id}/schedule"""

    user_id: str
    months: List[ScheduleMonthSchema]
