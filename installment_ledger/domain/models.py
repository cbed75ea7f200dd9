"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

DEFAULT_PURCHASE_LABEL = "Purchase"


@dataclass(frozen=True)
class User:
    """Person sharing the cards"""

    id: str
    name: str
    color: str = "#3B82F6"
    note: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Card:
    """Card account purchases are charged to"""

    id: str
    name: str
    color: str = "#10B981"
    note: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Purchase:
    """Installment-bearing purchase owned by one user"""

    id: str
    user_id: str
    total_amount: Decimal
    installment_count: int  # 1 = single payment
    first_installment_date: date
    card_id: Optional[str] = None
    store_name: Optional[str] = None
    product_name: Optional[str] = None
    description: Optional[str] = None  # Legacy free-text label
    currency: str = "TRY"

    @property
    def label(self) -> str:
        """Display name: store and product, else the legacy description"""
        if self.store_name:
            if self.product_name:
                return f"{self.store_name} - {self.product_name}"
            return self.store_name
        return self.description or DEFAULT_PURCHASE_LABEL


@dataclass(frozen=True)
class PaymentRecord:
    """Partial payment a user made toward one month's due balance"""

    id: str
    user_id: str
    month: str  # "YYYY-MM"
    amount: Decimal
    payment_date: date
    description: Optional[str] = None


@dataclass(frozen=True)
class ScheduledInstallment:
    """One installment of a purchase's monthly schedule"""

    number: int
    month: str
    amount: Decimal


@dataclass(frozen=True)
class InstallmentLine:
    """Statement line: the installment of one purchase due in a month"""

    purchase_id: str
    user_id: str
    card_id: Optional[str]
    amount: Decimal
    installment_number: int
    total_installments: int
    description: str


@dataclass(frozen=True)
class PurchaseProgress:
    """Paid/remaining breakdown of a purchase as of a reference month"""

    purchase: Purchase
    installment_amount: Decimal
    paid_installments: int
    remaining_installments: int
    paid_amount: Decimal
    remaining_amount: Decimal
    current_line: Optional[InstallmentLine]


@dataclass(frozen=True)
class PartySummary:
    """Month figures for one user or card"""

    party_id: str
    name: str
    color: str
    month_total: Decimal
    total_debt: Decimal
    remaining_installments: int
    total_spending: Decimal


@dataclass(frozen=True)
class SummaryTotals:
    """Grand totals across a list of party summaries"""

    month_total: Decimal
    total_debt: Decimal
    total_spending: Decimal


@dataclass(frozen=True)
class NetPosition:
    """
    Derived view: outstanding debt minus every recorded payment.

    Debt and payments are kept in separate ledgers; this figure is computed
    on demand for display and never feeds back into the debt calculation.
    """

    outstanding_debt: Decimal
    total_paid: Decimal
    net: Decimal
