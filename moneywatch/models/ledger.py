"""
Core Ledger Models for MoneyWatch

These models define the authoritative, user-authored records of the ledger.
They are designed to:
1. Enforce the sign/type agreement of transactions at construction time
2. Be immutable, so a snapshot handed to the aggregation engine cannot drift
3. Round-trip through the key-value store with camelCase keys
4. Rebuild calendar dates from whatever the store hands back

DESIGN DECISION: Budgets carry no "spent" figure. Spend is always derived
from the transaction set (see moneywatch.models.views.BudgetProgress), so a
persisted value can never go stale.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Fresh unique identifier for a ledger record."""
    return str(uuid4())


def _coerce_date(value: Any) -> Any:
    """
    Accept full ISO timestamps for date fields.

    Browsers persisted dates as '2024-02-15T05:00:00.000Z'; only the calendar
    part is meaningful to the ledger.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Kinds of account a user can track."""
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"


class TransactionType(str, Enum):
    """
    Direction of a transaction.

    Redundant with the sign of the amount; the two must always agree.
    """
    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    """Billing period a budget is measured over."""
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class SubscriptionFrequency(str, Enum):
    """How often a subscription bills."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(str, Enum):
    """
    Subscription lifecycle status.

    Transitions are user-driven and unrestricted: a cancelled subscription
    may be reactivated.
    """
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class LedgerRecord(BaseModel):
    """Shared configuration for every persisted ledger record."""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique record ID"
    )


class Account(LedgerRecord):
    """
    A bank, card or investment account.

    The balance is an opaque user-entered figure; it is never reconciled
    against the transaction sum. Credit card debt is stored negative.
    """

    name: str = Field(..., min_length=1, max_length=200)
    type: AccountType
    balance: Decimal = Field(..., description="Signed balance")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    institution: str = Field(default="", max_length=200)
    last_updated: dt.datetime = Field(default_factory=dt.datetime.now)


class Transaction(LedgerRecord):
    """
    A single income or expense entry.

    account_id is not required to reference an existing account, and
    category is free text that is never checked against the category set.
    """

    account_id: str = Field(default="", description="Owning account (may be orphaned)")
    amount: Decimal = Field(..., description="Positive = income, negative = expense")
    description: str = Field(..., max_length=500)
    category: str = Field(..., min_length=1, max_length=100)
    date: dt.date
    type: TransactionType
    merchant: Optional[str] = Field(default=None, max_length=200)
    is_recurring: bool = False

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return _coerce_date(v)

    @model_validator(mode='after')
    def validate_sign_matches_type(self) -> 'Transaction':
        """Positive amounts are income, everything else is an expense."""
        is_income = self.amount > 0
        if is_income != (self.type == TransactionType.INCOME):
            raise ValueError(
                f"Transaction type '{self.type.value}' disagrees with amount {self.amount}"
            )
        return self

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @classmethod
    def from_amount(cls, amount: Decimal, **fields: Any) -> 'Transaction':
        """Build a transaction whose type is derived from the amount's sign."""
        amount = Decimal(amount)
        kind = TransactionType.INCOME if amount > 0 else TransactionType.EXPENSE
        return cls(amount=amount, type=kind, **fields)


class Budget(LedgerRecord):
    """
    A spending limit for one category over a billing period.

    Only user-authored fields are stored. Spend is derived on demand.
    """

    category: str = Field(..., min_length=1, max_length=100)
    limit: Decimal = Field(..., gt=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    color: str = Field(default="#3B82F6", max_length=20)


class Subscription(LedgerRecord):
    """
    A recurring bill.

    next_billing is never advanced automatically, whatever the status.
    """

    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    frequency: SubscriptionFrequency = SubscriptionFrequency.MONTHLY
    next_billing: dt.date
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    category: str = Field(default="Other", min_length=1, max_length=100)
    icon: Optional[str] = None
    logo: Optional[str] = None

    @field_validator('next_billing', mode='before')
    @classmethod
    def parse_next_billing(cls, v: Any) -> Any:
        return _coerce_date(v)


class LedgerData(BaseModel):
    """The five collections as they are loaded from and saved to storage."""

    accounts: list[Account] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    subscriptions: list[Subscription] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
