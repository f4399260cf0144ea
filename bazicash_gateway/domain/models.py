"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


@dataclass(frozen=True)
class Account:
    """Customer account as owned by the commerce platform"""

    id: str
    email: str
    display_name: str


@dataclass(frozen=True)
class Balance:
    """Redeemable store credit of a customer"""

    amount: Decimal
    currency: str
    account_id: Optional[str]


@dataclass(frozen=True)
class StoreCreditTransaction:
    """Store credit transaction as returned by the Admin API"""

    id: str
    amount: Decimal  # signed: > 0 credit, <= 0 debit
    currency: str
    created_at: datetime
    typename: str = ""


@dataclass(frozen=True)
class HistoryEntry:
    """Normalized transaction ready for display"""

    id: str
    kind: TransactionKind
    amount: Decimal  # always non-negative
    description: str
    date: date
    timestamp: datetime


@dataclass(frozen=True)
class StatisticsSummary:
    """Derived totals for a transaction history"""

    total_credits: Decimal
    total_debits: Decimal
    savings_percent: float
