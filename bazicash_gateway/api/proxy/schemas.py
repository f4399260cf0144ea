"""Pydantic schemas for App Proxy responses"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from bazicash_gateway.domain.history import FilteredHistory
from bazicash_gateway.domain.models import Account, Balance, HistoryEntry, StatisticsSummary


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CustomerSchema(BaseModel):
    """Resolved customer"""

    id: str
    email: str
    name: str

    @classmethod
    def from_account(cls, account: Account) -> "CustomerSchema":
        return cls(id=account.id, email=account.email, name=account.display_name)


class BalanceResponse(CamelModel):
    """Response for GET /proxy/balance"""

    success: bool = True
    balance: float
    currency: str
    account_id: Optional[str] = Field(None, alias="accountId")
    customer: CustomerSchema

    @classmethod
    def build(cls, balance: Balance, account: Account) -> "BalanceResponse":
        return cls(
            balance=float(balance.amount),
            currency=balance.currency,
            account_id=balance.account_id,
            customer=CustomerSchema.from_account(account),
        )


class HistoryItem(BaseModel):
    """Single normalized transaction"""

    id: str
    type: str  # "credit" or "debit"
    amount: float
    description: str
    date: str
    timestamp: str

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItem":
        return cls(
            id=entry.id,
            type=entry.kind.value,
            amount=float(entry.amount),
            description=entry.description,
            date=entry.date.isoformat(),
            timestamp=entry.timestamp.isoformat(),
        )


class StatisticsSchema(CamelModel):
    """Totals over the whole (unfiltered) history"""

    total_credits: float = Field(..., alias="totalCredits")
    total_debits: float = Field(..., alias="totalDebits")
    savings_percent: float = Field(..., alias="savingsPercent")

    @classmethod
    def from_summary(cls, summary: StatisticsSummary) -> "StatisticsSchema":
        return cls(
            total_credits=float(summary.total_credits),
            total_debits=float(summary.total_debits),
            savings_percent=round(summary.savings_percent, 2),
        )


class HistoryResponse(BaseModel):
    """Response for GET /proxy/history"""

    success: bool = True
    filter: str
    empty: Optional[str] = None  # "no_transactions" | "no_match"
    history: List[HistoryItem]
    statistics: StatisticsSchema

    @classmethod
    def build(cls, result: FilteredHistory, summary: StatisticsSummary) -> "HistoryResponse":
        return cls(
            filter=result.filter.value,
            empty=result.empty_reason.value if result.empty_reason else None,
            history=[HistoryItem.from_entry(e) for e in result.entries],
            statistics=StatisticsSchema.from_summary(summary),
        )


class RedeemResponse(BaseModel):
    """Response for a successful POST /proxy/redeem"""

    success: bool = True
    message: str
    balance: float
    currency: str
