"""Wallet statistics derived from transaction history"""

from decimal import Decimal
from typing import Iterable

from bazicash_gateway.domain.models import HistoryEntry, StatisticsSummary, TransactionKind


def compute_statistics(entries: Iterable[HistoryEntry]) -> StatisticsSummary:
    """
    Total credits, total debits and the share of earned credit still saved.

    savings_percent = (credits - debits) / credits * 100, or 0 without credits.
    The value is at most 100 and goes negative when debits exceed credits.
    """
    total_credits = Decimal("0")
    total_debits = Decimal("0")

    for entry in entries:
        if entry.kind is TransactionKind.CREDIT:
            total_credits += entry.amount
        else:
            total_debits += abs(entry.amount)

    savings_percent = (
        float((total_credits - total_debits) / total_credits * 100)
        if total_credits > 0
        else 0.0
    )

    return StatisticsSummary(
        total_credits=total_credits,
        total_debits=total_debits,
        savings_percent=savings_percent,
    )
