"""Store credit history normalization, ordering and filtering"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from bazicash_gateway.domain.exceptions import InvalidRequestError
from bazicash_gateway.domain.models import HistoryEntry, StoreCreditTransaction, TransactionKind


class HistoryFilter(str, Enum):
    ALL = "all"
    CREDITS = "credits-only"
    DEBITS = "debits-only"


class EmptyReason(str, Enum):
    NO_TRANSACTIONS = "no_transactions"
    NO_MATCH = "no_match"


_FILTER_ALIASES = {
    "all": HistoryFilter.ALL,
    "credits-only": HistoryFilter.CREDITS,
    "credits": HistoryFilter.CREDITS,
    "ganhos": HistoryFilter.CREDITS,
    "debits-only": HistoryFilter.DEBITS,
    "debits": HistoryFilter.DEBITS,
    "resgates": HistoryFilter.DEBITS,
}

# Transaction types with a fixed human description
_TYPENAME_DESCRIPTIONS = {
    "StoreCreditAccountDebitRevertTransaction": "Estorno de resgate",
    "StoreCreditAccountExpirationTransaction": "Crédito expirado",
}


@dataclass(frozen=True)
class FilteredHistory:
    """History after sort + filter, with the reason when it is empty"""

    filter: HistoryFilter
    entries: List[HistoryEntry]
    empty_reason: Optional[EmptyReason] = None


def parse_filter(value: Optional[str]) -> HistoryFilter:
    """Map a filter tag (or one of its aliases) to a HistoryFilter"""
    if value is None or value == "":
        return HistoryFilter.ALL
    try:
        return _FILTER_ALIASES[value.strip().lower()]
    except KeyError:
        raise InvalidRequestError(f"Filtro inválido: {value}", field="filter") from None


def id_tail(external_id: str) -> str:
    """Last path segment of a Shopify GID (gid://shopify/Type/123 -> 123)"""
    return external_id.rstrip("/").split("/")[-1]


def describe_transaction(txn: StoreCreditTransaction, kind: TransactionKind) -> str:
    tail = id_tail(txn.id)
    label = _TYPENAME_DESCRIPTIONS.get(txn.typename)
    if label:
        return f"{label} - ID: {tail}"
    if kind is TransactionKind.CREDIT:
        return f"Crédito adicionado - ID: {tail}"
    return f"Resgate utilizado - ID: {tail}"


def normalize_transaction(txn: StoreCreditTransaction) -> HistoryEntry:
    """
    Classify a raw transaction and compute its display amount.

    Positive amounts are credits; everything else is a debit shown as an
    absolute value.
    """
    kind = TransactionKind.CREDIT if txn.amount > 0 else TransactionKind.DEBIT
    return HistoryEntry(
        id=id_tail(txn.id),
        kind=kind,
        amount=abs(txn.amount),
        description=describe_transaction(txn, kind),
        date=txn.created_at.date(),
        timestamp=txn.created_at,
    )


def sort_history(entries: Iterable[HistoryEntry]) -> List[HistoryEntry]:
    """Most recent first; stable for equal timestamps"""
    return sorted(entries, key=lambda e: e.timestamp, reverse=True)


def filter_history(entries: Sequence[HistoryEntry], history_filter: HistoryFilter) -> List[HistoryEntry]:
    """Keep entries matching the filter, preserving relative order"""
    if history_filter is HistoryFilter.CREDITS:
        return [e for e in entries if e.kind is TransactionKind.CREDIT]
    if history_filter is HistoryFilter.DEBITS:
        return [e for e in entries if e.kind is TransactionKind.DEBIT]
    return list(entries)


def build_history(
    entries: Iterable[HistoryEntry],
    history_filter: HistoryFilter = HistoryFilter.ALL,
) -> FilteredHistory:
    """Sort most-recent-first, then filter, tagging why the result is empty"""
    ordered = sort_history(entries)
    selected = filter_history(ordered, history_filter)

    empty_reason = None
    if not ordered:
        empty_reason = EmptyReason.NO_TRANSACTIONS
    elif not selected:
        empty_reason = EmptyReason.NO_MATCH

    return FilteredHistory(filter=history_filter, entries=selected, empty_reason=empty_reason)
