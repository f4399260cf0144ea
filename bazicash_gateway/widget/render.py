"""View model for the wallet widget and the render adapters that consume it"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Protocol, Tuple

from bazicash_gateway.domain.history import EmptyReason, build_history
from bazicash_gateway.domain.models import HistoryEntry, TransactionKind
from bazicash_gateway.domain.statistics import compute_statistics
from bazicash_gateway.widget.state import Phase, WidgetState

CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "US$", "EUR": "€"}

EMPTY_TEXTS = {
    EmptyReason.NO_MATCH: "Nenhuma transação encontrada para este filtro.",
    EmptyReason.NO_TRANSACTIONS: "Nenhuma transação registrada ainda.",
}


def format_money(amount: Decimal, currency: str = "BRL") -> str:
    """pt-BR money: R$ 1.234,50"""
    quantized = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{quantized:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{CURRENCY_SYMBOLS.get(currency, currency)} {text}"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_percent(value: float) -> str:
    return f"{value:.0f}%"


@dataclass(frozen=True)
class HistoryRow:
    id: str
    description: str
    date: str
    amount: str
    kind: str


@dataclass(frozen=True)
class WidgetView:
    visible: bool
    balance_text: str
    badge_text: Optional[str]
    total_credits_text: str
    total_debits_text: str
    savings_text: str
    active_tab: str
    rows: Tuple[HistoryRow, ...]
    empty_text: Optional[str]
    message_text: Optional[str]
    message_level: Optional[str]
    redeem_enabled: bool
    redeem_label: str


def _row(entry: HistoryEntry, currency: str) -> HistoryRow:
    money = format_money(entry.amount, currency)
    return HistoryRow(
        id=entry.id,
        description=entry.description,
        date=format_date(entry.date),
        amount=f"+{money}" if entry.kind is TransactionKind.CREDIT else f"-{money}",
        kind=entry.kind.value,
    )


def _balance_text(state: WidgetState) -> str:
    if state.phase is Phase.LOADING:
        return "Carregando..."
    if state.balance is None:
        return "Erro ao carregar saldo" if state.is_open else ""
    text = format_money(state.balance, state.currency)
    return f"{text} (DEMO)" if state.demo else text


def build_view(state: WidgetState) -> WidgetView:
    """Everything a renderer needs, derived from state (statistics are never stored)"""
    stats = compute_statistics(state.history)

    rows: Tuple[HistoryRow, ...] = ()
    empty_text = None
    if state.history_loaded:
        result = build_history(state.history, state.tab)
        rows = tuple(_row(e, state.currency) for e in result.entries)
        empty_text = EMPTY_TEXTS.get(result.empty_reason) if result.empty_reason else None

    return WidgetView(
        visible=state.is_open,
        balance_text=_balance_text(state),
        badge_text=format_money(state.balance, state.currency) if state.balance is not None else None,
        total_credits_text=format_money(stats.total_credits, state.currency),
        total_debits_text=format_money(stats.total_debits, state.currency),
        savings_text=format_percent(stats.savings_percent),
        active_tab=state.tab.value,
        rows=rows,
        empty_text=empty_text,
        message_text=state.message.text if state.message else None,
        message_level=state.message.level.value if state.message else None,
        redeem_enabled=state.phase is Phase.READY,
        redeem_label="Processando..." if state.phase is Phase.REDEEMING else "Resgatar",
    )


class Renderer(Protocol):
    def render(self, view: WidgetView) -> None: ...


class MemoryRenderer:
    """Keeps every rendered view; used headless and in tests"""

    def __init__(self) -> None:
        self.views: List[WidgetView] = []

    def render(self, view: WidgetView) -> None:
        self.views.append(view)

    @property
    def last(self) -> Optional[WidgetView]:
        return self.views[-1] if self.views else None
