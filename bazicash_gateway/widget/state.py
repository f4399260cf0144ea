"""Wallet widget state machine.

closed -> loading -> ready -> closed, with ready -> redeeming -> ready and a
parallel history tab while open. Each handler is a pure function
``(state, event) -> state``; an event that is not legal in the current phase
returns the state object unchanged.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple, Type

from bazicash_gateway.domain.history import HistoryFilter, sort_history
from bazicash_gateway.domain.models import HistoryEntry


class Phase(str, Enum):
    CLOSED = "closed"
    LOADING = "loading"
    READY = "ready"
    REDEEMING = "redeeming"


class MessageLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Message:
    text: str
    level: MessageLevel
    seq: int


@dataclass(frozen=True)
class WidgetState:
    phase: Phase = Phase.CLOSED
    tab: HistoryFilter = HistoryFilter.ALL
    balance: Optional[Decimal] = None
    currency: str = "BRL"
    history: Tuple[HistoryEntry, ...] = ()
    history_loaded: bool = False
    history_seq: int = 0
    message: Optional[Message] = None
    message_seq: int = 0
    demo: bool = False

    @property
    def is_open(self) -> bool:
        return self.phase is not Phase.CLOSED


# Events


@dataclass(frozen=True)
class Opened:
    demo: bool = False


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class BalanceLoaded:
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class BalanceFailed:
    message: str


@dataclass(frozen=True)
class HistoryRequested:
    tab: HistoryFilter


@dataclass(frozen=True)
class HistoryLoaded:
    seq: int
    entries: Sequence[HistoryEntry]


@dataclass(frozen=True)
class HistoryFailed:
    seq: int
    message: str


@dataclass(frozen=True)
class RedeemSubmitted:
    pass


@dataclass(frozen=True)
class RedeemSucceeded:
    balance: Decimal
    message: str


@dataclass(frozen=True)
class RedeemFailed:
    message: str


@dataclass(frozen=True)
class MessageShown:
    text: str
    level: MessageLevel


@dataclass(frozen=True)
class MessageExpired:
    seq: int


def with_message(state: WidgetState, text: str, level: MessageLevel) -> WidgetState:
    """Replace the current message; the new sequence number supersedes any pending expiry"""
    seq = state.message_seq + 1
    return replace(state, message=Message(text=text, level=level, seq=seq), message_seq=seq)


def on_opened(state: WidgetState, event: Opened) -> WidgetState:
    if state.is_open:
        return state
    return replace(
        state,
        phase=Phase.LOADING,
        tab=HistoryFilter.ALL,
        history_seq=state.history_seq + 1,
        message=None,
        demo=event.demo,
    )


def on_closed(state: WidgetState, event: Closed) -> WidgetState:
    if not state.is_open:
        return state
    # cached balance/history survive closing
    return replace(state, phase=Phase.CLOSED, message=None)


def on_balance_loaded(state: WidgetState, event: BalanceLoaded) -> WidgetState:
    if state.phase is not Phase.LOADING:
        return state
    return replace(state, phase=Phase.READY, balance=event.amount, currency=event.currency)


def on_balance_failed(state: WidgetState, event: BalanceFailed) -> WidgetState:
    if state.phase is not Phase.LOADING:
        return state
    return with_message(replace(state, phase=Phase.READY), event.message, MessageLevel.ERROR)


def on_history_requested(state: WidgetState, event: HistoryRequested) -> WidgetState:
    if not state.is_open:
        return state
    return replace(state, tab=event.tab, history_seq=state.history_seq + 1)


def on_history_loaded(state: WidgetState, event: HistoryLoaded) -> WidgetState:
    # a newer request superseded this one: last write wins
    if not state.is_open or event.seq != state.history_seq:
        return state
    return replace(state, history=tuple(sort_history(event.entries)), history_loaded=True)


def on_history_failed(state: WidgetState, event: HistoryFailed) -> WidgetState:
    if not state.is_open or event.seq != state.history_seq:
        return state
    return with_message(state, event.message, MessageLevel.ERROR)


def on_redeem_submitted(state: WidgetState, event: RedeemSubmitted) -> WidgetState:
    if state.phase is not Phase.READY:
        return state
    return replace(state, phase=Phase.REDEEMING, message=None)


def on_redeem_succeeded(state: WidgetState, event: RedeemSucceeded) -> WidgetState:
    if state.phase is not Phase.REDEEMING:
        return state
    ready = replace(state, phase=Phase.READY, balance=event.balance)
    return with_message(ready, event.message, MessageLevel.SUCCESS)


def on_redeem_failed(state: WidgetState, event: RedeemFailed) -> WidgetState:
    if state.phase is not Phase.REDEEMING:
        return state
    return with_message(replace(state, phase=Phase.READY), event.message, MessageLevel.ERROR)


def on_message_shown(state: WidgetState, event: MessageShown) -> WidgetState:
    return with_message(state, event.text, event.level)


def on_message_expired(state: WidgetState, event: MessageExpired) -> WidgetState:
    if state.message is None or state.message.seq != event.seq:
        return state
    return replace(state, message=None)


_HANDLERS: Dict[Type, Callable[[WidgetState, object], WidgetState]] = {
    Opened: on_opened,
    Closed: on_closed,
    BalanceLoaded: on_balance_loaded,
    BalanceFailed: on_balance_failed,
    HistoryRequested: on_history_requested,
    HistoryLoaded: on_history_loaded,
    HistoryFailed: on_history_failed,
    RedeemSubmitted: on_redeem_submitted,
    RedeemSucceeded: on_redeem_succeeded,
    RedeemFailed: on_redeem_failed,
    MessageShown: on_message_shown,
    MessageExpired: on_message_expired,
}


def transition(state: WidgetState, event: object) -> WidgetState:
    """Apply one event"""
    try:
        handler = _HANDLERS[type(event)]
    except KeyError:
        raise TypeError(f"Unknown widget event: {type(event).__name__}") from None
    return handler(state, event)
