"""Unit tests for the wallet widget state machine"""

import pytest
from decimal import Decimal
from bazicash_gateway.domain.history import HistoryFilter
from bazicash_gateway.widget.state import (
    BalanceFailed,
    BalanceLoaded,
    Closed,
    HistoryFailed,
    HistoryLoaded,
    HistoryRequested,
    MessageExpired,
    MessageLevel,
    MessageShown,
    Opened,
    Phase,
    RedeemFailed,
    RedeemSubmitted,
    RedeemSucceeded,
    WidgetState,
    transition,
)
from conftest import make_entry


def run(state, *events):
    for event in events:
        state = transition(state, event)
    return state


def ready_state(balance="100"):
    return run(WidgetState(), Opened(), BalanceLoaded(amount=Decimal(balance), currency="BRL"))


def test_open_moves_to_loading_and_resets_tab():
    state = WidgetState(tab=HistoryFilter.DEBITS)
    opened = transition(state, Opened())

    assert opened.phase is Phase.LOADING
    assert opened.tab is HistoryFilter.ALL
    assert opened.history_seq == state.history_seq + 1


def test_balance_loaded_makes_widget_ready():
    state = ready_state("42.10")
    assert state.phase is Phase.READY
    assert state.balance == Decimal("42.10")


def test_balance_failure_still_becomes_ready_with_error():
    state = run(WidgetState(), Opened(), BalanceFailed("Erro de conexão. Tente novamente."))

    assert state.phase is Phase.READY
    assert state.balance is None
    assert state.message.level is MessageLevel.ERROR


def test_illegal_events_leave_state_untouched():
    closed = WidgetState()
    assert transition(closed, Closed()) is closed
    assert transition(closed, RedeemSubmitted()) is closed
    assert transition(closed, BalanceLoaded(amount=Decimal("1"), currency="BRL")) is closed

    ready = ready_state()
    assert transition(ready, Opened()) is ready
    assert transition(ready, RedeemSucceeded(balance=Decimal("0"), message="ok")) is ready


def test_redeem_cycle_success():
    state = run(ready_state("100"), RedeemSubmitted())
    assert state.phase is Phase.REDEEMING
    # second submission while in flight is ignored
    assert transition(state, RedeemSubmitted()) is state

    done = transition(state, RedeemSucceeded(balance=Decimal("90"), message="Resgate realizado com sucesso!"))
    assert done.phase is Phase.READY
    assert done.balance == Decimal("90")
    assert done.message.level is MessageLevel.SUCCESS


def test_redeem_failure_keeps_balance():
    state = run(ready_state("100"), RedeemSubmitted(), RedeemFailed("Resgate manual não suportado"))

    assert state.phase is Phase.READY
    assert state.balance == Decimal("100")
    assert state.message.text == "Resgate manual não suportado"


def test_close_keeps_cached_balance_and_clears_message():
    state = run(ready_state("55"), MessageShown("oi", MessageLevel.WARNING), Closed())

    assert state.phase is Phase.CLOSED
    assert state.balance == Decimal("55")
    assert state.message is None


def test_stale_history_response_is_ignored():
    state = ready_state()
    first_seq = state.history_seq
    state = transition(state, HistoryRequested(tab=HistoryFilter.CREDITS))

    stale = transition(state, HistoryLoaded(seq=first_seq, entries=[make_entry("1", "credit", "5", "2024-01-01T00:00:00")]))
    assert stale is state

    fresh = transition(state, HistoryLoaded(seq=state.history_seq, entries=[]))
    assert fresh.history_loaded is True
    assert fresh.tab is HistoryFilter.CREDITS


def test_history_loaded_is_sorted_most_recent_first():
    entries = [
        make_entry("old", "credit", "5", "2024-01-01T00:00:00"),
        make_entry("new", "debit", "2", "2024-02-01T00:00:00"),
    ]
    state = ready_state()
    state = transition(state, HistoryLoaded(seq=state.history_seq, entries=entries))

    assert [e.id for e in state.history] == ["new", "old"]


def test_stale_history_failure_is_ignored():
    state = transition(ready_state(), HistoryRequested(tab=HistoryFilter.DEBITS))
    assert transition(state, HistoryFailed(seq=state.history_seq - 1, message="x")) is state
    assert transition(state, HistoryFailed(seq=state.history_seq, message="x")).message.text == "x"


def test_message_expiry_only_clears_matching_message():
    first = transition(ready_state(), MessageShown("primeira", MessageLevel.ERROR))
    second = transition(first, MessageShown("segunda", MessageLevel.ERROR))

    assert transition(second, MessageExpired(seq=first.message.seq)) is second
    assert transition(second, MessageExpired(seq=second.message.seq)).message is None


def test_unknown_event_raises_type_error():
    with pytest.raises(TypeError):
        transition(WidgetState(), object())
