"""Unit tests for the widget view model"""

from datetime import date
from decimal import Decimal
from bazicash_gateway.domain.history import HistoryFilter
from bazicash_gateway.widget.render import build_view, format_date, format_money, format_percent
from bazicash_gateway.widget.sources import DEMO_HISTORY
from bazicash_gateway.widget.state import Phase, WidgetState
from conftest import make_entry


def loaded_state(**overrides):
    history = (
        make_entry("9003", "credit", "320.50", "2024-03-10T18:30:00"),
        make_entry("9002", "debit", "200.00", "2024-03-05T14:15:00"),
        make_entry("9001", "credit", "150.00", "2024-03-01T10:00:00"),
    )
    values = dict(phase=Phase.READY, balance=Decimal("270.50"), history=history, history_loaded=True)
    values.update(overrides)
    return WidgetState(**values)


def test_format_helpers():
    assert format_money(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_money(Decimal("0")) == "R$ 0,00"
    assert format_money(Decimal("9.999"), "USD") == "US$ 10,00"
    assert format_date(date(2024, 3, 5)) == "05/03/2024"
    assert format_percent(57.49) == "57%"


def test_view_shows_balance_rows_and_statistics():
    view = build_view(loaded_state())

    assert view.visible is True
    assert view.balance_text == "R$ 270,50"
    assert view.badge_text == "R$ 270,50"
    assert view.total_credits_text == "R$ 470,50"
    assert view.total_debits_text == "R$ 200,00"
    assert view.savings_text == "57%"
    assert [row.amount for row in view.rows] == ["+R$ 320,50", "-R$ 200,00", "+R$ 150,00"]
    assert view.empty_text is None
    assert view.redeem_enabled is True


def test_view_filters_rows_but_not_statistics():
    view = build_view(loaded_state(tab=HistoryFilter.DEBITS))

    assert [row.id for row in view.rows] == ["9002"]
    assert view.total_credits_text == "R$ 470,50"
    assert view.active_tab == "debits-only"


def test_view_empty_texts():
    no_match = build_view(loaded_state(history=(make_entry("1", "credit", "5", "2024-01-01T00:00:00"),), tab=HistoryFilter.DEBITS))
    nothing = build_view(loaded_state(history=()))

    assert no_match.empty_text == "Nenhuma transação encontrada para este filtro."
    assert nothing.empty_text == "Nenhuma transação registrada ainda."


def test_view_balance_text_by_phase():
    assert build_view(WidgetState(phase=Phase.LOADING)).balance_text == "Carregando..."
    assert build_view(WidgetState(phase=Phase.READY)).balance_text == "Erro ao carregar saldo"
    assert build_view(loaded_state(demo=True)).balance_text == "R$ 270,50 (DEMO)"
    assert build_view(WidgetState()).visible is False


def test_view_while_redeeming():
    view = build_view(loaded_state(phase=Phase.REDEEMING))

    assert view.redeem_enabled is False
    assert view.redeem_label == "Processando..."


def test_view_history_not_loaded_has_no_rows_or_empty_text():
    view = build_view(WidgetState(phase=Phase.LOADING))
    assert view.rows == ()
    assert view.empty_text is None


def test_demo_history_statistics():
    view = build_view(loaded_state(history=tuple(DEMO_HISTORY)))

    assert view.total_credits_text == "R$ 260,50"
    assert view.total_debits_text == "R$ 50,50"
    assert view.savings_text == "81%"
