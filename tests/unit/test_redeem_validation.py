"""Unit tests for redemption request validation"""

import pytest
from decimal import Decimal
from bazicash_gateway.domain.exceptions import InsufficientBalanceError, InvalidRequestError
from bazicash_gateway.domain.redeem import parse_amount, validate_redeem_request


@pytest.mark.parametrize("value", [0, -1, "0", "-3.5", None, "", "abc", float("nan"), float("inf"), "Infinity", True])
def test_parse_amount_rejects_unusable_values(value):
    assert parse_amount(value) is None


@pytest.mark.parametrize("value, expected", [(10, Decimal("10")), (12.5, Decimal("12.5")), ("7.25", Decimal("7.25"))])
def test_parse_amount_accepts_positive_numbers(value, expected):
    assert parse_amount(value) == expected


def test_missing_email_fails_first():
    """Identity is checked before the amount"""
    with pytest.raises(InvalidRequestError) as exc:
        validate_redeem_request("  ", 0)
    assert exc.value.field == "customer_email"


def test_zero_amount_is_invalid():
    with pytest.raises(InvalidRequestError) as exc:
        validate_redeem_request("ana@example.com", 0)
    assert exc.value.field == "amount"
    assert "valor inválido" in str(exc.value).lower()


def test_balance_check_only_with_cached_balance():
    with pytest.raises(InsufficientBalanceError):
        validate_redeem_request("ana@example.com", "50", cached_balance=Decimal("49.99"))

    request = validate_redeem_request("ana@example.com", "50")
    assert request.amount == Decimal("50")


def test_invalid_amount_wins_over_balance_check():
    with pytest.raises(InvalidRequestError):
        validate_redeem_request("ana@example.com", -5, cached_balance=Decimal("0"))


def test_valid_request_is_normalized():
    request = validate_redeem_request(" ana@example.com ", 25, cached_balance=Decimal("25"))
    assert request.customer_email == "ana@example.com"
    assert request.amount == Decimal("25")
