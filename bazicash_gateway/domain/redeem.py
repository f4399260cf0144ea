"""Redemption request validation"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from bazicash_gateway.domain.exceptions import InsufficientBalanceError, InvalidRequestError
from bazicash_gateway.domain.identity import require_customer_email

INVALID_AMOUNT_MESSAGE = "Valor inválido: o valor do resgate deve ser maior que zero"
INSUFFICIENT_BALANCE_MESSAGE = "Saldo insuficiente para este resgate"
NOT_SUPPORTED_MESSAGE = (
    "Resgate manual não suportado. O Store Credit é usado automaticamente no checkout."
)
NOT_SUPPORTED_INFO = (
    "Para usar o crédito, o cliente deve fazer uma compra e selecionar "
    "Store Credit como forma de pagamento."
)


@dataclass(frozen=True)
class RedeemRequest:
    customer_email: str
    amount: Decimal


def parse_amount(value: Any) -> Optional[Decimal]:
    """Positive finite amount as Decimal, or None when unusable"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def validate_redeem_request(
    customer_email: Optional[str],
    amount: Any,
    cached_balance: Optional[Decimal] = None,
) -> RedeemRequest:
    """
    Validate a redemption, first failing check wins.

    Order: identity present, amount positive and finite, then (only when a
    cached balance is supplied, i.e. client side) amount within balance. The
    balance check is advisory since the cached value may be stale.

    Raises:
        InvalidRequestError: Missing email or invalid amount
        InsufficientBalanceError: Amount exceeds the cached balance
    """
    email = require_customer_email(customer_email)

    parsed = parse_amount(amount)
    if parsed is None:
        raise InvalidRequestError(INVALID_AMOUNT_MESSAGE, field="amount")

    if cached_balance is not None and parsed > cached_balance:
        raise InsufficientBalanceError(INSUFFICIENT_BALANCE_MESSAGE)

    return RedeemRequest(customer_email=email, amount=parsed)
