"""Widget data sources: live App Proxy over HTTP, or fixture data for demos and tests"""

import httpx
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Protocol, Sequence
from bazicash_gateway.domain.exceptions import WalletSourceError
from bazicash_gateway.domain.models import HistoryEntry, TransactionKind
from bazicash_gateway.domain.redeem import NOT_SUPPORTED_MESSAGE

CONNECTION_ERROR_MESSAGE = "Erro de conexão. Tente novamente."


@dataclass(frozen=True)
class BalanceSnapshot:
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class RedeemOutcome:
    success: bool
    message: str
    balance: Optional[Decimal] = None


class WalletDataSource(Protocol):
    async def fetch_balance(self, customer_email: Optional[str]) -> BalanceSnapshot: ...

    async def fetch_history(self, customer_email: Optional[str]) -> List[HistoryEntry]: ...

    async def redeem(self, customer_email: str, amount: Decimal) -> RedeemOutcome: ...


def _parse_history_item(item: Dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        id=str(item["id"]),
        kind=TransactionKind(item["type"]),
        amount=abs(Decimal(str(item["amount"]))),
        description=item["description"],
        date=date.fromisoformat(item["date"]),
        timestamp=datetime.fromisoformat(item["timestamp"].replace("Z", "+00:00")),
    )


class LiveDataSource:
    """
    Reads the wallet through the storefront App Proxy
    (``https://<shop>/apps/bazicash``), which signs and forwards to the backend.

    Every backend failure carries a ``{success: false, message}`` body, so
    responses are parsed regardless of status code.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{endpoint}",
                    headers={"X-Requested-With": "XMLHttpRequest"},
                    **kwargs,
                )
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise WalletSourceError(CONNECTION_ERROR_MESSAGE) from e

        if not isinstance(payload, dict):
            raise WalletSourceError(CONNECTION_ERROR_MESSAGE)
        return payload

    async def fetch_balance(self, customer_email: Optional[str]) -> BalanceSnapshot:
        payload = await self._request("GET", "/balance", params={"customer_email": customer_email or ""})
        if not payload.get("success"):
            raise WalletSourceError(payload.get("message") or "Erro ao carregar saldo")
        try:
            return BalanceSnapshot(
                amount=Decimal(str(payload["balance"])),
                currency=payload.get("currency") or "BRL",
            )
        except (KeyError, InvalidOperation) as e:
            raise WalletSourceError("Erro ao carregar saldo") from e

    async def fetch_history(self, customer_email: Optional[str]) -> List[HistoryEntry]:
        payload = await self._request(
            "GET", "/history", params={"customer_email": customer_email or "", "filter": "all"}
        )
        if not payload.get("success"):
            raise WalletSourceError(payload.get("message") or "Erro ao carregar histórico")
        try:
            return [_parse_history_item(item) for item in payload.get("history") or []]
        except (KeyError, ValueError, TypeError, InvalidOperation) as e:
            raise WalletSourceError("Erro ao carregar histórico") from e

    async def redeem(self, customer_email: str, amount: Decimal) -> RedeemOutcome:
        payload = await self._request(
            "POST", "/redeem", json={"customer_email": customer_email, "amount": float(amount)}
        )
        balance = payload.get("balance")
        try:
            new_balance = Decimal(str(balance)) if balance is not None else None
        except InvalidOperation as e:
            raise WalletSourceError("Erro ao processar resgate") from e
        if new_balance is not None and not new_balance.is_finite():
            raise WalletSourceError("Erro ao processar resgate")
        return RedeemOutcome(
            success=bool(payload.get("success")),
            message=payload.get("message") or "",
            balance=new_balance,
        )


def _fixture_entry(id: str, kind: TransactionKind, amount: str, description: str, timestamp: str) -> HistoryEntry:
    moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    return HistoryEntry(
        id=id,
        kind=kind,
        amount=Decimal(amount),
        description=description,
        date=moment.date(),
        timestamp=moment,
    )


DEMO_BALANCE = Decimal("125.50")

DEMO_HISTORY = (
    _fixture_entry("1", TransactionKind.CREDIT, "45.30", "Compra #1001 - Tênis Nike", "2024-01-15T10:30:00Z"),
    _fixture_entry("2", TransactionKind.CREDIT, "23.50", "Compra #1002 - Camiseta Adidas", "2024-01-18T14:20:00Z"),
    _fixture_entry("3", TransactionKind.DEBIT, "15.00", "Resgate utilizado na compra #1003", "2024-01-20T16:45:00Z"),
    _fixture_entry("4", TransactionKind.CREDIT, "67.20", "Compra #1004 - Kit Esportivo", "2024-01-25T11:15:00Z"),
    _fixture_entry("5", TransactionKind.DEBIT, "25.00", "Resgate utilizado na compra #1005", "2024-01-28T09:30:00Z"),
    _fixture_entry("6", TransactionKind.CREDIT, "34.80", "Compra #1006 - Shorts Nike", "2024-02-02T13:20:00Z"),
    _fixture_entry("7", TransactionKind.DEBIT, "10.50", "Resgate utilizado na compra #1007", "2024-02-05T15:10:00Z"),
    _fixture_entry("8", TransactionKind.CREDIT, "89.70", "Compra #1008 - Jaqueta Puma", "2024-02-10T12:45:00Z"),
)


class FixtureDataSource:
    """In-memory wallet data; the default source for the logged-out demo view"""

    def __init__(
        self,
        balance: Decimal = DEMO_BALANCE,
        history: Sequence[HistoryEntry] = DEMO_HISTORY,
        currency: str = "BRL",
        redeem_outcome: Optional[RedeemOutcome] = None,
    ):
        self.balance = balance
        self.history = list(history)
        self.currency = currency
        self.redeem_outcome = redeem_outcome or RedeemOutcome(success=False, message=NOT_SUPPORTED_MESSAGE)
        self.redeem_calls: List[Decimal] = []

    async def fetch_balance(self, customer_email: Optional[str]) -> BalanceSnapshot:
        return BalanceSnapshot(amount=self.balance, currency=self.currency)

    async def fetch_history(self, customer_email: Optional[str]) -> List[HistoryEntry]:
        return list(self.history)

    async def redeem(self, customer_email: str, amount: Decimal) -> RedeemOutcome:
        self.redeem_calls.append(amount)
        return self.redeem_outcome
