"""Wallet widget controller: runs side effects and feeds their results to the state machine"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Optional, Union

from bazicash_gateway.domain.exceptions import (
    InsufficientBalanceError,
    InvalidRequestError,
    WalletSourceError,
)
from bazicash_gateway.domain.history import HistoryFilter, parse_filter
from bazicash_gateway.domain.redeem import validate_redeem_request
from bazicash_gateway.widget.render import Renderer, build_view
from bazicash_gateway.widget.sources import (
    CONNECTION_ERROR_MESSAGE,
    FixtureDataSource,
    WalletDataSource,
)
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

logger = logging.getLogger(__name__)

MESSAGE_TTL_SECONDS = 5.0

DEMO_WARNING = "Visualização de demonstração - faça login para dados reais"
LOGIN_REQUIRED_MESSAGE = "É necessário estar logado para resgatar Bazicash"
INVALID_AMOUNT_MESSAGE = "Digite um valor válido para resgate"
REDEEM_SUCCESS_MESSAGE = "Resgate realizado com sucesso!"
REDEEM_FAILURE_MESSAGE = "Erro ao processar resgate"


class WidgetController:
    """
    One wallet widget instance.

    Dependencies are injected: ``source`` serves logged-in customers,
    ``demo_source`` (fixture data by default) serves the logged-out demo and
    ``renderer`` receives a fresh view after every state change.
    """

    def __init__(
        self,
        source: WalletDataSource,
        renderer: Renderer,
        customer_email: Optional[str] = None,
        demo_source: Optional[WalletDataSource] = None,
        message_ttl: float = MESSAGE_TTL_SECONDS,
    ):
        self.source = source
        self.renderer = renderer
        self.customer_email = (customer_email or "").strip() or None
        self.demo_source = demo_source or FixtureDataSource()
        self.message_ttl = message_ttl
        self.state = WidgetState()
        self._message_timer: Optional[asyncio.Task] = None

    @property
    def active_source(self) -> WalletDataSource:
        return self.source if self.customer_email else self.demo_source

    def dispatch(self, event: object) -> WidgetState:
        """Apply an event, re-render on change and arm the message timer"""
        previous = self.state
        self.state = transition(previous, event)
        if self.state is previous:
            return self.state

        message = self.state.message
        if message is not None and (previous.message is None or previous.message.seq != message.seq):
            self._schedule_message_expiry(message.seq)

        self.renderer.render(build_view(self.state))
        return self.state

    def _schedule_message_expiry(self, seq: int) -> None:
        if self._message_timer is not None:
            self._message_timer.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop: message stays until superseded or the modal closes
            self._message_timer = None
            return
        self._message_timer = loop.create_task(self._expire_message(seq))

    async def _expire_message(self, seq: int) -> None:
        await asyncio.sleep(self.message_ttl)
        self.dispatch(MessageExpired(seq=seq))

    async def open(self) -> None:
        """Open the modal and load balance and history together"""
        before = self.state
        self.dispatch(Opened(demo=self.customer_email is None))
        if self.state is before:
            return

        if self.state.demo:
            self.dispatch(MessageShown(DEMO_WARNING, MessageLevel.WARNING))

        await asyncio.gather(self._load_balance(), self._load_history(self.state.history_seq))

    def close(self) -> None:
        self.dispatch(Closed())
        if self._message_timer is not None:
            self._message_timer.cancel()
            self._message_timer = None

    async def switch_tab(self, tab: Union[HistoryFilter, str]) -> None:
        """Re-fetch history for a new tab; the balance is not reloaded"""
        if not isinstance(tab, HistoryFilter):
            tab = parse_filter(tab)
        before = self.state
        self.dispatch(HistoryRequested(tab=tab))
        if self.state is before:
            return
        await self._load_history(self.state.history_seq)

    async def redeem(self, amount: Any) -> bool:
        """
        Submit a redemption. Returns True on success.

        Only reachable while ready; a redemption in flight blocks new ones.
        Input is checked locally first, including an advisory check against
        the cached balance.
        """
        if self.state.phase is not Phase.READY:
            return False

        try:
            request = validate_redeem_request(self.customer_email, amount, cached_balance=self.state.balance)
        except InvalidRequestError as e:
            text = LOGIN_REQUIRED_MESSAGE if e.field == "customer_email" else INVALID_AMOUNT_MESSAGE
            self.dispatch(MessageShown(text, MessageLevel.ERROR))
            return False
        except InsufficientBalanceError as e:
            self.dispatch(MessageShown(str(e), MessageLevel.ERROR))
            return False

        self.dispatch(RedeemSubmitted())
        try:
            outcome = await self.active_source.redeem(request.customer_email, request.amount)
        except WalletSourceError as e:
            logger.warning(f"Redeem request failed: {e}")
            self.dispatch(RedeemFailed(CONNECTION_ERROR_MESSAGE))
            return False
        except Exception:
            # redeeming always returns to ready
            logger.exception("Redeem request failed unexpectedly")
            self.dispatch(RedeemFailed(REDEEM_FAILURE_MESSAGE))
            return False

        if not outcome.success:
            self.dispatch(RedeemFailed(outcome.message or REDEEM_FAILURE_MESSAGE))
            return False

        cached = self.state.balance if self.state.balance is not None else Decimal("0")
        new_balance = outcome.balance if outcome.balance is not None else max(cached - request.amount, Decimal("0"))
        self.dispatch(RedeemSucceeded(balance=new_balance, message=outcome.message or REDEEM_SUCCESS_MESSAGE))
        return True

    async def _load_balance(self) -> None:
        try:
            snapshot = await self.active_source.fetch_balance(self.customer_email)
        except WalletSourceError as e:
            logger.warning(f"Balance load failed: {e}")
            self.dispatch(BalanceFailed(str(e) or CONNECTION_ERROR_MESSAGE))
            return
        except Exception:
            logger.exception("Balance load failed unexpectedly")
            self.dispatch(BalanceFailed(CONNECTION_ERROR_MESSAGE))
            return
        self.dispatch(BalanceLoaded(amount=snapshot.amount, currency=snapshot.currency))

    async def _load_history(self, seq: int) -> None:
        try:
            entries = await self.active_source.fetch_history(self.customer_email)
        except WalletSourceError as e:
            logger.warning(f"History load failed: {e}")
            self.dispatch(HistoryFailed(seq=seq, message=str(e) or CONNECTION_ERROR_MESSAGE))
            return
        except Exception:
            logger.exception("History load failed unexpectedly")
            self.dispatch(HistoryFailed(seq=seq, message=CONNECTION_ERROR_MESSAGE))
            return
        self.dispatch(HistoryLoaded(seq=seq, entries=entries))
