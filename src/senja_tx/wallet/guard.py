"""Wallet readiness gate: decide whether an action may proceed or must prompt first."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..classifier import classify
from ..config import DEFAULT_GUARD_DEBOUNCE, DEFAULT_TARGET_CHAIN_ID, GuardConfig
from .provider import WalletProvider, WalletState

logger = logging.getLogger(__name__)

ReadyCallback = Callable[[Any], Any]
DeferredCallback = Callable[[], Any]


class GuardState(str, Enum):
    NOT_CONNECTED = "not-connected"
    WRONG_CHAIN = "wrong-chain"
    READY = "ready"


@dataclass
class GuardSession:
    """Pending context captured when an action is attempted before the wallet is ready."""

    pool: Any = None
    deferred: DeferredCallback | None = None


def evaluate_state(wallet: WalletState, target_chain_id: int) -> GuardState:
    if not wallet.is_connected:
        return GuardState.NOT_CONNECTED
    if wallet.chain_id != target_chain_id:
        return GuardState.WRONG_CHAIN
    return GuardState.READY


class WalletReadinessGate:
    """Blocks an action until the wallet is connected and on the target chain.

    The gate only activates when :meth:`trigger` (or :meth:`proceed_with`) is
    called while the wallet is not ready. While active it watches wallet
    state; once the state settles on ``READY`` for ``debounce`` seconds it
    deactivates, then fires ``on_ready`` with the pending pool followed by any
    deferred callback. Bursts of intermediate states emitted during a
    connect-then-switch sequence restart the debounce window.

    Must be driven from a running event loop.
    """

    def __init__(
        self,
        wallet: WalletProvider,
        *,
        target_chain_id: int = DEFAULT_TARGET_CHAIN_ID,
        debounce: float = DEFAULT_GUARD_DEBOUNCE,
        on_ready: ReadyCallback | None = None,
    ) -> None:
        self._wallet = wallet
        self._target_chain_id = target_chain_id
        self._debounce = debounce
        self._on_ready = on_ready
        self._session: GuardSession | None = None
        self._active = False
        self._ready_task: asyncio.Task[None] | None = None
        self._unsubscribe = wallet.subscribe(self._handle_wallet_state)

    @classmethod
    def from_config(
        cls,
        wallet: WalletProvider,
        target_chain_id: int,
        guard: GuardConfig,
        *,
        on_ready: ReadyCallback | None = None,
    ) -> WalletReadinessGate:
        return cls(wallet, target_chain_id=target_chain_id, debounce=guard.debounce, on_ready=on_ready)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def target_chain_id(self) -> int:
        return self._target_chain_id

    @property
    def state(self) -> GuardState:
        return evaluate_state(self._wallet.state, self._target_chain_id)

    @property
    def is_ready(self) -> bool:
        return self.state is GuardState.READY

    @property
    def is_active(self) -> bool:
        """True while the blocking guard surface should be shown."""
        return self._active

    @property
    def session(self) -> GuardSession | None:
        return self._session

    @property
    def pending_pool(self) -> Any:
        return self._session.pool if self._session is not None else None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def trigger(self, pool: Any) -> bool:
        """Record ``pool`` as pending. Returns True when the caller may proceed now."""
        self._session = GuardSession(pool=pool)
        if self.is_ready:
            # the caller proceeds itself; a pending hand-off must not fire as well
            self._cancel_timer()
            self._active = False
            return True

        self._active = True
        logger.debug("Guard activated in state %s for pool %s", self.state.value, pool)
        return False

    async def proceed_with(self, callback: DeferredCallback) -> bool:
        """Run ``callback`` now when ready, otherwise defer it until the gate hands off.

        Returns True when the callback ran immediately.
        """
        if self.is_ready:
            await _maybe_await(callback())
            return True

        if self._session is None:
            self._session = GuardSession()
        self._session.deferred = callback
        self._active = True
        logger.debug("Deferred callback until wallet is ready (state %s)", self.state.value)
        return False

    async def request_connect(self) -> GuardState:
        try:
            await self._wallet.connect()
        except Exception as exc:
            outcome = classify(exc)
            if outcome.cancelled:
                logger.info("Wallet connection declined by user")
            else:
                logger.warning("Wallet connection failed: %s", exc)
        return self.state

    async def request_chain_switch(self, target_chain_id: int | None = None) -> GuardState:
        target = target_chain_id if target_chain_id is not None else self._target_chain_id
        try:
            await self._wallet.switch_chain(target)
        except Exception as exc:
            logger.warning("Chain switch to %s failed: %s", target, exc)
        return self.state

    def cancel(self) -> None:
        """Deactivate without firing ``on_ready`` and drop any pending context."""
        self._cancel_timer()
        self._active = False
        self._session = None
        logger.debug("Guard cancelled")

    def close(self) -> None:
        self.cancel()
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Wallet observation and debounced hand-off
    # ------------------------------------------------------------------
    def _handle_wallet_state(self, wallet_state: WalletState) -> None:
        if not self._active:
            return
        if evaluate_state(wallet_state, self._target_chain_id) is GuardState.READY:
            self._cancel_timer()
            self._ready_task = asyncio.get_running_loop().create_task(self._hand_off_after_debounce())
            logger.debug("Wallet ready; handing off in %.3fs", self._debounce)
        else:
            self._cancel_timer()

    async def _hand_off_after_debounce(self) -> None:
        await asyncio.sleep(self._debounce)
        self._ready_task = None
        if not self._active or not self.is_ready:
            return

        session = self._session or GuardSession()
        self._active = False
        self._session = None
        deferred, session.deferred = session.deferred, None

        try:
            if self._on_ready is not None:
                await _maybe_await(self._on_ready(session.pool))
            if deferred is not None:
                await _maybe_await(deferred())
        except Exception:
            logger.exception("Ready hand-off for pool %s failed", session.pool)

    def _cancel_timer(self) -> None:
        if self._ready_task is not None and not self._ready_task.done():
            self._ready_task.cancel()
        self._ready_task = None


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
