"""Per-action transaction lifecycle: submit, await confirmation, classify the outcome."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..amounts import to_integer
from ..chains.registry import explorer_tx_url, is_chain_supported
from ..chains.selection import ChainSelection
from ..classifier import FriendlyRule, classify
from ..config import OrchestratorConfig
from ..constants import (
    APPROVAL_REQUIRED,
    INVALID_AMOUNT,
    INVALID_CONTRACT_ADDRESS,
    UNSUPPORTED_CHAIN,
    WALLET_NOT_CONNECTED,
    ZERO_ADDRESS,
)
from ..evm.client import ContractCallClient
from ..evm.reader import PoolReader
from ..exceptions import ConfirmationError, TransactionInProgressError, ValidationError
from ..types import ActionType, Address, Confirmation, ContractCall, TxHash
from ..wallet.provider import WalletProvider

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CompletionPolicy(str, Enum):
    """When the caller's completion callback runs."""

    AUTO = "auto"  # as soon as the call is confirmed
    MANUAL = "manual"  # when the success surface is dismissed


_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    LifecycleState.IDLE: frozenset(
        {LifecycleState.IDLE, LifecycleState.SUBMITTING, LifecycleState.FAILED}
    ),
    LifecycleState.SUBMITTING: frozenset(
        {LifecycleState.AWAITING_CONFIRMATION, LifecycleState.FAILED, LifecycleState.IDLE}
    ),
    LifecycleState.AWAITING_CONFIRMATION: frozenset(
        {LifecycleState.SUCCEEDED, LifecycleState.FAILED, LifecycleState.IDLE}
    ),
    LifecycleState.SUCCEEDED: frozenset({LifecycleState.IDLE}),
    LifecycleState.FAILED: frozenset({LifecycleState.IDLE}),
}


@dataclass(frozen=True)
class TransactionRecord:
    """Immutable snapshot of one action's transaction."""

    state: LifecycleState = LifecycleState.IDLE
    submitted_hash: TxHash | None = None
    confirmed_hash: TxHash | None = None
    amount_input: str = ""
    amount: int = 0
    error_message: str = ""
    show_success_alert: bool = False
    show_failed_alert: bool = False
    is_success: bool = False
    cancelled: bool = False

    @property
    def is_pending(self) -> bool:
        return self.state in (LifecycleState.SUBMITTING, LifecycleState.AWAITING_CONFIRMATION)


CompletionCallback = Callable[[TransactionRecord], Any]
RecordListener = Callable[[TransactionRecord], None]


class TransactionController(ABC):
    """Owns the single live :class:`TransactionRecord` for one action type.

    Subclasses describe the action: its contract call, its completion policy,
    whether the success flag survives dismissing the success surface, and any
    action-specific friendly-message rules checked before the generic table.

    Precondition, submission and confirmation failures never raise out of
    :meth:`submit`; they are recorded on the record. The one exception is a
    second submission while the first is still in flight, which raises
    :class:`TransactionInProgressError` and leaves the record untouched.
    """

    action: ActionType
    label: str = "Transaction"
    completion_policy: CompletionPolicy = CompletionPolicy.AUTO
    preserve_success_flag: bool = False
    invalid_amount_message: str = INVALID_AMOUNT
    extra_rules: tuple[FriendlyRule, ...] = ()

    def __init__(
        self,
        wallet: WalletProvider,
        client: ContractCallClient,
        *,
        selection: ChainSelection | None = None,
        chain_id: int | None = None,
        reader: PoolReader | None = None,
        config: OrchestratorConfig | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> None:
        self._wallet = wallet
        self._client = client
        self._selection = selection
        self._chain_id = chain_id
        self._reader = reader
        self._config = config or OrchestratorConfig()
        self._on_complete = on_complete
        self._record = TransactionRecord()
        self._listeners: list[RecordListener] = []
        self._in_flight = False

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def record(self) -> TransactionRecord:
        return self._record

    @property
    def state(self) -> LifecycleState:
        return self._record.state

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def chain_id(self) -> int | None:
        """Chain the action executes on: explicit, else the current selection, else the wallet's."""
        if self._chain_id is not None:
            return self._chain_id
        if self._selection is not None:
            return self._selection.current_chain_id
        return self._wallet.state.chain_id

    @property
    def explorer_url(self) -> str | None:
        if self._record.confirmed_hash is None or self.chain_id is None:
            return None
        return explorer_tx_url(self.chain_id, self._record.confirmed_hash)

    def subscribe(self, listener: RecordListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    async def submit(self, params: Any) -> TransactionRecord:
        if self._in_flight:
            raise TransactionInProgressError(self.action.value)

        self._in_flight = True
        try:
            return await self._run(params)
        finally:
            self._in_flight = False

    async def _run(self, params: Any) -> TransactionRecord:
        self._transition(LifecycleState.IDLE, **_fresh(amount_input=str(params.amount)))

        try:
            call = await self._prepare(params)
        except ValidationError as exc:
            return self._fail(exc.message)
        except Exception as exc:
            return self._handle_failure(exc)

        self._transition(LifecycleState.SUBMITTING, amount=_call_amount(call))
        try:
            call_id = await self._send(call)
        except Exception as exc:
            return self._handle_failure(exc)

        self._transition(LifecycleState.AWAITING_CONFIRMATION, submitted_hash=call_id)
        try:
            confirmation = await self._confirm(call_id)
        except Exception as exc:
            return self._handle_failure(exc)

        if not confirmation.success:
            return self._handle_failure(
                ConfirmationError(confirmation.error or "Transaction failed", tx_hash=call_id)
            )

        self._transition(
            LifecycleState.SUCCEEDED,
            confirmed_hash=call_id,
            is_success=True,
            show_success_alert=True,
            error_message="",
        )
        logger.info("%s succeeded hash=%s", self.label, call_id)

        if self.completion_policy is CompletionPolicy.AUTO:
            await self._complete(self._record)
        return self._record

    async def _prepare(self, params: Any) -> ContractCall:
        wallet = self._wallet.state
        if not wallet.is_connected or not wallet.address:
            raise ValidationError(WALLET_NOT_CONNECTED, field="wallet")

        chain_id = self.chain_id
        if chain_id is None or not is_chain_supported(chain_id):
            raise ValidationError(UNSUPPORTED_CHAIN, field="chain_id", value=chain_id)

        amount = self._amount_of(params)
        if amount <= 0:
            raise ValidationError(self.invalid_amount_message, field="amount", value=params.amount)

        return await self._build_call(params, amount, wallet.address, chain_id)

    def _amount_of(self, params: Any) -> int:
        return to_integer(params.amount, params.decimals)

    @abstractmethod
    async def _build_call(self, params: Any, amount: int, user: Address, chain_id: int) -> ContractCall:
        """Validate action-specific inputs and encode the contract call."""

    async def _send(self, call: ContractCall) -> TxHash:
        return await self._client.write_call(call)

    async def _confirm(self, call_id: TxHash) -> Confirmation:
        return await self._client.await_confirmation(call_id)

    # ------------------------------------------------------------------
    # Shared precondition helpers
    # ------------------------------------------------------------------
    def _call(
        self,
        chain_id: int,
        address: Address,
        function: str,
        args: list[Any],
        abi: list[dict[str, Any]],
        *,
        amount: int,
        **context: Any,
    ) -> ContractCall:
        context["amount"] = amount
        return ContractCall(
            chain_id=chain_id,
            address=address,
            function=function,
            args=args,
            abi=abi,
            value=0,
            action=self.action.value,
            context=context,
        )

    @staticmethod
    def _require_address(address: Address | None, field: str = "address") -> Address:
        if not address or address.lower() == ZERO_ADDRESS:
            raise ValidationError(INVALID_CONTRACT_ADDRESS, field=field, value=address)
        return address

    async def _require_allowance(
        self, chain_id: int, token: Address | None, owner: Address, spender: Address, amount: int
    ) -> None:
        if self._reader is None or not token:
            return
        allowance = await self._reader.allowance(chain_id, token, owner, spender)
        if allowance < amount:
            raise ValidationError(APPROVAL_REQUIRED, field="allowance", value=allowance)

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------
    def _fail(self, message: str) -> TransactionRecord:
        logger.warning("%s blocked: %s", self.label, message)
        self._transition(
            LifecycleState.FAILED,
            error_message=message,
            show_failed_alert=True,
            show_success_alert=False,
            is_success=False,
        )
        return self._record

    def _handle_failure(self, error: BaseException) -> TransactionRecord:
        outcome = classify(error, fallback=f"{self.label} failed: {error}", extra_rules=self.extra_rules)
        if outcome.cancelled:
            logger.info("%s cancelled by user", self.label)
            self._transition(
                LifecycleState.IDLE,
                error_message="",
                show_failed_alert=False,
                submitted_hash=None,
                cancelled=True,
            )
            return self._record

        logger.warning("%s failed (%s): %s", self.label, outcome.kind.value, outcome.raw)
        self._transition(
            LifecycleState.FAILED,
            error_message=outcome.message,
            show_failed_alert=True,
            is_success=False,
        )
        return self._record

    async def _complete(self, record: TransactionRecord) -> None:
        if self._on_complete is None:
            return
        try:
            result = self._on_complete(record)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("%s completion callback failed", self.label)

    # ------------------------------------------------------------------
    # Dismissal and reset
    # ------------------------------------------------------------------
    async def dismiss_success(self) -> None:
        """Close the success surface. Manual-complete actions fire their callback here, once."""
        record = self._record
        if record.state is not LifecycleState.SUCCEEDED:
            return

        keep_flag = record.is_success and self.preserve_success_flag
        self._transition(LifecycleState.IDLE, **_fresh(is_success=keep_flag))
        if self.completion_policy is CompletionPolicy.MANUAL:
            await self._complete(record)

    def dismiss_failure(self) -> None:
        if self._record.state is not LifecycleState.FAILED:
            return
        self._transition(LifecycleState.IDLE, **_fresh(is_success=self._record.is_success))

    def reset_success(self) -> None:
        """Drop a preserved success flag, e.g. when the surrounding view is left."""
        if self._record.is_success and self._record.state is LifecycleState.IDLE:
            self._transition(LifecycleState.IDLE, is_success=False)

    def reset(self) -> None:
        if self._in_flight:
            raise TransactionInProgressError(self.action.value)
        if self._record != TransactionRecord():
            self._transition(LifecycleState.IDLE, **_fresh())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _transition(self, state: LifecycleState, **changes: Any) -> None:
        current = self._record.state
        if state not in _TRANSITIONS[current]:
            raise RuntimeError(f"Illegal {self.label} transition {current.value} -> {state.value}")

        self._record = replace(self._record, state=state, **changes)
        logger.debug("%s %s -> %s", self.label, current.value, state.value)
        for listener in list(self._listeners):
            listener(self._record)


def _fresh(**overrides: Any) -> dict[str, Any]:
    values = {
        "submitted_hash": None,
        "confirmed_hash": None,
        "amount_input": "",
        "amount": 0,
        "error_message": "",
        "show_success_alert": False,
        "show_failed_alert": False,
        "is_success": False,
        "cancelled": False,
    }
    values.update(overrides)
    return values


def _call_amount(call: ContractCall) -> int:
    amount = call.context.get("amount", 0)
    return amount if isinstance(amount, int) else 0
