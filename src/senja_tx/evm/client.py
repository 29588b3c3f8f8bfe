"""Contract-call client: submit a write and resolve its confirmation."""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError, TimeExhausted

from ..config import DEFAULT_RECEIPT_TIMEOUT
from ..exceptions import (
    ConfirmationError,
    NetworkError,
    SubmissionError,
    UserRejectedError,
    ValidationError,
)
from ..types import Confirmation, ContractCall, TxHash
from .connections import Web3Connections

logger = logging.getLogger(__name__)

ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")  # Error(string)
PANIC_SELECTOR = bytes.fromhex("4e487b71")  # Panic(uint256)

SigningApprover = Callable[[ContractCall], bool | Awaitable[bool]]


class ContractCallClient(ABC):
    """Submit contract writes and resolve their on-chain outcome."""

    @abstractmethod
    async def write_call(self, call: ContractCall) -> TxHash:
        pass

    @abstractmethod
    async def await_confirmation(self, call_id: TxHash) -> Confirmation:
        pass


class Web3ContractCallClient(ContractCallClient):
    """web3.py implementation signing with the connected local account.

    Blocking RPC work runs in a worker thread so callers on the event loop
    are only suspended, never blocked.
    """

    def __init__(
        self,
        connections: Web3Connections,
        *,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        signing_approver: SigningApprover | None = None,
    ) -> None:
        self._connections = connections
        self._receipt_timeout = receipt_timeout
        self._signing_approver = signing_approver
        self._pending: dict[TxHash, int] = {}

    async def write_call(self, call: ContractCall) -> TxHash:
        self._connections.ensure_connected()
        action = call.action or call.function

        if self._signing_approver is not None:
            approved = self._signing_approver(call)
            if inspect.isawaitable(approved):
                approved = await approved
            if not approved:
                logger.info("Signature declined for action=%s", action)
                raise UserRejectedError(details={"action": action, "function": call.function})

        logger.info("Dispatching %s via %s on chain %s", action, call.function, call.chain_id)
        try:
            tx_hex = await asyncio.to_thread(self._transact, call)
        except (ValidationError, NetworkError):
            raise
        except Exception as exc:
            details: dict[str, Any] = {"args": list(call.args), "error": str(exc)}
            if isinstance(exc, ContractLogicError):
                reason = decode_revert_reason(exc.data)
                if reason:
                    details["revert_reason"] = reason
            raise SubmissionError(
                f"Failed to submit transaction for {action}: {exc}",
                action=action,
                function=call.function,
                details=details,
            ) from exc

        self._pending[tx_hex] = call.chain_id
        logger.info("Transaction sent for action=%s hash=%s", action, tx_hex)
        return tx_hex

    async def await_confirmation(self, call_id: TxHash) -> Confirmation:
        chain_id = self._pending.pop(call_id, None)
        if chain_id is None:
            raise ConfirmationError("Unknown transaction identifier", tx_hash=call_id)

        web3 = self._connections.web3_for(chain_id)
        try:
            receipt = await asyncio.to_thread(
                web3.eth.wait_for_transaction_receipt, HexBytes(call_id), self._receipt_timeout
            )
        except TimeExhausted as exc:
            raise ConfirmationError(
                f"Transaction timeout after {self._receipt_timeout:.0f}s", tx_hash=call_id
            ) from exc

        block_number = receipt.get("blockNumber")
        success = receipt.get("status", 0) == 1
        if success:
            logger.info("Transaction confirmed hash=%s block=%s", call_id, block_number)
        else:
            logger.warning("Transaction reverted hash=%s block=%s", call_id, block_number)

        return Confirmation(
            success=success,
            tx_hash=call_id,
            block_number=block_number,
            error=None if success else "Transaction reverted",
            receipt=serialise_receipt(receipt),
        )

    def _transact(self, call: ContractCall) -> TxHash:
        contract = self._connections.contract(call.chain_id, call.address, call.abi)
        contract_function = getattr(contract.functions, call.function)(*call.args)
        tx_params: dict[str, Any] = {"value": call.value} if call.value else {}
        tx_hash = contract_function.transact(tx_params)
        return tx_hash.to_0x_hex()


def serialise_receipt(receipt: Any) -> Any:
    """Flatten a receipt (AttributeDict, HexBytes, nested log lists) into plain JSON types."""
    if isinstance(receipt, bytes | bytearray):
        return HexBytes(receipt).to_0x_hex()
    if isinstance(receipt, Mapping):
        return {str(key): serialise_receipt(value) for key, value in receipt.items()}
    if isinstance(receipt, list | tuple):
        return [serialise_receipt(item) for item in receipt]
    return receipt


def decode_revert_reason(data: Any) -> str | None:
    """Decode ``Error(string)`` / ``Panic(uint256)`` revert payloads; None when not decodable."""
    if not data or not isinstance(data, str | bytes | bytearray):
        return None
    try:
        raw = bytes(HexBytes(data))
    except (TypeError, ValueError):
        return None

    selector, payload = raw[:4], raw[4:]
    try:
        if selector == ERROR_STRING_SELECTOR:
            (reason,) = abi_decode(["string"], payload)
            return str(reason)
        if selector == PANIC_SELECTOR:
            (code,) = abi_decode(["uint256"], payload)
            return f"Panic(0x{code:02x})"
    except DecodingError:
        return None
    return None
