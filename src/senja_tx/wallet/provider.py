"""Wallet-provider capability consumed by the readiness gate and controllers."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from web3 import Web3

from ..chains.registry import MOONBEAM_CHAIN_ID
from ..evm.abi import ERC20_ABI
from ..evm.connections import Web3Connections
from ..exceptions import NetworkError, SenjaError, ValidationError, WalletError
from ..types import Address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletState:
    """Snapshot of the wallet: connection flag, address and active chain."""

    is_connected: bool = False
    address: Address | None = None
    chain_id: int | None = None


WalletListener = Callable[[WalletState], None]


class WalletProvider(ABC):
    """Connection, chain switching and balances; publishes :class:`WalletState` snapshots."""

    def __init__(self) -> None:
        self._state = WalletState()
        self._listeners: list[WalletListener] = []

    @property
    def state(self) -> WalletState:
        return self._state

    def subscribe(self, listener: WalletListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: WalletState) -> None:
        if state == self._state:
            return
        self._state = state
        logger.debug("Wallet state %s", state)
        for listener in list(self._listeners):
            listener(state)

    @abstractmethod
    async def connect(self) -> WalletState:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def switch_chain(self, chain_id: int) -> WalletState:
        pass

    @abstractmethod
    async def get_balance(self, token: Address | None = None) -> int:
        """Native balance on the active chain, or the ERC-20 balance of ``token``."""


class LocalAccountWallet(WalletProvider):
    """Headless wallet over an ``eth_account`` signer and per-chain HTTP providers."""

    def __init__(
        self,
        connections: Web3Connections,
        private_key: str,
        *,
        initial_chain_id: int = MOONBEAM_CHAIN_ID,
    ) -> None:
        super().__init__()
        self._connections = connections
        self._private_key = private_key
        self._initial_chain_id = initial_chain_id

    async def connect(self) -> WalletState:
        try:
            account = self._connections.connect(self._private_key)
        except ValidationError as exc:
            raise WalletError("Failed to connect wallet", details={"error": exc.message}) from exc

        self._set_state(
            WalletState(is_connected=True, address=account.address, chain_id=self._initial_chain_id)
        )
        logger.info("Wallet %s connected on chain %s", account.address, self._initial_chain_id)
        return self._state

    async def disconnect(self) -> None:
        self._connections.disconnect()
        self._set_state(WalletState())
        logger.info("Wallet disconnected")

    async def switch_chain(self, chain_id: int) -> WalletState:
        if not self._state.is_connected:
            raise WalletError("Wallet is not connected")

        try:
            await asyncio.to_thread(self._connections.web3_for, chain_id)
        except SenjaError as exc:
            raise WalletError(
                f"Cannot switch to chain {chain_id}: {exc.message}", details={"chain_id": chain_id}
            ) from exc

        self._set_state(
            WalletState(is_connected=True, address=self._state.address, chain_id=chain_id)
        )
        logger.info("Switched wallet to chain %s", chain_id)
        return self._state

    async def get_balance(self, token: Address | None = None) -> int:
        state = self._state
        if not state.is_connected or state.address is None or state.chain_id is None:
            raise WalletError("Wallet is not connected")

        web3 = self._connections.web3_for(state.chain_id)
        owner = Web3.to_checksum_address(state.address)
        try:
            if token is None:
                balance = await asyncio.to_thread(web3.eth.get_balance, owner)
            else:
                contract = self._connections.contract(state.chain_id, token, ERC20_ABI)
                balance = await asyncio.to_thread(contract.functions.balanceOf(owner).call)
        except SenjaError:
            raise
        except Exception as exc:
            raise NetworkError(
                f"Failed to fetch balance: {exc}", details={"token": token, "chain_id": state.chain_id}
            ) from exc
        return int(balance)
