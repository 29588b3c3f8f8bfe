from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from senja_tx.evm.client import ContractCallClient
from senja_tx.evm.reader import PoolReader
from senja_tx.exceptions import UserRejectedError
from senja_tx.types import Address, Confirmation, ContractCall, TxHash
from senja_tx.wallet.provider import WalletProvider, WalletState

USER = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32


class FakeWallet(WalletProvider):
    def __init__(
        self,
        *,
        connected: bool = False,
        chain_id: int | None = None,
        connect_chain_id: int = 1284,
        reject_connect: bool = False,
        reject_switch: bool = False,
    ) -> None:
        super().__init__()
        self.connect_chain_id = connect_chain_id
        self.reject_connect = reject_connect
        self.reject_switch = reject_switch
        self.connect_calls = 0
        self.switch_calls: list[int] = []
        if connected:
            self._state = WalletState(is_connected=True, address=USER, chain_id=chain_id)

    async def connect(self) -> WalletState:
        self.connect_calls += 1
        if self.reject_connect:
            raise UserRejectedError()
        self._set_state(WalletState(is_connected=True, address=USER, chain_id=self.connect_chain_id))
        return self.state

    async def disconnect(self) -> None:
        self._set_state(WalletState())

    async def switch_chain(self, chain_id: int) -> WalletState:
        self.switch_calls.append(chain_id)
        if self.reject_switch:
            raise UserRejectedError()
        self._set_state(WalletState(is_connected=True, address=USER, chain_id=chain_id))
        return self.state

    async def get_balance(self, token: Address | None = None) -> int:
        return 0

    def emit(self, *, connected: bool, chain_id: int | None) -> None:
        self._set_state(
            WalletState(is_connected=connected, address=USER if connected else None, chain_id=chain_id)
        )


class FakeCallClient(ContractCallClient):
    def __init__(
        self,
        *,
        tx_hash: TxHash = TX_HASH,
        write_error: BaseException | None = None,
        confirm_error: BaseException | None = None,
        confirmation: Confirmation | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.tx_hash = tx_hash
        self.write_error = write_error
        self.confirm_error = confirm_error
        self.confirmation = confirmation
        self.gate = gate
        self.calls: list[ContractCall] = []
        self.confirmed: list[TxHash] = []

    async def write_call(self, call: ContractCall) -> TxHash:
        self.calls.append(call)
        if self.gate is not None:
            await self.gate.wait()
        if self.write_error is not None:
            raise self.write_error
        return self.tx_hash

    async def await_confirmation(self, call_id: TxHash) -> Confirmation:
        self.confirmed.append(call_id)
        if self.confirm_error is not None:
            raise self.confirm_error
        if self.confirmation is not None:
            return self.confirmation
        return Confirmation(success=True, tx_hash=call_id, block_number=1)


class FakePoolReader(PoolReader):
    def __init__(
        self,
        *,
        totals: tuple[int, int] = (0, 0),
        allowance: int = 10**30,
        balance: int = 0,
    ) -> None:
        self.totals = totals
        self.allowance_value = allowance
        self.balance = balance
        self.reads: list[str] = []

    async def borrow_totals(self, chain_id: int, pool: Address) -> tuple[int, int]:
        self.reads.append("borrow_totals")
        return self.totals

    async def user_borrow_shares(self, chain_id: int, pool: Address, user: Address) -> int:
        self.reads.append("user_borrow_shares")
        return 0

    async def allowance(self, chain_id: int, token: Address, owner: Address, spender: Address) -> int:
        self.reads.append("allowance")
        return self.allowance_value

    async def balance_of(self, chain_id: int, token: Address, owner: Address) -> int:
        self.reads.append("balance_of")
        return self.balance


@pytest.fixture
def make_wallet() -> Callable[..., FakeWallet]:
    return FakeWallet


@pytest.fixture
def ready_wallet() -> FakeWallet:
    return FakeWallet(connected=True, chain_id=1284)


@pytest.fixture
def call_client() -> FakeCallClient:
    return FakeCallClient()


@pytest.fixture
def make_client() -> Callable[..., FakeCallClient]:
    return FakeCallClient


@pytest.fixture
def make_reader() -> Callable[..., FakePoolReader]:
    return FakePoolReader
