from __future__ import annotations

from types import SimpleNamespace
from typing import Any, cast

import pytest
from eth_account import Account

from senja_tx.config import OrchestratorConfig
from senja_tx.evm.connections import Web3Connections
from senja_tx.exceptions import NetworkError, ValidationError, WalletError
from senja_tx.wallet.provider import LocalAccountWallet, WalletState

PRIVATE_KEY = "0x" + "11" * 32


class DummyConnections:
    def __init__(self, *, supported: tuple[int, ...] = (1284, 8453), balance: int = 0) -> None:
        self.supported = supported
        self.balance = balance
        self.connected_with: str | None = None

    def connect(self, private_key: str) -> Any:
        if private_key != PRIVATE_KEY:
            raise ValidationError("Failed to derive signer account from provided private key")
        self.connected_with = private_key
        return SimpleNamespace(address="0x1111111111111111111111111111111111111111")

    def disconnect(self) -> None:
        self.connected_with = None

    def web3_for(self, chain_id: int) -> Any:
        if chain_id not in self.supported:
            raise ValidationError(f"No RPC endpoint configured for chain {chain_id}")
        return SimpleNamespace(eth=SimpleNamespace(get_balance=lambda owner: self.balance))


def _wallet(connections: DummyConnections, key: str = PRIVATE_KEY) -> LocalAccountWallet:
    return LocalAccountWallet(cast(Web3Connections, connections), key)


class TestLocalAccountWallet:
    @pytest.mark.asyncio
    async def test_connect_publishes_state(self):
        wallet = _wallet(DummyConnections())
        seen: list[WalletState] = []
        wallet.subscribe(seen.append)

        state = await wallet.connect()

        assert state.is_connected
        assert state.chain_id == 1284
        assert seen == [state]

    @pytest.mark.asyncio
    async def test_bad_key_raises_wallet_error(self):
        wallet = _wallet(DummyConnections(), key="0xbad")

        with pytest.raises(WalletError):
            await wallet.connect()
        assert not wallet.state.is_connected

    @pytest.mark.asyncio
    async def test_switch_chain(self):
        wallet = _wallet(DummyConnections())
        await wallet.connect()

        state = await wallet.switch_chain(8453)

        assert state.chain_id == 8453
        assert state.address == "0x1111111111111111111111111111111111111111"

    @pytest.mark.asyncio
    async def test_switch_to_unconfigured_chain_fails(self):
        wallet = _wallet(DummyConnections(supported=(1284,)))
        await wallet.connect()

        with pytest.raises(WalletError):
            await wallet.switch_chain(8453)
        assert wallet.state.chain_id == 1284

    @pytest.mark.asyncio
    async def test_switch_requires_connection(self):
        with pytest.raises(WalletError):
            await _wallet(DummyConnections()).switch_chain(8453)

    @pytest.mark.asyncio
    async def test_native_balance(self):
        wallet = _wallet(DummyConnections(balance=42))
        await wallet.connect()

        assert await wallet.get_balance() == 42

    @pytest.mark.asyncio
    async def test_disconnect(self):
        connections = DummyConnections()
        wallet = _wallet(connections)
        await wallet.connect()

        await wallet.disconnect()

        assert wallet.state == WalletState()
        assert connections.connected_with is None


class TestWeb3Connections:
    def test_connect_derives_account(self):
        connections = Web3Connections(OrchestratorConfig())

        account = connections.connect(PRIVATE_KEY)

        assert account.address == Account.from_key(PRIVATE_KEY).address
        assert connections.is_connected()

    def test_invalid_key(self):
        with pytest.raises(ValidationError):
            Web3Connections(OrchestratorConfig()).connect("not-a-key")

    def test_requires_connection(self):
        connections = Web3Connections(OrchestratorConfig())
        with pytest.raises(NetworkError):
            connections.ensure_connected()

    def test_invalid_contract_address(self):
        connections = Web3Connections(OrchestratorConfig())
        with pytest.raises(ValidationError) as exc_info:
            connections.contract(1284, "0x1234", [])
        assert exc_info.value.message == "Invalid contract address"

    def test_unconfigured_chain(self):
        connections = Web3Connections(OrchestratorConfig(rpc_urls={}))
        with pytest.raises(ValidationError):
            connections.web3_for(1284)
