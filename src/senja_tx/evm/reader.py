"""Read-only pool and token queries used before submitting a write."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from eth_typing import ChecksumAddress
from web3 import Web3

from ..exceptions import NetworkError
from ..types import Address
from .abi import ERC20_ABI, LENDING_POOL_ABI
from .connections import Web3Connections

logger = logging.getLogger(__name__)


class PoolReader(ABC):
    """Pool totals and ERC-20 state needed for share math and allowance checks."""

    @abstractmethod
    async def borrow_totals(self, chain_id: int, pool: Address) -> tuple[int, int]:
        """Return ``(totalBorrowAssets, totalBorrowShares)`` for ``pool``."""

    @abstractmethod
    async def user_borrow_shares(self, chain_id: int, pool: Address, user: Address) -> int:
        pass

    @abstractmethod
    async def allowance(self, chain_id: int, token: Address, owner: Address, spender: Address) -> int:
        pass

    @abstractmethod
    async def balance_of(self, chain_id: int, token: Address, owner: Address) -> int:
        pass


class Web3PoolReader(PoolReader):
    def __init__(self, connections: Web3Connections):
        self._connections = connections

    async def borrow_totals(self, chain_id: int, pool: Address) -> tuple[int, int]:
        contract = self._connections.contract(chain_id, pool, LENDING_POOL_ABI)
        assets = await self._call(contract.functions.totalBorrowAssets(), "totalBorrowAssets")
        shares = await self._call(contract.functions.totalBorrowShares(), "totalBorrowShares")
        logger.debug("Pool %s totals assets=%s shares=%s", pool, assets, shares)
        return assets, shares

    async def user_borrow_shares(self, chain_id: int, pool: Address, user: Address) -> int:
        contract = self._connections.contract(chain_id, pool, LENDING_POOL_ABI)
        return await self._call(
            contract.functions.userBorrowShares(_checksum(user)), "userBorrowShares"
        )

    async def allowance(self, chain_id: int, token: Address, owner: Address, spender: Address) -> int:
        contract = self._connections.contract(chain_id, token, ERC20_ABI)
        return await self._call(
            contract.functions.allowance(
                _checksum(owner), _checksum(spender)
            ),
            "allowance",
        )

    async def balance_of(self, chain_id: int, token: Address, owner: Address) -> int:
        contract = self._connections.contract(chain_id, token, ERC20_ABI)
        return await self._call(
            contract.functions.balanceOf(_checksum(owner)), "balanceOf"
        )

    async def _call(self, contract_function, label: str) -> int:
        try:
            result = await asyncio.to_thread(contract_function.call)
        except Exception as exc:
            raise NetworkError(f"Failed to read {label}: {exc}", details={"function": label}) from exc
        return int(result or 0)


def _checksum(address: Address) -> ChecksumAddress:
    return Web3.to_checksum_address(address)
