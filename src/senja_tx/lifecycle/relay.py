"""Dispatch of actions whose destination chain differs from the active chain."""

from __future__ import annotations

import asyncio
import logging
import secrets
from abc import ABC, abstractmethod

from ..config import RelayConfig, RelayPolicy
from ..evm.client import ContractCallClient
from ..types import Confirmation, ContractCall, TxHash

logger = logging.getLogger(__name__)


class CrossChainRelay(ABC):
    """Same two-step contract as the call client: dispatch, then resolve."""

    @abstractmethod
    async def dispatch(self, call: ContractCall) -> TxHash:
        pass

    @abstractmethod
    async def await_delivery(self, call_id: TxHash) -> Confirmation:
        pass


class MessagingRelay(CrossChainRelay):
    """Submit the real source-chain call; the pool contract emits the cross-chain message.

    Completion is the source-chain confirmation. Delivery on the destination
    chain is not tracked here.
    """

    def __init__(self, client: ContractCallClient):
        self._client = client

    async def dispatch(self, call: ContractCall) -> TxHash:
        logger.info(
            "Relaying %s from chain %s to chain %s",
            call.action,
            call.chain_id,
            call.context.get("destination_chain_id"),
        )
        return await self._client.write_call(call)

    async def await_delivery(self, call_id: TxHash) -> Confirmation:
        return await self._client.await_confirmation(call_id)


class SimulatedRelay(CrossChainRelay):
    """Development placeholder: wait, then report success with a random identifier.

    Nothing is sent to any network.
    """

    def __init__(self, delay: float):
        self._delay = delay
        self._issued: set[TxHash] = set()

    async def dispatch(self, call: ContractCall) -> TxHash:
        logger.warning(
            "Simulating cross-chain %s to chain %s; no transaction is sent",
            call.action,
            call.context.get("destination_chain_id"),
        )
        await asyncio.sleep(self._delay)
        call_id = "0x" + secrets.token_hex(32)
        self._issued.add(call_id)
        return call_id

    async def await_delivery(self, call_id: TxHash) -> Confirmation:
        if call_id not in self._issued:
            return Confirmation(success=False, tx_hash=call_id, error="Unknown simulated transaction")
        self._issued.discard(call_id)
        return Confirmation(success=True, tx_hash=call_id)


def build_relay(config: RelayConfig, client: ContractCallClient) -> CrossChainRelay:
    if config.policy is RelayPolicy.SIMULATED:
        return SimulatedRelay(config.simulated_delay)
    return MessagingRelay(client)
