"""Concrete controllers, one per pool action."""

from __future__ import annotations

from typing import Any

from ..amounts import apply_buffer, to_integer
from ..chains.registry import get_chain, require_chain
from ..classifier import ErrorKind, FriendlyRule
from ..constants import (
    INVALID_LTV,
    INVALID_SHARES,
    LTV_MAX,
    LTV_SCALE_DECIMALS,
    UNSUPPORTED_CHAIN,
)
from ..evm.abi import ERC20_ABI, FACTORY_ABI, LENDING_POOL_ABI, POSITION_ABI
from ..exceptions import ValidationError
from ..shares import require_shares
from ..types import ActionType, Address, Confirmation, ContractCall, TxHash
from .controller import CompletionPolicy, TransactionController
from .params import (
    ApproveParams,
    BorrowParams,
    CreatePoolParams,
    RepayByCollateralParams,
    RepayParams,
    SupplyCollateralParams,
    SupplyLiquidityParams,
    SwapParams,
    WithdrawCollateralParams,
    WithdrawLiquidityParams,
)
from .relay import CrossChainRelay, build_relay

LTV_RULE = FriendlyRule(
    "LTV",
    ErrorKind.ACTION_SPECIFIC,
    "Loan-to-Value ratio exceeded. Please reduce the amount or add more collateral.",
    case_sensitive=True,
)
LIQUIDITY_RULE = FriendlyRule(
    "liquidity",
    ErrorKind.ACTION_SPECIFIC,
    "Insufficient liquidity in the pool. Please try a smaller amount.",
)


class SupplyCollateralController(TransactionController):
    action = ActionType.SUPPLY_COLLATERAL
    label = "Supply"
    completion_policy = CompletionPolicy.MANUAL

    async def _build_call(
        self, params: SupplyCollateralParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        await self._require_allowance(chain_id, params.collateral_token, user, pool, amount)
        return self._call(
            chain_id, pool, "supplyCollateral", [amount, user], LENDING_POOL_ABI, amount=amount
        )


class SupplyLiquidityController(TransactionController):
    action = ActionType.SUPPLY_LIQUIDITY
    label = "Supply"

    async def _build_call(
        self, params: SupplyLiquidityParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        await self._require_allowance(chain_id, params.borrow_token, user, pool, amount)
        return self._call(
            chain_id, pool, "supplyLiquidity", [user, amount], LENDING_POOL_ABI, amount=amount
        )


class BorrowController(TransactionController):
    """Borrow on the active chain, optionally settling on another registered chain.

    When the destination differs from the active chain the call is routed
    through a :class:`CrossChainRelay`; the lifecycle states are the same.
    """

    action = ActionType.BORROW
    label = "Borrow"
    preserve_success_flag = True
    extra_rules = (LTV_RULE, LIQUIDITY_RULE)

    def __init__(self, *args: Any, relay: CrossChainRelay | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._relay = relay or build_relay(self._config.relay, self._client)
        self._relayed: set[TxHash] = set()

    async def _build_call(
        self, params: BorrowParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        destination_id = params.destination_chain_id or chain_id
        destination = get_chain(destination_id)
        if destination is None:
            raise ValidationError(UNSUPPORTED_CHAIN, field="destination_chain_id", value=destination_id)

        return self._call(
            chain_id,
            pool,
            "borrowDebt",
            [
                amount,
                destination_id,
                destination.destination_endpoint,
                self._config.relay.executor_lz_receive_gas,
            ],
            LENDING_POOL_ABI,
            amount=amount,
            destination_chain_id=destination_id,
        )

    async def _send(self, call: ContractCall) -> TxHash:
        if call.context.get("destination_chain_id", call.chain_id) == call.chain_id:
            return await super()._send(call)

        call_id = await self._relay.dispatch(call)
        self._relayed.add(call_id)
        return call_id

    async def _confirm(self, call_id: TxHash) -> Confirmation:
        if call_id in self._relayed:
            self._relayed.discard(call_id)
            return await self._relay.await_delivery(call_id)
        return await super()._confirm(call_id)


class _RepayBase(TransactionController):
    label = "Repay"

    async def _shares_for(self, chain_id: int, pool: Address, amount: int) -> int:
        if self._reader is None:
            total_assets, total_shares = 0, 0
        else:
            total_assets, total_shares = await self._reader.borrow_totals(chain_id, pool)
        return require_shares(amount, total_assets, total_shares)


class RepayController(_RepayBase):
    """Repay debt with the borrow token; the amount is converted to borrow shares."""

    action = ActionType.REPAY

    async def _build_call(
        self, params: RepayParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        await self._require_allowance(chain_id, params.borrow_token, user, pool, amount)
        shares = await self._shares_for(chain_id, pool, amount)
        return self._call(
            chain_id,
            pool,
            "repayWithSelectedToken",
            [shares, params.borrow_token, False, user, self._config.slippage_tolerance],
            LENDING_POOL_ABI,
            amount=amount,
            shares=shares,
        )


class RepayByCollateralController(_RepayBase):
    """Repay debt from the position's collateral."""

    action = ActionType.REPAY_BY_COLLATERAL

    async def _build_call(
        self, params: RepayByCollateralParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        shares = await self._shares_for(chain_id, pool, amount)
        return self._call(
            chain_id,
            pool,
            "repayWithSelectedToken",
            [shares, params.collateral_token, True, user, self._config.slippage_tolerance],
            LENDING_POOL_ABI,
            amount=amount,
            shares=shares,
        )


class WithdrawCollateralController(TransactionController):
    action = ActionType.WITHDRAW_COLLATERAL
    label = "Withdraw"
    completion_policy = CompletionPolicy.MANUAL

    async def _build_call(
        self, params: WithdrawCollateralParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        return self._call(chain_id, pool, "withdrawCollateral", [amount], LENDING_POOL_ABI, amount=amount)


class WithdrawLiquidityController(TransactionController):
    """Redeem liquidity shares; prefers the chain's registered lending pool."""

    action = ActionType.WITHDRAW_LIQUIDITY
    label = "Withdraw"
    completion_policy = CompletionPolicy.MANUAL
    invalid_amount_message = INVALID_SHARES

    async def _build_call(
        self, params: WithdrawLiquidityParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        pool = self._require_address(params.pool, "pool")
        registered = require_chain(chain_id).contracts.lending_pool
        target = registered or pool
        return self._call(chain_id, target, "withdrawLiquidity", [amount], LENDING_POOL_ABI, amount=amount)


class SwapCollateralController(TransactionController):
    """Swap collateral held by the user's position contract."""

    action = ActionType.SWAP
    label = "Swap"
    completion_policy = CompletionPolicy.MANUAL

    async def _build_call(
        self, params: SwapParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        position = self._require_address(
            params.position or require_chain(chain_id).contracts.position, "position"
        )
        token_in = self._require_address(params.token_in, "token_in")
        token_out = self._require_address(params.token_out, "token_out")
        return self._call(
            chain_id,
            position,
            "swapTokenByPosition",
            [token_in, token_out, amount, self._config.slippage_tolerance],
            POSITION_ABI,
            amount=amount,
        )


class CreatePoolController(TransactionController):
    """Create a lending pool on the chain's factory with an LTV given in percent."""

    action = ActionType.CREATE_POOL
    label = "Create pool"
    invalid_amount_message = INVALID_LTV

    def _amount_of(self, params: CreatePoolParams) -> int:
        ltv = to_integer(params.ltv, LTV_SCALE_DECIMALS)
        if ltv > LTV_MAX * 10**LTV_SCALE_DECIMALS:
            raise ValidationError(INVALID_LTV, field="ltv", value=params.ltv)
        return ltv

    async def _build_call(
        self, params: CreatePoolParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        factory = self._require_address(require_chain(chain_id).contracts.factory, "factory")
        collateral = self._require_address(params.collateral_token, "collateral_token")
        borrow = self._require_address(params.borrow_token, "borrow_token")
        return self._call(
            chain_id, factory, "createLendingPool", [collateral, borrow, amount], FACTORY_ABI, amount=amount
        )


class ApproveController(TransactionController):
    action = ActionType.APPROVE
    label = "Approve"

    async def _build_call(
        self, params: ApproveParams, amount: int, user: Address, chain_id: int
    ) -> ContractCall:
        token = self._require_address(params.token, "token")
        spender = self._require_address(params.spender, "spender")
        if params.with_buffer:
            amount = apply_buffer(amount)
        return self._call(chain_id, token, "approve", [spender, amount], ERC20_ABI, amount=amount)
