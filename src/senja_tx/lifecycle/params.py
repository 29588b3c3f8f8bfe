"""Explicit parameter structs, one per action type."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..types import Address

AmountInput = str | int | Decimal


@dataclass(frozen=True)
class ActionParams:
    """Fields shared by every amount-carrying action.

    ``amount`` is the user's decimal input; ``decimals`` is the token precision
    used to convert it to a fixed-point integer.
    """

    amount: AmountInput
    decimals: int


@dataclass(frozen=True)
class SupplyCollateralParams(ActionParams):
    pool: Address
    collateral_token: Address | None = None


@dataclass(frozen=True)
class SupplyLiquidityParams(ActionParams):
    pool: Address
    borrow_token: Address | None = None


@dataclass(frozen=True)
class BorrowParams(ActionParams):
    pool: Address
    destination_chain_id: int | None = None  # defaults to the active chain


@dataclass(frozen=True)
class RepayParams(ActionParams):
    pool: Address
    borrow_token: Address


@dataclass(frozen=True)
class RepayByCollateralParams(ActionParams):
    pool: Address
    collateral_token: Address


@dataclass(frozen=True)
class WithdrawCollateralParams(ActionParams):
    pool: Address


@dataclass(frozen=True)
class WithdrawLiquidityParams(ActionParams):
    """``amount`` is a share count in the pool's share precision."""

    pool: Address


@dataclass(frozen=True)
class SwapParams(ActionParams):
    token_in: Address
    token_out: Address
    position: Address | None = None  # falls back to the chain's registered position contract


@dataclass(frozen=True)
class CreatePoolParams:
    collateral_token: Address
    borrow_token: Address
    ltv: AmountInput  # percent, within (0, 100]

    @property
    def amount(self) -> AmountInput:
        return self.ltv


@dataclass(frozen=True)
class ApproveParams(ActionParams):
    token: Address
    spender: Address
    with_buffer: bool = False
