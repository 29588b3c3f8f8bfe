"""Type definitions and data models shared across the orchestration layer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Address = str  # Hex-encoded EVM address
TxHash = str  # 0x-prefixed transaction identifier
Wei = int  # Fixed-point integer amount in a token's smallest unit


class ActionType(str, Enum):
    """Pool actions that own a transaction lifecycle."""

    SUPPLY_COLLATERAL = "supply-collateral"
    SUPPLY_LIQUIDITY = "supply-liquidity"
    BORROW = "borrow"
    REPAY = "repay"
    REPAY_BY_COLLATERAL = "repay-by-collateral"
    WITHDRAW_COLLATERAL = "withdraw-collateral"
    WITHDRAW_LIQUIDITY = "withdraw-liquidity"
    SWAP = "swap"
    CREATE_POOL = "create-pool"
    APPROVE = "approve"


@dataclass
class ContractCall:
    """A single contract write, ready to hand to the contract-call client."""

    chain_id: int
    address: Address
    function: str
    args: list[Any]
    abi: list[dict[str, Any]]
    value: Wei = 0
    action: str = ""
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class Confirmation:
    """Outcome of waiting for a submitted call to land on chain."""

    success: bool
    tx_hash: TxHash
    block_number: int | None = None
    error: str | None = None
    receipt: dict[str, Any] | None = None
