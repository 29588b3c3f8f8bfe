"""ABI fragments for the contracts the orchestration layer calls."""

from typing import Any


def _fn(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: list[tuple[str, str]] | None = None,
    *,
    mutability: str = "nonpayable",
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": arg, "type": kind, "internalType": kind} for arg, kind in inputs],
        "outputs": [
            {"name": arg, "type": kind, "internalType": kind} for arg, kind in outputs or []
        ],
        "stateMutability": mutability,
    }


LENDING_POOL_ABI: list[dict[str, Any]] = [
    _fn(
        "borrowDebt",
        [
            ("_amount", "uint256"),
            ("_chainId", "uint256"),
            ("_dstEid", "uint32"),
            ("_addExecutorLzReceiveOption", "uint128"),
        ],
        mutability="payable",
    ),
    _fn(
        "repayWithSelectedToken",
        [
            ("shares", "uint256"),
            ("_token", "address"),
            ("_fromPosition", "bool"),
            ("_user", "address"),
            ("_slippageTolerance", "uint256"),
        ],
        mutability="payable",
    ),
    _fn("supplyCollateral", [("_amount", "uint256"), ("_user", "address")], mutability="payable"),
    _fn("supplyLiquidity", [("_user", "address"), ("_amount", "uint256")], mutability="payable"),
    _fn("withdrawCollateral", [("_amount", "uint256")], mutability="payable"),
    _fn("withdrawLiquidity", [("_shares", "uint256")], mutability="payable"),
    _fn("totalBorrowAssets", [], [("", "uint256")], mutability="view"),
    _fn("totalBorrowShares", [], [("", "uint256")], mutability="view"),
    _fn("userBorrowShares", [("", "address")], [("", "uint256")], mutability="view"),
    _fn("addressPositions", [("", "address")], [("", "address")], mutability="view"),
]

POSITION_ABI: list[dict[str, Any]] = [
    _fn(
        "swapTokenByPosition",
        [
            ("_tokenIn", "address"),
            ("_tokenOut", "address"),
            ("amountIn", "uint256"),
            ("slippageTolerance", "uint256"),
        ],
        [("amountOut", "uint256")],
    ),
]

FACTORY_ABI: list[dict[str, Any]] = [
    _fn(
        "createLendingPool",
        [("collateralToken", "address"), ("borrowToken", "address"), ("ltv", "uint256")],
        [("", "address")],
    ),
]

ERC20_ABI: list[dict[str, Any]] = [
    _fn("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")]),
    _fn(
        "allowance",
        [("owner", "address"), ("spender", "address")],
        [("", "uint256")],
        mutability="view",
    ),
    _fn("balanceOf", [("account", "address")], [("", "uint256")], mutability="view"),
    _fn("decimals", [], [("", "uint8")], mutability="view"),
]
