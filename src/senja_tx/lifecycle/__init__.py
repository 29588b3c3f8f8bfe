"""Transaction lifecycle controllers and their parameter structs."""

from .actions import (
    ApproveController,
    BorrowController,
    CreatePoolController,
    RepayByCollateralController,
    RepayController,
    SupplyCollateralController,
    SupplyLiquidityController,
    SwapCollateralController,
    WithdrawCollateralController,
    WithdrawLiquidityController,
)
from .controller import (
    CompletionPolicy,
    LifecycleState,
    TransactionController,
    TransactionRecord,
)
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
from .relay import CrossChainRelay, MessagingRelay, SimulatedRelay, build_relay

__all__ = [
    "ApproveController",
    "ApproveParams",
    "BorrowController",
    "BorrowParams",
    "CompletionPolicy",
    "CreatePoolController",
    "CreatePoolParams",
    "CrossChainRelay",
    "LifecycleState",
    "MessagingRelay",
    "RepayByCollateralController",
    "RepayByCollateralParams",
    "RepayController",
    "RepayParams",
    "SimulatedRelay",
    "SupplyCollateralController",
    "SupplyCollateralParams",
    "SupplyLiquidityController",
    "SupplyLiquidityParams",
    "SwapCollateralController",
    "SwapParams",
    "TransactionController",
    "TransactionRecord",
    "WithdrawCollateralController",
    "WithdrawCollateralParams",
    "WithdrawLiquidityController",
    "WithdrawLiquidityParams",
    "build_relay",
]
