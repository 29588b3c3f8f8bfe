"""Senja transaction orchestration layer.

Wallet readiness gating, per-action transaction lifecycles and integer
share/amount accounting for the Senja lending pools on Moonbeam and Base.
"""

from .amounts import (
    apply_buffer,
    display_decimals,
    format_large_number,
    format_token_amount,
    parse_amount,
    sanitize_amount,
    to_display,
    to_integer,
)
from .chains import (
    CHAINS,
    TOKENS,
    ChainDescriptor,
    ChainSelection,
    TokenDescriptor,
    get_chain,
    get_token,
)
from .classifier import ErrorClassification, ErrorKind, classify, is_user_cancellation, to_friendly_message
from .config import GuardConfig, OrchestratorConfig, RelayConfig, RelayPolicy
from .exceptions import (
    ConfirmationError,
    NetworkError,
    SenjaError,
    SubmissionError,
    TransactionInProgressError,
    UserRejectedError,
    ValidationError,
    WalletError,
)
from .indexer import IndexerClient, LendingPool, PoolApy
from .lifecycle import (
    ApproveController,
    BorrowController,
    CompletionPolicy,
    CreatePoolController,
    LifecycleState,
    RepayByCollateralController,
    RepayController,
    SupplyCollateralController,
    SupplyLiquidityController,
    SwapCollateralController,
    TransactionController,
    TransactionRecord,
    WithdrawCollateralController,
    WithdrawLiquidityController,
)
from .shares import compute_shares, require_shares
from .storage import KeyValueStore, MemoryStore, SqliteStore
from .types import ActionType, Confirmation, ContractCall
from .wallet import GuardState, LocalAccountWallet, WalletProvider, WalletReadinessGate, WalletState

__version__ = "0.1.0"

__all__ = [
    "CHAINS",
    "TOKENS",
    "ActionType",
    "ApproveController",
    "BorrowController",
    "ChainDescriptor",
    "ChainSelection",
    "CompletionPolicy",
    "Confirmation",
    "ConfirmationError",
    "ContractCall",
    "CreatePoolController",
    "ErrorClassification",
    "ErrorKind",
    "GuardConfig",
    "GuardState",
    "IndexerClient",
    "KeyValueStore",
    "LendingPool",
    "LifecycleState",
    "LocalAccountWallet",
    "MemoryStore",
    "NetworkError",
    "OrchestratorConfig",
    "PoolApy",
    "RelayConfig",
    "RelayPolicy",
    "RepayByCollateralController",
    "RepayController",
    "SenjaError",
    "SqliteStore",
    "SubmissionError",
    "SupplyCollateralController",
    "SupplyLiquidityController",
    "SwapCollateralController",
    "TokenDescriptor",
    "TransactionController",
    "TransactionInProgressError",
    "TransactionRecord",
    "UserRejectedError",
    "ValidationError",
    "WalletError",
    "WalletProvider",
    "WalletReadinessGate",
    "WalletState",
    "WithdrawCollateralController",
    "WithdrawLiquidityController",
    "apply_buffer",
    "classify",
    "compute_shares",
    "display_decimals",
    "format_large_number",
    "format_token_amount",
    "get_chain",
    "get_token",
    "is_user_cancellation",
    "parse_amount",
    "require_shares",
    "sanitize_amount",
    "to_display",
    "to_friendly_message",
    "to_integer",
]
