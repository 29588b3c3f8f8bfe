"""Wallet-provider capability and the readiness gate built on it."""

from .guard import GuardSession, GuardState, WalletReadinessGate, evaluate_state
from .provider import LocalAccountWallet, WalletProvider, WalletState

__all__ = [
    "GuardSession",
    "GuardState",
    "LocalAccountWallet",
    "WalletProvider",
    "WalletReadinessGate",
    "WalletState",
    "evaluate_state",
]
