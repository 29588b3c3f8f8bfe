"""Configuration containers for the orchestration layer."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv

from .chains.registry import CHAINS, MOONBEAM_CHAIN_ID, is_chain_supported
from .constants import EXECUTOR_LZ_RECEIVE_GAS, SLIPPAGE_TOLERANCE
from .exceptions import ValidationError
from .storage import DEFAULT_STORAGE_PATH

ENV_PREFIX = "SENJA_"

DEFAULT_TARGET_CHAIN_ID = MOONBEAM_CHAIN_ID
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_GUARD_DEBOUNCE = 0.1
DEFAULT_SIMULATED_RELAY_DELAY = 2.0


class RelayPolicy(str, Enum):
    """How cross-chain actions are dispatched."""

    MESSAGING = "messaging"  # real call; the pool contract emits the cross-chain message
    SIMULATED = "simulated"  # development placeholder, no network traffic


def _default_rpc_urls() -> Mapping[int, str]:
    return MappingProxyType({chain.chain_id: chain.rpc_url for chain in CHAINS if chain.rpc_url})


@dataclass(frozen=True)
class GuardConfig:
    """Wallet readiness gate tuning."""

    debounce: float = DEFAULT_GUARD_DEBOUNCE


@dataclass(frozen=True)
class RelayConfig:
    """Cross-chain dispatch settings."""

    policy: RelayPolicy = RelayPolicy.MESSAGING
    simulated_delay: float = DEFAULT_SIMULATED_RELAY_DELAY
    executor_lz_receive_gas: int = EXECUTOR_LZ_RECEIVE_GAS


@dataclass(frozen=True)
class OrchestratorConfig:
    """Aggregated configuration used to wire wallets, clients and controllers."""

    target_chain_id: int = DEFAULT_TARGET_CHAIN_ID
    rpc_urls: Mapping[int, str] = field(default_factory=_default_rpc_urls)
    storage_path: Path = DEFAULT_STORAGE_PATH
    indexer_url: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    slippage_tolerance: int = SLIPPAGE_TOLERANCE
    guard: GuardConfig = GuardConfig()
    relay: RelayConfig = RelayConfig()

    def __post_init__(self) -> None:
        if not is_chain_supported(self.target_chain_id):
            raise ValidationError(
                f"Unsupported target chain: {self.target_chain_id}",
                field="target_chain_id",
                value=self.target_chain_id,
            )
        for name in ("request_timeout", "receipt_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ValidationError(f"{name} must be positive", field=name, value=value)
        if self.guard.debounce < 0:
            raise ValidationError(
                "Guard debounce cannot be negative", field="guard.debounce", value=self.guard.debounce
            )

    def rpc_url_for(self, chain_id: int) -> str:
        url = self.rpc_urls.get(chain_id)
        if not url:
            raise ValidationError(
                f"No RPC endpoint configured for chain {chain_id}", field="rpc_urls", value=chain_id
            )
        return url

    @classmethod
    def from_env(cls, env_file: str | os.PathLike[str] | None = None) -> OrchestratorConfig:
        """Build a configuration from ``SENJA_*`` variables, loading ``.env`` first."""

        load_dotenv(env_file)

        rpc_urls = dict(_default_rpc_urls())
        for chain in CHAINS:
            override = os.getenv(f"{ENV_PREFIX}RPC_{chain.chain_id}")
            if override:
                rpc_urls[chain.chain_id] = override

        policy_raw = os.getenv(f"{ENV_PREFIX}RELAY_POLICY", RelayPolicy.MESSAGING.value)
        try:
            policy = RelayPolicy(policy_raw.strip().lower())
        except ValueError as exc:
            raise ValidationError(
                f"Invalid {ENV_PREFIX}RELAY_POLICY: {policy_raw}",
                field=f"{ENV_PREFIX}RELAY_POLICY",
                value=policy_raw,
            ) from exc

        storage_path = os.getenv(f"{ENV_PREFIX}STORAGE_PATH")

        return cls(
            target_chain_id=_env_int("TARGET_CHAIN_ID", DEFAULT_TARGET_CHAIN_ID),
            rpc_urls=MappingProxyType(rpc_urls),
            storage_path=Path(storage_path).expanduser() if storage_path else DEFAULT_STORAGE_PATH,
            indexer_url=os.getenv(f"{ENV_PREFIX}INDEXER_URL") or None,
            request_timeout=_env_float("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            receipt_timeout=_env_float("RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
            slippage_tolerance=_env_int("SLIPPAGE_TOLERANCE", SLIPPAGE_TOLERANCE),
            guard=GuardConfig(debounce=_env_float("GUARD_DEBOUNCE", DEFAULT_GUARD_DEBOUNCE)),
            relay=RelayConfig(
                policy=policy,
                simulated_delay=_env_float("RELAY_DELAY", DEFAULT_SIMULATED_RELAY_DELAY),
            ),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip(), 0)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid integer for {ENV_PREFIX}{name}: {raw}", field=f"{ENV_PREFIX}{name}", value=raw
        ) from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ValidationError(
            f"Invalid number for {ENV_PREFIX}{name}: {raw}", field=f"{ENV_PREFIX}{name}", value=raw
        ) from exc
