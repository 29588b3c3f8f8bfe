from __future__ import annotations

from pathlib import Path

import pytest

from senja_tx.config import (
    DEFAULT_RECEIPT_TIMEOUT,
    GuardConfig,
    OrchestratorConfig,
    RelayPolicy,
)
from senja_tx.exceptions import ValidationError

ENV_VARS = (
    "SENJA_TARGET_CHAIN_ID",
    "SENJA_RPC_1284",
    "SENJA_RPC_8453",
    "SENJA_STORAGE_PATH",
    "SENJA_INDEXER_URL",
    "SENJA_REQUEST_TIMEOUT",
    "SENJA_RECEIPT_TIMEOUT",
    "SENJA_SLIPPAGE_TOLERANCE",
    "SENJA_GUARD_DEBOUNCE",
    "SENJA_RELAY_POLICY",
    "SENJA_RELAY_DELAY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = OrchestratorConfig()
    assert config.target_chain_id == 1284
    assert config.receipt_timeout == DEFAULT_RECEIPT_TIMEOUT
    assert config.guard.debounce == pytest.approx(0.1)
    assert config.relay.policy is RelayPolicy.MESSAGING
    assert config.relay.executor_lz_receive_gas == 6500
    assert config.rpc_url_for(1284) == "https://rpc.api.moonbeam.network"


def test_unknown_rpc_raises() -> None:
    with pytest.raises(ValidationError):
        OrchestratorConfig(rpc_urls={}).rpc_url_for(1284)


def test_rejects_unsupported_target() -> None:
    with pytest.raises(ValidationError):
        OrchestratorConfig(target_chain_id=1)


def test_rejects_invalid_timeouts() -> None:
    with pytest.raises(ValidationError):
        OrchestratorConfig(receipt_timeout=0)
    with pytest.raises(ValidationError):
        OrchestratorConfig(guard=GuardConfig(debounce=-1))


def test_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SENJA_TARGET_CHAIN_ID", "8453")
    monkeypatch.setenv("SENJA_RPC_8453", "https://base.example")
    monkeypatch.setenv("SENJA_STORAGE_PATH", str(tmp_path / "state.sqlite"))
    monkeypatch.setenv("SENJA_INDEXER_URL", "https://indexer.example/graphql")
    monkeypatch.setenv("SENJA_RECEIPT_TIMEOUT", "30")
    monkeypatch.setenv("SENJA_GUARD_DEBOUNCE", "0.25")
    monkeypatch.setenv("SENJA_RELAY_POLICY", "Simulated")

    config = OrchestratorConfig.from_env()

    assert config.target_chain_id == 8453
    assert config.rpc_url_for(8453) == "https://base.example"
    assert config.rpc_url_for(1284) == "https://rpc.api.moonbeam.network"
    assert config.storage_path == tmp_path / "state.sqlite"
    assert config.indexer_url == "https://indexer.example/graphql"
    assert config.receipt_timeout == 30.0
    assert config.guard.debounce == 0.25
    assert config.relay.policy is RelayPolicy.SIMULATED


def test_from_env_reads_dotenv_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # register the variable so monkeypatch removes what load_dotenv writes
    monkeypatch.setenv("SENJA_REQUEST_TIMEOUT", "unset")
    monkeypatch.delenv("SENJA_REQUEST_TIMEOUT")
    env_file = tmp_path / "custom.env"
    env_file.write_text("SENJA_REQUEST_TIMEOUT=3.5\n")

    config = OrchestratorConfig.from_env(env_file)
    assert config.request_timeout == 3.5


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SENJA_TARGET_CHAIN_ID", "moonbeam"),
        ("SENJA_RECEIPT_TIMEOUT", "soon"),
        ("SENJA_RELAY_POLICY", "carrier-pigeon"),
    ],
)
def test_from_env_invalid_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError) as exc_info:
        OrchestratorConfig.from_env()
    assert exc_info.value.field == name
