from __future__ import annotations

from pathlib import Path

import pytest

from senja_tx.chains import (
    BASE_CHAIN_ID,
    MOONBEAM_CHAIN_ID,
    ChainSelection,
    chain_name,
    default_chain,
    explorer_tx_url,
    find_token_by_address,
    get_chain,
    get_token,
    is_chain_supported,
    next_chain,
    previous_chain,
    require_chain,
)
from senja_tx.constants import SELECTED_CHAIN_KEY
from senja_tx.exceptions import ValidationError
from senja_tx.storage import MemoryStore, SqliteStore


class TestRegistry:
    def test_reference_deployment(self):
        moonbeam = get_chain(MOONBEAM_CHAIN_ID)
        base = get_chain(BASE_CHAIN_ID)
        assert moonbeam is not None and base is not None
        assert moonbeam.name == "Moonbeam"
        assert moonbeam.destination_endpoint == 30126
        assert base.destination_endpoint == 30184
        assert default_chain() is moonbeam

    def test_require_chain_lists_available(self):
        with pytest.raises(ValidationError) as exc_info:
            require_chain(1)
        assert exc_info.value.message == "Unsupported chain: 1. Available chains: 1284, 8453"

    def test_supported_and_names(self):
        assert is_chain_supported(8453)
        assert not is_chain_supported(1)
        assert chain_name(8453) == "Base"
        assert chain_name(1) == "Unknown"

    def test_navigation_wraps(self):
        assert next_chain(MOONBEAM_CHAIN_ID).chain_id == BASE_CHAIN_ID
        assert next_chain(BASE_CHAIN_ID).chain_id == MOONBEAM_CHAIN_ID
        assert previous_chain(MOONBEAM_CHAIN_ID).chain_id == BASE_CHAIN_ID
        assert next_chain(999).chain_id == MOONBEAM_CHAIN_ID

    def test_explorer_url(self):
        assert explorer_tx_url(BASE_CHAIN_ID, "0xabc") == "https://basescan.org/tx/0xabc"
        assert explorer_tx_url(1, "0xabc") is None

    def test_token_lookup(self):
        usdt = get_token("usdt")
        assert usdt is not None and usdt.decimals == 6
        assert usdt.address_on(MOONBEAM_CHAIN_ID) == "0x32822138bc93390f236B4a629EA793dE12b92d19"

        found = find_token_by_address("0x32822138BC93390F236B4A629EA793DE12B92D19")
        assert found is usdt
        assert find_token_by_address("0x32822138bc93390f236B4a629EA793dE12b92d19", BASE_CHAIN_ID) is None
        assert find_token_by_address(None) is None


class TestChainSelection:
    def test_defaults_to_first_chain(self):
        selection = ChainSelection()
        assert selection.current_chain_id == MOONBEAM_CHAIN_ID

    def test_set_chain_persists_and_notifies(self):
        store = MemoryStore()
        selection = ChainSelection(store)
        seen: list[int] = []
        selection.subscribe(lambda chain: seen.append(chain.chain_id))

        assert selection.set_chain(BASE_CHAIN_ID)
        assert selection.current.name == "Base"
        assert store.get(SELECTED_CHAIN_KEY) == BASE_CHAIN_ID
        assert seen == [BASE_CHAIN_ID]

    def test_unsupported_chain_is_ignored(self):
        store = MemoryStore()
        selection = ChainSelection(store)
        assert not selection.set_chain(1)
        assert selection.current_chain_id == MOONBEAM_CHAIN_ID
        assert store.get(SELECTED_CHAIN_KEY) is None

    def test_unsubscribe(self):
        selection = ChainSelection()
        seen: list[int] = []
        unsubscribe = selection.subscribe(lambda chain: seen.append(chain.chain_id))
        unsubscribe()
        selection.set_chain(BASE_CHAIN_ID)
        assert seen == []

    def test_switch_next_and_previous(self):
        selection = ChainSelection()
        assert selection.switch_to_next().chain_id == BASE_CHAIN_ID
        assert selection.switch_to_previous().chain_id == MOONBEAM_CHAIN_ID

    @pytest.mark.parametrize("stored", ["not-a-number", 1, None])
    def test_invalid_persisted_value_falls_back(self, stored):
        selection = ChainSelection(MemoryStore({SELECTED_CHAIN_KEY: stored}))
        assert selection.current_chain_id == MOONBEAM_CHAIN_ID

    def test_restores_from_sqlite(self, tmp_path: Path):
        path = tmp_path / "state.sqlite"
        ChainSelection(SqliteStore(path)).set_chain(BASE_CHAIN_ID)

        restored = ChainSelection(SqliteStore(path))
        assert restored.current_chain_id == BASE_CHAIN_ID
        assert SqliteStore(path).get(SELECTED_CHAIN_KEY) == BASE_CHAIN_ID

    def test_explicit_default(self):
        selection = ChainSelection(default_chain_id=BASE_CHAIN_ID)
        assert selection.current_chain_id == BASE_CHAIN_ID
