"""Process-wide current-chain selection, persisted across sessions."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ..constants import SELECTED_CHAIN_KEY
from ..storage import KeyValueStore, MemoryStore
from .registry import (
    ChainDescriptor,
    all_chains,
    default_chain,
    get_chain,
    is_chain_supported,
    next_chain,
    previous_chain,
)

logger = logging.getLogger(__name__)

SelectionListener = Callable[[ChainDescriptor], None]


class ChainSelection:
    """Single-writer cell holding the selected chain.

    Readers always see a complete :class:`ChainDescriptor` snapshot; writes
    replace the snapshot atomically and are persisted under a fixed key.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        default_chain_id: int | None = None,
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._lock = threading.Lock()
        self._listeners: list[SelectionListener] = []
        fallback = get_chain(default_chain_id) if default_chain_id is not None else None
        self._default = fallback or default_chain()
        self._current = self._load()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def current(self) -> ChainDescriptor:
        return self._current

    @property
    def current_chain_id(self) -> int:
        return self._current.chain_id

    @property
    def all_chains(self) -> tuple[ChainDescriptor, ...]:
        return all_chains()

    def is_chain_supported(self, chain_id: int) -> bool:
        return is_chain_supported(chain_id)

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a listener called with each new selection; returns an unsubscribe hook."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------
    def set_chain(self, chain_id: int) -> bool:
        """Select ``chain_id`` if it is registered. Returns False when ignored."""
        chain = get_chain(chain_id)
        if chain is None:
            logger.warning("Ignoring selection of unsupported chain %s", chain_id)
            return False

        with self._lock:
            self._current = chain
            listeners = list(self._listeners)
        self._store.set(SELECTED_CHAIN_KEY, chain.chain_id)
        logger.info("Selected chain %s (%s)", chain.name, chain.chain_id)

        for listener in listeners:
            listener(chain)
        return True

    def switch_to_next(self) -> ChainDescriptor:
        self.set_chain(next_chain(self.current_chain_id).chain_id)
        return self._current

    def switch_to_previous(self) -> ChainDescriptor:
        self.set_chain(previous_chain(self.current_chain_id).chain_id)
        return self._current

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> ChainDescriptor:
        stored = self._store.get(SELECTED_CHAIN_KEY)
        if stored is None:
            return self._default

        try:
            chain_id = int(stored)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed persisted chain id %r", stored)
            return self._default

        chain = get_chain(chain_id)
        if chain is None:
            logger.warning("Persisted chain %s is no longer supported; using %s", chain_id, self._default.name)
            return self._default
        return chain
