"""Client-local persistent key/value storage backed by sqlitedict."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlitedict import SqliteDict

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path.home() / ".senja" / "state.sqlite"
_TABLE = "client_state"


class KeyValueStore(ABC):
    """Minimal persistent storage used for session-spanning client state."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass


class MemoryStore(KeyValueStore):
    """Process-local store; state is lost when the process exits."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value


class SqliteStore(KeyValueStore):
    """sqlitedict-backed store; every write is committed immediately."""

    def __init__(self, path: Path | str = DEFAULT_STORAGE_PATH) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _open(self) -> Iterator[SqliteDict]:
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            db = SqliteDict(str(self._path), tablename=_TABLE, autocommit=True)
            try:
                yield db
            finally:
                db.close()

    def get(self, key: str, default: Any = None) -> Any:
        with self._open() as db:
            return db.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._open() as db:
            db[key] = value
        logger.debug("Persisted %s to %s", key, self._path)
