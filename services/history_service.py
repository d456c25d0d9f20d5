"""
List History Service

Newest-first, capacity-bounded log of generated lists. Persistence goes
through an injected KeyValueStore so the same history logic runs over
memory, a per-client JSON file, or Streamlit session state.

History belongs to one client: each browser session (or signed-in user,
for the file backend) gets its own store and never sees another client's
lists.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from domain.errors import ValidationError
from domain.models import GeneratedList
from logging_config import setup_logging

logger = setup_logging(__name__, log_file="history_service.log")

HISTORY_KEY = "lodestone.history"
DEFAULT_MAX_ENTRIES = 20
HISTORY_BACKENDS = ("session", "file")


# =============================================================================
# Protocol
# =============================================================================

class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def update(self, key: str, fn: Callable[[Optional[Any]], Any]) -> None:
        """Replace the value under key with fn(current value), atomically."""
        ...


# =============================================================================
# Key-value stores
# =============================================================================

class InMemoryKeyValueStore:
    """Dict-backed store; lives as long as the process."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def update(self, key: str, fn: Callable[[Optional[Any]], Any]) -> None:
        with self._lock:
            self._data[key] = fn(self._data.get(key))


class JsonFileKeyValueStore:
    """All keys in one JSON file, rewritten atomically on every write.

    Instances opened on the same path share one lock, so concurrent
    update() calls from different sessions never lose a write.
    """

    _locks: dict[Path, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, path: str | Path):
        self.path = Path(path)
        key = self.path.resolve()
        with JsonFileKeyValueStore._locks_guard:
            self._lock = JsonFileKeyValueStore._locks.setdefault(key, threading.Lock())

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        self.update(key, lambda _: value)

    def update(self, key: str, fn: Callable[[Optional[Any]], Any]) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = fn(data.get(key))
            self._write_all(data)


# =============================================================================
# History
# =============================================================================

class ListHistory:
    """Generated-list history, newest first.

    Args:
        store: Key-value persistence
        max_entries: Capacity; the oldest entries are evicted beyond it
        key: Storage key
    """

    def __init__(self, store: KeyValueStore, max_entries: int = DEFAULT_MAX_ENTRIES, key: str = HISTORY_KEY):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._store = store
        self.max_entries = max_entries
        self.key = key

    def _as_entries(self, raw: Optional[Any]) -> list[dict]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.error(f"Discarding history under '{self.key}': expected a list, got {type(raw).__name__}")
            return []
        return raw

    def add(self, generated: GeneratedList) -> None:
        """Prepend a list, evicting the oldest entries beyond capacity."""
        entry = generated.to_dict()

        def _prepend(raw: Optional[Any]) -> list[dict]:
            entries = [entry] + self._as_entries(raw)
            if len(entries) > self.max_entries:
                logger.debug(f"Evicting {len(entries) - self.max_entries} oldest history entries")
            return entries[: self.max_entries]

        self._store.update(self.key, _prepend)

    def all(self) -> tuple[GeneratedList, ...]:
        """Every stored list, newest first. Unreadable entries are skipped."""
        result = []
        for entry in self._as_entries(self._store.get(self.key)):
            try:
                result.append(GeneratedList.from_dict(entry))
            except (AttributeError, TypeError, ValueError, ValidationError) as e:
                logger.error(f"Skipping unreadable history entry: {e}")
        return tuple(result)

    def clear(self) -> None:
        self._store.set(self.key, [])

    def __len__(self) -> int:
        return len(self._as_entries(self._store.get(self.key)))


def create_client_history(
    client_id: str,
    backend: str = "session",
    history_dir: str | Path | None = None,
    max_entries: int = DEFAULT_MAX_ENTRIES,
) -> ListHistory:
    """Build the history for one client.

    Args:
        client_id: Stable id of the browser session or signed-in user
        backend: "session" (Streamlit session state) or "file" (one JSON
            file per client under history_dir)
        history_dir: Directory for per-client files, required for "file"
        max_entries: History capacity

    Raises:
        ValueError: On an unknown backend or a file backend without a directory
    """
    if backend == "session":
        from state.history_state import SessionStateKeyValueStore
        store = SessionStateKeyValueStore()
    elif backend == "file":
        if history_dir is None:
            raise ValueError("The file history backend needs a history directory")
        store = JsonFileKeyValueStore(Path(history_dir) / f"{client_id}.json")
    else:
        raise ValueError(f"Unknown history backend '{backend}'. Expected one of {', '.join(HISTORY_BACKENDS)}")
    return ListHistory(store, max_entries=max_entries)


def get_list_history() -> ListHistory:
    """
    Get or create the ListHistory for the current client.

    [history].backend selects "session" (default, Streamlit session state)
    or "file" (per-client file that survives reloads for signed-in users).
    """
    from settings_service import SettingsService
    from state.history_state import current_client_id

    settings = SettingsService()

    def _create() -> ListHistory:
        return create_client_history(
            current_client_id(),
            backend=settings.history_backend,
            history_dir=settings.history_dir,
            max_entries=settings.history_max_entries,
        )

    from state import get_service
    return get_service('list_history', _create)
