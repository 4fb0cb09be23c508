"""String key-value storage modelled on the browser's ``localStorage``.

Holds the convenience records that sit beside the durable record store:
the current session, the current remember-me token, and the remembered
users list. Operations are synchronous. Every write is broadcast to
subscribed listeners as a ``StorageEvent``, which other views of the same
storage use to refresh themselves; the signal is advisory only.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageEvent:
    """A change to one key (``key`` is None when the storage was cleared)."""

    key: str | None
    old_value: str | None
    new_value: str | None


StorageListener = Callable[[StorageEvent], None]


class LocalStorage(ABC):
    """Abstract string key-value store with change notifications."""

    def __init__(self) -> None:
        self._listeners: list[StorageListener] = []

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""

    @abstractmethod
    def _write(self, key: str, value: str) -> None: ...

    @abstractmethod
    def _remove(self, key: str) -> None: ...

    @abstractmethod
    def _clear(self) -> None: ...

    def set_item(self, key: str, value: str) -> None:
        old_value = self.get_item(key)
        self._write(key, value)
        self._notify(StorageEvent(key=key, old_value=old_value, new_value=value))

    def remove_item(self, key: str) -> None:
        old_value = self.get_item(key)
        if old_value is None:
            return
        self._remove(key)
        self._notify(StorageEvent(key=key, old_value=old_value, new_value=None))

    def clear(self) -> None:
        self._clear()
        self._notify(StorageEvent(key=None, old_value=None, new_value=None))

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: StorageEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # A broken listener must not undo a completed write
                logger.exception("Storage listener failed for key %s", event.key)


class InMemoryLocalStorage(LocalStorage):
    """Process-local storage; contents vanish when the process exits."""

    def __init__(self) -> None:
        super().__init__()
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def keys(self) -> list[str]:
        return list(self._items)

    def _write(self, key: str, value: str) -> None:
        self._items[key] = value

    def _remove(self, key: str) -> None:
        self._items.pop(key, None)

    def _clear(self) -> None:
        self._items.clear()


class FileLocalStorage(LocalStorage):
    """Storage persisted as a single JSON object on disk.

    The file is re-read on every access so several processes sharing it see
    each other's writes; writes replace the file atomically.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def keys(self) -> list[str]:
        return list(self._load())

    def _write(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def _remove(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)

    def _clear(self) -> None:
        self._dump({})

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt local storage file: %s", self._path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed local storage file: %s", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
