"""
Key-value stores for persisted session state.

The used-recipe memory persists itself through a tiny string key-value
contract (get/set of serialized values), the same shape a browser's
localStorage offers. Two implementations are provided:

- JsonFileStore: a single JSON object on disk, rewritten on every set().
- InMemoryStore: a process-local dict, for tests and throwaway sessions.

Writes are synchronous; there is one logical writer per store.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Synchronous string key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the serialized value for key, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a serialized value under key, replacing any previous value."""
        pass


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Contents are lost with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self) -> None:
        """Drop all keys (useful for testing)."""
        self._data.clear()


class JsonFileStore(KeyValueStore):
    """
    Store backed by one JSON object file.

    The whole file is read on every get() and rewritten on every set(). A
    missing, unreadable or non-object file reads as empty; the next set()
    replaces it with a valid document.

    Args:
        path: Location of the JSON file. Parent directories are created on write.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read store file %s, treating as empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s does not hold a JSON object, treating as empty", self.path)
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        logger.debug("Persisted key %r to %s", key, self.path)
