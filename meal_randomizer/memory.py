"""
Rolling-week memory of served recipe identifiers.

UsedRecipeMemory remembers which recipe ids have been served so the selector
can skip them. The list is append-only within a window and is wiped once more
than a week has passed since the last reset. The reset is checked only when
the memory is initialized (once per session).

Persistence uses two keys on a KeyValueStore:
- "usedIds": JSON array of recipe ids
- "lastReset": last reset time in milliseconds since the epoch, as a decimal string

Malformed persisted values are treated as absent and never raise. Failed
writes are logged; the in-memory list stays authoritative for the session.
"""

import json
import logging
import time
from typing import Callable, List, Optional, Tuple

from meal_randomizer.models import RecipeId
from meal_randomizer.store import KeyValueStore

logger = logging.getLogger(__name__)

USED_IDS_KEY = "usedIds"
LAST_RESET_KEY = "lastReset"

# 7 days in milliseconds
RESET_INTERVAL_MS = 7 * 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def _is_recipe_id(value) -> bool:
    # bool is an int subclass but never a recipe id
    return isinstance(value, int) and not isinstance(value, bool)


class UsedRecipeMemory:
    """
    Time-windowed list of recipe ids already served this week.

    Args:
        store: Durable key-value store owned by the session
        clock: Callable returning the current time in milliseconds (injectable for tests)
        reset_interval_ms: Window length; defaults to 7 days

    Call initialize() once before use. record() persists after every append.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], int] = now_ms,
        reset_interval_ms: int = RESET_INTERVAL_MS,
    ) -> None:
        self.store = store
        self.clock = clock
        self.reset_interval_ms = reset_interval_ms
        self._ids: List[RecipeId] = []
        self._last_reset: Optional[int] = None

    @property
    def ids(self) -> List[RecipeId]:
        """Copy of the served ids, in the order they were recorded."""
        return list(self._ids)

    @property
    def last_reset(self) -> Optional[int]:
        return self._last_reset

    def _load_ids(self) -> List[RecipeId]:
        raw = self.store.get(USED_IDS_KEY)
        if raw is None:
            return []
        try:
            ids = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed %s value: %r", USED_IDS_KEY, raw)
            return []
        if not isinstance(ids, list) or not all(_is_recipe_id(i) for i in ids):
            logger.warning("Ignoring malformed %s value: %r", USED_IDS_KEY, raw)
            return []
        return ids

    def _load_last_reset(self) -> Optional[int]:
        raw = self.store.get(LAST_RESET_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed %s value: %r", LAST_RESET_KEY, raw)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self.store.set(key, value)
        except OSError as e:
            logger.warning("Could not persist %s: %s", key, e)

    def _persist_ids(self) -> None:
        self._write(USED_IDS_KEY, json.dumps(self._ids))

    def initialize(self) -> Tuple[List[RecipeId], int]:
        """
        Load persisted state, resetting it if the window has elapsed.

        A reset happens when no valid last-reset timestamp is stored or when
        more than reset_interval_ms have passed since it. A reset empties the
        id list, sets the timestamp to now and persists both immediately.

        Returns:
            Tuple of (served ids, last reset timestamp in ms)
        """
        now = self.clock()
        last_reset = self._load_last_reset()

        if last_reset is None or now - last_reset > self.reset_interval_ms:
            logger.info("Resetting used recipe memory (last reset: %s, now: %d)", last_reset, now)
            self._ids = []
            self._last_reset = now
            self._write(LAST_RESET_KEY, str(now))
            self._persist_ids()
        else:
            self._ids = self._load_ids()
            self._last_reset = last_reset
            logger.debug("Loaded %d used recipe ids", len(self._ids))

        return self.ids, self._last_reset

    def record(self, recipe_id: RecipeId) -> None:
        """Append recipe_id (duplicates allowed) and persist the id list."""
        self._ids.append(recipe_id)
        self._persist_ids()

    def contains(self, recipe_id: RecipeId) -> bool:
        return recipe_id in self._ids

    def __contains__(self, recipe_id: RecipeId) -> bool:
        return self.contains(recipe_id)

    def __len__(self) -> int:
        return len(self._ids)
