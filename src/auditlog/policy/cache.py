"""Versioned cache slots owned by a policy engine.

Each slot has a generation counter. Invalidating a slot drops its value
and bumps the counter; a value computed under an older generation is
refused when stored, so a reader racing an invalidation never installs
stale data.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar


T = TypeVar("T")


class CacheSlot(StrEnum):
    STRATEGY = "strategy"
    EXCEPTIONS = "exceptions"
    IMPLICITLY_AUDITED = "implicitly_audited"
    STORE_LAST_STATE = "store_last_state"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    generation: int


class PolicyCache:
    """Thread-safe container of generation-tagged cache entries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generations: dict[CacheSlot, int] = {slot: 0 for slot in CacheSlot}
        self._entries: dict[CacheSlot, CacheEntry] = {}

    def generation(self, slot: CacheSlot) -> int:
        with self._lock:
            return self._generations[slot]

    def get(self, slot: CacheSlot) -> Any:
        """Return the current value of ``slot`` or MISSING."""
        with self._lock:
            entry = self._entries.get(slot)
            if entry is None or entry.generation != self._generations[slot]:
                return MISSING
            return entry.value

    def is_cached(self, slot: CacheSlot) -> bool:
        return self.get(slot) is not MISSING

    def put(self, slot: CacheSlot, value: Any, generation: int) -> bool:
        """Store ``value`` if ``generation`` is still current.

        Returns:
            True if the value was stored
        """
        with self._lock:
            if generation != self._generations[slot]:
                return False
            self._entries[slot] = CacheEntry(value, generation)
            return True

    def get_or_compute(self, slot: CacheSlot, compute: Callable[[], T]) -> T:
        """Return the cached value, computing and storing it on a miss.

        Concurrent misses may compute redundantly; the first current
        result wins and later ones overwrite it with an equal value.
        """
        value = self.get(slot)
        if value is not MISSING:
            return value
        generation = self.generation(slot)
        value = compute()
        self.put(slot, value, generation)
        return value

    def invalidate(self, *slots: CacheSlot) -> None:
        with self._lock:
            for slot in slots:
                self._generations[slot] += 1
                self._entries.pop(slot, None)
