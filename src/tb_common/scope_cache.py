"""ScopeCache — bounded in-memory cache of per-user session state.

Entries expire after ``ttl_seconds`` and the least recently used ones are
evicted beyond ``max_entries``. An entry whose last save failed is "unsaved":
it holds the only copy of a mutation, so it never expires and is never evicted
until a later save succeeds.

Each scope has an ``asyncio.Lock``; callers hold it across load, mutate and
save so two requests for the same user never work on separate copies. Locks
live in a WeakValueDictionary and disappear once no coroutine holds or waits
on them.
"""

import asyncio
import time
import weakref
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class _Entry(Generic[T]):
    value: T
    stored_at: float
    unsaved: bool = False


class ScopeCache(Generic[T]):
    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry[T]] = OrderedDict()
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, scope: str) -> bool:
        return scope in self._entries

    def lock(self, scope: str) -> asyncio.Lock:
        lock = self._locks.get(scope)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[scope] = lock
        return lock

    def get(self, scope: str) -> T | None:
        """Cached value, or None when absent or expired."""
        entry = self._entries.get(scope)
        if entry is None:
            return None
        if self._expired(entry):
            del self._entries[scope]
            return None
        self._entries.move_to_end(scope)
        return entry.value

    def get_unsaved(self, scope: str) -> T | None:
        """The cached value only if it holds changes storage does not have."""
        entry = self._entries.get(scope)
        if entry is None or not entry.unsaved:
            return None
        self._entries.move_to_end(scope)
        return entry.value

    def put(self, scope: str, value: T) -> None:
        self._entries[scope] = _Entry(value, self._clock())
        self._entries.move_to_end(scope)
        self._evict()

    def mark_saved(self, scope: str, saved: bool) -> None:
        entry = self._entries.get(scope)
        if entry is None:
            return
        entry.unsaved = not saved
        if saved:
            entry.stored_at = self._clock()

    def drop(self, scope: str) -> None:
        self._entries.pop(scope, None)

    def _expired(self, entry: _Entry[T]) -> bool:
        return not entry.unsaved and self._clock() - entry.stored_at >= self._ttl

    def _evict(self) -> None:
        for scope, entry in list(self._entries.items()):
            if self._expired(entry):
                del self._entries[scope]
        if len(self._entries) <= self._max_entries:
            return
        # Oldest first; unsaved entries are skipped
        for scope, entry in list(self._entries.items()):
            if len(self._entries) <= self._max_entries:
                break
            if not entry.unsaved:
                del self._entries[scope]
