"""Per-key re-entrant locks for the in-memory stores.

Each entity id gets its own ``RLock`` while somebody holds or waits for it.
The entry is dropped once the last holder releases, so the registry only
grows with the number of keys in use, not with every id ever seen. Acquiring
several keys at once always happens in sorted order so that two callers
locking overlapping key sets cannot deadlock.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


class KeyedLocks:
    """A registry of re-entrant locks, one per key in use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _acquire(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            # Counted before blocking, so a waiter keeps the entry alive.
            entry.holders += 1
        entry.lock.acquire()
        return entry

    def _release(self, key: str, entry: _Entry) -> None:
        entry.lock.release()
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock of a single key."""
        key = str(key)
        entry = self._acquire(key)
        try:
            yield
        finally:
            self._release(key, entry)

    @contextmanager
    def hold_many(self, keys: Iterable[str]) -> Iterator[None]:
        """Hold the locks of several keys, acquired in sorted order."""
        with ExitStack() as stack:
            for key in sorted({str(k) for k in keys}):
                stack.enter_context(self.hold(key))
            yield
