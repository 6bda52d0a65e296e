"""Per-key mutual exclusion inside one process."""

import threading
from contextlib import contextmanager, nullcontext


class KeyedLock:
    """Hands out one lock per key; unrelated keys never block each other.

    Locks are created on first use and discarded once nobody holds or
    waits on them, so the registry does not grow with every key ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[str, list] = {}  # key -> [lock, holders]

    @contextmanager
    def hold(self, key: str):
        with self._guard:
            entry = self._entries.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


def held(locks: KeyedLock | None, key: str):
    """``locks.hold(key)``, or a no-op when the caller has no lock registry."""
    return locks.hold(key) if locks is not None else nullcontext()
