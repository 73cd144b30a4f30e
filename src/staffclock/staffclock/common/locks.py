from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator


class KeyedLocks:
    """One lock per key (user id), created lazily.

    Serializes read-decide-write sequences for the same user while letting
    different users proceed in parallel. A lock lives only while someone
    holds or waits on it, so the map does not grow with the user base.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield
