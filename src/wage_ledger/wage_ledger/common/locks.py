"""Per-key mutual exclusion for service entry points."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLocks:
    """Registry of re-entrant locks, one per key (usually the caller identity).

    Locks are created lazily and never discarded; the number of keys is bounded
    by the number of identities that ever called in.
    """

    def __init__(self):
        self._locks: Dict[Hashable, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield
