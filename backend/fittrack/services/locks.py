"""Per-profile locks serializing load, apply and save of a profile document."""
from __future__ import annotations

import threading


class ProfileLocks:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def for_profile(self, profile_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(profile_id)
            if lock is None:
                lock = self._locks[profile_id] = threading.RLock()
            return lock
