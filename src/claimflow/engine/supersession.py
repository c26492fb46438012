"""
ClaimFlow Request Supersession

Availability lookups for the same claim can overlap when the user changes the
repairer or the date quickly. Each lookup takes a ticket; only the result of
the newest ticket for a key is applied, older results are discarded.
"""
from __future__ import annotations

import threading
from typing import Hashable


class SupersessionGuard:
    """
    Per-key generation counter.

    Usage:
        guard = SupersessionGuard()
        ticket = guard.issue(("CLM-001", "slots"))
        slots = oracle.available_slots(...)
        if guard.is_current(("CLM-001", "slots"), ticket):
            apply(slots)
    """

    def __init__(self) -> None:
        self._generations: dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def issue(self, key: Hashable) -> int:
        """Start a new request for ``key``; every earlier ticket becomes stale."""
        with self._lock:
            generation = self._generations.get(key, 0) + 1
            self._generations[key] = generation
            return generation

    def is_current(self, key: Hashable, ticket: int) -> bool:
        with self._lock:
            return self._generations.get(key, 0) == ticket

    def invalidate(self, key: Hashable) -> None:
        """Discard any in-flight request for ``key``."""
        with self._lock:
            self._generations[key] = self._generations.get(key, 0) + 1
