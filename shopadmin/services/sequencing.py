# Overview: Monotonic request tickets so stale list responses never overwrite newer state.

from __future__ import annotations

import threading


class RequestSequence:
    """
    Issue increasing tickets per outgoing fetch.

    A response is applied only if its ticket is still the latest one issued;
    anything older arrived after a newer request was sent and is discarded.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = 0

    def next(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    def invalidate(self) -> None:
        """Make every in-flight ticket stale (used by clear())."""
        with self._lock:
            self._latest += 1

    @property
    def latest(self) -> int:
        return self._latest
