# Overview: Observable state container shared by the session store and resource stores.

from __future__ import annotations

import copy
import threading
from typing import Any, Callable

Listener = Callable[["StateContainer", dict], None]


class StateContainer:
    """
    Explicit, injectable state holder.

    State lives in plain attributes named in STATE_FIELDS. All writes go
    through _set(), which applies the changes under a lock and then notifies
    subscribers with the dict of changed fields.
    """

    STATE_FIELDS: tuple[str, ...] = ()

    def __init__(self):
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    def _set(self, **changes: Any) -> None:
        with self._lock:
            for name, value in changes.items():
                if name not in self.STATE_FIELDS:
                    raise AttributeError(f"{type(self).__name__} has no state field {name!r}")
                setattr(self, name, value)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self, changes)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def snapshot(self, *fields: str) -> dict:
        """Deep copy of the named fields (all state fields when none given)."""
        with self._lock:
            return {
                name: copy.deepcopy(getattr(self, name))
                for name in (fields or self.STATE_FIELDS)
            }
