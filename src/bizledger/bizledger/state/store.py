from __future__ import annotations

import threading
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, List, Optional

from .actions import Action, RestoreState
from .model import AppState, initial_state
from .reducer import reduce


class Origin(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


StateListener = Callable[[AppState, Action, Origin], None]


class StateStore:
    """Owns the in-memory aggregate; the reducer is its only writer.

    `dispatch` is for local (user) actions, `apply_remote` for snapshots coming
    from the document store. Listeners see the origin so the sync engine writes
    local changes out and leaves remote ones alone.
    """

    def __init__(self, state: Optional[AppState] = None):
        self._state: AppState = state if state is not None else initial_state()
        self._lock = threading.RLock()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> AppState:
        with self._lock:
            return self._state

    def dispatch(self, action: Action) -> AppState:
        return self._apply(action, Origin.LOCAL)

    @contextmanager
    def locked(self) -> Iterator[AppState]:
        """Hold the store lock across a read and the dispatch that depends on it.

        Services that derive ids or exists/new decisions from the current state
        do both inside this block so concurrent requests cannot interleave.
        """

        with self._lock:
            yield self._state

    def apply_remote(self, payload) -> AppState:
        return self._apply(RestoreState(payload), Origin.REMOTE)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, action: Action, origin: Origin) -> AppState:
        with self._lock:
            previous = self._state
            self._state = reduce(previous, action)
            current = self._state
            listeners = list(self._listeners)
            # Listeners run under the lock so they observe dispatches in order.
            if current is not previous:
                for listener in listeners:
                    listener(current, action, origin)
            return current
