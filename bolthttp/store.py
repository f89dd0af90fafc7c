"""Single owner of the application state.

Every transition, whether from the UI thread or the response listener, runs
the reducer inside one lock. Side effects run after the lock is released:
handing snapshots to the executor, persisting, opening links, and notifying
redraw listeners.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable

from .actions import Action
from .dispatch import OutboundRequest
from .reducer import ReduceResult, reduce
from .state import AppState
from .text_transform import transform_json as default_transform_json

logger = logging.getLogger(__name__)

RedrawListener = Callable[[AppState], None]


class Store:
    """Lock-guarded state holder; the reducer is its only writer."""

    def __init__(
        self,
        state: AppState,
        *,
        send: Callable[[OutboundRequest], None] | None = None,
        persist: Callable[[AppState], None] | None = None,
        open_url: Callable[[str], object] | None = None,
        transform_json: Callable[[str], str] = default_transform_json,
    ) -> None:
        self._state = state
        self._send = send
        self._persist = persist
        self._open_url = open_url
        self._transform_json = transform_json
        self._lock = threading.Lock()
        self._listeners: list[RedrawListener] = []
        self._version = 0
        self._persist_lock = threading.Lock()
        self._persisted_version = 0

    def snapshot(self) -> AppState:
        """Return a deep copy of the current state for read-only use."""
        with self._lock:
            return copy.deepcopy(self._state)

    def subscribe(self, listener: RedrawListener) -> Callable[[], None]:
        """Register a redraw listener and return a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> ReduceResult:
        """Run one transition atomically, then its side effects.

        Exceptions from the reducer propagate and leave the state unchanged.
        """
        with self._lock:
            previous = self._state
            result = reduce(previous, action, self._transform_json)
            self._state = result.state
            changed = result.state is not previous
            if changed:
                self._version += 1
            version = self._version
            listeners = list(self._listeners) if result.redraw else []
            redraw_snapshot = copy.deepcopy(result.state) if listeners else None

        if result.outbound is not None and self._send is not None:
            self._send(result.outbound)
        if changed and self._persist is not None:
            self._persist_version(result.state, version)
        if result.open_url is not None and self._open_url is not None:
            self._open_url(result.open_url)
        for listener in listeners:
            listener(redraw_snapshot)
        return result

    def _persist_version(self, state: AppState, version: int) -> None:
        # Writers can race after the lock; never let an older state overwrite a newer one.
        with self._persist_lock:
            if version <= self._persisted_version:
                return
            try:
                self._persist(state)
            except Exception:
                logger.exception("failed to persist state")
                return
            self._persisted_version = version


__all__ = ["RedrawListener", "Store"]
