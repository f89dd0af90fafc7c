"""Persistent consumer thread for executor results.

Turns each queued ``ResponsePayload`` into a ``ResponseReceived`` dispatch.
Started once at startup and kept for the process lifetime.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from queue import Queue

from .actions import ResponseReceived
from .dispatch import ResponsePayload
from .errors import BoltError
from .reducer import ReduceResult

logger = logging.getLogger(__name__)

_STOP = object()


class ResponseListener:
    """Single subscription that feeds response arrivals into the store."""

    def __init__(
        self,
        events: Queue,
        dispatch: Callable[[ResponseReceived], ReduceResult],
    ) -> None:
        self._events = events
        self._dispatch = dispatch
        self._thread: threading.Thread | None = None

    def _worker(self) -> None:
        while True:
            payload = self._events.get()
            if payload is _STOP:
                return
            self.deliver(payload)

    def deliver(self, payload: ResponsePayload) -> bool:
        """Dispatch one arrival; returns ``False`` when it could not be fully applied.

        Failures are logged and never stop the listener thread.
        """
        try:
            self._dispatch(ResponseReceived(payload))
        except BoltError as exc:
            logger.warning(
                "dropping response (status %s, correlation index %s): %s",
                payload.status,
                payload.correlation_index,
                exc,
            )
            return False
        except Exception:
            logger.exception(
                "response delivery failed (status %s, correlation index %s)",
                payload.status,
                payload.correlation_index,
            )
            return False
        return True

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the listener thread; calling twice is an error."""
        if self._thread is not None:
            raise RuntimeError("response listener already started")
        self._thread = threading.Thread(
            target=self._worker,
            name="bolthttp-response-listener",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        """Ask the thread to exit after draining queued arrivals."""
        if self._thread is None:
            return
        self._events.put(_STOP)
        self._thread.join(timeout)


__all__ = ["ResponseListener"]
