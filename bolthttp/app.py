"""Startup wiring: state recovery plus store, executor, and listener assembly."""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from .config import Settings
from .errors import CorruptState
from .executor import RequestExecutor
from .listener import ResponseListener
from .persistence import ensure_state_file, load_state, reset_state_file, save_state
from .state import AppState
from .store import Store
from .text_transform import transform_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoltRuntime:
    """Running pieces of one client session."""

    store: Store
    executor: RequestExecutor
    listener: ResponseListener

    def stop(self) -> None:
        self.listener.stop()


def load_startup_state(path: Path) -> AppState:
    """Load the state file, creating it on first run and regenerating it if corrupt."""
    ensure_state_file(path)
    try:
        return load_state(path)
    except CorruptState as exc:
        logger.warning("state file %s is corrupt (%s); regenerating defaults", path, exc)
        return reset_state_file(path)


def start_runtime(
    state: AppState,
    settings: Settings,
    state_path: Path,
    open_url: Callable[[str], object] = webbrowser.open,
) -> BoltRuntime:
    """Build the store around ``state`` and start the response listener."""
    executor = RequestExecutor(timeout=settings.request_timeout)
    store = Store(
        state,
        send=executor.submit,
        persist=partial(save_state, path=state_path),
        open_url=open_url,
        transform_json=partial(transform_json, style=settings.style, no_color=settings.no_color),
    )
    listener = ResponseListener(executor.events, store.dispatch)
    listener.start()
    logger.debug("runtime started with state file %s", state_path)
    return BoltRuntime(store=store, executor=executor, listener=listener)


__all__ = ["BoltRuntime", "load_startup_state", "start_runtime"]
