"""Resolve navigation state into the request every action targets.

Home addresses the working collection through ``main_current``.
Collections addresses a named collection through ``collection_selection``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import IndexOutOfBounds
from .model import Collection, Page, Request
from .state import AppState


@dataclass(frozen=True)
class Target:
    """Live handle into the container that owns the addressed request."""

    container: Collection
    index: int

    @property
    def request(self) -> Request:
        """Return the addressed request, raising if the slot does not exist."""
        return checked_item(self.container.requests, self.index, "request")


def checked_item(items: list, index: int, what: str):
    """Return ``items[index]`` without negative-index wraparound."""
    if index < 0 or index >= len(items):
        raise IndexOutOfBounds(what, index, len(items))
    return items[index]


def resolve_target(state: AppState) -> Target:
    """Turn current page and selection indices into a ``Target``."""
    if state.page is Page.HOME:
        return Target(container=state.main, index=state.main_current)
    col_index, req_index = state.collection_selection
    collection = checked_item(state.collections, col_index, "collection")
    return Target(container=collection, index=req_index)


def resolve_request(state: AppState) -> Request:
    """Shortcut for ``resolve_target(state).request``."""
    return resolve_target(state).request


__all__ = ["Target", "checked_item", "resolve_request", "resolve_target"]
