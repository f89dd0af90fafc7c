"""Application state root and the first-run seed.

The store owns one ``AppState``; the reducer replaces it with modified copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .model import WORKING_COLLECTION_NAME, Collection, Page, new_request


@dataclass
class AppState:
    """Everything persisted between sessions: page, selections, and collections."""

    page: Page = Page.HOME
    main_current: int = 0
    collection_selection: tuple[int, int] = (0, 0)
    main: Collection = field(default_factory=lambda: Collection(name=WORKING_COLLECTION_NAME))
    collections: list[Collection] = field(default_factory=list)


def default_state() -> AppState:
    """First-run state: Home page with one default request in the working collection."""
    return AppState(main=Collection(name=WORKING_COLLECTION_NAME, requests=[new_request(1)]))
