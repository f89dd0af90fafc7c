"""Tests for the plain-text state view."""

from __future__ import annotations

import unittest

from bolthttp import actions
from bolthttp.dispatch import ResponsePayload
from bolthttp.model import ContentType, Page, RequestTab, ResponseTab
from bolthttp.reducer import reduce
from bolthttp.render import render_view
from bolthttp.state import default_state


def _apply(state, *steps):
    for step in steps:
        state = reduce(state, step, lambda text: text).state
    return state


class RenderViewTests(unittest.TestCase):
    def test_home_view_marks_selection_and_unsent_response(self) -> None:
        state = _apply(default_state(), actions.AddRequest(), actions.SelectRequest(1), actions.UrlChanged("http://h/"))

        text = render_view(state)

        self.assertIn("== Home ==", text)
        self.assertIn("  0: GET     New Request 1", text)
        self.assertIn("> 1: GET     http://h/", text)
        self.assertIn("Response: not sent", text)

    def test_request_tabs_show_rows(self) -> None:
        state = _apply(
            default_state(),
            actions.ParamChanged(0, "q", "1"),
            actions.SelectRequestTab(RequestTab.PARAMS),
        )

        self.assertIn("  0: q = 1", render_view(state))

    def test_response_headers_tab_and_failure(self) -> None:
        payload = ResponsePayload(
            status=0,
            body="boom",
            headers=(("Retry-After", "1"),),
            elapsed_ms=9,
            size_bytes=0,
            content_type=ContentType.TEXT,
            correlation_index=0,
            failed=True,
        )
        state = _apply(
            default_state(),
            actions.ResponseReceived(payload),
            actions.SelectResponseTab(ResponseTab.HEADERS),
        )

        text = render_view(state)

        self.assertIn("Response: FAILED  9 ms  0 B  (request #0)", text)
        self.assertIn("  0: Retry-After = 1", text)

    def test_collections_view_hides_collapsed_requests(self) -> None:
        state = _apply(
            default_state(),
            actions.AddCollection(),
            actions.AddCollection(),
            actions.AddToCollection(0),
            actions.AddToCollection(1),
            actions.ToggleCollapsed(1),
            actions.SwitchPage(Page.COLLECTIONS),
        )

        text = render_view(state)

        self.assertIn("- 0: New Collection 1 (1)", text)
        self.assertIn("    > 0: GET     New Request 1", text)
        self.assertIn("+ 1: New Collection 2 (1)", text)
        self.assertEqual(text.count("New Request 1"), 1)

    def test_view_without_target(self) -> None:
        state = _apply(default_state(), actions.SwitchPage(Page.COLLECTIONS))

        text = render_view(state)

        self.assertIn("(no collections; use 'add-col')", text)
        self.assertIn("(no request selected)", text)


if __name__ == "__main__":
    unittest.main()
