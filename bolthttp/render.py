"""Plain-text view of a state snapshot.

Shows the request list for the active page, then the addressed request's
editor tab and last response. Used for shell redraws and ``bolthttp show``.
"""

from __future__ import annotations

from .addressing import resolve_target
from .errors import BoltError
from .model import Collection, Pair, Page, Request, RequestTab, ResponseTab
from .state import AppState

_TAB_LABELS = {
    RequestTab.BODY: "Body",
    RequestTab.PARAMS: "Params",
    RequestTab.HEADERS: "Headers",
}
_RESPONSE_TAB_LABELS = {
    ResponseTab.BODY: "Body",
    ResponseTab.HEADERS: "Headers",
}


def _tab_bar(labels: dict, active) -> str:
    return "  ".join(f"[{label}]" if tab == active else f" {label} " for tab, label in labels.items())


def _pair_rows(pairs: list[Pair]) -> list[str]:
    return [f"  {idx}: {name or '<name>'} = {value}" for idx, (name, value) in enumerate(pairs)]


def _request_list(collection: Collection, selected: int | None, indent: str = "") -> list[str]:
    rows: list[str] = []
    for idx, request in enumerate(collection.requests):
        marker = ">" if idx == selected else " "
        rows.append(f"{indent}{marker} {idx}: {request.method.value:<7} {request.name}")
    return rows


def _home_lines(state: AppState) -> list[str]:
    lines = ["== Home =="]
    lines.extend(_request_list(state.main, state.main_current))
    if not state.main.requests:
        lines.append("  (no requests; use 'add')")
    return lines


def _collections_lines(state: AppState) -> list[str]:
    lines = ["== Collections =="]
    selected_col, selected_req = state.collection_selection
    for col_idx, collection in enumerate(state.collections):
        fold = "+" if collection.collapsed else "-"
        lines.append(f"{fold} {col_idx}: {collection.name} ({len(collection.requests)})")
        if collection.collapsed:
            continue
        selected = selected_req if col_idx == selected_col else None
        lines.extend(_request_list(collection, selected, indent="    "))
    if not state.collections:
        lines.append("  (no collections; use 'add-col')")
    return lines


def _request_lines(request: Request) -> list[str]:
    lines = [f"{request.method.value} {request.url or '<url>'}", _tab_bar(_TAB_LABELS, request.request_tab)]
    if request.request_tab is RequestTab.BODY:
        lines.append(request.body or "  <empty body>")
    elif request.request_tab is RequestTab.PARAMS:
        lines.extend(_pair_rows(request.params))
    else:
        lines.extend(_pair_rows(request.headers))

    response = request.response
    lines.append("")
    if response.failed:
        status = "FAILED"
    elif response.status == 0:
        status = "not sent"
    else:
        status = str(response.status)
    lines.append(
        f"Response: {status}  {response.elapsed_ms} ms  {response.size_bytes} B  "
        f"(request #{response.correlation_index})"
    )
    lines.append(_tab_bar(_RESPONSE_TAB_LABELS, request.response_tab))
    if request.response_tab is ResponseTab.BODY:
        lines.append(response.body)
    else:
        lines.extend(_pair_rows(response.headers))
    return lines


def render_view(state: AppState) -> str:
    """Render ``state`` for the terminal."""
    lines = _home_lines(state) if state.page is Page.HOME else _collections_lines(state)
    lines.append("")
    try:
        request = resolve_target(state).request
    except BoltError:
        lines.append("(no request selected)")
    else:
        lines.extend(_request_lines(request))
    return "\n".join(lines) + "\n"


__all__ = ["render_view"]
