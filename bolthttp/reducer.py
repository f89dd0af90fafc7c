"""Pure state transitions: ``reduce(state, action) -> ReduceResult``.

The input state is never modified. State-changing actions run against a deep
copy, so a transition that raises leaves the caller's state untouched.
Side effects (sending, opening links) are returned as data for the store to run.

Two behaviors are kept on purpose even though they look surprising:

* removing a collection, or a request inside one, resets
  ``collection_selection`` to ``(0, 0)`` even when the old selection is still valid;
* an arriving response is written to whatever request is selected *now*;
  its ``correlation_index`` is stored for display and never used for routing.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass

from .actions import (
    Action,
    AddCollection,
    AddHeader,
    AddParam,
    AddRequest,
    AddToCollection,
    BodyChanged,
    HeaderChanged,
    HelpPressed,
    MethodChanged,
    Nothing,
    ParamChanged,
    Redraw,
    RemoveCollection,
    RemoveFromCollection,
    RemoveHeader,
    RemoveParam,
    RemoveRequest,
    ResponseReceived,
    SelectFromCollection,
    SelectRequest,
    SelectRequestTab,
    SelectResponseTab,
    SendPressed,
    SwitchPage,
    ToggleCollapsed,
    UrlChanged,
)
from .addressing import checked_item, resolve_request
from .dispatch import OutboundRequest, build_outbound
from .model import BLANK_PAIR, new_collection, new_request
from .state import AppState
from .text_transform import transform_json as default_transform_json

HELP_URL = "https://github.com/hiro-codes/bolt"


@dataclass(frozen=True)
class ReduceResult:
    """Next state plus redraw flag and any side effect to perform."""

    state: AppState
    redraw: bool
    outbound: OutboundRequest | None = None
    open_url: str | None = None


def _changed(snap: AppState) -> ReduceResult:
    return ReduceResult(state=snap, redraw=True)


# Navigation


def _switch_page(snap: AppState, action: SwitchPage) -> ReduceResult:
    snap.page = action.page
    return _changed(snap)


def _select_request(snap: AppState, action: SelectRequest) -> ReduceResult:
    request = checked_item(snap.main.requests, action.index, "request")
    snap.main_current = action.index
    request.response.correlation_index = action.index
    return _changed(snap)


def _select_from_collection(snap: AppState, action: SelectFromCollection) -> ReduceResult:
    collection = checked_item(snap.collections, action.collection_index, "collection")
    request = checked_item(collection.requests, action.request_index, "request")
    snap.collection_selection = (action.collection_index, action.request_index)
    request.response.correlation_index = action.request_index
    return _changed(snap)


def _select_request_tab(snap: AppState, action: SelectRequestTab) -> ReduceResult:
    resolve_request(snap).request_tab = action.tab
    return _changed(snap)


def _select_response_tab(snap: AppState, action: SelectResponseTab) -> ReduceResult:
    resolve_request(snap).response_tab = action.tab
    return _changed(snap)


# Field edits


def _url_changed(snap: AppState, action: UrlChanged) -> ReduceResult:
    request = resolve_request(snap)
    request.url = action.url
    request.name = action.url
    return _changed(snap)


def _body_changed(snap: AppState, action: BodyChanged) -> ReduceResult:
    resolve_request(snap).body = action.body
    return _changed(snap)


def _method_changed(snap: AppState, action: MethodChanged) -> ReduceResult:
    resolve_request(snap).method = action.method
    return _changed(snap)


def _header_changed(snap: AppState, action: HeaderChanged) -> ReduceResult:
    request = resolve_request(snap)
    checked_item(request.headers, action.index, "header")
    request.headers[action.index] = (action.name, action.value)
    return _changed(snap)


def _param_changed(snap: AppState, action: ParamChanged) -> ReduceResult:
    request = resolve_request(snap)
    checked_item(request.params, action.index, "param")
    request.params[action.index] = (action.name, action.value)
    return _changed(snap)


# Structural edits


def _add_header(snap: AppState, _action: AddHeader) -> ReduceResult:
    resolve_request(snap).headers.append(BLANK_PAIR)
    return _changed(snap)


def _remove_header(snap: AppState, action: RemoveHeader) -> ReduceResult:
    request = resolve_request(snap)
    checked_item(request.headers, action.index, "header")
    del request.headers[action.index]
    return _changed(snap)


def _add_param(snap: AppState, _action: AddParam) -> ReduceResult:
    resolve_request(snap).params.append(BLANK_PAIR)
    return _changed(snap)


def _remove_param(snap: AppState, action: RemoveParam) -> ReduceResult:
    request = resolve_request(snap)
    checked_item(request.params, action.index, "param")
    del request.params[action.index]
    return _changed(snap)


def _add_request(snap: AppState, _action: AddRequest) -> ReduceResult:
    requests = snap.main.requests
    requests.append(new_request(len(requests) + 1))
    return _changed(snap)


def _remove_request(snap: AppState, action: RemoveRequest) -> ReduceResult:
    requests = snap.main.requests
    checked_item(requests, action.index, "request")
    del requests[action.index]
    if requests and snap.main_current > len(requests) - 1:
        snap.main_current = len(requests) - 1
    return _changed(snap)


def _add_collection(snap: AppState, _action: AddCollection) -> ReduceResult:
    snap.collections.append(new_collection(len(snap.collections) + 1))
    return _changed(snap)


def _remove_collection(snap: AppState, action: RemoveCollection) -> ReduceResult:
    checked_item(snap.collections, action.index, "collection")
    del snap.collections[action.index]
    snap.collection_selection = (0, 0)
    return _changed(snap)


def _add_to_collection(snap: AppState, action: AddToCollection) -> ReduceResult:
    collection = checked_item(snap.collections, action.index, "collection")
    collection.requests.append(new_request(len(collection.requests) + 1))
    return _changed(snap)


def _remove_from_collection(snap: AppState, action: RemoveFromCollection) -> ReduceResult:
    collection = checked_item(snap.collections, action.collection_index, "collection")
    checked_item(collection.requests, action.request_index, "request")
    del collection.requests[action.request_index]
    snap.collection_selection = (0, 0)
    return _changed(snap)


def _toggle_collapsed(snap: AppState, action: ToggleCollapsed) -> ReduceResult:
    collection = checked_item(snap.collections, action.index, "collection")
    collection.collapsed = not collection.collapsed
    return _changed(snap)


_MUTATING_HANDLERS: dict[type, Callable[[AppState, object], ReduceResult]] = {
    SwitchPage: _switch_page,
    SelectRequest: _select_request,
    SelectFromCollection: _select_from_collection,
    SelectRequestTab: _select_request_tab,
    SelectResponseTab: _select_response_tab,
    UrlChanged: _url_changed,
    BodyChanged: _body_changed,
    MethodChanged: _method_changed,
    HeaderChanged: _header_changed,
    ParamChanged: _param_changed,
    AddHeader: _add_header,
    RemoveHeader: _remove_header,
    AddParam: _add_param,
    RemoveParam: _remove_param,
    AddRequest: _add_request,
    RemoveRequest: _remove_request,
    AddCollection: _add_collection,
    RemoveCollection: _remove_collection,
    AddToCollection: _add_to_collection,
    RemoveFromCollection: _remove_from_collection,
    ToggleCollapsed: _toggle_collapsed,
}


def reduce(
    state: AppState,
    action: Action,
    transform_json: Callable[[str], str] = default_transform_json,
) -> ReduceResult:
    """Apply one action and return the next state.

    ``transform_json`` formats JSON response bodies on arrival. Raises
    ``IndexOutOfBounds`` when the action addresses something missing and
    ``TypeError`` for objects that are not actions.
    """
    if isinstance(action, SendPressed):
        return ReduceResult(state=state, redraw=False, outbound=build_outbound(resolve_request(state)))
    if isinstance(action, ResponseReceived):
        snap = copy.deepcopy(state)
        resolve_request(snap).response = action.payload.to_response(transform_json)
        return _changed(snap)
    if isinstance(action, Redraw):
        return ReduceResult(state=state, redraw=True)
    if isinstance(action, Nothing):
        return ReduceResult(state=state, redraw=False)
    if isinstance(action, HelpPressed):
        return ReduceResult(state=state, redraw=True, open_url=HELP_URL)

    handler = _MUTATING_HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"not a bolthttp action: {action!r}")
    return handler(copy.deepcopy(state), action)


__all__ = ["HELP_URL", "ReduceResult", "reduce"]
