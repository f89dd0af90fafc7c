"""Closed set of user and system actions consumed by the reducer.

Each action is a frozen dataclass; ``Action`` is their union.
Indices carried by actions are positions in the container the action names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .dispatch import ResponsePayload
from .model import HttpMethod, Page, RequestTab, ResponseTab


# Navigation


@dataclass(frozen=True)
class SwitchPage:
    page: Page


@dataclass(frozen=True)
class SelectRequest:
    index: int


@dataclass(frozen=True)
class SelectFromCollection:
    collection_index: int
    request_index: int


@dataclass(frozen=True)
class SelectRequestTab:
    tab: RequestTab


@dataclass(frozen=True)
class SelectResponseTab:
    tab: ResponseTab


# Field edits


@dataclass(frozen=True)
class UrlChanged:
    url: str


@dataclass(frozen=True)
class BodyChanged:
    body: str


@dataclass(frozen=True)
class MethodChanged:
    method: HttpMethod


@dataclass(frozen=True)
class HeaderChanged:
    index: int
    name: str
    value: str


@dataclass(frozen=True)
class ParamChanged:
    index: int
    name: str
    value: str


# Structural edits


@dataclass(frozen=True)
class AddHeader:
    pass


@dataclass(frozen=True)
class RemoveHeader:
    index: int


@dataclass(frozen=True)
class AddParam:
    pass


@dataclass(frozen=True)
class RemoveParam:
    index: int


@dataclass(frozen=True)
class AddRequest:
    pass


@dataclass(frozen=True)
class RemoveRequest:
    index: int


@dataclass(frozen=True)
class AddCollection:
    pass


@dataclass(frozen=True)
class RemoveCollection:
    index: int


@dataclass(frozen=True)
class AddToCollection:
    index: int


@dataclass(frozen=True)
class RemoveFromCollection:
    collection_index: int
    request_index: int


@dataclass(frozen=True)
class ToggleCollapsed:
    index: int


# Send / receive


@dataclass(frozen=True)
class SendPressed:
    pass


@dataclass(frozen=True)
class ResponseReceived:
    payload: ResponsePayload


# Housekeeping


@dataclass(frozen=True)
class Redraw:
    pass


@dataclass(frozen=True)
class Nothing:
    pass


@dataclass(frozen=True)
class HelpPressed:
    pass


Action = Union[
    SwitchPage,
    SelectRequest,
    SelectFromCollection,
    SelectRequestTab,
    SelectResponseTab,
    UrlChanged,
    BodyChanged,
    MethodChanged,
    HeaderChanged,
    ParamChanged,
    AddHeader,
    RemoveHeader,
    AddParam,
    RemoveParam,
    AddRequest,
    RemoveRequest,
    AddCollection,
    RemoveCollection,
    AddToCollection,
    RemoveFromCollection,
    ToggleCollapsed,
    SendPressed,
    ResponseReceived,
    Redraw,
    Nothing,
    HelpPressed,
]
