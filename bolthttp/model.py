"""Entity model: requests, responses, and collections.

Pure data plus the two constructors used by add actions.
Header and param lists always start with one blank row so editors have a row to type into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

Pair = tuple[str, str]

BLANK_PAIR: Pair = ("", "")
NEW_REQUEST_PREFIX = "New Request "
NEW_COLLECTION_PREFIX = "New Collection "
WORKING_COLLECTION_NAME = "main"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, value: str) -> HttpMethod:
        """Return the method named by ``value`` (case-insensitive)."""
        return cls(value.strip().upper())


class Page(str, Enum):
    HOME = "Home"
    COLLECTIONS = "Collections"


class ContentType(str, Enum):
    TEXT = "TEXT"
    JSON = "JSON"


class RequestTab(IntEnum):
    BODY = 1
    PARAMS = 2
    HEADERS = 3


class ResponseTab(IntEnum):
    BODY = 1
    HEADERS = 2


@dataclass
class Response:
    """Last response stored on a request; the default value means "unsent"."""

    status: int = 0
    body: str = ""
    headers: list[Pair] = field(default_factory=list)
    elapsed_ms: int = 0
    size_bytes: int = 0
    content_type: ContentType = ContentType.TEXT
    correlation_index: int = 0
    failed: bool = False


@dataclass
class Request:
    url: str = ""
    body: str = ""
    headers: list[Pair] = field(default_factory=lambda: [BLANK_PAIR])
    params: list[Pair] = field(default_factory=lambda: [BLANK_PAIR])
    method: HttpMethod = HttpMethod.GET
    response: Response = field(default_factory=Response)
    name: str = NEW_REQUEST_PREFIX
    request_tab: RequestTab = RequestTab.BODY
    response_tab: ResponseTab = ResponseTab.BODY


@dataclass
class Collection:
    name: str = NEW_COLLECTION_PREFIX
    requests: list[Request] = field(default_factory=list)
    collapsed: bool = False


def new_request(number: int) -> Request:
    """Build a default GET request labelled ``New Request <number>``."""
    return Request(name=f"{NEW_REQUEST_PREFIX}{number}")


def new_collection(number: int) -> Collection:
    """Build an empty collection labelled ``New Collection <number>``."""
    return Collection(name=f"{NEW_COLLECTION_PREFIX}{number}")


__all__ = [
    "BLANK_PAIR",
    "Collection",
    "ContentType",
    "HttpMethod",
    "Page",
    "Pair",
    "Request",
    "RequestTab",
    "Response",
    "ResponseTab",
    "WORKING_COLLECTION_NAME",
    "new_collection",
    "new_request",
]
