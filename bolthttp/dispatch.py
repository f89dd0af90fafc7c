"""Outbound request snapshots and inbound response payloads.

A send copies the target request into an immutable ``OutboundRequest`` that
carries the correlation index recorded at selection time. The executor answers
later with a ``ResponsePayload`` echoing that index. Arrival is routed by the
reducer using current navigation state; the echoed index is informational.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urlencode, urlsplit, urlunsplit

from .model import ContentType, HttpMethod, Pair, Request, Response


@dataclass(frozen=True)
class OutboundRequest:
    """Snapshot handed to the executor; never mutated after creation."""

    url: str
    method: HttpMethod
    body: str
    headers: tuple[Pair, ...]
    correlation_index: int


@dataclass(frozen=True)
class ResponsePayload:
    """Inbound executor result for one outbound request."""

    status: int
    body: str
    headers: tuple[Pair, ...]
    elapsed_ms: int
    size_bytes: int
    content_type: ContentType
    correlation_index: int
    failed: bool = False

    def to_response(self, transform_json: Callable[[str], str]) -> Response:
        """Build the stored ``Response``, running JSON bodies through ``transform_json``."""
        body = self.body
        if self.content_type is ContentType.JSON:
            body = transform_json(body)
        return Response(
            status=self.status,
            body=body,
            headers=list(self.headers),
            elapsed_ms=self.elapsed_ms,
            size_bytes=self.size_bytes,
            content_type=self.content_type,
            correlation_index=self.correlation_index,
            failed=self.failed,
        )


def merge_params(url: str, params: list[Pair]) -> str:
    """Append non-blank ``params`` to the query string of ``url``.

    Existing query text and fragments are preserved; rows with a blank name
    are skipped.
    """
    pairs = [(name, value) for name, value in params if name.strip()]
    if not pairs:
        return url
    parts = urlsplit(url)
    encoded = urlencode(pairs)
    query = f"{parts.query}&{encoded}" if parts.query else encoded
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def build_outbound(request: Request) -> OutboundRequest:
    """Snapshot ``request`` for sending, merging params into the URL."""
    return OutboundRequest(
        url=merge_params(request.url, request.params),
        method=request.method,
        body=request.body,
        headers=tuple(request.headers),
        correlation_index=request.response.correlation_index,
    )


__all__ = ["OutboundRequest", "ResponsePayload", "build_outbound", "merge_params"]
