"""Background HTTP executor.

Each submitted snapshot runs on its own daemon thread; results are posted to
``events`` as ``ResponsePayload`` values, never returned to the submitter.
Transport errors become ``failed=True`` payloads instead of exceptions.
"""

from __future__ import annotations

import logging
import threading
import time
from queue import Queue

import requests
from requests.structures import CaseInsensitiveDict

from .config import DEFAULT_REQUEST_TIMEOUT
from .dispatch import OutboundRequest, ResponsePayload
from .model import ContentType, Pair

logger = logging.getLogger(__name__)

_MAX_STATUS = 0xFFFF
_MAX_ELAPSED_MS = 0xFFFFFFFF


def _content_type_for(headers: CaseInsensitiveDict) -> ContentType:
    content_type = headers.get("Content-Type", "")
    return ContentType.JSON if "json" in content_type.lower() else ContentType.TEXT


def _request_headers(headers: tuple[Pair, ...]) -> dict[str, str]:
    """Drop blank-name rows; join repeated names into one comma-separated value."""
    merged: CaseInsensitiveDict = CaseInsensitiveDict()
    for raw_name, value in headers:
        name = raw_name.strip()
        if not name:
            continue
        merged[name] = f"{merged[name]}, {value}" if name in merged else value
    return dict(merged.items())


def _elapsed_ms(started: float) -> int:
    return min(_MAX_ELAPSED_MS, int((time.monotonic() - started) * 1000))


class RequestExecutor:
    """Fire-and-forget request runner with an inbound result queue."""

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        self.timeout = timeout
        self.events: Queue[ResponsePayload] = Queue()

    def execute(self, outbound: OutboundRequest) -> ResponsePayload:
        """Perform one request synchronously and describe the outcome."""
        started = time.monotonic()
        try:
            response = requests.request(
                outbound.method.value,
                outbound.url,
                headers=_request_headers(outbound.headers),
                data=outbound.body.encode("utf-8") if outbound.body else None,
                timeout=self.timeout,
            )
        except (requests.RequestException, ValueError) as exc:
            # ValueError covers header or body text the transport cannot encode.
            logger.warning("%s %s failed: %s", outbound.method.value, outbound.url, exc)
            return ResponsePayload(
                status=0,
                body=str(exc),
                headers=(),
                elapsed_ms=_elapsed_ms(started),
                size_bytes=0,
                content_type=ContentType.TEXT,
                correlation_index=outbound.correlation_index,
                failed=True,
            )

        elapsed_ms = _elapsed_ms(started)
        logger.debug(
            "%s %s -> %s in %d ms", outbound.method.value, outbound.url, response.status_code, elapsed_ms
        )
        return ResponsePayload(
            status=min(_MAX_STATUS, response.status_code),
            body=response.text,
            headers=tuple(response.headers.items()),
            elapsed_ms=elapsed_ms,
            size_bytes=len(response.content),
            content_type=_content_type_for(response.headers),
            correlation_index=outbound.correlation_index,
        )

    def _worker(self, outbound: OutboundRequest) -> None:
        self.events.put(self.execute(outbound))

    def submit(self, outbound: OutboundRequest) -> None:
        """Start executing ``outbound`` in the background and return immediately."""
        worker = threading.Thread(
            target=self._worker,
            args=(outbound,),
            name="bolthttp-request",
            daemon=True,
        )
        worker.start()


__all__ = ["RequestExecutor"]
