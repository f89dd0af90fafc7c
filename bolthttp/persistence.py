"""State-file codec and IO.

``encode_state``/``decode_state`` convert ``AppState`` to and from a JSON
document whose keys match the original Bolt ``state.json`` layout, so files
written by it load unchanged. Decoding is strict: any shape mismatch raises
``CorruptState``. Deciding what to do about a corrupt file is the caller's job.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from platformdirs import user_data_dir

from .errors import CorruptState
from .model import (
    Collection,
    ContentType,
    HttpMethod,
    Page,
    Pair,
    Request,
    RequestTab,
    Response,
    ResponseTab,
)
from .state import AppState, default_state

logger = logging.getLogger(__name__)

APP_NAME = "bolthttp"
STATE_FILENAME = "state.json"
STATE_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / STATE_FILENAME


# Encoding


def _encode_pairs(pairs: list[Pair]) -> list[list[str]]:
    return [[name, value] for name, value in pairs]


def _encode_response(response: Response) -> dict[str, object]:
    return {
        "status": response.status,
        "body": response.body,
        "headers": _encode_pairs(response.headers),
        "time": response.elapsed_ms,
        "size": response.size_bytes,
        "response_type": response.content_type.value,
        "request_index": response.correlation_index,
        "failed": response.failed,
    }


def _encode_request(request: Request) -> dict[str, object]:
    return {
        "url": request.url,
        "body": request.body,
        "headers": _encode_pairs(request.headers),
        "params": _encode_pairs(request.params),
        "method": request.method.value,
        "response": _encode_response(request.response),
        "name": request.name,
        "req_tab": int(request.request_tab),
        "resp_tab": int(request.response_tab),
    }


def _encode_collection(collection: Collection) -> dict[str, object]:
    return {
        "name": collection.name,
        "requests": [_encode_request(request) for request in collection.requests],
        "collapsed": collection.collapsed,
    }


def encode_state(state: AppState) -> bytes:
    """Serialize ``state`` to UTF-8 JSON bytes."""
    document = {
        "page": state.page.value,
        "main_current": state.main_current,
        "col_current": list(state.collection_selection),
        "main_col": _encode_collection(state.main),
        "collections": [_encode_collection(collection) for collection in state.collections],
    }
    return (json.dumps(document, indent=2) + "\n").encode("utf-8")


# Decoding


def _field(data: dict, key: str, where: str) -> object:
    if key not in data:
        raise CorruptState(f"{where}: missing key {key!r}")
    return data[key]


def _str(data: dict, key: str, where: str) -> str:
    value = _field(data, key, where)
    if not isinstance(value, str):
        raise CorruptState(f"{where}.{key}: expected string, got {type(value).__name__}")
    return value


def _bool(data: dict, key: str, where: str) -> bool:
    value = _field(data, key, where)
    if not isinstance(value, bool):
        raise CorruptState(f"{where}.{key}: expected boolean, got {type(value).__name__}")
    return value


def _uint(value: object, where: str) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CorruptState(f"{where}: expected non-negative integer, got {value!r}")
    return value


def _object(value: object, where: str) -> dict:
    if not isinstance(value, dict):
        raise CorruptState(f"{where}: expected object, got {type(value).__name__}")
    return value


def _list(value: object, where: str) -> list:
    if not isinstance(value, list):
        raise CorruptState(f"{where}: expected array, got {type(value).__name__}")
    return value


def _enum(enum_type, value: object, where: str):
    try:
        return enum_type(value)
    except ValueError as exc:
        raise CorruptState(f"{where}: invalid {enum_type.__name__} {value!r}") from exc


def _decode_pairs(value: object, where: str) -> list[Pair]:
    pairs: list[Pair] = []
    for idx, raw in enumerate(_list(value, where)):
        item = f"{where}[{idx}]"
        row = _list(raw, item)
        if len(row) != 2 or not all(isinstance(part, str) for part in row):
            raise CorruptState(f"{item}: expected [name, value] strings, got {row!r}")
        pairs.append((row[0], row[1]))
    return pairs


def _decode_response(value: object, where: str) -> Response:
    data = _object(value, where)
    return Response(
        status=_uint(_field(data, "status", where), f"{where}.status"),
        body=_str(data, "body", where),
        headers=_decode_pairs(_field(data, "headers", where), f"{where}.headers"),
        elapsed_ms=_uint(_field(data, "time", where), f"{where}.time"),
        size_bytes=_uint(_field(data, "size", where), f"{where}.size"),
        content_type=_enum(ContentType, _field(data, "response_type", where), f"{where}.response_type"),
        correlation_index=_uint(_field(data, "request_index", where), f"{where}.request_index"),
        failed=_bool(data, "failed", where),
    )


def _decode_request(value: object, where: str) -> Request:
    data = _object(value, where)
    return Request(
        url=_str(data, "url", where),
        body=_str(data, "body", where),
        headers=_decode_pairs(_field(data, "headers", where), f"{where}.headers"),
        params=_decode_pairs(_field(data, "params", where), f"{where}.params"),
        method=_enum(HttpMethod, _field(data, "method", where), f"{where}.method"),
        response=_decode_response(_field(data, "response", where), f"{where}.response"),
        name=_str(data, "name", where),
        request_tab=_enum(RequestTab, _field(data, "req_tab", where), f"{where}.req_tab"),
        response_tab=_enum(ResponseTab, _field(data, "resp_tab", where), f"{where}.resp_tab"),
    )


def _decode_collection(value: object, where: str) -> Collection:
    data = _object(value, where)
    raw_requests = _list(_field(data, "requests", where), f"{where}.requests")
    return Collection(
        name=_str(data, "name", where),
        requests=[
            _decode_request(raw, f"{where}.requests[{idx}]") for idx, raw in enumerate(raw_requests)
        ],
        collapsed=_bool(data, "collapsed", where),
    )


def decode_state(raw: bytes) -> AppState:
    """Parse state-file bytes.

    Empty or whitespace-only input yields ``default_state()``. Anything that is
    not valid UTF-8 JSON of the expected shape raises ``CorruptState``.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptState(f"state is not UTF-8: {exc}") from exc
    if not text.strip():
        return default_state()
    try:
        document = json.loads(text)
    except ValueError as exc:
        raise CorruptState(f"state is not valid JSON: {exc}") from exc

    data = _object(document, "state")
    selection = _list(_field(data, "col_current", "state"), "state.col_current")
    if len(selection) != 2:
        raise CorruptState(f"state.col_current: expected two indices, got {selection!r}")
    raw_collections = _list(_field(data, "collections", "state"), "state.collections")
    main = _decode_collection(_field(data, "main_col", "state"), "state.main_col")
    main_current = _uint(_field(data, "main_current", "state"), "state.main_current")
    if main.requests and main_current > len(main.requests) - 1:
        logger.warning("state.main_current %d out of range; clamping", main_current)
        main_current = len(main.requests) - 1
    return AppState(
        page=_enum(Page, _field(data, "page", "state"), "state.page"),
        main_current=main_current,
        collection_selection=(
            _uint(selection[0], "state.col_current[0]"),
            _uint(selection[1], "state.col_current[1]"),
        ),
        main=main,
        collections=[
            _decode_collection(raw, f"state.collections[{idx}]") for idx, raw in enumerate(raw_collections)
        ],
    )


# File IO


def load_state(path: Path | None = None) -> AppState:
    """Read and decode the state file; a missing file decodes as empty."""
    target = path if path is not None else STATE_PATH
    try:
        raw = target.read_bytes()
    except FileNotFoundError:
        return default_state()
    return decode_state(raw)


def save_state(state: AppState, path: Path | None = None) -> None:
    """Atomically replace the state file with ``state``."""
    target = path if path is not None else STATE_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(encode_state(state))
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def ensure_state_file(path: Path | None = None) -> bool:
    """Write the default state file when none exists; return whether one was created."""
    target = path if path is not None else STATE_PATH
    if target.exists():
        return False
    logger.info("creating state file %s", target)
    save_state(default_state(), target)
    return True


def reset_state_file(path: Path | None = None) -> AppState:
    """Overwrite the state file with the default seed and return that state."""
    target = path if path is not None else STATE_PATH
    state = default_state()
    save_state(state, target)
    logger.info("reset state file %s", target)
    return state


__all__ = [
    "STATE_PATH",
    "decode_state",
    "encode_state",
    "ensure_state_file",
    "load_state",
    "reset_state_file",
    "save_state",
]
