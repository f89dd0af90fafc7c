"""Persistent JSON preferences.

Stores the highlight style, color preference, request timeout, and log level.
All access is defensive: malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .text_transform import DEFAULT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "bolthttp"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Effective preferences after config loading and CLI overrides."""

    style: str = DEFAULT_STYLE
    no_color: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks the client.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_style() -> str | None:
    """Load persisted Pygments style name, returning ``None`` when unset/invalid."""
    value = load_config().get("style")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_no_color() -> bool:
    """Only explicit booleans count; anything else means color stays on."""
    value = load_config().get("no_color")
    return value if isinstance(value, bool) else False


def _coerce_timeout(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0:
        return None
    return float(value)


def load_request_timeout() -> float:
    """Load the per-request timeout in seconds."""
    timeout = _coerce_timeout(load_config().get("request_timeout"))
    return timeout if timeout is not None else DEFAULT_REQUEST_TIMEOUT


def _coerce_log_level(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    upper = value.strip().upper()
    return upper if upper in LOG_LEVELS else None


def load_log_level() -> str:
    level = _coerce_log_level(load_config().get("log_level"))
    return level if level is not None else DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    """Read every preference once into a ``Settings`` value."""
    return Settings(
        style=load_style() or DEFAULT_STYLE,
        no_color=load_no_color(),
        request_timeout=load_request_timeout(),
        log_level=load_log_level(),
    )


def _parse_setting(key: str, raw: str) -> object:
    if key == "style":
        stripped = raw.strip()
        if not stripped:
            raise ValueError("style must not be empty")
        return stripped
    if key == "no_color":
        lowered = raw.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"invalid boolean: {raw!r}")
    if key == "request_timeout":
        try:
            timeout = _coerce_timeout(float(raw))
        except ValueError as exc:
            raise ValueError(f"invalid timeout: {raw!r}") from exc
        if timeout is None:
            raise ValueError("request_timeout must be > 0")
        return timeout
    if key == "log_level":
        level = _coerce_log_level(raw)
        if level is None:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
    raise ValueError(f"unknown setting: {key!r}")


SETTING_KEYS = ("style", "no_color", "request_timeout", "log_level")


def save_setting(key: str, raw: str) -> object:
    """Validate ``raw`` for ``key``, persist it, and return the stored value.

    Raises ``ValueError`` for unknown keys or invalid values.
    """
    value = _parse_setting(key, raw)
    config = load_config()
    config[key] = value
    save_config(config)
    return value


__all__ = [
    "CONFIG_PATH",
    "SETTING_KEYS",
    "Settings",
    "load_config",
    "load_settings",
    "save_config",
    "save_setting",
]
