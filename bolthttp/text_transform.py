"""JSON response body formatting and syntax highlighting.

Pretty-prints JSON text, then colorizes it with Pygments for terminal display.
Malformed JSON passes through ``format_json`` unchanged.
"""

from __future__ import annotations

import json

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"
JSON_INDENT = 4

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_LEXER = JsonLexer()


def format_json(text: str) -> str:
    """Return ``text`` re-indented as JSON, or unchanged if it does not parse."""
    try:
        return json.dumps(json.loads(text), indent=JSON_INDENT, ensure_ascii=False)
    except (ValueError, RecursionError):
        return text


def _normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE

    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    formatter = Terminal256Formatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_json(text: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Colorize JSON ``text`` with ANSI escapes; plain passthrough when ``no_color``."""
    if no_color or not text:
        return text
    formatter = _formatter_for_style(_normalize_style(style))
    return highlight(text, _LEXER, formatter)


def transform_json(text: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Format then highlight a JSON response body."""
    return highlight_json(format_json(text), style=style, no_color=no_color)


__all__ = ["DEFAULT_STYLE", "format_json", "highlight_json", "transform_json"]
