# This file renders the datasource protocol's object literal syntax.
# It exists because the protocol expects unquoted keys and single-quoted strings, not generic JSON.
# Field order is preserved exactly as given so response bodies are byte-stable.
# Values that are already serialized (such as the table payload) are passed through as raw text.

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "<": "\\u003c",
    ">": "\\u003e",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass(frozen=True)
class Raw:
    """Literal text inserted without quoting."""

    text: str


def quote_string(value: str) -> str:
    """Quote text as a single-quoted script string literal."""

    parts: list[str] = []
    for char in value:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif ord(char) < 0x20:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return "'" + "".join(parts) + "'"


def encode_value(value: object) -> str:
    if isinstance(value, Raw):
        return value.text
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(encode_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return encode_object(value.items())
    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def encode_object(fields: Iterable[tuple[str, object]]) -> str:
    """Encode ordered key/value pairs as an object literal with bare keys."""

    return "{" + ",".join(f"{key}:{encode_value(value)}" for key, value in fields) + "}"


def wrap_in_handler(handler_name: str, body: str) -> str:
    return f"{handler_name}({body});"
