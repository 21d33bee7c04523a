# This file defines the data payload capability consumed by the response assembler.
# It exists so the assembler never depends on how tabular data is modeled or encoded.
# A payload is anything that can produce its own pre-formatted object literal text.
# Serialization is deferred until assembly so the freshness signature sees the final text.

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class DataPayload(Protocol):
    def serialize(self) -> str:
        """Return the table serialized as a protocol object literal."""
        ...


@dataclass(frozen=True)
class StaticPayload:
    """Payload that was serialized ahead of time."""

    text: str

    def serialize(self) -> str:
        return self.text


@dataclass(frozen=True)
class CallablePayload:
    """Payload produced on demand by a zero-argument function."""

    func: Callable[[], str]

    def serialize(self) -> str:
        return self.func()


def coerce_payload(value: DataPayload | str | Callable[[], str]) -> DataPayload:
    if isinstance(value, str):
        return StaticPayload(value)
    if isinstance(value, DataPayload):
        return value
    if callable(value):
        return CallablePayload(value)
    raise TypeError(f"Unsupported data payload type: {type(value).__name__}")
