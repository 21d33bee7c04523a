# This file defines the error and warning messages a datasource response can carry.
# It exists so every part of the protocol shares one immutable message type and reason vocabulary.
# The log keeps errors and warnings in separate ordered sequences without deduplication.
# Limits and priority rules are applied later by the assembler, never here.

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class MessageKind(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Reason:
    """Reason codes used by the wire protocol.

    The set is not closed: callers may pass any string as a reason.
    """

    NOT_MODIFIED = "not_modified"
    USER_NOT_AUTHENTICATED = "user_not_authenticated"
    UNKNOWN_DATA_SOURCE_ID = "unknown_data_source_id"
    ACCESS_DENIED = "access_denied"
    UNSUPPORTED_QUERY_OPERATION = "unsupported_query_operation"
    INVALID_QUERY = "invalid_query"
    INVALID_REQUEST = "invalid_request"
    INTERNAL_ERROR = "internal_error"
    NOT_SUPPORTED = "not_supported"
    ILLEGAL_FORMATTING_PATTERNS = "illegal_formatting_patterns"
    VERSION_MISMATCH = "version_mismatch"
    OTHER = "other"


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    reason: str
    summary: str | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MessageKind(self.kind))

    def as_wire_fields(self) -> list[tuple[str, str]]:
        """Return protocol field pairs, skipping unset text fields."""

        fields = [("reason", self.reason)]
        if self.summary is not None:
            fields.append(("message", self.summary))
        if self.detail is not None:
            fields.append(("detailed_message", self.detail))
        return fields


class MessageLog:
    """Ordered error and warning sequences."""

    def __init__(self, messages: tuple[Message, ...] | list[Message] = ()) -> None:
        self._errors: list[Message] = []
        self._warnings: list[Message] = []
        for message in messages:
            self.append(message)

    def append(self, message: Message) -> None:
        if message.kind is MessageKind.ERROR:
            self._errors.append(message)
        else:
            self._warnings.append(message)

    def add(
        self,
        kind: MessageKind,
        reason: str,
        summary: str | None = None,
        detail: str | None = None,
    ) -> Message:
        message = Message(kind=MessageKind(kind), reason=reason, summary=summary, detail=detail)
        self.append(message)
        return message

    @property
    def errors(self) -> tuple[Message, ...]:
        return tuple(self._errors)

    @property
    def warnings(self) -> tuple[Message, ...]:
        return tuple(self._warnings)

    def copy(self) -> MessageLog:
        clone = MessageLog()
        clone._errors = list(self._errors)
        clone._warnings = list(self._warnings)
        return clone

    def __iter__(self) -> Iterator[Message]:
        yield from self._errors
        yield from self._warnings

    def __len__(self) -> int:
        return len(self._errors) + len(self._warnings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageLog):
            return NotImplemented
        return self._errors == other._errors and self._warnings == other._warnings

    def __repr__(self) -> str:
        return f"MessageLog(errors={self._errors!r}, warnings={self._warnings!r})"
