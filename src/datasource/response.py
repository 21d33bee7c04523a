# This file assembles datasource protocol responses from a request descriptor, messages, and a payload.
# It exists so the message priority rules live in one place: the first error wins, warnings ride along with data.
# Assembly works on a copy of the message log, so a container can be assembled repeatedly with identical output.
# The returned log is for server-side diagnostics only and must never be sent to the remote caller.

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from src.datasource.encoding import Raw, encode_object, wrap_in_handler
from src.datasource.messages import Message, MessageKind, MessageLog, Reason
from src.datasource.payload import DataPayload, coerce_payload
from src.datasource.request import (
    DEFAULT_OUTPUT_FORMAT,
    SUPPORTED_VERSION,
    RequestDescriptor,
    parse_request,
)

LOGGER = logging.getLogger("datasource")

JSON_CONTENT_TYPE: Final[str] = "application/json; charset=UTF-8"
SCRIPT_CONTENT_TYPE: Final[str] = "text/javascript; charset=UTF-8"

# Error reasons that mean the caller sent a request we cannot honour.
BAD_REQUEST_REASONS: Final[frozenset[str]] = frozenset(
    {
        Reason.INVALID_REQUEST,
        Reason.INVALID_QUERY,
        Reason.NOT_SUPPORTED,
        Reason.UNSUPPORTED_QUERY_OPERATION,
        Reason.ILLEGAL_FORMATTING_PATTERNS,
    }
)


class ResponseStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class AssembledResponse:
    headers: tuple[tuple[str, str], ...]
    body: str
    message_log: MessageLog
    status: ResponseStatus
    http_status: int
    signature: str | None = None

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == lowered:
                return value
        return None


def compute_signature(serialized_payload: str) -> str:
    """Return the freshness signature for a serialized table payload."""

    return hashlib.sha256(serialized_payload.encode("utf-8")).hexdigest()[:24]


class ResponseContainer:
    """Collects messages and the data payload for a single datasource response."""

    def __init__(
        self,
        descriptor: RequestDescriptor,
        data_payload: DataPayload | str | Callable[[], str] | None = None,
    ) -> None:
        self.descriptor = descriptor
        self._messages = MessageLog(descriptor.deferred_messages)
        self._data_payload: DataPayload | None = None
        if data_payload is not None:
            self.set_data_payload(data_payload)

    @classmethod
    def from_query(
        cls,
        raw: str | None,
        auth_present: bool = False,
        overrides: Mapping[str, Any] | None = None,
    ) -> ResponseContainer:
        return cls(parse_request(raw, auth_present=auth_present, overrides=overrides))

    @property
    def messages(self) -> MessageLog:
        return self._messages.copy()

    @property
    def data_payload(self) -> DataPayload | None:
        return self._data_payload

    def add_message(
        self,
        kind: MessageKind,
        reason: str,
        summary: str | None = None,
        detail: str | None = None,
    ) -> None:
        self._messages.add(kind, reason, summary, detail)

    def add_error(self, reason: str, summary: str | None = None, detail: str | None = None) -> None:
        self.add_message(MessageKind.ERROR, reason, summary, detail)

    def add_warning(self, reason: str, summary: str | None = None, detail: str | None = None) -> None:
        self.add_message(MessageKind.WARNING, reason, summary, detail)

    def set_data_payload(self, payload: DataPayload | str | Callable[[], str]) -> None:
        self._data_payload = coerce_payload(payload)

    def assemble(self, *, emit_signature: bool = False) -> AssembledResponse:
        return assemble(self, emit_signature=emit_signature)


def _integrity_pass(descriptor: RequestDescriptor, log: MessageLog) -> None:
    # Integrity errors go after anything the caller queued.
    if descriptor.output_format != DEFAULT_OUTPUT_FORMAT:
        log.add(
            MessageKind.ERROR,
            Reason.NOT_SUPPORTED,
            f"Output format {descriptor.output_format!r} is not supported.",
            f"Only the {DEFAULT_OUTPUT_FORMAT!r} output format is available.",
        )


def _serialize_payload(payload: DataPayload, log: MessageLog) -> str | None:
    try:
        text = payload.serialize()
    except Exception as exc:
        LOGGER.exception("Data payload serialization failed")
        log.add(
            MessageKind.ERROR,
            Reason.INTERNAL_ERROR,
            "The data could not be prepared.",
            type(exc).__name__,
        )
        return None
    if not isinstance(text, str):
        LOGGER.error("Data payload serialized to %s instead of str", type(text).__name__)
        log.add(
            MessageKind.ERROR,
            Reason.INTERNAL_ERROR,
            "The data could not be prepared.",
            f"Serializer returned {type(text).__name__}",
        )
        return None
    return text


def _message_entries(messages: tuple[Message, ...]) -> list[Raw]:
    return [Raw(encode_object(message.as_wire_fields())) for message in messages]


def _build_headers(descriptor: RequestDescriptor) -> list[tuple[str, str]]:
    content_type = JSON_CONTENT_TYPE if descriptor.auth_present else SCRIPT_CONTENT_TYPE
    return [("Content-Type", content_type)]


def assemble(container: ResponseContainer, *, emit_signature: bool = False) -> AssembledResponse:
    """Apply the message priority rules and render the final headers and body."""

    descriptor = container.descriptor
    log = container.messages
    _integrity_pass(descriptor, log)

    table_text: str | None = None
    signature: str | None = None
    payload = container.data_payload
    if not log.errors and payload is not None:
        table_text = _serialize_payload(payload, log)
        if table_text is not None:
            signature = compute_signature(table_text)
            if descriptor.signature is not None and descriptor.signature == signature:
                log.add(
                    MessageKind.ERROR,
                    Reason.NOT_MODIFIED,
                    "Data not modified.",
                    "The data has not changed since the signature supplied with the request.",
                )

    fields: list[tuple[str, object]] = [
        ("version", SUPPORTED_VERSION),
        ("reqId", descriptor.request_id),
    ]
    http_status = 200
    if log.errors:
        status = ResponseStatus.ERROR
        first_error = log.errors[0]
        fields.append(("status", status.value))
        fields.append(("errors", _message_entries((first_error,))))
        if first_error.reason in BAD_REQUEST_REASONS:
            http_status = 400
        signature = None
    else:
        status = ResponseStatus.WARNING if log.warnings else ResponseStatus.OK
        fields.append(("status", status.value))
        if emit_signature and signature is not None:
            fields.append(("sig", signature))
        if table_text is not None:
            fields.append(("table", Raw(table_text)))
        if log.warnings:
            fields.append(("warnings", _message_entries(log.warnings)))

    body = encode_object(fields)
    if not descriptor.auth_present:
        body = wrap_in_handler(descriptor.response_handler, body)

    LOGGER.debug(
        "Assembled datasource response reqId=%s status=%s errors=%d warnings=%d",
        descriptor.request_id,
        status.value,
        len(log.errors),
        len(log.warnings),
    )
    return AssembledResponse(
        headers=tuple(_build_headers(descriptor)),
        body=body,
        message_log=log,
        status=status,
        http_status=http_status,
        signature=signature,
    )
