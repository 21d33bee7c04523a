# This file parses the datasource request descriptor (the `tqx` parameter).
# It exists so response-shaping options are validated once into a single frozen object.
# The parser never raises: unsupported values become deferred messages for the assembler.
# Malformed segments are skipped, and unknown keys are kept verbatim for forward compatibility.

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from src.datasource.messages import Message, MessageKind, Reason

LOGGER = logging.getLogger("datasource")

SUPPORTED_VERSION: Final[str] = "0.6"
DEFAULT_RESPONSE_HANDLER: Final[str] = "google.visualization.Query.setResponse"
DEFAULT_OUTPUT_FORMAT: Final[str] = "json"

# Protocol key -> descriptor field name.
PROTOCOL_KEYS: Final[dict[str, str]] = {
    "reqId": "request_id",
    "version": "version",
    "sig": "signature",
    "out": "output_format",
    "responseHandler": "response_handler",
    "outFileName": "output_file_name",
}

_UNSAFE_HANDLER_CHARS = re.compile(r"[^A-Za-z0-9._$]")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class RequestDescriptor(BaseModel):
    """Validated response-shaping options for one datasource request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    request_id: int = 0
    version: str | None = None
    signature: str | None = None
    output_format: str = DEFAULT_OUTPUT_FORMAT
    response_handler: str = DEFAULT_RESPONSE_HANDLER
    output_file_name: str | None = None
    auth_present: bool = False
    extra_attributes: dict[str, str] = Field(default_factory=dict)
    deferred_messages: tuple[Message, ...] = ()


def sanitize_handler_name(name: str | None) -> str:
    """Strip characters that are unsafe in a callable identifier.

    Falls back to the default handler when nothing usable is left.
    """

    cleaned = _UNSAFE_HANDLER_CHARS.sub("", name or "")
    return cleaned or DEFAULT_RESPONSE_HANDLER


def split_descriptor(raw: str | None) -> tuple[dict[str, str], dict[str, str]]:
    """Split `key=value;key=value` text into known fields and extra attributes."""

    known: dict[str, str] = {}
    extra: dict[str, str] = {}
    for segment in (raw or "").split(";"):
        segment = segment.strip()
        if not segment:
            continue
        if "=" not in segment:
            LOGGER.debug("Skipping malformed request descriptor segment %r", segment)
            continue
        key, value = segment.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            LOGGER.debug("Skipping request descriptor segment without key %r", segment)
            continue
        field_name = PROTOCOL_KEYS.get(key)
        if field_name is None:
            extra[key] = value
        else:
            known[field_name] = value
    return known, extra


def _normalize_override_keys(overrides: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
    field_names = set(PROTOCOL_KEYS.values())
    known: dict[str, Any] = {}
    extra: dict[str, str] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        field_name = PROTOCOL_KEYS.get(key, key)
        if field_name in field_names:
            known[field_name] = value
        else:
            extra[key] = str(value)
    return known, extra


def _parse_request_id(value: Any, deferred: list[Message]) -> int:
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    text = str(value).strip()
    if _INTEGER_RE.fullmatch(text):
        return int(text)
    deferred.append(
        Message(
            kind=MessageKind.WARNING,
            reason=Reason.INVALID_REQUEST,
            summary="Request id must be an integer.",
            detail=f"Received reqId={value!r}; using 0.",
        )
    )
    return 0


def _check_version(version: str | None, deferred: list[Message]) -> None:
    if version is None or version == SUPPORTED_VERSION:
        return
    deferred.append(
        Message(
            kind=MessageKind.WARNING,
            reason=Reason.VERSION_MISMATCH,
            summary=f"Only protocol version {SUPPORTED_VERSION} is supported.",
            detail=f"Requested version {version!r}; responding with {SUPPORTED_VERSION}.",
        )
    )


def parse_request(
    raw: str | None,
    auth_present: bool = False,
    overrides: Mapping[str, Any] | None = None,
) -> RequestDescriptor:
    """Build a request descriptor from the raw `tqx` string and caller overrides.

    Overrides may use descriptor field names (`request_id`) or protocol keys
    (`reqId`); they always win over parsed values. `None` overrides are ignored.
    """

    fields, extra = split_descriptor(raw)
    if overrides:
        override_fields, override_extra = _normalize_override_keys(overrides)
        fields.update(override_fields)
        extra.update(override_extra)

    deferred: list[Message] = []
    request_id = _parse_request_id(fields.get("request_id"), deferred)

    version = fields.get("version")
    version = None if version is None else str(version)
    _check_version(version, deferred)

    raw_handler = fields.get("response_handler")
    handler = sanitize_handler_name(None if raw_handler is None else str(raw_handler))
    if raw_handler is not None and handler != raw_handler:
        LOGGER.debug("Sanitized response handler %r to %r", raw_handler, handler)

    output_format = fields.get("output_format")
    signature = fields.get("signature")
    output_file_name = fields.get("output_file_name")

    return RequestDescriptor(
        request_id=request_id,
        version=version,
        signature=None if signature is None else str(signature),
        output_format=DEFAULT_OUTPUT_FORMAT if output_format is None else str(output_format),
        response_handler=handler,
        output_file_name=None if output_file_name is None else str(output_file_name),
        auth_present=bool(auth_present),
        extra_attributes=extra,
        deferred_messages=tuple(deferred),
    )
