"""
Chart Tools datasource protocol helpers.
It groups the request descriptor parser, the message log, and the response assembler.
Callers usually only need `parse_request`, `ResponseContainer`, and `assemble`.
"""

from src.datasource.messages import Message, MessageKind, MessageLog, Reason
from src.datasource.payload import CallablePayload, DataPayload, StaticPayload
from src.datasource.request import (
    DEFAULT_RESPONSE_HANDLER,
    SUPPORTED_VERSION,
    RequestDescriptor,
    parse_request,
    sanitize_handler_name,
)
from src.datasource.response import (
    AssembledResponse,
    ResponseContainer,
    ResponseStatus,
    assemble,
    compute_signature,
)

__all__ = [
    "DEFAULT_RESPONSE_HANDLER",
    "SUPPORTED_VERSION",
    "AssembledResponse",
    "CallablePayload",
    "DataPayload",
    "Message",
    "MessageKind",
    "MessageLog",
    "Reason",
    "RequestDescriptor",
    "ResponseContainer",
    "ResponseStatus",
    "StaticPayload",
    "assemble",
    "compute_signature",
    "parse_request",
    "sanitize_handler_name",
]
