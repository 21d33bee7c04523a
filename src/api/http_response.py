# This file converts assembled datasource responses into HTTP responses.
# It exists so routers and error handlers hand the same headers, body, and status to the transport.
# The message log is deliberately not copied anywhere into the HTTP response.

from __future__ import annotations

from fastapi import Response

from src.datasource.response import AssembledResponse


def to_http_response(assembled: AssembledResponse) -> Response:
    """Build a FastAPI response carrying the assembled headers and body."""

    response = Response(
        content=assembled.body.encode("utf-8"),
        status_code=assembled.http_status,
    )
    for name, value in assembled.headers:
        response.headers[name] = value
    return response
