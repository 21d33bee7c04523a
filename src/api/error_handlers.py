# This file defines consistent datasource error responses for failures outside the assembler.
# It exists so validation problems and unexpected exceptions still reach clients in the protocol's error shape.
# The handlers rebuild the request descriptor from the incoming query so wrapping rules still apply.
# Centralized error handling prevents stack traces from leaking in production responses.

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError

from src.api.http_response import to_http_response
from src.datasource.messages import Reason
from src.datasource.response import ResponseContainer

AUTH_HEADER = "X-DataSource-Auth"

LOGGER = logging.getLogger("datasource")


def _error_response(
    request: Request, *, reason: str, summary: str, status_code: int | None = None
) -> Response:
    container = ResponseContainer.from_query(
        request.query_params.get("tqx"),
        auth_present=request.headers.get(AUTH_HEADER) is not None,
    )
    container.add_error(reason, summary)
    response = to_http_response(container.assemble())
    if status_code is not None:
        response.status_code = status_code
    return response


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        LOGGER.info("Rejected datasource request: %s", exc.errors())
        return _error_response(
            request,
            reason=Reason.INVALID_REQUEST,
            summary="Invalid request parameters.",
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, _: Exception) -> Response:
        LOGGER.exception("Unhandled error while serving %s", request.url.path)
        return _error_response(
            request,
            reason=Reason.INTERNAL_ERROR,
            summary="The server encountered an unexpected error.",
            status_code=500,
        )
