# This file defines the datasource endpoint consumed by chart clients.
# It exists so a `tqx` request string and the auth header turn into a wrapped protocol response.
# The payload comes from an injected provider, so this router never knows how tables are built.
# The diagnostic message log is logged server-side and never returned to the caller.

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Response

from src.api.dependencies import PayloadProvider, get_config, get_payload_provider
from src.api.http_response import to_http_response
from src.common.settings import Settings
from src.datasource.response import ResponseContainer

router = APIRouter(tags=["datasource"])
ConfigDep = Annotated[Settings, Depends(get_config)]
ProviderDep = Annotated[PayloadProvider, Depends(get_payload_provider)]

LOGGER = logging.getLogger("datasource")


@router.get("/datasource")
def datasource(
    config: ConfigDep,
    provider: ProviderDep,
    tqx: str | None = Query(default=None),
    datasource_auth: str | None = Header(default=None, alias="X-DataSource-Auth"),
) -> Response:
    container = ResponseContainer.from_query(tqx, auth_present=datasource_auth is not None)
    payload = provider(container.descriptor)
    if payload is not None:
        container.set_data_payload(payload)

    assembled = container.assemble(emit_signature=config.DATASOURCE_EMIT_SIGNATURE)
    for message in assembled.message_log:
        LOGGER.info(
            "reqId=%s %s %s: %s",
            container.descriptor.request_id,
            message.kind.value,
            message.reason,
            message.summary or "",
        )
    return to_http_response(assembled)
