# This file defines the liveness endpoint for API operations.
# It exists so orchestration and monitoring systems can verify the datasource service quickly.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_config
from src.api.schemas.health_schemas import HealthResponse
from src.common.settings import Settings

router = APIRouter(tags=["health"])
ConfigDep = Annotated[Settings, Depends(get_config)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/health", response_model=HealthResponse)
def health(config: ConfigDep) -> dict[str, object]:
    return {
        "status": "ok",
        "environment": config.ENV,
        "service_name": config.PROJECT_NAME,
        "timestamp": _utc_now(),
    }
