# This file defines the response schema for the health endpoint.
# It exists to keep the operational status contract explicit for platform consumers.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    environment: str
    service_name: str
    timestamp: datetime
