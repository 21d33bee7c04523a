# This file provides dependency factories for FastAPI routes.
# It exists so the datasource router gets its settings and payload provider through dependency injection.
# Tests override `get_payload_provider` to serve fixed tables without touching real data sources.

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from src.common.settings import Settings, get_settings
from src.datasource.payload import DataPayload, StaticPayload
from src.datasource.request import RequestDescriptor

EMPTY_TABLE: Final[str] = "{cols:[],rows:[]}"

PayloadProvider = Callable[[RequestDescriptor], DataPayload | None]


def empty_table_provider(_: RequestDescriptor) -> DataPayload | None:
    return StaticPayload(EMPTY_TABLE)


def get_payload_provider() -> PayloadProvider:
    return empty_table_provider


def get_config() -> Settings:
    return get_settings()
