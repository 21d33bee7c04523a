# This file provides shared helpers for API endpoint tests.
# It exists so tests can override the payload provider and settings without real data sources.
# Centralized test wiring keeps API tests small and focused on behavior.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi.testclient import TestClient

from src.api.app import app
from src.api.dependencies import PayloadProvider, get_config, get_payload_provider
from src.common.settings import Settings


def build_test_settings(*, emit_signature: bool = False) -> Settings:
    """Create deterministic settings for tests."""

    return Settings(
        PROJECT_NAME="Test Datasource",
        ENV="test",
        LOG_LEVEL="INFO",
        DATASOURCE_EMIT_SIGNATURE=emit_signature,
    )


@contextmanager
def api_test_client(
    *,
    settings: Settings | None = None,
    payload_provider: PayloadProvider | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_settings = settings or build_test_settings()

    app.dependency_overrides[get_config] = lambda: resolved_settings
    if payload_provider is not None:
        app.dependency_overrides[get_payload_provider] = lambda: payload_provider

    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
