# This file tests the API health endpoint.
# It exists to validate the operational contract used by orchestration and monitoring.

from __future__ import annotations

from tests.api.support import api_test_client, build_test_settings


def test_health_endpoint_returns_expected_fields() -> None:
    settings = build_test_settings()
    with api_test_client(settings=settings) as client:
        response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["environment"] == "test"
    assert payload["service_name"] == settings.PROJECT_NAME
    assert "timestamp" in payload
