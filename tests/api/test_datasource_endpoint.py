# This file tests the datasource endpoint end to end through the FastAPI app.
# It exists to confirm the `tqx` parameter and auth header drive wrapping, status, and headers.
# Payload providers are overridden so responses are deterministic.

from __future__ import annotations

from src.datasource.payload import StaticPayload
from src.datasource.request import RequestDescriptor
from src.datasource.response import compute_signature
from tests.api.support import api_test_client, build_test_settings

TABLE = "{cols:[{id:'a',type:'number'}],rows:[{c:[{v:1}]}]}"


def _table_provider(_: RequestDescriptor) -> StaticPayload:
    return StaticPayload(TABLE)


def test_datasource_defaults_to_empty_table_wrapped_in_handler() -> None:
    with api_test_client() as client:
        response = client.get("/datasource", params={"tqx": "reqId=7"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/javascript")
    assert response.text == (
        "google.visualization.Query.setResponse("
        "{version:'0.6',reqId:7,status:'ok',table:{cols:[],rows:[]}});"
    )


def test_datasource_auth_header_returns_plain_object() -> None:
    with api_test_client(payload_provider=_table_provider) as client:
        response = client.get(
            "/datasource",
            params={"tqx": "reqId=3;responseHandler=cb"},
            headers={"X-DataSource-Auth": "a"},
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.text == f"{{version:'0.6',reqId:3,status:'ok',table:{TABLE}}}"


def test_datasource_unsupported_format_is_bad_request() -> None:
    with api_test_client() as client:
        response = client.get("/datasource", params={"tqx": "reqId=1;out=csv;responseHandler=cb"})

    assert response.status_code == 400
    assert response.text.startswith("cb({version:'0.6',reqId:1,status:'error',errors:[{reason:'not_supported'")
    assert "table:" not in response.text


def test_datasource_not_modified_when_signature_matches() -> None:
    signature = compute_signature(TABLE)
    with api_test_client(payload_provider=_table_provider) as client:
        response = client.get("/datasource", params={"tqx": f"reqId=2;sig={signature}"})

    assert response.status_code == 200
    assert "reason:'not_modified'" in response.text
    assert "table:" not in response.text


def test_datasource_emits_signature_when_enabled() -> None:
    settings = build_test_settings(emit_signature=True)
    with api_test_client(settings=settings, payload_provider=_table_provider) as client:
        response = client.get("/datasource", params={"tqx": "reqId=2"})

    assert f"sig:'{compute_signature(TABLE)}'" in response.text


def test_datasource_provider_without_payload_omits_table() -> None:
    with api_test_client(payload_provider=lambda _: None) as client:
        response = client.get("/datasource", headers={"X-DataSource-Auth": "1"})

    assert response.text == "{version:'0.6',reqId:0,status:'ok'}"


def test_datasource_unexpected_failure_returns_internal_error() -> None:
    def broken_provider(_: RequestDescriptor) -> StaticPayload:
        raise RuntimeError("boom")

    with api_test_client(payload_provider=broken_provider) as client:
        response = client.get("/datasource", params={"tqx": "reqId=9;responseHandler=cb"})

    assert response.status_code == 500
    assert response.text.startswith("cb({version:'0.6',reqId:9,status:'error',errors:[{reason:'internal_error'")
    assert "boom" not in response.text
