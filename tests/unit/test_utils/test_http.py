"""Unit tests for the outbound HTTP helper and error payloads."""

from __future__ import annotations

import httpx
import pytest

from adb_query_runner.utils.exceptions import (
    HttpStatusError,
    MalformedResponse,
    PartialExportFailure,
    TransportError,
)
from adb_query_runner.utils.http import send_json


async def _send(handler, **kwargs):
    async with httpx.AsyncClient(
        base_url="http://service.test/", transport=httpx.MockTransport(handler)
    ) as client:
        return await send_json(client, kwargs.pop("method", "GET"), "thing", **kwargs)


@pytest.mark.asyncio
async def test_returns_decoded_body():
    assert await _send(lambda r: httpx.Response(200, json={"ok": 1})) == {"ok": 1}


@pytest.mark.asyncio
async def test_no_body_expected():
    assert await _send(lambda r: httpx.Response(204), expect_body=False) is None


@pytest.mark.asyncio
async def test_invalid_json_body():
    with pytest.raises(MalformedResponse) as exc_info:
        await _send(lambda r: httpx.Response(200, text="<html>"))
    assert exc_info.value.value == "<html>"


@pytest.mark.asyncio
async def test_status_error_with_plain_text_body():
    with pytest.raises(HttpStatusError) as exc_info:
        await _send(lambda r: httpx.Response(503, text="down for maintenance"), method="PUT")
    err = exc_info.value
    assert err.status_code == 503
    assert err.message == "HTTP 503: down for maintenance"
    assert err.to_dict() == {
        "kind": "HttpStatusError",
        "error": "HTTP 503: down for maintenance",
        "endpoint": "PUT http://service.test/thing",
        "status_code": 503,
    }


@pytest.mark.asyncio
async def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        await _send(handler)
    assert exc_info.value.endpoint == "GET http://service.test/thing"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_undecodable_body_is_a_transport_error():
    def handler(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

    with pytest.raises(TransportError) as exc_info:
        await _send(handler, method="POST", expect_body=False)
    assert exc_info.value.endpoint == "POST http://service.test/thing"
    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)


def test_partial_export_failure_payload():
    failures = [{"step": "layout", "kind": "TransportError", "error": "refused"}]
    payload = PartialExportFailure(3, failures).to_dict()
    assert payload == {
        "kind": "PartialExportFailure",
        "error": "1 export step(s) failed for network 3",
        "network_suid": 3,
        "failures": failures,
    }
