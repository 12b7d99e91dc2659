"""Single entry point for outbound HTTP calls.

Converts httpx outcomes into the typed errors of ``utils.exceptions`` so that
no client ever lets a raw ``httpx`` exception escape.
"""

from __future__ import annotations

from typing import Any

import httpx

from adb_query_runner.utils.exceptions import (
    HttpStatusError,
    MalformedResponse,
    TransportError,
)
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)

_MAX_DETAIL_CHARS = 500


def _error_detail(response: httpx.Response) -> str:
    """Best-effort human readable reason from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:_MAX_DETAIL_CHARS]

    if isinstance(body, dict):
        # ArangoDB: {"error": true, "errorMessage": ..., "errorNum": ...}
        if isinstance(body.get("errorMessage"), str):
            return body["errorMessage"]
        # CyREST: {"errors": [{"message": ...}], "data": {}}
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return str(errors[0].get("message", ""))
    return str(body)[:_MAX_DETAIL_CHARS]


async def send_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    json: Any = None,
    params: dict[str, str] | None = None,
    expect_body: bool = True,
) -> Any:
    """Send one request and return the decoded JSON body.

    Returns ``None`` when ``expect_body`` is false. Raises ``TransportError``,
    ``HttpStatusError`` or ``MalformedResponse``.
    """
    request = client.build_request(method, url, json=json, params=params)
    endpoint = f"{method} {request.url}"

    try:
        response = await client.send(request)
    except httpx.RequestError as exc:
        logger.warning("http_transport_failed", endpoint=endpoint, error=str(exc))
        raise TransportError(
            f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__,
            endpoint=endpoint,
        ) from exc

    if not response.is_success:
        detail = _error_detail(response)
        logger.warning(
            "http_status_error",
            endpoint=endpoint,
            status=response.status_code,
            detail=detail,
        )
        raise HttpStatusError(
            f"HTTP {response.status_code}: {detail}" if detail else f"HTTP {response.status_code}",
            status_code=response.status_code,
            endpoint=endpoint,
        )

    if not expect_body:
        return None

    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponse(
            "Response body is not valid JSON",
            endpoint=endpoint,
            value=response.text[:_MAX_DETAIL_CHARS],
        ) from exc
