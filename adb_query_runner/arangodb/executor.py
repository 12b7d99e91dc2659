"""Async ArangoDB cursor API client: runs AQL and drains the result cursor."""

from __future__ import annotations

from typing import Any

import httpx

from adb_query_runner.config import Settings
from adb_query_runner.utils.exceptions import MalformedResponse
from adb_query_runner.utils.http import send_json
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)

CURSOR_PATH = "_api/cursor"
VERSION_PATH = "_api/version"


def _endpoint_base(endpoint: str) -> str:
    # Paths are appended to the endpoint verbatim, so it must end with a slash.
    return endpoint if endpoint.endswith("/") else endpoint + "/"


class ArangoQueryExecutor:
    """Manages the HTTP client used to talk to ArangoDB.

    Mirrors a database connection: ``connect()`` at startup, ``close()`` at
    shutdown, one pooled client shared by all requests in between.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=_endpoint_base(self._settings.ARANGODB_ENDPOINT),
            auth=httpx.BasicAuth(
                self._settings.ARANGODB_USERNAME, self._settings.ARANGODB_PASSWORD
            ),
            timeout=self._settings.HTTP_TIMEOUT,
            transport=self._transport,
        )
        logger.info("arangodb_client_ready", endpoint=self._settings.ARANGODB_ENDPOINT)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("arangodb_client_closed")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("ArangoDB client not initialized, call connect() first")
        return self._client

    async def health_check(self) -> bool:
        body = await send_json(self.client, "GET", VERSION_PATH)
        return isinstance(body, dict) and "version" in body

    async def execute(self, query: str, bind_vars: dict[str, Any]) -> list[Any]:
        """Run ``query`` and return every result document, in batch order.

        The first failure is raised; no partial result is returned and
        nothing is retried.
        """
        body = await send_json(
            self.client,
            "POST",
            CURSOR_PATH,
            json={"query": query, "bindVars": bind_vars, "stream": True},
        )
        results = list(self._batch(body, f"POST {CURSOR_PATH}"))
        has_more = body.get("hasMore") is True
        cursor_id = body.get("id")
        batches = 1

        if has_more and not isinstance(cursor_id, str):
            raise MalformedResponse(
                "Cursor reports more results but has no id",
                endpoint=f"POST {CURSOR_PATH}",
                value=cursor_id,
            )

        while has_more:
            path = f"{CURSOR_PATH}/{cursor_id}"
            body = await send_json(self.client, "PUT", path)
            results.extend(self._batch(body, f"PUT {path}"))
            batches += 1
            if "hasMore" not in body:
                raise MalformedResponse(
                    "Cursor response has no 'hasMore' field",
                    endpoint=f"PUT {path}",
                )
            has_more = body["hasMore"] is True

        logger.info("query_executed", batches=batches, documents=len(results))
        return results

    @staticmethod
    def _batch(body: Any, endpoint: str) -> list[Any]:
        if not isinstance(body, dict) or not isinstance(body.get("result"), list):
            raise MalformedResponse(
                "Cursor response has no 'result' list",
                endpoint=endpoint,
            )
        return body["result"]
