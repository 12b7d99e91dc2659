"""Thin async client for the three CyREST calls the exporter needs."""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx

from adb_query_runner.config import Settings
from adb_query_runner.utils.exceptions import MalformedResponse
from adb_query_runner.utils.http import send_json
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)


class ColumnType(str, Enum):
    STRING = "String"
    DOUBLE = "Double"
    BOOLEAN = "Boolean"


class Table(str, Enum):
    NODE = "defaultnode"
    EDGE = "defaultedge"


FORCE_DIRECTED = "force-directed"


class CytoscapeClient:
    """Async CyREST client sharing one pooled ``httpx.AsyncClient``."""

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
            base_url=self._settings.CYTOSCAPE_BASE_URL.rstrip("/") + "/",
            timeout=self._settings.HTTP_TIMEOUT,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Cytoscape client not initialized, call connect() first")
        return self._client

    async def create_network(self, payload: dict[str, Any]) -> int:
        """Upload a Cytoscape.js network and return its SUID."""
        body = await send_json(
            self.client, "POST", "networks", json=payload, params={"format": "json"}
        )
        suid = body.get("networkSUID") if isinstance(body, dict) else None
        # bool is an int subclass; a JSON true is not an SUID
        if not isinstance(suid, int) or isinstance(suid, bool):
            raise MalformedResponse(
                "Response has no integer 'networkSUID'",
                endpoint="POST networks?format=json",
                value=body,
            )
        logger.info("network_created", network_suid=suid)
        return suid

    async def create_column(
        self, network_suid: int, table: Table, name: str, column_type: ColumnType
    ) -> None:
        await send_json(
            self.client,
            "POST",
            f"networks/{network_suid}/tables/{table.value}/columns",
            json={"name": name, "type": column_type.value},
            expect_body=False,
        )

    async def apply_layout(self, network_suid: int, algorithm: str = FORCE_DIRECTED) -> None:
        await send_json(
            self.client,
            "PUT",
            f"networks/{network_suid}/layouts/{algorithm}",
            expect_body=False,
        )
        logger.info("layout_applied", network_suid=network_suid, algorithm=algorithm)
