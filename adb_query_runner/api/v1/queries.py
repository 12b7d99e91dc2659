"""Query API endpoints: list the catalog, inspect a query, run it."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from adb_query_runner.api.dependencies import get_app_settings, get_catalog, get_query_service
from adb_query_runner.api.v1.schemas.queries import ExecuteRequest, QueryDetail, QuerySummary
from adb_query_runner.config import Settings
from adb_query_runner.queries import QueryCatalog
from adb_query_runner.services.query_service import QueryResult, QueryService
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/queries", tags=["queries"])


@router.get("", response_model=list[QuerySummary])
async def list_queries(catalog: QueryCatalog = Depends(get_catalog)) -> list[QuerySummary]:
    return [
        QuerySummary(
            index=index,
            name=definition.name,
            description=definition.description,
            parameters=definition.parameters,
        )
        for index, definition in enumerate(catalog.queries)
    ]


@router.get("/{index}", response_model=QueryDetail)
async def get_query(index: int, catalog: QueryCatalog = Depends(get_catalog)) -> QueryDetail:
    """Parameter schema of one query, for building its input form."""
    definition = catalog.get(index)
    return QueryDetail(
        index=index,
        name=definition.name,
        description=definition.description,
        parameters=definition.parameters,
        query=definition.query,
    )


@router.post("/{index}/execute", response_model=QueryResult)
async def execute_query(
    index: int,
    request: ExecuteRequest,
    service: QueryService = Depends(get_query_service),
    settings: Settings = Depends(get_app_settings),
) -> QueryResult:
    """Run the query; graph-shaped results are also pushed to Cytoscape."""
    timeout = settings.PIPELINE_TIMEOUT
    try:
        return await asyncio.wait_for(service.run(index, request.parameters), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error("query_timed_out", index=index, timeout=timeout)
        raise HTTPException(status_code=504, detail=f"Query did not finish within {timeout}s")
