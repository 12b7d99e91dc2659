"""Health and readiness probe endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from adb_query_runner.api.dependencies import get_executor
from adb_query_runner.arangodb.executor import ArangoQueryExecutor
from adb_query_runner.utils.exceptions import QueryRunnerError

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(executor: ArangoQueryExecutor = Depends(get_executor)) -> dict:
    try:
        ok = await executor.health_check()
        return {"status": "ready" if ok else "degraded", "arangodb": ok}
    except QueryRunnerError as exc:
        return {"status": "not_ready", "error": exc.to_dict()}
