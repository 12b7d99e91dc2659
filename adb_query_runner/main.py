"""FastAPI application factory with lifespan events."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from adb_query_runner.api import dependencies
from adb_query_runner.api.router import api_router
from adb_query_runner.arangodb.executor import ArangoQueryExecutor
from adb_query_runner.config import get_settings
from adb_query_runner.cytoscape.client import CytoscapeClient
from adb_query_runner.cytoscape.exporter import GraphExporter
from adb_query_runner.queries import load_query_catalog
from adb_query_runner.utils.exceptions import (
    ConfigurationError,
    QueryNotFound,
    QueryRunnerError,
    ServiceError,
)
from adb_query_runner.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _status_for(exc: QueryRunnerError) -> int:
    if isinstance(exc, QueryNotFound):
        return 404
    if isinstance(exc, ConfigurationError):
        return 422
    if isinstance(exc, ServiceError):
        return 502
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configuration once and open the pooled HTTP clients."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    catalog = load_query_catalog(settings.QUERY_CONFIG_PATH)

    executor = ArangoQueryExecutor(settings)
    await executor.connect()

    cytoscape = CytoscapeClient(settings)
    await cytoscape.connect()

    exporter = GraphExporter(
        cytoscape,
        network_name=settings.CYTOSCAPE_NETWORK_NAME,
        max_concurrent_columns=settings.CYTOSCAPE_MAX_CONCURRENT_COLUMNS,
    )
    dependencies.configure(settings, executor, exporter, catalog)

    logger.info("app_started", queries=len(catalog.queries))
    yield

    # Shutdown
    dependencies.reset()
    await cytoscape.close()
    await executor.close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    application = FastAPI(
        title="ADB Query Runner",
        description="Run named ArangoDB queries and visualize graph results in Cytoscape",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.include_router(api_router)

    @application.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @application.exception_handler(QueryRunnerError)
    async def query_runner_error_handler(request: Request, exc: QueryRunnerError) -> JSONResponse:
        status_code = _status_for(exc)
        logger.warning(
            "request_failed",
            kind=exc.kind,
            error=exc.message,
            status=status_code,
            path=request.url.path,
        )
        return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )

    return application


app = create_app()
