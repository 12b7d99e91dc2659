"""Shared FastAPI dependency injection."""

from __future__ import annotations

from adb_query_runner.arangodb.executor import ArangoQueryExecutor
from adb_query_runner.config import Settings
from adb_query_runner.cytoscape.exporter import GraphExporter
from adb_query_runner.queries import QueryCatalog
from adb_query_runner.services.query_service import QueryService

_settings: Settings | None = None
_executor: ArangoQueryExecutor | None = None
_catalog: QueryCatalog | None = None
_service: QueryService | None = None


def configure(
    settings: Settings,
    executor: ArangoQueryExecutor,
    exporter: GraphExporter,
    catalog: QueryCatalog,
) -> None:
    global _settings, _executor, _catalog, _service
    _settings = settings
    _executor = executor
    _catalog = catalog
    _service = QueryService(executor, exporter, catalog)


def reset() -> None:
    global _settings, _executor, _catalog, _service
    _settings = _executor = _catalog = _service = None


def get_app_settings() -> Settings:
    if _settings is None:
        raise RuntimeError("Settings not loaded")
    return _settings


def get_executor() -> ArangoQueryExecutor:
    if _executor is None:
        raise RuntimeError("ArangoDB executor not initialized")
    return _executor


def get_catalog() -> QueryCatalog:
    if _catalog is None:
        raise RuntimeError("Query catalog not loaded")
    return _catalog


def get_query_service() -> QueryService:
    if _service is None:
        raise RuntimeError("Query service not initialized")
    return _service
