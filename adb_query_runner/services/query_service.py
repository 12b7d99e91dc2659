"""Runs a named query end to end: execute, classify, export."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from adb_query_runner.arangodb.executor import ArangoQueryExecutor
from adb_query_runner.cytoscape.exporter import ExportReport, GraphExporter
from adb_query_runner.graph.classifier import classify
from adb_query_runner.queries import QueryCatalog, coerce_bind_vars
from adb_query_runner.utils.exceptions import (
    ClassificationError,
    PartialExportFailure,
    QueryRunnerError,
)
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)


class QueryResult(BaseModel):
    query_name: str
    results: list[Any] = Field(default_factory=list)
    is_graph: bool = False
    vertex_count: int = 0
    edge_count: int = 0
    classification_error: dict[str, Any] | None = None
    export: ExportReport | None = None
    export_error: dict[str, Any] | None = None


class QueryService:
    """Pipeline for one request. Holds only read-only collaborators."""

    def __init__(
        self,
        executor: ArangoQueryExecutor,
        exporter: GraphExporter,
        catalog: QueryCatalog,
    ) -> None:
        self._executor = executor
        self._exporter = exporter
        self._catalog = catalog

    async def run(self, index: int, parameters: dict[str, str]) -> QueryResult:
        """Run query ``index`` with the submitted (string) parameters.

        Catalog and store errors propagate. Classification and export
        errors are reported on the returned ``QueryResult``.
        """
        definition = self._catalog.get(index)
        bind_vars = coerce_bind_vars(definition, parameters)

        logger.info("query_started", query=definition.name, index=index)
        documents = await self._executor.execute(definition.query, bind_vars)
        result = QueryResult(query_name=definition.name, results=documents)

        try:
            graph = classify(documents)
        except ClassificationError as exc:
            logger.info("result_not_a_graph", query=definition.name, reason=exc.message)
            result.classification_error = exc.to_dict()
            return result

        result.is_graph = True
        result.vertex_count = len(graph.vertices)
        result.edge_count = len(graph.edges)

        try:
            report = await self._exporter.export(graph)
        except QueryRunnerError as exc:
            logger.error("network_create_failed", query=definition.name, error=exc.message)
            result.export_error = exc.to_dict()
            return result

        result.export = report
        try:
            report.raise_for_failures()
        except PartialExportFailure as exc:
            result.export_error = exc.to_dict()
        return result
