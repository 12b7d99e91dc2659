"""Upload a classified graph to Cytoscape.

Steps, in order:

1. discover vertex and edge attributes (system ``_`` fields excluded)
2. translate documents into Cytoscape.js elements
3. create the network (failure aborts the export)
4. create one typed table column per attribute, concurrently
5. apply a force-directed layout

Once the network exists, failures of steps 4 and 5 are collected into the
``ExportReport`` instead of aborting; the network is never rolled back.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable

from pydantic import BaseModel, Field, computed_field

from adb_query_runner.cytoscape.client import ColumnType, CytoscapeClient, Table
from adb_query_runner.graph.models import SYSTEM_FIELD_PREFIX, Graph
from adb_query_runner.utils.exceptions import (
    MissingEdgeKey,
    PartialExportFailure,
    QueryRunnerError,
)
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)

GENERATED_BY = "adb_query_runner"

# Attributes may not overwrite these element fields.
_NODE_RESERVED = frozenset({"id"})
_EDGE_RESERVED = frozenset({"id", "source", "target"})


class ExportElement(BaseModel):
    """A node or edge in Cytoscape.js element form."""

    id: Any
    name: Any = None
    source: str | None = None
    target: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    def to_cyjs(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.name is not None:
            data["name"] = self.name
        if self.source is not None:
            data["source"] = self.source
            data["target"] = self.target
        data.update(self.attributes)
        return {"data": data}


class ExportReport(BaseModel):
    network_suid: int
    node_count: int = 0
    edge_count: int = 0
    node_columns: dict[str, ColumnType] = Field(default_factory=dict)
    edge_columns: dict[str, ColumnType] = Field(default_factory=dict)
    skipped_edges: list[dict[str, Any]] = Field(default_factory=list)
    failures: list[dict[str, Any]] = Field(default_factory=list)

    @computed_field
    @property
    def complete(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if self.failures:
            raise PartialExportFailure(self.network_suid, self.failures)


# ── Pure steps ──────────────────────────────────────────────────────


def discover_attributes(documents: Iterable[dict[str, Any]]) -> set[str]:
    """Names present on at least one document, minus ArangoDB system fields."""
    return {
        key
        for document in documents
        for key in document
        if not key.startswith(SYSTEM_FIELD_PREFIX)
    }


def infer_column_type(documents: Iterable[dict[str, Any]], attribute: str) -> ColumnType:
    """Type of the first string/number/boolean value of ``attribute``; String if none."""
    for document in documents:
        value = document.get(attribute)
        # bool before int/float: bool is an int subclass
        if isinstance(value, bool):
            return ColumnType.BOOLEAN
        if isinstance(value, (int, float)):
            return ColumnType.DOUBLE
        if isinstance(value, str):
            return ColumnType.STRING
    return ColumnType.STRING


def infer_column_types(
    documents: list[dict[str, Any]], attributes: Iterable[str]
) -> dict[str, ColumnType]:
    return {attr: infer_column_type(documents, attr) for attr in sorted(attributes)}


def _pick(document: dict[str, Any], attributes: set[str], reserved: frozenset[str]) -> dict[str, Any]:
    return {
        key: value
        for key, value in document.items()
        if key in attributes and key not in reserved
    }


def _exportable(attributes: set[str], reserved: frozenset[str], table: Table) -> set[str]:
    """Drop attributes that collide with element fields; they get no column either."""
    shadowed = attributes & reserved
    if shadowed:
        logger.warning("attributes_shadowed", table=table.value, attributes=sorted(shadowed))
    return attributes - reserved


def to_export_nodes(vertices: list[dict[str, Any]], attributes: set[str]) -> list[ExportElement]:
    nodes = []
    for vertex in vertices:
        attrs = _pick(vertex, attributes, _NODE_RESERVED)
        name = attrs.pop("name", None)
        if name is None:
            name = vertex["_id"]
        nodes.append(ExportElement(id=vertex["_id"], name=name, attributes=attrs))
    return nodes


def to_export_edges(
    edges: list[dict[str, Any]], attributes: set[str]
) -> tuple[list[ExportElement], list[MissingEdgeKey]]:
    """Translate edges; those without ``_key`` are returned separately, not exported."""
    exported: list[ExportElement] = []
    skipped: list[MissingEdgeKey] = []
    for edge in edges:
        if "_key" not in edge:
            skipped.append(MissingEdgeKey(edge))
            continue
        exported.append(
            ExportElement(
                id=edge["_key"],
                source=edge["_from"],
                target=edge["_to"],
                attributes=_pick(edge, attributes, _EDGE_RESERVED),
            )
        )
    return exported, skipped


def build_network_payload(
    nodes: list[ExportElement], edges: list[ExportElement], network_name: str
) -> dict[str, Any]:
    return {
        "format_version": "1.0",
        "generated_by": GENERATED_BY,
        "target_cytoscapejs_version": "~3.0",
        "data": {
            "shared_name": network_name,
            "name": network_name,
        },
        "elements": {
            "nodes": [node.to_cyjs() for node in nodes],
            "edges": [edge.to_cyjs() for edge in edges],
        },
    }


# ── Protocol sequencing ─────────────────────────────────────────────


class GraphExporter:
    """Runs the CyREST upload sequence for one graph per ``export()`` call."""

    def __init__(
        self,
        client: CytoscapeClient,
        network_name: str = "ArangoDB Graph",
        max_concurrent_columns: int = 4,
    ) -> None:
        self._client = client
        self._network_name = network_name
        self._max_concurrent_columns = max_concurrent_columns

    async def export(self, graph: Graph) -> ExportReport:
        vertex_attributes = _exportable(
            discover_attributes(graph.vertices), _NODE_RESERVED, Table.NODE
        )
        edge_attributes = _exportable(
            discover_attributes(graph.edges), _EDGE_RESERVED, Table.EDGE
        )

        nodes = to_export_nodes(graph.vertices, vertex_attributes)
        edges, skipped = to_export_edges(graph.edges, edge_attributes)
        for missing in skipped:
            logger.warning("edge_dropped_missing_key", edge=missing.value)

        # Raises on failure: without a network there is nothing to continue with.
        suid = await self._client.create_network(
            build_network_payload(nodes, edges, self._network_name)
        )

        report = ExportReport(
            network_suid=suid,
            node_count=len(nodes),
            edge_count=len(edges),
            node_columns=infer_column_types(graph.vertices, vertex_attributes),
            edge_columns=infer_column_types(graph.edges, edge_attributes),
            skipped_edges=[missing.to_dict() for missing in skipped],
        )

        report.failures.extend(await self._create_columns(report))

        try:
            await self._client.apply_layout(suid)
        except QueryRunnerError as exc:
            logger.error("layout_failed", network_suid=suid, error=exc.message)
            report.failures.append({"step": "layout", **exc.to_dict()})

        logger.info(
            "graph_exported",
            network_suid=suid,
            nodes=report.node_count,
            edges=report.edge_count,
            skipped_edges=len(report.skipped_edges),
            failures=len(report.failures),
        )
        return report

    async def _create_columns(self, report: ExportReport) -> list[dict[str, Any]]:
        """Create every node and edge column; return one failure record per error."""
        semaphore = asyncio.Semaphore(self._max_concurrent_columns)

        async def create(table: Table, name: str, column_type: ColumnType) -> dict[str, Any] | None:
            async with semaphore:
                try:
                    await self._client.create_column(report.network_suid, table, name, column_type)
                except QueryRunnerError as exc:
                    logger.error(
                        "column_create_failed",
                        network_suid=report.network_suid,
                        table=table.value,
                        column=name,
                        error=exc.message,
                    )
                    return {"step": "column", "table": table.value, "column": name, **exc.to_dict()}
            return None

        tasks = [
            create(Table.NODE, name, column_type)
            for name, column_type in report.node_columns.items()
        ] + [
            create(Table.EDGE, name, column_type)
            for name, column_type in report.edge_columns.items()
        ]
        results = await asyncio.gather(*tasks)
        return [failure for failure in results if failure is not None]
