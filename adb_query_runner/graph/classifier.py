"""Decide whether a query result set is a graph and split it into vertices/edges.

A single linear pass over the documents: each one is classified as a vertex,
an edge or invalid. The first invalid document rejects the whole result set.
Edge endpoints that have no vertex document of their own get a placeholder
vertex ``{"_id": ...}`` so the exporter can always resolve ``source``/``target``.
"""

from __future__ import annotations

from typing import Any, Iterable

from adb_query_runner.graph.models import (
    ID_SEPARATOR,
    Classified,
    Edge,
    Graph,
    Invalid,
    Vertex,
)
from adb_query_runner.utils.exceptions import (
    InvalidElement,
    NoEdgesFound,
)
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)


def is_document_handle(value: Any) -> bool:
    """True for strings of the form ``collection/key`` (exactly one separator)."""
    return isinstance(value, str) and value.count(ID_SEPARATOR) == 1


def classify_document(document: Any) -> Classified:
    if not isinstance(document, dict):
        return Invalid(reason="Array contains non-object elements", value=document)

    if "_from" in document and "_to" in document:
        source, target = document["_from"], document["_to"]
        if not isinstance(source, str) or not isinstance(target, str):
            return Invalid(reason="Edge _from or _to is not a string", value=document)
        if not (is_document_handle(source) and is_document_handle(target)):
            return Invalid(reason="Edge _from or _to has invalid format", value=document)
        return Edge(document=document)

    if "_id" in document:
        vertex_id = document["_id"]
        if not isinstance(vertex_id, str):
            return Invalid(reason="Vertex _id is not a string", value=document)
        if not is_document_handle(vertex_id):
            return Invalid(reason="Vertex _id has invalid format", value=document)
        return Vertex(document=document)

    return Invalid(reason="Object is neither vertex nor edge", value=document)


def classify(documents: Iterable[Any]) -> Graph:
    """Build a ``Graph`` or raise on the first disqualifying document.

    Raises ``InvalidElement`` for a malformed document and ``NoEdgesFound``
    when the result set holds no edge at all.
    """
    vertices: list[dict[str, Any]] = []
    edges: list[dict[str, Any]] = []
    present: set[str] = set()
    # dict keeps first-reference order for the placeholders
    needed: dict[str, None] = {}

    for document in documents:
        item = classify_document(document)
        if isinstance(item, Invalid):
            raise InvalidElement(item.reason, item.value)
        if isinstance(item, Edge):
            needed.setdefault(item.source)
            needed.setdefault(item.target)
            edges.append(item.document)
        else:
            present.add(item.id)
            vertices.append(item.document)

    if not edges:
        raise NoEdgesFound()

    placeholders = [{"_id": vertex_id} for vertex_id in needed if vertex_id not in present]
    vertices.extend(placeholders)

    logger.debug(
        "graph_classified",
        vertices=len(vertices),
        edges=len(edges),
        placeholders=len(placeholders),
    )
    return Graph(vertices=vertices, edges=edges)
