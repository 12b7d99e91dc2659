"""Classified documents and the vertex/edge graph built from them."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# ArangoDB document handles look like "collection/key".
ID_SEPARATOR = "/"

# Attributes with this prefix are ArangoDB system fields (_id, _key, _rev, ...).
SYSTEM_FIELD_PREFIX = "_"


class Vertex(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["vertex"] = "vertex"
    document: dict[str, Any]

    @property
    def id(self) -> str:
        return self.document["_id"]


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["edge"] = "edge"
    document: dict[str, Any]

    @property
    def source(self) -> str:
        return self.document["_from"]

    @property
    def target(self) -> str:
        return self.document["_to"]


class Invalid(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["invalid"] = "invalid"
    reason: str
    value: Any = None


Classified = Union[Vertex, Edge, Invalid]


class Graph(BaseModel):
    """Vertices and edges of a result set; every edge endpoint has a vertex."""

    vertices: list[dict[str, Any]] = Field(default_factory=list)
    edges: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def vertex_ids(self) -> set[str]:
        return {v["_id"] for v in self.vertices}
