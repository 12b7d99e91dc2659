"""Graph detection for query result sets."""

from __future__ import annotations

from adb_query_runner.graph.classifier import classify, classify_document
from adb_query_runner.graph.models import Edge, Graph, Invalid, Vertex
