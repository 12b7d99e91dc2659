"""Request/response models for the query API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from adb_query_runner.queries import QueryParameter


class QuerySummary(BaseModel):
    index: int
    name: str
    description: str = ""
    parameters: list[QueryParameter] = Field(default_factory=list)


class QueryDetail(QuerySummary):
    query: str


class ExecuteRequest(BaseModel):
    # Raw form values; converted using the query's parameter types.
    parameters: dict[str, str] = Field(default_factory=dict)
