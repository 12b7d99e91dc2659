"""Named query catalog and bind-variable coercion."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from adb_query_runner.utils.exceptions import InvalidBindVariable, QueryNotFound
from adb_query_runner.utils.logging import get_logger

logger = get_logger(__name__)

ParameterType = Literal["string", "number", "boolean"]


class QueryParameter(BaseModel):
    name: str
    parameter_type: ParameterType = "string"


class QueryDefinition(BaseModel):
    name: str
    description: str = ""
    query: str
    parameters: list[QueryParameter] = Field(default_factory=list)

    def parameter_type(self, name: str) -> ParameterType:
        for param in self.parameters:
            if param.name == name:
                return param.parameter_type
        return "string"


class QueryCatalog(BaseModel):
    queries: list[QueryDefinition] = Field(default_factory=list)

    def get(self, index: int) -> QueryDefinition:
        if not 0 <= index < len(self.queries):
            raise QueryNotFound(index)
        return self.queries[index]


def load_query_catalog(path: str | Path) -> QueryCatalog:
    """Read the catalog from a JSON file; keys other than ``queries`` are ignored."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    catalog = QueryCatalog.model_validate({"queries": raw.get("queries", [])})
    logger.info("query_catalog_loaded", path=str(path), queries=len(catalog.queries))
    return catalog


def _parse_number(value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        number = float(value)
    if not math.isfinite(number):
        raise ValueError(value)
    return number


def coerce_bind_vars(definition: QueryDefinition, raw: dict[str, str]) -> dict[str, Any]:
    """Convert submitted string values to the JSON types the query declares.

    Names not declared by the query are passed through as strings.
    """
    bind_vars: dict[str, Any] = {}
    for name, value in raw.items():
        param_type = definition.parameter_type(name)
        if param_type == "number":
            try:
                bind_vars[name] = _parse_number(value.strip())
            except ValueError:
                raise InvalidBindVariable(name, value, param_type) from None
        elif param_type == "boolean":
            if value not in ("true", "false"):
                raise InvalidBindVariable(name, value, param_type)
            bind_vars[name] = value == "true"
        else:
            bind_vars[name] = value
    return bind_vars
