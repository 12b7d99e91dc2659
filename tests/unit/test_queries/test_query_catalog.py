"""Unit tests for the query catalog and bind-variable coercion."""

from __future__ import annotations

import json

import pytest

from adb_query_runner.queries import (
    QueryDefinition,
    QueryParameter,
    coerce_bind_vars,
    load_query_catalog,
)
from adb_query_runner.utils.exceptions import InvalidBindVariable, QueryNotFound


@pytest.fixture
def definition() -> QueryDefinition:
    return QueryDefinition(
        name="typed",
        query="RETURN [@s, @n, @b]",
        parameters=[
            QueryParameter(name="s", parameter_type="string"),
            QueryParameter(name="n", parameter_type="number"),
            QueryParameter(name="b", parameter_type="boolean"),
        ],
    )


def test_load_catalog_ignores_other_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "arangodb_endpoint": "http://localhost:8529/",
        "username": "root",
        "queries": [
            {
                "name": "q",
                "description": "d",
                "query": "RETURN @x",
                "parameters": [{"name": "x", "parameter_type": "number"}],
            }
        ],
    }))

    catalog = load_query_catalog(path)

    assert len(catalog.queries) == 1
    assert catalog.get(0).parameter_type("x") == "number"


def test_load_catalog_rejects_unknown_parameter_type(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "queries": [
            {"name": "q", "query": "RETURN @x", "parameters": [{"name": "x", "parameter_type": "date"}]}
        ]
    }))
    with pytest.raises(ValueError):
        load_query_catalog(path)


def test_catalog_get_out_of_range(catalog):
    assert catalog.get(1).name == "Active people"
    with pytest.raises(QueryNotFound):
        catalog.get(2)
    with pytest.raises(QueryNotFound):
        catalog.get(-1)


def test_coerce_typed_values(definition):
    bind_vars = coerce_bind_vars(definition, {"s": "42", "n": "42", "b": "true"})
    assert bind_vars == {"s": "42", "n": 42, "b": True}
    assert isinstance(bind_vars["n"], int)


def test_coerce_float_and_false(definition):
    assert coerce_bind_vars(definition, {"n": " 2.5 ", "b": "false"}) == {"n": 2.5, "b": False}


def test_undeclared_parameters_stay_strings(definition):
    assert coerce_bind_vars(definition, {"other": "7"}) == {"other": "7"}


@pytest.mark.parametrize("value", ["abc", "", "nan", "inf"])
def test_invalid_number(definition, value):
    with pytest.raises(InvalidBindVariable) as exc_info:
        coerce_bind_vars(definition, {"n": value})
    assert exc_info.value.to_dict()["parameter"] == "n"
    assert exc_info.value.to_dict()["value"] == value


@pytest.mark.parametrize("value", ["True", "yes", "1", ""])
def test_invalid_boolean(definition, value):
    with pytest.raises(InvalidBindVariable):
        coerce_bind_vars(definition, {"b": value})
