"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch, tmp_path):
    """Point settings at test endpoints and a throwaway query catalog."""
    catalog = tmp_path / "config.json"
    catalog.write_text(json.dumps(SAMPLE_CATALOG))

    monkeypatch.setenv("ARANGODB_ENDPOINT", "http://arangodb.test:8529/")
    monkeypatch.setenv("ARANGODB_USERNAME", "root")
    monkeypatch.setenv("ARANGODB_PASSWORD", "secret")
    monkeypatch.setenv("CYTOSCAPE_BASE_URL", "http://cytoscape.test:1234/v1")
    monkeypatch.setenv("QUERY_CONFIG_PATH", str(catalog))
    monkeypatch.setenv("LOG_FORMAT", "console")


SAMPLE_CATALOG = {
    "arangodb_endpoint": "ignored",
    "queries": [
        {
            "name": "Friends",
            "description": "Friends of a person",
            "query": "FOR v, e IN 1..@depth OUTBOUND @start knows RETURN e",
            "parameters": [
                {"name": "start", "parameter_type": "string"},
                {"name": "depth", "parameter_type": "number"},
            ],
        },
        {
            "name": "Active people",
            "description": "",
            "query": "FOR p IN persons FILTER p.active == @active RETURN p",
            "parameters": [{"name": "active", "parameter_type": "boolean"}],
        },
    ],
}


@pytest.fixture
def settings():
    from adb_query_runner.config import Settings

    return Settings(
        ARANGODB_ENDPOINT="http://arangodb.test:8529/",
        ARANGODB_USERNAME="root",
        ARANGODB_PASSWORD="secret",
        CYTOSCAPE_BASE_URL="http://cytoscape.test:1234/v1",
    )


@pytest.fixture
def catalog():
    from adb_query_runner.queries import QueryCatalog

    return QueryCatalog.model_validate(SAMPLE_CATALOG)


@pytest.fixture
def social_documents() -> list[dict]:
    """Two people and a keyless edge between them."""
    return [
        {"_id": "persons/1", "_key": "1", "_rev": "a", "name": "Alice", "age": 30, "active": True},
        {"_id": "persons/2", "_key": "2", "_rev": "b", "name": "Bob", "age": 25, "active": False},
        {"_from": "persons/1", "_to": "persons/2", "type": "knows", "weight": 0.8, "since": "2020"},
    ]
