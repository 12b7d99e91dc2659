"""Exception hierarchy for the query runner.

Every error can be rendered as a structured value with ``to_dict()`` so that
callers (the API, the CLI) never have to expose a raw transport exception.
"""

from __future__ import annotations

from typing import Any

_UNSET: Any = object()


class QueryRunnerError(Exception):
    """Base exception for all query runner errors."""

    def __init__(self, message: str, *, value: Any = _UNSET) -> None:
        super().__init__(message)
        self.message = message
        self.value = value

    @property
    def kind(self) -> str:
        return type(self).__name__

    def extra(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind, "error": self.message}
        if self.value is not _UNSET:
            data["value"] = self.value
        data.update(self.extra())
        return data


# ── External services (ArangoDB, CyREST) ────────────────────────────


class ServiceError(QueryRunnerError):
    """Base for failures talking to an external HTTP service."""

    def __init__(self, message: str, *, endpoint: str, value: Any = _UNSET) -> None:
        super().__init__(message, value=value)
        self.endpoint = endpoint

    def extra(self) -> dict[str, Any]:
        return {"endpoint": self.endpoint}


class TransportError(ServiceError):
    """Network or connection failure before a response was received."""


class HttpStatusError(ServiceError):
    """The service answered with a non-2xx status."""

    def __init__(
        self, message: str, *, status_code: int, endpoint: str, value: Any = _UNSET
    ) -> None:
        super().__init__(message, endpoint=endpoint, value=value)
        self.status_code = status_code

    def extra(self) -> dict[str, Any]:
        return {"endpoint": self.endpoint, "status_code": self.status_code}


class MalformedResponse(ServiceError):
    """An expected field is missing from a response or has the wrong type."""


# ── Graph classification ────────────────────────────────────────────


class ClassificationError(QueryRunnerError):
    """The result set does not form a graph."""


class InvalidElement(ClassificationError):
    """A single element disqualified the result set."""

    def __init__(self, reason: str, value: Any) -> None:
        super().__init__(reason, value=value)
        self.reason = reason


class NoEdgesFound(ClassificationError):
    """The result set contains no edges."""

    def __init__(self, message: str = "Array contains no valid edges") -> None:
        super().__init__(message)


# ── Cytoscape export ────────────────────────────────────────────────


class ExportError(QueryRunnerError):
    """Base for failures while exporting a graph to Cytoscape."""


class MissingEdgeKey(ExportError):
    """An edge has no ``_key`` and was left out of the export."""

    def __init__(self, value: Any) -> None:
        super().__init__("Edge has no _key and was not exported", value=value)


class PartialExportFailure(ExportError):
    """The network was created but some later steps failed."""

    def __init__(self, network_suid: int, failures: list[dict[str, Any]]) -> None:
        super().__init__(
            f"{len(failures)} export step(s) failed for network {network_suid}"
        )
        self.network_suid = network_suid
        self.failures = failures

    def extra(self) -> dict[str, Any]:
        return {"network_suid": self.network_suid, "failures": self.failures}


# ── Query catalog ───────────────────────────────────────────────────


class ConfigurationError(QueryRunnerError):
    """Named query lookup or parameter handling failure."""


class QueryNotFound(ConfigurationError):
    def __init__(self, index: int) -> None:
        super().__init__(f"No query configured at index {index}", value=index)
        self.index = index


class InvalidBindVariable(ConfigurationError):
    """A submitted parameter cannot be converted to its declared type."""

    def __init__(self, name: str, value: str, parameter_type: str) -> None:
        super().__init__(
            f"Parameter '{name}' is not a valid {parameter_type}", value=value
        )
        self.name = name
        self.parameter_type = parameter_type

    def extra(self) -> dict[str, Any]:
        return {"parameter": self.name, "parameter_type": self.parameter_type}
