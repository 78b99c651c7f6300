"""
Tool Bindings

A tool's execution capability is a ToolBinding: a small object holding the
static binding data compiled from an API descriptor plus the adapter that
performs the call. Bindings never reference the registry and hold no
per-invocation state; each execute() call works only from its own params.

Pattern: Strategy (one binding class per backend kind)
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from src.adapters.binding import join_url, strip_reserved
from src.adapters.database import DatabaseAdapter
from src.adapters.http import EndpointTarget, GraphQLAdapter, HttpAdapter
from src.adapters.results import AdapterResult


class ToolBinding(ABC):
    """Execution capability of a tool."""

    kind: str = "abstract"

    @abstractmethod
    async def execute(self, params: dict[str, Any]) -> AdapterResult:
        """
        Execute the bound operation.

        Args:
            params: Validated parameter values for this invocation.

        Returns:
            AdapterResult describing the outcome.
        """

    def describe(self) -> dict[str, Any]:
        """Non-secret binding details for tool listings."""
        return {"kind": self.kind}


class RestEndpointBinding(ToolBinding):
    """Binds a tool to one REST endpoint."""

    kind = "rest"

    def __init__(self, target: EndpointTarget, adapter: HttpAdapter) -> None:
        self._target = target
        self._adapter = adapter

    @property
    def target(self) -> EndpointTarget:
        """The endpoint this binding calls."""
        return self._target

    async def execute(self, params: dict[str, Any]) -> AdapterResult:
        target = self.target
        # A caller-supplied baseUrl only fills in a missing endpoint base
        override = params.get("baseUrl")
        if not target.base_url and override:
            target = replace(target, base_url=str(override))
        return await self._adapter.execute(target, params)

    def describe(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "method": self.target.method,
            "path": self.target.path,
        }


class GraphQLBinding(ToolBinding):
    """
    Binds a tool to a GraphQL endpoint.

    The document comes from the descriptor config or, when the descriptor
    has none, from the ``query`` parameter. Remaining parameters become the
    GraphQL variables; an explicit ``variables`` object is merged in.
    """

    kind = "graphql"

    def __init__(
        self,
        url: str,
        adapter: GraphQLAdapter,
        query: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.url = url
        self.query = query
        self._headers = MappingProxyType(dict(headers or {}))
        self._adapter = adapter

    @property
    def headers(self) -> Mapping[str, str]:
        """Extra headers sent with every call (read-only)."""
        return self._headers

    async def execute(self, params: dict[str, Any]) -> AdapterResult:
        values = strip_reserved(params)
        query = self.query or values.pop("query", "")
        variables = dict(values.pop("variables", None) or {})
        variables.update(values)
        return await self._adapter.execute(self.url, query, variables, self.headers)

    def describe(self) -> dict[str, Any]:
        return {"kind": self.kind, "url": self.url}


class DatabaseBinding(ToolBinding):
    """Binds a tool to a database connection."""

    kind = "database"

    def __init__(self, connection_string: str, adapter: DatabaseAdapter) -> None:
        self._connection_string = connection_string
        self._adapter = adapter

    async def execute(self, params: dict[str, Any]) -> AdapterResult:
        values = strip_reserved(params)
        statement = str(values.get("statement", ""))
        parameters = dict(values.get("parameters") or {})
        return await self._adapter.execute(
            self._connection_string, statement, parameters
        )


def graphql_url(base_url: str, path: str | None = None) -> str:
    """Resolve the GraphQL endpoint URL from a base URL and optional path."""
    return join_url(base_url, path) if path else base_url
