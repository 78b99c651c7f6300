"""
Adapters Package - Upstream Execution

Binding logic that maps tool parameters onto concrete requests, and the
adapters that perform HTTP, GraphQL and database calls and report their
outcome as explicit result values.
"""

from src.adapters.binding import BoundRequest, bind_request, join_url
from src.adapters.database import DatabaseAdapter, DatabaseClient
from src.adapters.http import (
    EndpointTarget,
    GraphQLAdapter,
    HttpAdapter,
    create_http_client,
)
from src.adapters.results import AdapterFailure, AdapterResult, AdapterSuccess
from src.adapters.tool_bindings import (
    DatabaseBinding,
    GraphQLBinding,
    RestEndpointBinding,
    ToolBinding,
)

__all__ = [
    "AdapterFailure",
    "AdapterResult",
    "AdapterSuccess",
    "BoundRequest",
    "DatabaseAdapter",
    "DatabaseBinding",
    "DatabaseClient",
    "EndpointTarget",
    "GraphQLAdapter",
    "GraphQLBinding",
    "HttpAdapter",
    "RestEndpointBinding",
    "ToolBinding",
    "bind_request",
    "create_http_client",
    "join_url",
]
