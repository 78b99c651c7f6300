"""
API Descriptor Compiler

Turns a declarative API descriptor into tool descriptors:

- rest: one tool per endpoint, named ``<api id>_<method>_<path>`` with every
  non-alphanumeric character replaced by ``_``. The endpoint's parameter map
  becomes the tool's parameter contract verbatim.
- graphql: one ``<api id>_graphql`` tool posting to the descriptor's endpoint.
- database: one ``<api id>_query`` tool running statements through the
  database adapter.

Compilation is pure: the produced bindings capture only static data from
the descriptor and a reference to the adapter, so compiling the same
descriptor twice yields tools with identical names and schemas.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from src.adapters.database import DatabaseAdapter
from src.adapters.http import EndpointTarget, GraphQLAdapter, HttpAdapter
from src.adapters.tool_bindings import (
    DatabaseBinding,
    GraphQLBinding,
    RestEndpointBinding,
    graphql_url,
)
from src.core.exceptions import InvalidDescriptorError
from src.models.descriptors import (
    ApiDescriptor,
    ApiType,
    EndpointConfig,
    ParameterSchema,
    ParameterType,
)
from src.models.domain import ToolDescriptor

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class CompilerAdapters:
    """
    Adapters captured by compiled bindings.

    Attributes:
        http: Adapter for REST endpoints.
        graphql: Adapter for GraphQL endpoints.
        database: Adapter for database connections.
        default_base_url: Base URL for REST descriptors that declare none.
    """

    http: HttpAdapter
    graphql: GraphQLAdapter
    database: DatabaseAdapter
    default_base_url: Optional[str] = None


def derive_tool_name(api_id: str, method: str, path: str) -> str:
    """
    Derive the stable tool name of a REST endpoint.

    Example:
        >>> derive_tool_name("shop", "GET", "/items/{id}")
        'shop_get__items__id_'
    """
    return _NON_ALNUM.sub("_", f"{api_id}_{method}_{path}").lower()


def compile_descriptor(
    descriptor: ApiDescriptor, adapters: CompilerAdapters
) -> list[ToolDescriptor]:
    """
    Compile an API descriptor into tool descriptors.

    Args:
        descriptor: Validated API descriptor.
        adapters: Adapters the compiled bindings will call.

    Returns:
        Tool descriptors attributed to ``descriptor.id``.

    Raises:
        InvalidDescriptorError: If required config for the declared type is
            missing, an endpoint has an empty path or method, or two
            endpoints compile to the same tool name.
    """
    if descriptor.type is ApiType.REST:
        tools = _compile_rest(descriptor, adapters)
    elif descriptor.type is ApiType.GRAPHQL:
        tools = [_compile_graphql(descriptor, adapters)]
    else:
        tools = [_compile_database(descriptor, adapters)]

    logger.debug(f"Compiled descriptor {descriptor.id} into {len(tools)} tools")
    return tools


def _compile_rest(
    descriptor: ApiDescriptor, adapters: CompilerAdapters
) -> list[ToolDescriptor]:
    endpoints = descriptor.config.endpoints
    if not endpoints:
        raise InvalidDescriptorError(
            f"REST descriptor {descriptor.id} has no endpoints",
            api_id=descriptor.id,
            field="config.endpoints",
        )

    base_url = descriptor.config.base_url or adapters.default_base_url
    tools: list[ToolDescriptor] = []
    seen: set[str] = set()
    for index, endpoint in enumerate(endpoints):
        _check_endpoint(descriptor.id, index, endpoint)
        name = derive_tool_name(descriptor.id, endpoint.method, endpoint.path)
        if name in seen:
            raise InvalidDescriptorError(
                f"Endpoints of {descriptor.id} compile to duplicate tool name {name}",
                api_id=descriptor.id,
                field=f"config.endpoints.{index}",
            )
        seen.add(name)

        target = EndpointTarget(
            base_url=base_url,
            path=endpoint.path,
            method=endpoint.method,
            headers=dict(descriptor.config.headers),
        )
        summary = endpoint.description or endpoint.title or descriptor.description
        tools.append(
            ToolDescriptor(
                name=name,
                description=f"{summary} ({endpoint.method} {endpoint.path})".strip(),
                parameters=dict(endpoint.parameters),
                binding=RestEndpointBinding(target, adapters.http),
                source_id=descriptor.id,
            )
        )
    return tools


def _check_endpoint(api_id: str, index: int, endpoint: EndpointConfig) -> None:
    if not endpoint.path:
        raise InvalidDescriptorError(
            f"Endpoint {index} of {api_id} has an empty path",
            api_id=api_id,
            field=f"config.endpoints.{index}.path",
        )
    if not endpoint.method:
        raise InvalidDescriptorError(
            f"Endpoint {index} of {api_id} has an empty method",
            api_id=api_id,
            field=f"config.endpoints.{index}.method",
        )


def _compile_graphql(
    descriptor: ApiDescriptor, adapters: CompilerAdapters
) -> ToolDescriptor:
    config = descriptor.config
    if not config.base_url:
        raise InvalidDescriptorError(
            f"GraphQL descriptor {descriptor.id} has no baseUrl",
            api_id=descriptor.id,
            field="config.baseUrl",
        )

    endpoint = config.endpoints[0] if config.endpoints else None
    if endpoint is not None and endpoint.parameters:
        parameters = dict(endpoint.parameters)
    else:
        parameters = {
            "variables": ParameterSchema(
                type=ParameterType.OBJECT, description="GraphQL variables"
            ),
        }
    if not config.query:
        parameters.setdefault(
            "query",
            ParameterSchema(
                type=ParameterType.STRING, description="GraphQL document", required=True
            ),
        )

    binding = GraphQLBinding(
        url=graphql_url(config.base_url, endpoint.path if endpoint else None),
        adapter=adapters.graphql,
        query=config.query,
        headers=config.headers,
    )
    return ToolDescriptor(
        name=f"{descriptor.id}_graphql".lower(),
        description=descriptor.description or f"{descriptor.name} GraphQL API",
        parameters=parameters,
        binding=binding,
        source_id=descriptor.id,
    )


def _compile_database(
    descriptor: ApiDescriptor, adapters: CompilerAdapters
) -> ToolDescriptor:
    connection_string = descriptor.config.connection_string
    if not connection_string:
        raise InvalidDescriptorError(
            f"Database descriptor {descriptor.id} has no connectionString",
            api_id=descriptor.id,
            field="config.connectionString",
        )

    return ToolDescriptor(
        name=f"{descriptor.id}_query".lower(),
        description=descriptor.description or f"{descriptor.name} database",
        parameters={
            "statement": ParameterSchema(
                type=ParameterType.STRING,
                description="Statement to execute",
                required=True,
            ),
            "parameters": ParameterSchema(
                type=ParameterType.OBJECT, description="Statement parameters"
            ),
        },
        binding=DatabaseBinding(connection_string, adapters.database),
        source_id=descriptor.id,
    )
