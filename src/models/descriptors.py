"""
API Descriptor Models

This module contains the Pydantic models for the declarative API
descriptions that administrators configure, and the parameter schema
shared with compiled tools.

Descriptors arrive from the configuration store as camelCase JSON
(``baseUrl``, ``connectionString``, ``createdAt``); the models accept both
the wire names and the Python attribute names.

Structural problems (wrong types, unknown API type) are reported as
InvalidDescriptorError by ApiDescriptor.parse(). Type-specific requirements
(REST needs endpoints, database needs a connection string) are enforced by
the compiler, which owns the contract for what can become a tool.

Pattern: Value objects validated at the ingestion boundary
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidDescriptorError


# =============================================================================
# Parameter Schema
# =============================================================================


class ParameterType(str, Enum):
    """Closed set of primitive parameter type tags."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class ParameterSchema(BaseModel):
    """
    Describes one tool parameter.

    Attributes:
        type: Primitive type tag.
        description: Optional human-readable description.
        required: Whether the parameter must be supplied (default False).

    Example:
        >>> ParameterSchema(type="string", description="Item ID", required=True)
    """

    type: ParameterType = Field(..., description="Primitive type tag")
    description: Optional[str] = Field(default=None, description="Parameter description")
    required: bool = Field(default=False, description="Whether the parameter is required")

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept integer as a number and tolerate case differences."""
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "integer":
                return ParameterType.NUMBER
        return v

    def to_json_schema(self) -> dict[str, Any]:
        """Render this parameter as a JSON Schema property."""
        prop: dict[str, Any] = {"type": self.type.value}
        if self.description:
            prop["description"] = self.description
        return prop


# =============================================================================
# API Descriptor
# =============================================================================


class ApiType(str, Enum):
    """Kinds of backends an API descriptor can describe."""

    REST = "rest"
    GRAPHQL = "graphql"
    DATABASE = "database"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class EndpointConfig(_CamelModel):
    """
    One REST endpoint of an API descriptor.

    Attributes:
        path: URL path, may contain ``{name}`` or ``:name`` placeholders.
        method: HTTP method, upper-cased on ingestion.
        parameters: Parameter schemas keyed by parameter name.
        title: Optional short title.
        description: Optional description used for the compiled tool.
    """

    path: str = Field(default="", description="Endpoint path")
    method: str = Field(default="", description="HTTP method")
    parameters: dict[str, ParameterSchema] = Field(
        default_factory=dict, description="Parameter schemas"
    )
    title: Optional[str] = Field(default=None, description="Endpoint title")
    description: Optional[str] = Field(default=None, description="Endpoint description")

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        """Upper-case and strip the HTTP method."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("path", mode="before")
    @classmethod
    def strip_path(cls, v: Any) -> Any:
        """Strip surrounding whitespace from the path."""
        if isinstance(v, str):
            return v.strip()
        return v


class ApiConfig(_CamelModel):
    """
    Backend configuration of an API descriptor.

    Attributes:
        base_url: Base URL for REST and GraphQL backends.
        endpoints: REST endpoints (required and non-empty for REST).
        connection_string: Database connection string (required for database).
        headers: Extra headers sent with every upstream request.
        query: GraphQL document executed by a GraphQL tool.
    """

    base_url: Optional[str] = Field(default=None, description="Backend base URL")
    endpoints: Optional[list[EndpointConfig]] = Field(
        default=None, description="REST endpoints"
    )
    connection_string: Optional[str] = Field(
        default=None, description="Database connection string"
    )
    headers: dict[str, str] = Field(default_factory=dict, description="Extra headers")
    query: Optional[str] = Field(default=None, description="GraphQL document")


class ApiDescriptor(_CamelModel):
    """
    Stored configuration describing a REST, GraphQL or database backend.

    Attributes:
        id: Descriptor identifier; also the source id of its compiled tools.
        name: Display name.
        description: What the API does.
        type: Backend kind.
        config: Backend configuration.
        enabled: Disabled descriptors compile to no registered tools.
        created_at: Creation timestamp from the configuration store.
        updated_at: Last update timestamp from the configuration store.
    """

    id: str = Field(..., min_length=1, description="Descriptor identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Descriptor description")
    type: ApiType = Field(..., description="Backend kind")
    config: ApiConfig = Field(default_factory=ApiConfig, description="Backend config")
    enabled: bool = Field(default=True, description="Whether tools are registered")
    created_at: Optional[datetime] = Field(default=None, description="Created at")
    updated_at: Optional[datetime] = Field(default=None, description="Updated at")

    @classmethod
    def parse(cls, payload: dict[str, Any]) -> "ApiDescriptor":
        """
        Validate a raw descriptor payload.

        Args:
            payload: Descriptor JSON as loaded from the configuration store.

        Returns:
            The validated ApiDescriptor.

        Raises:
            InvalidDescriptorError: If the payload does not match the schema.
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            api_id = payload.get("id") if isinstance(payload, dict) else None
            first = e.errors()[0] if e.errors() else {}
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidDescriptorError(
                f"Invalid API descriptor: {location or 'payload'}: "
                f"{first.get('msg', 'validation failed')}",
                api_id=api_id,
                field=location or None,
            ) from e
