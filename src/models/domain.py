"""
Domain Models - Tool Descriptors

This module contains the domain model held by the tool registry: a tool's
name, description, parameter contract and execution binding.

Pattern: Value object (frozen Pydantic model). The parameter map is frozen
too, so the instances the registry hands out are read-only views that no
caller can use to rewrite a tool's contract.

Note: These models are distinct from the request/response models in
requests.py and responses.py, which describe the HTTP boundary.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.adapters.results import AdapterResult
from src.adapters.tool_bindings import ToolBinding
from src.models.descriptors import ParameterSchema


# =============================================================================
# ToolDescriptor Model
# =============================================================================


class ToolDescriptor(BaseModel):
    """
    A named, schema-described callable operation.

    Attributes:
        name: Unique tool identifier within a registry.
        description: Human-readable description of what the tool does.
        parameters: Parameter schemas keyed by parameter name.
        binding: Execution capability (REST, GraphQL or database binding).
        source_id: ID of the API descriptor the tool was compiled from.

    Example:
        >>> tool = ToolDescriptor(
        ...     name="shop_get__items__id_",
        ...     description="Get an item (GET /items/{id})",
        ...     parameters={"id": ParameterSchema(type="string", required=True)},
        ...     binding=binding,
        ...     source_id="shop",
        ... )
    """

    name: str = Field(..., min_length=1, description="Unique tool identifier")
    description: str = Field(default="", description="Human-readable description")
    parameters: Mapping[str, ParameterSchema] = Field(
        default_factory=dict, description="Parameter schemas"
    )
    binding: ToolBinding = Field(..., description="Execution capability")
    source_id: Optional[str] = Field(
        default=None, description="ID of the originating API descriptor"
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("parameters", mode="after")
    @classmethod
    def freeze_parameters(
        cls, v: Mapping[str, ParameterSchema]
    ) -> Mapping[str, ParameterSchema]:
        """Store a read-only copy of the parameter map."""
        return MappingProxyType(dict(v))

    @property
    def required_parameters(self) -> list[str]:
        """Names of the parameters marked required, in declaration order."""
        return [name for name, schema in self.parameters.items() if schema.required]

    async def execute(self, params: dict[str, Any]) -> AdapterResult:
        """Run the tool's binding with the given parameter values."""
        return await self.binding.execute(params)

    def to_json_schema(self) -> dict[str, Any]:
        """
        Render the parameter contract as a JSON Schema object.

        Returns:
            ``{"type": "object", "properties": {...}, "required": [...]}``
            suitable for LLM tool definitions.
        """
        return {
            "type": "object",
            "properties": {
                name: schema.to_json_schema()
                for name, schema in self.parameters.items()
            },
            "required": self.required_parameters,
        }

    def summary(self) -> "ToolSummary":
        """Build the JSON-serializable listing entry for this tool."""
        return ToolSummary(
            name=self.name,
            description=self.description,
            parameters=self.to_json_schema(),
            source=self.source_id,
            binding=self.binding.describe(),
        )


# =============================================================================
# ToolSummary Model
# =============================================================================


class ToolSummary(BaseModel):
    """
    Listing entry for UIs and the model-facing layer.

    Attributes:
        name: Tool name.
        description: Tool description.
        parameters: JSON Schema of the parameters.
        source: Originating API descriptor ID.
        binding: Non-secret binding details (kind, method, path).
    """

    name: str
    description: str
    parameters: dict[str, Any]
    source: Optional[str] = None
    binding: dict[str, Any] = Field(default_factory=dict)
