"""
Request Models - Invocation Requests and HTTP Bodies

This module contains the invocation request variants handled by the
dispatcher and the Pydantic models for the HTTP request bodies.

An invocation request is a closed tagged union discriminated on ``kind``:
``tool`` (call a registered tool), ``form-submit`` (ad-hoc call described by
the submitted form's API info) and ``query`` (natural-language text plus the
tool plan chosen by the model). A new kind needs a new variant here and a
new handler in the dispatcher.

Anti-Patterns Avoided:
- Optional fields use Optional[T] with explicit None default
- Mutable defaults use default_factory
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Invocation Request Variants
# =============================================================================


class ToolInvocation(_WireModel):
    """
    Call a registered tool by name.

    Attributes:
        kind: Always "tool".
        tool_id: Registered tool name (wire name ``toolId``).
        params: Parameter values.
    """

    kind: Literal["tool"] = "tool"
    tool_id: str = Field(..., min_length=1, description="Registered tool name")
    params: dict[str, Any] = Field(default_factory=dict, description="Parameters")


class ApiInfo(_WireModel):
    """
    Ad-hoc endpoint locator carried by a form submission.

    Attributes:
        service_id: Owning service (informational).
        api_id: API descriptor ID (informational).
        method: HTTP method, upper-cased.
        path: Endpoint path or absolute URL.
        base_url: Base URL; the configured default is used when absent.
    """

    service_id: Optional[str] = None
    api_id: Optional[str] = None
    method: str = "POST"
    path: str = Field(..., min_length=1)
    base_url: Optional[str] = None

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Upper-case the HTTP method."""
        v = v.strip().upper()
        if not v:
            raise ValueError("method must not be empty")
        return v


class FormSubmitInvocation(_WireModel):
    """
    Submit form data to the endpoint described by ``api_info``.

    Attributes:
        kind: Always "form-submit".
        form_data: Submitted values, used as the parameter bag.
        api_info: Endpoint locator.
    """

    kind: Literal["form-submit"] = "form-submit"
    form_data: dict[str, Any] = Field(..., description="Submitted form values")
    api_info: ApiInfo = Field(..., description="Target endpoint")


class PlannedCall(_WireModel):
    """One tool call selected by the model for a query."""

    tool_id: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)


class QueryInvocation(_WireModel):
    """
    Forward a natural-language query to the tools the caller selected.

    Attributes:
        kind: Always "query".
        text: The user's natural-language query.
        plan: Tool calls chosen by the model-facing layer.
    """

    kind: Literal["query"] = "query"
    text: str = Field(..., description="Natural-language query")
    plan: list[PlannedCall] = Field(default_factory=list)


InvocationRequest = Annotated[
    Union[ToolInvocation, FormSubmitInvocation, QueryInvocation],
    Field(discriminator="kind"),
]

invocation_adapter: TypeAdapter[InvocationRequest] = TypeAdapter(InvocationRequest)


# =============================================================================
# HTTP Request Bodies
# =============================================================================


class ExecuteToolRequest(_WireModel):
    """Body of POST /api/mcp/execute-tool."""

    tool_id: Optional[str] = None
    params: Optional[dict[str, Any]] = None


class FormSubmitRequest(_WireModel):
    """Body of POST /api/form-submit."""

    form_data: Optional[dict[str, Any]] = None
    api_info: Optional[dict[str, Any]] = None


class ProcessRequest(_WireModel):
    """
    Body of POST /api/mcp/process.

    Either ``request`` (a raw invocation request, usually of kind query) or
    ``action="register_descriptors"`` with ``api_id``.
    """

    request: Optional[dict[str, Any]] = None
    action: Optional[str] = None
    api_id: Optional[str] = None


class ImportOpenApiRequest(_WireModel):
    """
    Body of POST /api/apis/import.

    ``document`` is the parsed OpenAPI 3 or Swagger 2 document; ``base_url``
    overrides the servers it declares.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    base_url: Optional[str] = None
    document: Optional[dict[str, Any]] = None
