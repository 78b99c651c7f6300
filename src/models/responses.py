"""
Response Models - Result Envelope

This module contains the uniform result envelope returned by the dispatcher
and the response models of the administrative endpoints.

Invariants of ResultEnvelope:
- success=False implies error is present
- visualization_complete=True means data already holds rendered content
  that downstream layers must not regenerate
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ResultEnvelope
# =============================================================================


class ResultEnvelope(BaseModel):
    """
    Uniform outcome of an invocation request.

    Attributes:
        success: Whether the invocation succeeded.
        data: Result payload, passed through verbatim.
        error: Technical cause of a failure (for logs).
        message: Short human-readable summary (for display).
        visualization_complete: Set when data is already rendered.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    visualization_complete: Optional[bool] = Field(
        default=None, alias="visualizationComplete"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="after")
    def check_error_present(self) -> "ResultEnvelope":
        """A failed envelope must say why."""
        if not self.success and not self.error:
            raise ValueError("error is required when success is False")
        return self

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ResultEnvelope":
        """Build a success envelope."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, message: Optional[str] = None) -> "ResultEnvelope":
        """Build a failure envelope."""
        return cls(success=False, error=error, message=message)

    def to_payload(self) -> dict[str, Any]:
        """
        Plain JSON-serializable dict with wire field names.

        Unset optional fields are omitted; ``data`` is placed as-is.
        """
        payload: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        if self.error is not None:
            payload["error"] = self.error
        if self.message is not None:
            payload["message"] = self.message
        if self.visualization_complete is not None:
            payload["visualizationComplete"] = self.visualization_complete
        return payload


# =============================================================================
# Administrative Responses
# =============================================================================


class RegistrationResult(BaseModel):
    """
    Outcome of registering (or recompiling) an API descriptor.

    Attributes:
        api_id: Descriptor ID.
        tool_count: Number of tools now registered for the descriptor.
        tools: Names of those tools.
    """

    api_id: str
    tool_count: int
    tools: list[str] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    tool_count: int = Field(alias="toolCount")

    model_config = ConfigDict(populate_by_name=True)
