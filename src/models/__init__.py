"""Models Package - Descriptors, Domain and Request/Response Models.

This package contains the Pydantic models for API descriptors, compiled
tools, invocation requests and result envelopes.
"""

from src.models.descriptors import (
    ApiConfig,
    ApiDescriptor,
    ApiType,
    EndpointConfig,
    ParameterSchema,
    ParameterType,
)
from src.models.domain import ToolDescriptor, ToolSummary
from src.models.requests import (
    ApiInfo,
    ExecuteToolRequest,
    FormSubmitInvocation,
    FormSubmitRequest,
    ImportOpenApiRequest,
    InvocationRequest,
    PlannedCall,
    ProcessRequest,
    QueryInvocation,
    ToolInvocation,
)
from src.models.responses import HealthResponse, RegistrationResult, ResultEnvelope

__all__ = [
    # Descriptors
    "ApiConfig",
    "ApiDescriptor",
    "ApiType",
    "EndpointConfig",
    "ParameterSchema",
    "ParameterType",
    # Domain
    "ToolDescriptor",
    "ToolSummary",
    # Requests
    "ApiInfo",
    "ExecuteToolRequest",
    "FormSubmitInvocation",
    "FormSubmitRequest",
    "ImportOpenApiRequest",
    "InvocationRequest",
    "PlannedCall",
    "ProcessRequest",
    "QueryInvocation",
    "ToolInvocation",
    # Responses
    "HealthResponse",
    "RegistrationResult",
    "ResultEnvelope",
]
