"""
Tests for invocation request models.

Invocation requests form a closed union discriminated on ``kind``.
"""

import pytest
from pydantic import ValidationError


class TestInvocationUnion:
    """Tests for parsing raw requests through the tagged union."""

    def test_tool_kind(self) -> None:
        from src.models.requests import ToolInvocation, invocation_adapter

        request = invocation_adapter.validate_python(
            {"kind": "tool", "toolId": "shop_get__items", "params": {"limit": 10}}
        )

        assert isinstance(request, ToolInvocation)
        assert request.tool_id == "shop_get__items"
        assert request.params == {"limit": 10}

    def test_form_submit_kind(self) -> None:
        from src.models.requests import FormSubmitInvocation, invocation_adapter

        request = invocation_adapter.validate_python(
            {
                "kind": "form-submit",
                "formData": {"name": "Widget"},
                "apiInfo": {"method": "post", "path": "/items"},
            }
        )

        assert isinstance(request, FormSubmitInvocation)
        assert request.api_info.method == "POST"
        assert request.api_info.base_url is None

    def test_query_kind(self) -> None:
        from src.models.requests import QueryInvocation, invocation_adapter

        request = invocation_adapter.validate_python(
            {
                "kind": "query",
                "text": "show item 42",
                "plan": [{"toolId": "shop_get__items__id_", "params": {"id": "42"}}],
            }
        )

        assert isinstance(request, QueryInvocation)
        assert request.plan[0].tool_id == "shop_get__items__id_"

    def test_query_plan_defaults_to_empty(self) -> None:
        from src.models.requests import invocation_adapter

        request = invocation_adapter.validate_python({"kind": "query", "text": "hi"})

        assert request.plan == []

    def test_unknown_kind_rejected(self) -> None:
        from src.models.requests import invocation_adapter

        with pytest.raises(ValidationError):
            invocation_adapter.validate_python({"kind": "stream", "toolId": "x"})

    def test_missing_kind_rejected(self) -> None:
        from src.models.requests import invocation_adapter

        with pytest.raises(ValidationError):
            invocation_adapter.validate_python({"toolId": "x"})

    def test_empty_tool_id_rejected(self) -> None:
        from src.models.requests import invocation_adapter

        with pytest.raises(ValidationError):
            invocation_adapter.validate_python({"kind": "tool", "toolId": ""})


class TestApiInfo:
    """Tests for ApiInfo."""

    def test_method_defaults_to_post(self) -> None:
        from src.models.requests import ApiInfo

        assert ApiInfo(path="/forms").method == "POST"

    def test_blank_method_rejected(self) -> None:
        from src.models.requests import ApiInfo

        with pytest.raises(ValidationError):
            ApiInfo(path="/forms", method="  ")

    def test_path_required(self) -> None:
        from src.models.requests import ApiInfo

        with pytest.raises(ValidationError):
            ApiInfo(method="POST")


class TestHttpBodies:
    """Tests for the HTTP request body models."""

    def test_execute_tool_request_fields_optional(self) -> None:
        from src.models.requests import ExecuteToolRequest

        body = ExecuteToolRequest.model_validate({})

        assert body.tool_id is None
        assert body.params is None

    def test_process_request_camel_case(self) -> None:
        from src.models.requests import ProcessRequest

        body = ProcessRequest.model_validate(
            {"action": "register_descriptors", "apiId": "shop"}
        )

        assert body.api_id == "shop"
        assert body.request is None
