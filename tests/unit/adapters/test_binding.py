"""
Tests for request binding.

Binding maps parameter values onto path placeholders, the query string and
the JSON body.
"""

import pytest


class TestBindRequest:
    """Tests for bind_request()."""

    def test_path_placeholder_and_query(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request("GET", "/items/{id}", {"id": "42", "limit": "10"})

        assert bound.method == "GET"
        assert bound.path == "/items/42"
        assert bound.query == {"limit": "10"}
        assert "id" not in bound.query
        assert bound.body is None

    def test_colon_placeholder(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request("GET", "/users/:userId/orders", {"userId": 7})

        assert bound.path == "/users/7/orders"
        assert bound.query == {}

    def test_colon_placeholder_at_end_of_path(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request("DELETE", "/users/:userId", {"userId": "u1"})

        assert bound.path == "/users/u1"

    @pytest.mark.parametrize(
        "path", ["/v1/items:batchGet", "/v1/{name}:cancel", "/time/12:30"]
    )
    def test_literal_colons_are_not_placeholders(self, path: str) -> None:
        from src.adapters.binding import bind_request, path_placeholders

        bound = bind_request("POST", path, {"name": "op1", "ids": ["a"]})

        assert bound.path == path.replace("{name}", "op1")
        assert bound.body == (
            {"ids": ["a"]} if "{name}" in path else {"name": "op1", "ids": ["a"]}
        )
        assert path_placeholders("/v1/items:batchGet") == []

    def test_multiple_placeholders(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request(
            "GET", "/stores/{store}/items/{item}", {"store": "s1", "item": "i2"}
        )

        assert bound.path == "/stores/s1/items/i2"

    def test_placeholder_values_are_url_quoted(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request("GET", "/files/{name}", {"name": "a b/c"})

        assert bound.path == "/files/a%20b%2Fc"

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_mutating_methods_use_json_body(self, method: str) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request(method, "/items/{id}", {"id": "1", "name": "Widget"})

        assert bound.path == "/items/1"
        assert bound.body == {"name": "Widget"}
        assert bound.query == {}

    @pytest.mark.parametrize("method", ["get", "DELETE", "HEAD", "OPTIONS"])
    def test_read_like_methods_use_query(self, method: str) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request(method, "/items", {"page": 2})

        assert bound.method == method.upper()
        assert bound.query == {"page": 2}
        assert bound.body is None

    def test_none_values_dropped_from_query(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request("GET", "/items", {"page": None, "q": "x"})

        assert bound.query == {"q": "x"}

    def test_booleans_formatted_in_query(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request("GET", "/items", {"active": True, "archived": False})

        assert bound.query == {"active": "true", "archived": "false"}

    def test_reserved_parameters_stripped(self) -> None:
        from src.adapters.binding import bind_request

        bound = bind_request(
            "POST",
            "/items",
            {"name": "Widget", "userQuery": "add a widget", "baseUrl": "http://x"},
        )

        assert bound.body == {"name": "Widget"}

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_placeholder_value_raises(self, value) -> None:
        from src.adapters.binding import bind_request
        from src.core.exceptions import MissingParameterError

        params = {} if value is None else {"id": value}

        with pytest.raises(MissingParameterError) as exc_info:
            bind_request("GET", "/items/{id}", params)

        assert exc_info.value.parameter == "id"

    def test_binding_is_deterministic(self) -> None:
        from src.adapters.binding import bind_request

        params = {"id": "42", "limit": "10"}

        assert bind_request("GET", "/items/{id}", params) == bind_request(
            "GET", "/items/{id}", params
        )

    def test_input_params_not_mutated(self) -> None:
        from src.adapters.binding import bind_request

        params = {"id": "42", "userQuery": "q"}

        bind_request("GET", "/items/{id}", params)

        assert params == {"id": "42", "userQuery": "q"}


class TestHelpers:
    """Tests for path helpers."""

    def test_path_placeholders(self) -> None:
        from src.adapters.binding import path_placeholders

        assert path_placeholders("/a/{x}/b/:y") == ["x", "y"]

    @pytest.mark.parametrize(
        "base_url,path,expected",
        [
            ("https://api.example.com", "/items", "https://api.example.com/items"),
            ("https://api.example.com/", "items", "https://api.example.com/items"),
            ("https://api.example.com/v1/", "/items", "https://api.example.com/v1/items"),
            (None, "/items", "/items"),
            ("https://api.example.com", "https://other.example.com/x", "https://other.example.com/x"),
        ],
    )
    def test_join_url(self, base_url, path, expected) -> None:
        from src.adapters.binding import join_url

        assert join_url(base_url, path) == expected
