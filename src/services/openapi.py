"""
OpenAPI Import

Converts an OpenAPI 3 or Swagger 2 document into a REST API descriptor, so
an existing API can be registered without writing its endpoints by hand.

Every path and HTTP method pair becomes one endpoint. Path parameters are
always required; query and form parameters keep their ``required`` flag.
The properties of a JSON request body (OpenAPI 3 ``requestBody`` or the
Swagger 2 ``in: body`` parameter) become parameters of their own, required
when the body schema lists them. Local ``$ref`` pointers are resolved
against the document. Header and cookie parameters are not imported.

Pattern: Translator from an external schema to the descriptor model
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from src.core.exceptions import InvalidDescriptorError
from src.models.descriptors import ApiDescriptor

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")

_PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean", "object", "array"})

_MAX_REF_DEPTH = 32


# =============================================================================
# Reference Resolution
# =============================================================================


def resolve_ref(document: Mapping[str, Any], node: Any) -> Any:
    """
    Follow local ``$ref`` pointers until a concrete node is reached.

    Unresolvable or external references yield an empty schema.

    Example:
        >>> doc = {"components": {"schemas": {"Id": {"type": "string"}}}}
        >>> resolve_ref(doc, {"$ref": "#/components/schemas/Id"})
        {'type': 'string'}
    """
    for _ in range(_MAX_REF_DEPTH):
        if not isinstance(node, Mapping) or "$ref" not in node:
            return node
        ref = node["$ref"]
        if not isinstance(ref, str) or not ref.startswith("#/"):
            logger.warning(f"Ignoring unsupported OpenAPI reference: {ref!r}")
            return {}
        target: Any = document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, Mapping) or part not in target:
                logger.warning(f"Ignoring unresolved OpenAPI reference: {ref}")
                return {}
            target = target[part]
        node = target
    logger.warning("Ignoring OpenAPI reference chain that does not terminate")
    return {}


# =============================================================================
# Parameters
# =============================================================================


def schema_type(schema: Mapping[str, Any]) -> str:
    """Map a JSON schema to a parameter type tag, defaulting to string."""
    declared = schema.get("type")
    if isinstance(declared, list):
        # OpenAPI 3.1 allows ["string", "null"]
        declared = next((t for t in declared if t != "null"), None)
    if isinstance(declared, str) and declared.lower() in _PRIMITIVE_TYPES:
        return declared.lower()
    if "properties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "string"


def _text(*candidates: Any) -> Optional[str]:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def _merged_parameters(
    document: Mapping[str, Any], path_item: Mapping[str, Any], operation: Mapping[str, Any]
) -> list[Mapping[str, Any]]:
    # Operation parameters override path-level ones with the same name and location
    merged: dict[tuple[str, str], Mapping[str, Any]] = {}
    for raw in list(path_item.get("parameters") or []) + list(operation.get("parameters") or []):
        param = resolve_ref(document, raw)
        if not isinstance(param, Mapping) or not isinstance(param.get("name"), str):
            continue
        merged[(param["name"], str(param.get("in", "query")))] = param
    return list(merged.values())


def _body_parameters(
    document: Mapping[str, Any], schema: Any
) -> dict[str, dict[str, Any]]:
    schema = resolve_ref(document, schema)
    if not isinstance(schema, Mapping):
        return {}
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        logger.debug("Skipping request body without object properties")
        return {}

    required = set(schema.get("required") or [])
    params: dict[str, dict[str, Any]] = {}
    for name, prop in properties.items():
        prop = resolve_ref(document, prop)
        if not isinstance(prop, Mapping):
            prop = {}
        params[name] = {
            "type": schema_type(prop),
            "description": _text(prop.get("description"), prop.get("title")),
            "required": name in required,
        }
    return params


def _request_body_schema(document: Mapping[str, Any], operation: Mapping[str, Any]) -> Any:
    body = resolve_ref(document, operation.get("requestBody"))
    if not isinstance(body, Mapping):
        return None
    content = body.get("content")
    if not isinstance(content, Mapping) or not content:
        return None
    media = content.get("application/json") or next(iter(content.values()))
    return media.get("schema") if isinstance(media, Mapping) else None


def operation_parameters(
    document: Mapping[str, Any],
    path_item: Mapping[str, Any],
    operation: Mapping[str, Any],
) -> dict[str, dict[str, Any]]:
    """
    Collect the parameter schemas of one operation.

    Path parameters are always required. A body property
    never replaces a path or query parameter of the same name.
    """
    params: dict[str, dict[str, Any]] = {}
    body: dict[str, dict[str, Any]] = {}

    for param in _merged_parameters(document, path_item, operation):
        location = param.get("in", "query")
        name = param["name"]
        if location == "body":
            body.update(_body_parameters(document, param.get("schema")))
            continue
        if location not in ("path", "query", "formData"):
            logger.debug(f"Skipping {location} parameter {name}")
            continue
        schema = resolve_ref(document, param.get("schema"))
        if not isinstance(schema, Mapping):
            # Swagger 2 declares the type on the parameter itself
            schema = param
        params[name] = {
            "type": schema_type(schema),
            "description": _text(param.get("description"), schema.get("description")),
            "required": location == "path" or param.get("required") is True,
        }

    body.update(_body_parameters(document, _request_body_schema(document, operation)))
    for name, schema in body.items():
        params.setdefault(name, schema)
    return params


# =============================================================================
# Base URL
# =============================================================================


def _server_url(document: Mapping[str, Any]) -> Optional[str]:
    servers = document.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], Mapping):
        url = servers[0].get("url")
        if isinstance(url, str) and url.strip():
            url = url.strip()
            variables = servers[0].get("variables")
            for key, variable in (variables.items() if isinstance(variables, Mapping) else ()):
                if isinstance(variable, Mapping) and "default" in variable:
                    url = url.replace(f"{{{key}}}", str(variable["default"]))
            return url

    host = document.get("host")
    base_path = document.get("basePath") if isinstance(document.get("basePath"), str) else ""
    if isinstance(host, str) and host:
        schemes = document.get("schemes")
        scheme = schemes[0] if isinstance(schemes, list) and schemes else "https"
        return f"{scheme}://{host}{base_path}"
    return base_path or None


def split_base_url(
    document: Mapping[str, Any], base_url: Optional[str] = None
) -> tuple[Optional[str], str]:
    """
    Determine the base URL and path prefix of the imported endpoints.

    An explicit base URL wins over the document's servers (OpenAPI 3) or
    host and basePath (Swagger 2). A relative server URL such as ``/v1``
    cannot serve as a base URL; it becomes a prefix of every endpoint path
    and the gateway's default base URL applies.

    Returns:
        (base_url or None, path prefix without trailing slash)
    """
    if base_url:
        return base_url, ""
    url = _server_url(document)
    if url is None:
        return None, ""
    if "://" in url:
        return url, ""
    return None, url.rstrip("/")


# =============================================================================
# Conversion
# =============================================================================


def descriptor_from_openapi(
    document: Mapping[str, Any],
    api_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ApiDescriptor:
    """
    Convert an OpenAPI 3 or Swagger 2 document into a REST API descriptor.

    Args:
        document: Parsed OpenAPI document.
        api_id: ID of the resulting descriptor.
        name: Display name (default: ``info.title``, then the ID).
        description: Description (default: ``info.description``).
        base_url: Base URL overriding the document's servers.

    Returns:
        An ApiDescriptor of type rest with one endpoint per operation.

    Raises:
        InvalidDescriptorError: If the document has no paths object or
            defines no operations.
    """
    if not isinstance(document, Mapping) or not isinstance(document.get("paths"), Mapping):
        raise InvalidDescriptorError(
            "OpenAPI document has no paths object", api_id=api_id, field="paths"
        )

    root, prefix = split_base_url(document, base_url)
    endpoints: list[dict[str, Any]] = []
    for path, path_item in document["paths"].items():
        path_item = resolve_ref(document, path_item)
        if not isinstance(path_item, Mapping):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, Mapping):
                continue
            summary = _text(operation.get("summary"))
            endpoints.append(
                {
                    "path": f"{prefix}{path}",
                    "method": method.upper(),
                    "title": summary or _text(operation.get("operationId")),
                    "description": _text(operation.get("description"), summary),
                    "parameters": operation_parameters(document, path_item, operation),
                }
            )

    if not endpoints:
        raise InvalidDescriptorError(
            "OpenAPI document defines no operations", api_id=api_id, field="paths"
        )

    info = document.get("info") if isinstance(document.get("info"), Mapping) else {}
    logger.info(f"Converted OpenAPI document into {len(endpoints)} endpoints for {api_id}")
    return ApiDescriptor.parse(
        {
            "id": api_id,
            "name": name or _text(info.get("title")) or api_id,
            "description": description or _text(info.get("description")) or "",
            "type": "rest",
            "config": {"base_url": root, "endpoints": endpoints},
        }
    )
