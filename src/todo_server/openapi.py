"""OpenAPI document generation — collects metadata from the routing table."""

from __future__ import annotations

from typing import Any

from todo_server.routing import Route, RouteGroup, RoutingTable

BEARER_SCHEME = "BearerAuth"

_PARAM_TYPES = {"IntegerConvertor": "integer", "FloatConvertor": "number"}

ERROR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "message": {"type": "string"},
        "details": {"type": "array", "items": {"type": "object"}},
    },
    "required": ["message"],
}


def build_openapi(
    table: RoutingTable, *, title: str, version: str, description: str | None = None
) -> dict[str, Any]:
    """Build an OpenAPI 3.1 document describing every registered route."""
    paths: dict[str, dict[str, Any]] = {}
    schemas: dict[str, Any] = {"Error": ERROR_SCHEMA}
    tags: list[dict[str, str]] = []
    uses_auth = False

    for group in table.groups:
        if group.tag and all(t["name"] != group.tag for t in tags):
            tags.append({"name": group.tag})
        for route in group.routes:
            operation = _operation(group, route, schemas)
            uses_auth = uses_auth or route.auth_required
            paths.setdefault(_full_path(group, route), {})[route.method.lower()] = (
                operation
            )

    info: dict[str, Any] = {"title": title, "version": version}
    if description:
        info["description"] = description

    document: dict[str, Any] = {
        "openapi": "3.1.0",
        "info": info,
        "paths": dict(sorted(paths.items())),
        "components": {"schemas": schemas},
    }
    if tags:
        document["tags"] = tags
    if uses_auth:
        document["components"]["securitySchemes"] = {
            BEARER_SCHEME: {"type": "http", "scheme": "bearer"}
        }
    return document


def _full_path(group: RouteGroup, route: Route) -> str:
    path = group.prefix + route.path_format
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/")
    return path or "/"


def _operation(
    group: RouteGroup, route: Route, schemas: dict[str, Any]
) -> dict[str, Any]:
    operation: dict[str, Any] = {
        "summary": route.summary,
        "operationId": f"{route.endpoint.__name__}_{route.method.lower()}",
    }
    if group.tag:
        operation["tags"] = [group.tag]

    parameters = [
        {
            "name": name,
            "in": "path",
            "required": True,
            "schema": {"type": _PARAM_TYPES.get(type(convertor).__name__, "string")},
        }
        for name, convertor in route.param_convertors.items()
    ]
    if parameters:
        operation["parameters"] = parameters

    if route.body is not None:
        name = route.body.__name__
        schema = route.body.model_json_schema(
            ref_template="#/components/schemas/{model}"
        )
        schemas.update(schema.pop("$defs", {}))
        schemas[name] = schema
        operation["requestBody"] = {
            "required": True,
            "content": {
                "application/json": {"schema": {"$ref": f"#/components/schemas/{name}"}}
            },
        }

    error_ref = {
        "content": {
            "application/json": {"schema": {"$ref": "#/components/schemas/Error"}}
        }
    }
    responses: dict[str, Any] = {
        str(route.status_code): {"description": "Successful Response"}
    }
    if route.body is not None:
        responses["400"] = {"description": "Validation error", **error_ref}
    if route.auth_required:
        operation["security"] = [{BEARER_SCHEME: []}]
        responses["401"] = {"description": "Authentication required", **error_ref}
    for code, description in route.responses.items():
        responses[str(code)] = {"description": description, **error_ref}
    operation["responses"] = responses
    return operation
