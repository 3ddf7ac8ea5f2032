"""OpenAPI document describing the routes synthesized from the catalog."""

from __future__ import annotations

import re
from typing import Any

import inflect

from contract_proxy.models import FieldDescriptor, TypeCatalog

_inflector = inflect.engine()

_ERROR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"error": {"type": "string"}, "message": {"type": "string"}},
}


def field_schema(field: FieldDescriptor, catalog: TypeCatalog) -> dict[str, Any]:
    if field.type_ref and catalog.lookup(field.type_ref) is not None:
        schema: dict[str, Any] = {"$ref": f"#/components/schemas/{field.type_ref}"}
    else:
        schema = {"type": field.kind}
        if field.format:
            schema["format"] = field.format
        if field.enum:
            schema["enum"] = list(field.enum)
    if field.is_array:
        return {"type": "array", "items": schema}
    return schema


def to_kebab_case(type_name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", type_name).lower()


def type_to_path(type_name: str) -> str:
    """``"UserProfile"`` -> ``"/user-profiles"``."""
    kebab = to_kebab_case(type_name)
    head, _, tail = kebab.rpartition("-")
    plural = _inflector.plural_noun(tail)
    return f"/{head}-{plural}" if head else f"/{plural}"


def _json_response(description: str, schema: dict[str, Any]) -> dict[str, Any]:
    return {"description": description, "content": {"application/json": {"schema": schema}}}


def generate_openapi(catalog: TypeCatalog, server_url: str) -> dict[str, Any]:
    paths: dict[str, Any] = {}
    schemas: dict[str, Any] = {}
    not_found = _json_response("Type not found", _ERROR_SCHEMA)
    status_parameter = {"$ref": "#/components/parameters/x-mock-status"}

    for name in sorted(catalog):
        descriptor = catalog[name]
        schemas[name] = {
            "type": "object",
            "properties": {field.name: field_schema(field, catalog) for field in descriptor.fields},
            "required": [field.name for field in descriptor.fields if not field.optional],
        }
        reference = {"$ref": f"#/components/schemas/{name}"}

        paths[type_to_path(name)] = {
            "get": {
                "summary": f"Get all {_inflector.plural_noun(name)}",
                "description": f"Returns an array of {name} objects",
                "parameters": [status_parameter],
                "responses": {
                    "200": _json_response("Successful response", {"type": "array", "items": reference}),
                    "404": not_found,
                },
            }
        }
        paths[f"/{to_kebab_case(name)}"] = {
            "get": {
                "summary": f"Get a single {name}",
                "description": f"Returns a single {name} object",
                "parameters": [status_parameter],
                "responses": {"200": _json_response("Successful response", reference), "404": not_found},
            }
        }

    paths["/health"] = {
        "get": {
            "summary": "Health check",
            "description": "Returns server health status and configuration",
            "responses": {"200": _json_response("Server is healthy", {"type": "object"})},
        }
    }

    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Contract Proxy API",
            "description": "Auto-generated REST API from TypeScript interfaces",
            "version": "1.0.0",
        },
        "servers": [{"url": server_url, "description": "Development server"}],
        "paths": paths,
        "components": {
            "schemas": schemas,
            "parameters": {
                "x-mock-status": {
                    "name": "x-mock-status",
                    "in": "header",
                    "description": "Force a specific HTTP status code",
                    "required": False,
                    "schema": {"type": "integer", "example": 500},
                }
            },
        },
    }
