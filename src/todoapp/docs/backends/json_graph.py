"""
Plain JSON Document Helpers

Descriptor construction and response rewriting for generators whose
documents are plain ``dict``/``list`` object graphs.
"""

from __future__ import annotations

from typing import Any

from todoapp.docs.descriptors import (
    OperationDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    RequestBodyDescriptor,
    ResponseDescriptor,
    SchemaDescriptor,
    key_slot,
)
from todoapp.docs.discovery import RouteMetadata
from todoapp.docs.enrichment import (
    JSON_MEDIA_TYPE,
    PROBLEM_MEDIA_TYPE,
    is_json_media_type,
    is_success_status,
)
from todoapp.docs.examples import ExampleRegistry

Json = dict[str, Any]


def operation_descriptor(
    metadata: RouteMetadata,
    operation: Json,
    registry: ExampleRegistry,
) -> OperationDescriptor:
    """View a JSON operation object through the route it documents."""
    declared_types = {parameter.name: parameter.declared_type for parameter in metadata.parameters}

    parameters = [
        ParameterDescriptor(
            name=parameter["name"],
            declared_type=declared_types.get(parameter["name"]),
            example=key_slot(parameter, "example"),
        )
        for parameter in operation.get("parameters", [])
        if "name" in parameter
    ]

    request_body = None
    for media_type, content in operation.get("requestBody", {}).get("content", {}).items():
        if is_json_media_type(media_type):
            request_body = RequestBodyDescriptor(metadata.body_type, key_slot(content, "example"))
            break

    responses = [
        ResponseDescriptor(
            status_code=int(status_code) if str(status_code).isdigit() else 0,
            media_type=media_type,
            response_type=metadata.response_type(status_code),
            example=key_slot(content, "example"),
        )
        for status_code, response in operation.get("responses", {}).items()
        for media_type, content in response.get("content", {}).items()
    ]

    return OperationDescriptor(
        operation_id=operation.get("operationId", metadata.operation_id),
        parameters=parameters,
        request_body=request_body,
        responses=responses,
        bindings=registry.site_bindings(metadata.endpoint, metadata.path),
    )


def schema_descriptor(schema_type: Any, schema: Json) -> SchemaDescriptor:
    """View a JSON component schema object."""
    return SchemaDescriptor(
        schema_type=schema_type,
        description=key_slot(schema, "description"),
        example=key_slot(schema, "example"),
        additional_properties=key_slot(schema, "additionalProperties"),
        properties=[
            PropertyDescriptor(name, key_slot(prop, "description"))
            for name, prop in schema.get("properties", {}).items()
            if isinstance(prop, dict)
        ],
    )


def use_problem_media_type(operation: Json) -> None:
    """Declare error responses as problem details instead of generic JSON."""
    for status_code, response in operation.get("responses", {}).items():
        content = response.get("content")
        if is_success_status(status_code) or not content or JSON_MEDIA_TYPE not in content:
            continue

        response["content"] = {
            (PROBLEM_MEDIA_TYPE if media_type == JSON_MEDIA_TYPE else media_type): value
            for media_type, value in content.items()
        }


def iter_operations(document: Json):
    """Yield ``(path, method, operation)`` for every operation in a document."""
    for path, path_item in document.get("paths", {}).items():
        for method, operation in path_item.items():
            if isinstance(operation, dict) and "responses" in operation:
                yield path, method, operation
