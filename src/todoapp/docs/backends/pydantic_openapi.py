"""
openapi-pydantic OpenAPI Document

Builds the OpenAPI document as typed openapi-pydantic objects. Component
schemas start out as ``PydanticSchema`` placeholders that are resolved once
every operation has been processed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from openapi_pydantic import MediaType, OpenAPI, Operation, PathItem, Reference, Schema
from openapi_pydantic.util import PydanticSchema, construct_open_api_with_schema_class

from todoapp.docs.descriptors import (
    OperationDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    RequestBodyDescriptor,
    ResponseDescriptor,
    SchemaDescriptor,
    attribute_slot,
)
from todoapp.docs.discovery import RouteMetadata, describe_routes, parameter_schema, schema_types
from todoapp.docs.enrichment import (
    JSON_MEDIA_TYPE,
    PROBLEM_MEDIA_TYPE,
    ExampleEnricher,
    is_success_status,
)
from todoapp.docs.openapi_metadata import (
    OPENAPI_SPEC_VERSION,
    OPENAPI_TAGS,
    OPENAPI_VERSION,
    SECURITY_REQUIREMENTS,
    SECURITY_SCHEMES,
    document_info,
    document_servers,
)

logger = structlog.get_logger()

GENERATOR_NAME = "openapi-pydantic"
DOCUMENT_PATH = f"/openapi-pydantic/{OPENAPI_VERSION}.json"

OperationProcessor = Callable[[Operation, RouteMetadata], None]
SchemaProcessor = Callable[[Schema, Any], None]


def schema_class(media_type: MediaType) -> Any:
    """The model a media type's placeholder schema stands for."""
    schema = media_type.media_type_schema
    return schema.schema_class if isinstance(schema, PydanticSchema) else None


class ExamplesProcessor:
    """Adds examples and descriptions to typed operations and schemas."""

    def __init__(self, enricher: ExampleEnricher) -> None:
        self.enricher = enricher

    def process_operation(self, operation: Operation, route: RouteMetadata) -> None:
        declared_types = {parameter.name: parameter.declared_type for parameter in route.parameters}

        parameters = [
            ParameterDescriptor(
                name=parameter.name,
                declared_type=declared_types.get(parameter.name),
                example=attribute_slot(parameter, "example"),
            )
            for parameter in operation.parameters or []
            if not isinstance(parameter, Reference)
        ]

        request_body = None
        body = operation.requestBody
        if body is not None and not isinstance(body, Reference):
            for media_type in body.content.values():
                request_body = RequestBodyDescriptor(schema_class(media_type), attribute_slot(media_type, "example"))
                break

        responses = [
            ResponseDescriptor(
                status_code=int(status_code) if status_code.isdigit() else 0,
                media_type=name,
                response_type=schema_class(media_type),
                example=attribute_slot(media_type, "example"),
            )
            for status_code, response in (operation.responses or {}).items()
            if not isinstance(response, Reference)
            for name, media_type in (response.content or {}).items()
        ]

        self.enricher.enrich_operation(
            OperationDescriptor(
                operation_id=operation.operationId or route.operation_id,
                parameters=parameters,
                request_body=request_body,
                responses=responses,
                bindings=self.enricher.resolver.registry.site_bindings(route.endpoint, route.path),
            )
        )

    def process_schema(self, schema: Schema, schema_type: Any) -> None:
        if schema_type is None:
            return

        self.enricher.enrich_schema(
            SchemaDescriptor(
                schema_type=schema_type,
                description=attribute_slot(schema, "description"),
                example=attribute_slot(schema, "example"),
                additional_properties=attribute_slot(schema, "additionalProperties"),
                properties=[
                    PropertyDescriptor(name, attribute_slot(prop, "description"))
                    for name, prop in (schema.properties or {}).items()
                ],
            )
        )


class PydanticDocumentGenerator:
    """Generates the OpenAPI document for an application with openapi-pydantic."""

    def __init__(
        self,
        app: FastAPI,
        operation_processors: list[OperationProcessor] | None = None,
        schema_processors: list[SchemaProcessor] | None = None,
    ) -> None:
        self.app = app
        self.operation_processors = operation_processors or []
        self.schema_processors = schema_processors or []

    def generate(self, base_url: str | None = None) -> dict[str, Any]:
        routes = describe_routes(self.app.routes)
        types = schema_types(routes)

        paths: dict[str, dict[str, Operation]] = {}
        for route in routes:
            operation = self._operation(route)
            for processor in self.operation_processors:
                processor(operation, route)
            paths.setdefault(route.path, {})[route.method] = operation

        document: dict[str, Any] = {
            "openapi": OPENAPI_SPEC_VERSION,
            "info": document_info(GENERATOR_NAME),
            "paths": {path: PathItem.model_validate(item) for path, item in paths.items()},
            "components": {"securitySchemes": SECURITY_SCHEMES},
            "security": SECURITY_REQUIREMENTS,
            "tags": OPENAPI_TAGS,
        }
        servers = document_servers(base_url)
        if servers:
            document["servers"] = servers

        open_api = construct_open_api_with_schema_class(OpenAPI.model_validate(document))

        if open_api.components is not None:
            for name, schema in (open_api.components.schemas or {}).items():
                if isinstance(schema, Reference):
                    continue
                for processor in self.schema_processors:
                    processor(schema, types.get(name))

        # Only what was set explicitly, the models' defaults are not valid everywhere
        return open_api.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)

    @staticmethod
    def _operation(route: RouteMetadata) -> Operation:
        responses: dict[str, Any] = {}
        for response in route.responses:
            entry: dict[str, Any] = {"description": response.description}
            if response.response_type is not None:
                # Error responses are problem details
                media_type = JSON_MEDIA_TYPE if is_success_status(response.status_code) else PROBLEM_MEDIA_TYPE
                entry["content"] = {
                    media_type: MediaType(schema=PydanticSchema(schema_class=response.response_type)),
                }
            responses[str(response.status_code)] = entry

        operation: dict[str, Any] = {
            "tags": list(route.tags),
            "summary": route.summary,
            "description": route.description,
            "operationId": route.operation_id,
            "responses": responses,
        }

        if route.parameters:
            operation["parameters"] = [
                {
                    "name": parameter.name,
                    "in": parameter.location,
                    "required": parameter.required,
                    "schema": parameter_schema(parameter.declared_type),
                }
                for parameter in route.parameters
            ]

        if route.body_type is not None:
            operation["requestBody"] = {
                "content": {
                    JSON_MEDIA_TYPE: MediaType(schema=PydanticSchema(schema_class=route.body_type)),
                },
                "required": route.body_required,
            }

        return Operation.model_validate(operation)


def setup_pydantic_openapi(app: FastAPI, enricher: ExampleEnricher) -> PydanticDocumentGenerator:
    """Serve the openapi-pydantic document."""
    examples = ExamplesProcessor(enricher)
    generator = PydanticDocumentGenerator(
        app,
        operation_processors=[examples.process_operation],
        schema_processors=[examples.process_schema],
    )

    def openapi_document(request: Request) -> JSONResponse:
        return JSONResponse(generator.generate(str(request.base_url)))

    app.add_api_route(DOCUMENT_PATH, openapi_document, methods=["GET"], include_in_schema=False)
    logger.debug("OpenAPI document registered", generator=GENERATOR_NAME, path=DOCUMENT_PATH)

    return generator
