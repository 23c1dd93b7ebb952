"""
FastAPI OpenAPI Document

The document FastAPI generates from the application's routes, extended by
operation, schema and document transformers.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from todoapp.docs.backends.json_graph import (
    Json,
    iter_operations,
    operation_descriptor,
    schema_descriptor,
    use_problem_media_type,
)
from todoapp.docs.discovery import RouteMetadata, describe_routes, schema_types
from todoapp.docs.enrichment import ExampleEnricher
from todoapp.docs.openapi_metadata import (
    OPENAPI_CONTACT,
    OPENAPI_DESCRIPTION,
    OPENAPI_LICENSE,
    OPENAPI_SPEC_VERSION,
    OPENAPI_TAGS,
    OPENAPI_VERSION,
    SECURITY_REQUIREMENTS,
    SECURITY_SCHEMES,
    document_servers,
    document_title,
)

logger = structlog.get_logger()

GENERATOR_NAME = "FastAPI"
DOCUMENT_PATH = f"/openapi/{OPENAPI_VERSION}.json"

# Schemas FastAPI adds for its own request validation responses
VALIDATION_SCHEMAS = ("HTTPValidationError", "ValidationError")


@dataclass
class OperationContext:
    route: RouteMetadata


@dataclass
class SchemaContext:
    name: str
    schema_type: Any


@dataclass
class DocumentContext:
    base_url: str | None = None


OperationTransformer = Callable[[Json, OperationContext], None]
SchemaTransformer = Callable[[Json, SchemaContext], None]
DocumentTransformer = Callable[[Json, DocumentContext], None]


class OpenApiOptions:
    """Transformers applied to the generated document, in registration order."""

    def __init__(self) -> None:
        self.operation_transformers: list[OperationTransformer] = []
        self.schema_transformers: list[SchemaTransformer] = []
        self.document_transformers: list[DocumentTransformer] = []

    def add_operation_transformer(self, transformer: OperationTransformer) -> OpenApiOptions:
        self.operation_transformers.append(transformer)
        return self

    def add_schema_transformer(self, transformer: SchemaTransformer) -> OpenApiOptions:
        self.schema_transformers.append(transformer)
        return self

    def add_document_transformer(self, transformer: DocumentTransformer) -> OpenApiOptions:
        self.document_transformers.append(transformer)
        return self


class FastApiDocumentGenerator:
    """Generates the OpenAPI document for an application with FastAPI."""

    def __init__(self, app: FastAPI, options: OpenApiOptions) -> None:
        self.app = app
        self.options = options

    def generate(self, base_url: str | None = None) -> Json:
        routes = self.app.routes

        document = get_openapi(
            title=document_title(GENERATOR_NAME),
            version=OPENAPI_VERSION,
            openapi_version=OPENAPI_SPEC_VERSION,
            description=OPENAPI_DESCRIPTION,
            routes=routes,
            tags=OPENAPI_TAGS,
            contact=OPENAPI_CONTACT,
            license_info=OPENAPI_LICENSE,
            separate_input_output_schemas=False,
        )

        metadata = {(route.path, route.method): route for route in describe_routes(routes)}

        for path, method, operation in iter_operations(document):
            route = metadata.get((path, method))
            if route is None:
                continue
            context = OperationContext(route)
            for transformer in self.options.operation_transformers:
                transformer(operation, context)

        context = DocumentContext(base_url)
        for transformer in self.options.document_transformers:
            transformer(document, context)

        types = schema_types(metadata.values())
        for name, schema in document.get("components", {}).get("schemas", {}).items():
            schema_context = SchemaContext(name, types.get(name))
            for transformer in self.options.schema_transformers:
                transformer(schema, schema_context)

        return document


class ExamplesTransformer:
    """Adds examples and descriptions to operations and schemas."""

    def __init__(self, enricher: ExampleEnricher) -> None:
        self.enricher = enricher

    def transform_operation(self, operation: Json, context: OperationContext) -> None:
        descriptor = operation_descriptor(context.route, operation, self.enricher.resolver.registry)
        self.enricher.enrich_operation(descriptor)

    def transform_schema(self, schema: Json, context: SchemaContext) -> None:
        if context.schema_type is None:
            return
        self.enricher.enrich_schema(schema_descriptor(context.schema_type, schema))


def remove_parameter_titles(operation: Json, context: OperationContext) -> None:
    """Remove the titles FastAPI derives from Python argument names."""
    for parameter in operation.get("parameters", []):
        parameter.get("schema", {}).pop("title", None)


def remove_validation_responses(operation: Json, context: OperationContext) -> None:
    """Remove the 422 responses FastAPI declares for request validation."""
    operation.get("responses", {}).pop("422", None)


def update_problem_media_types(operation: Json, context: OperationContext) -> None:
    use_problem_media_type(operation)


def remove_validation_schemas(document: Json, context: DocumentContext) -> None:
    """Remove validation error schemas no operation references any more."""
    schemas = document.get("components", {}).get("schemas", {})
    paths = json.dumps(document.get("paths", {}))

    for name in VALIDATION_SCHEMAS:
        if f"#/components/schemas/{name}" not in paths:
            schemas.pop(name, None)


def add_security(document: Json, context: DocumentContext) -> None:
    components = document.setdefault("components", {})
    components["securitySchemes"] = json.loads(json.dumps(SECURITY_SCHEMES))
    document["security"] = json.loads(json.dumps(SECURITY_REQUIREMENTS))


def add_servers(document: Json, context: DocumentContext) -> None:
    servers = document_servers(context.base_url)
    if servers:
        document["servers"] = servers


def create_options(enricher: ExampleEnricher) -> OpenApiOptions:
    examples = ExamplesTransformer(enricher)

    return (
        OpenApiOptions()
        .add_operation_transformer(remove_parameter_titles)
        .add_operation_transformer(remove_validation_responses)
        .add_operation_transformer(examples.transform_operation)
        .add_operation_transformer(update_problem_media_types)
        .add_document_transformer(remove_validation_schemas)
        .add_document_transformer(add_security)
        .add_document_transformer(add_servers)
        .add_schema_transformer(examples.transform_schema)
    )


def setup_fastapi_openapi(app: FastAPI, enricher: ExampleEnricher) -> FastApiDocumentGenerator:
    """Serve the FastAPI-generated document."""
    generator = FastApiDocumentGenerator(app, create_options(enricher))

    def openapi_document(request: Request) -> JSONResponse:
        return JSONResponse(generator.generate(str(request.base_url)))

    app.add_api_route(DOCUMENT_PATH, openapi_document, methods=["GET"], include_in_schema=False)
    logger.debug("OpenAPI document registered", generator=GENERATOR_NAME, path=DOCUMENT_PATH)

    return generator
