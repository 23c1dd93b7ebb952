"""
apispec OpenAPI Document

Builds the OpenAPI document with apispec. Routes are turned into operations
by a path plugin that declares every response as generic JSON; further
plugins refine operations and component schemas as apispec registers them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from apispec import APISpec, BasePlugin
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, TypeAdapter
from pydantic.json_schema import models_json_schema

from todoapp.docs.backends.json_graph import (
    Json,
    operation_descriptor,
    schema_descriptor,
    use_problem_media_type,
)
from todoapp.docs.discovery import (
    REF_TEMPLATE,
    RouteMetadata,
    describe_routes,
    parameter_schema,
    schema_types,
)
from todoapp.docs.enrichment import JSON_MEDIA_TYPE, ExampleEnricher
from todoapp.docs.openapi_metadata import (
    OPENAPI_SPEC_VERSION,
    OPENAPI_TAGS,
    OPENAPI_VERSION,
    SECURITY_REQUIREMENTS,
    SECURITY_SCHEMES,
    document_info,
    document_servers,
    document_title,
)

logger = structlog.get_logger()

GENERATOR_NAME = "apispec"
DOCUMENT_PATH = f"/apispec/{OPENAPI_VERSION}.json"


def schema_reference(declared_type: Any) -> str | Json:
    """Component name of a model, resolved to a reference by apispec, or an inline schema."""
    if isinstance(declared_type, type) and issubclass(declared_type, BaseModel):
        return declared_type.__name__
    return TypeAdapter(declared_type).json_schema(ref_template=REF_TEMPLATE)


def component_schemas(types: Iterable[type[BaseModel]]) -> dict[str, Json]:
    models = [(model, "validation") for model in types]
    if not models:
        return {}
    _, definitions = models_json_schema(models, ref_template=REF_TEMPLATE)
    return definitions.get("$defs", {})


class FastApiRoutePlugin(BasePlugin):
    """Adds the operation of a FastAPI route passed to ``APISpec.path`` as ``route``."""

    def path_helper(self, path=None, operations=None, parameters=None, *, route: RouteMetadata | None = None, **kwargs):
        if route is None:
            return None

        operation: Json = {"tags": list(route.tags)}
        if route.summary:
            operation["summary"] = route.summary
        if route.description:
            operation["description"] = route.description
        operation["operationId"] = route.operation_id

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
                "content": {JSON_MEDIA_TYPE: {"schema": schema_reference(route.body_type)}},
                "required": route.body_required,
            }

        responses: Json = {}
        for response in route.responses:
            entry: Json = {"description": response.description}
            if response.response_type is not None:
                entry["content"] = {JSON_MEDIA_TYPE: {"schema": schema_reference(response.response_type)}}
            responses[str(response.status_code)] = entry
        operation["responses"] = responses

        operations[route.method] = operation
        return route.path


class ExamplesPlugin(BasePlugin):
    """Adds examples and descriptions to operations and component schemas."""

    def __init__(self, enricher: ExampleEnricher) -> None:
        self.enricher = enricher

    def operation_helper(self, path=None, operations=None, *, route: RouteMetadata | None = None, **kwargs) -> None:
        if route is None:
            return

        operation = (operations or {}).get(route.method)
        if operation is not None:
            descriptor = operation_descriptor(route, operation, self.enricher.resolver.registry)
            self.enricher.enrich_operation(descriptor)

    def schema_helper(self, name, definition, *, schema_type: Any = None, **kwargs) -> Json | None:
        if schema_type is None:
            return None
        self.enricher.enrich_schema(schema_descriptor(schema_type, definition))
        return definition


class ProblemMediaTypePlugin(BasePlugin):
    """Declares error responses as problem details instead of generic JSON."""

    def operation_helper(self, path=None, operations=None, **kwargs) -> None:
        for operation in (operations or {}).values():
            use_problem_media_type(operation)


class ApiSpecDocumentGenerator:
    """Generates the OpenAPI document for an application with apispec."""

    def __init__(self, app: FastAPI, plugins: Iterable[BasePlugin] = ()) -> None:
        self.app = app
        self.plugins = list(plugins)

    def generate(self, base_url: str | None = None) -> Json:
        routes = describe_routes(self.app.routes)
        types = schema_types(routes)

        options: Json = {
            "info": document_info(GENERATOR_NAME),
            "security": [dict(requirement) for requirement in SECURITY_REQUIREMENTS],
        }
        servers = document_servers(base_url)
        if servers:
            options["servers"] = servers

        spec = APISpec(
            title=document_title(GENERATOR_NAME),
            version=OPENAPI_VERSION,
            openapi_version=OPENAPI_SPEC_VERSION,
            plugins=self.plugins,
            **options,
        )

        for name, schema in component_schemas(types.values()).items():
            spec.components.schema(name, schema, schema_type=types.get(name))
        for name, scheme in SECURITY_SCHEMES.items():
            spec.components.security_scheme(name, dict(scheme))
        for tag in OPENAPI_TAGS:
            spec.tag(dict(tag))

        for route in routes:
            spec.path(route=route)

        return spec.to_dict()


def setup_apispec_openapi(app: FastAPI, enricher: ExampleEnricher) -> ApiSpecDocumentGenerator:
    """Serve the apispec document."""
    generator = ApiSpecDocumentGenerator(
        app,
        plugins=[
            FastApiRoutePlugin(),
            ExamplesPlugin(enricher),
            ProblemMediaTypePlugin(),
        ],
    )

    def openapi_document(request: Request) -> JSONResponse:
        return JSONResponse(generator.generate(str(request.base_url)))

    app.add_api_route(DOCUMENT_PATH, openapi_document, methods=["GET"], include_in_schema=False)
    logger.debug("OpenAPI document registered", generator=GENERATOR_NAME, path=DOCUMENT_PATH)

    return generator
