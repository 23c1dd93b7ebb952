"""
OpenAPI Document Setup

Wires the shared enrichment into each document generator and serves the
documents.
"""

from __future__ import annotations

from fastapi import FastAPI

from todoapp.config import TodoAppSettings, settings
from todoapp.docs.backends.apispec_openapi import setup_apispec_openapi
from todoapp.docs.backends.fastapi_openapi import setup_fastapi_openapi
from todoapp.docs.backends.pydantic_openapi import setup_pydantic_openapi
from todoapp.docs.descriptions import DescriptionResolver
from todoapp.docs.enrichment import ExampleEnricher
from todoapp.docs.examples import ExampleRegistry, example_registry
from todoapp.docs.resolver import ExampleResolver
from todoapp.models.problem import ProblemDetails


def create_enricher(
    config: TodoAppSettings | None = None,
    registry: ExampleRegistry | None = None,
) -> ExampleEnricher:
    """Create the enricher shared by every document generator."""
    config = config or settings
    return ExampleEnricher(
        resolver=ExampleResolver(registry or example_registry),
        descriptions=DescriptionResolver(config.DOCUMENTATION_MODULES),
        problem_types=[ProblemDetails],
    )


def setup_openapi(app: FastAPI, enricher: ExampleEnricher | None = None) -> ExampleEnricher:
    """Serve the OpenAPI documents of all generators."""
    enricher = enricher or create_enricher()

    setup_fastapi_openapi(app, enricher)
    setup_apispec_openapi(app, enricher)
    setup_pydantic_openapi(app, enricher)

    return enricher
