"""
Example and Description Enrichment

Applies resolved examples and descriptions to operation and schema
descriptors. Every backend adapter funnels through :class:`ExampleEnricher`,
so the resolution rules are implemented exactly once.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from todoapp.docs.descriptions import DescriptionResolver
from todoapp.docs.descriptors import OperationDescriptor, SchemaDescriptor, Slot
from todoapp.docs.encoder import encode
from todoapp.docs.examples import ExampleProvider
from todoapp.docs.resolver import ExampleResolver

logger = structlog.get_logger()

JSON_MEDIA_TYPE = "application/json"
PROBLEM_MEDIA_TYPE = "application/problem+json"


def is_success_status(status_code: int | str) -> bool:
    return str(status_code).startswith("2")


def is_json_media_type(media_type: str) -> bool:
    return media_type == JSON_MEDIA_TYPE or media_type.endswith("+json")


class ExampleEnricher:
    """
    Writes examples and descriptions into descriptor slots.

    Slots that already hold a value are never overwritten, so enriching the
    same descriptor repeatedly is harmless and explicit annotations win.
    """

    def __init__(
        self,
        resolver: ExampleResolver,
        descriptions: DescriptionResolver | None = None,
        problem_types: Iterable[Any] = (),
    ) -> None:
        self.resolver = resolver
        self.descriptions = descriptions
        self.problem_types = tuple(problem_types)

    def enrich_operation(self, operation: OperationDescriptor) -> None:
        """Add examples to an operation's parameters, request body and responses."""
        for parameter in operation.parameters:
            if not parameter.example.is_empty():
                continue
            provider = self.resolver.resolve_for_parameter(
                parameter.name, parameter.declared_type, operation.bindings
            )
            self._write_example(parameter.example, provider, operation.operation_id)

        body = operation.request_body
        if body is not None and body.example.is_empty():
            provider = self.resolver.resolve_for_schema(body.declared_type, operation.bindings)
            self._write_example(body.example, provider, operation.operation_id)

        # Resolved per (status, media type) so a shape used for both errors
        # and successes gets the right example in each slot
        for response in operation.responses:
            if not response.example.is_empty() or not is_json_media_type(response.media_type):
                continue
            provider = self.resolver.resolve_for_schema(response.response_type, operation.bindings)
            self._write_example(response.example, provider, operation.operation_id)

    def enrich_schema(self, schema: SchemaDescriptor) -> None:
        """Add the description and type-level example to a component schema."""
        if self.descriptions is not None:
            schema.description.fill(self.descriptions.describe_type(schema.schema_type))
            for prop in schema.properties:
                prop.description.fill(self.descriptions.describe_member(schema.schema_type, prop.name))

        if schema.example.is_empty():
            provider = self.resolver.resolve_for_schema(schema.schema_type)
            self._write_example(schema.example, provider, getattr(schema.schema_type, "__name__", None))

        if self.is_problem_type(schema.schema_type):
            # Problem examples carry extension members outside the declared shape
            schema.additional_properties.set(True)

    def is_problem_type(self, schema_type: Any) -> bool:
        return any(schema_type is problem_type for problem_type in self.problem_types)

    @staticmethod
    def _write_example(slot: Slot, provider: ExampleProvider | None, site: str | None) -> None:
        if provider is None:
            return

        try:
            value = provider.generate()
            encoded = encode(value, provider.schema_type)
        except Exception as e:
            logger.error(
                "Example generation failed",
                provider=repr(provider),
                site=site,
                error=str(e),
                exc_info=True,
            )
            return

        if encoded is None or encoded == "":
            return

        slot.fill(encoded)
