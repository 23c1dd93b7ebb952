"""
Example Metadata Resolver

Decides which example provider applies to a parameter or schema slot.

Resolution order, first match wins:

1. a binding on the parameter itself, or on the endpoint function for that type
2. a binding on the schema type
3. a binding on an enclosing route group for that type
4. nothing

Candidates are evaluated lazily and no provider is invoked while resolving.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from todoapp.docs.examples import (
    BindingScope,
    ExampleBinding,
    ExampleProvider,
    ExampleRegistry,
    example_registry,
)


class ExampleResolver:
    """Resolves example providers against an :class:`ExampleRegistry`."""

    def __init__(self, registry: ExampleRegistry | None = None) -> None:
        self.registry = registry or example_registry

    def resolve_for_parameter(
        self,
        parameter_name: str,
        declared_type: Any,
        site_bindings: Iterable[ExampleBinding] = (),
    ) -> ExampleProvider | None:
        """Resolve the provider for a named operation parameter."""
        site_bindings = tuple(site_bindings)
        return self._first(
            self._parameter_site(parameter_name, declared_type, site_bindings),
            self._type_level(declared_type),
            self._group_level(declared_type, site_bindings),
        )

    def resolve_for_schema(
        self,
        schema_type: Any,
        site_bindings: Iterable[ExampleBinding] = (),
    ) -> ExampleProvider | None:
        """Resolve the provider for a request body, response or component schema."""
        if schema_type is None:
            return None

        site_bindings = tuple(site_bindings)
        return self._first(
            self._operation_site(schema_type, site_bindings),
            self._type_level(schema_type),
            self._group_level(schema_type, site_bindings),
        )

    @staticmethod
    def _first(*candidates: Iterator[ExampleBinding]) -> ExampleProvider | None:
        for candidate in candidates:
            binding = next(candidate, None)
            if binding is not None:
                return binding.provider
        return None

    @staticmethod
    def _parameter_site(
        name: str,
        declared_type: Any,
        bindings: tuple[ExampleBinding, ...],
    ) -> Iterator[ExampleBinding]:
        for binding in bindings:
            if binding.scope is BindingScope.PARAMETER and binding.parameter == name:
                yield binding
        yield from ExampleResolver._operation_site(declared_type, bindings)

    @staticmethod
    def _operation_site(schema_type: Any, bindings: tuple[ExampleBinding, ...]) -> Iterator[ExampleBinding]:
        for binding in bindings:
            if (
                binding.scope is BindingScope.PARAMETER
                and binding.parameter is None
                and binding.schema_type == schema_type
            ):
                yield binding

    def _type_level(self, schema_type: Any) -> Iterator[ExampleBinding]:
        yield from self.registry.type_bindings(schema_type)

    @staticmethod
    def _group_level(schema_type: Any, bindings: tuple[ExampleBinding, ...]) -> Iterator[ExampleBinding]:
        for binding in bindings:
            if binding.scope is BindingScope.OPERATION_GROUP and binding.schema_type == schema_type:
                yield binding
