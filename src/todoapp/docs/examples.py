"""
OpenAPI Example Providers

Example providers produce canonical sample values for schema types. Providers
are bound to types, endpoint functions, endpoint parameters or route groups in
an explicit registry that document generators consult at build time.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from todoapp.docs.encoder import encode

T = TypeVar("T")


class ExampleProvider(ABC, Generic[T]):
    """Produces the canonical example value for a schema type."""

    schema_type: Any

    @abstractmethod
    def generate(self) -> T | None:
        """Generate the example value."""

    def generate_encoded(self) -> Any:
        """Generate the example as a canonical JSON node."""
        return encode(self.generate(), self.schema_type)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self.schema_type, '__name__', self.schema_type)})"


class ModelExample(ExampleProvider[T]):
    """
    Example provider backed by a model's ``generate_example`` classmethod.

    The provider can serve a different schema type than the model providing
    the value, e.g. a dedicated provider class for a shared error shape.
    """

    def __init__(self, source: type, schema_type: Any = None) -> None:
        if not callable(getattr(source, "generate_example", None)):
            raise TypeError(f"{source!r} does not define generate_example()")

        self.source = source
        self.schema_type = schema_type or source

    def generate(self) -> T | None:
        return self.source.generate_example()


class ValueExample(ExampleProvider[T]):
    """Example provider returning a fixed value."""

    def __init__(self, value: T, schema_type: Any = None) -> None:
        self.value = value
        self.schema_type = schema_type or type(value)

    def generate(self) -> T | None:
        return self.value


class BindingScope(str, Enum):
    """Where an example binding was declared."""

    PARAMETER = "parameter"
    TYPE = "type"
    OPERATION_GROUP = "operation-group"


@dataclass(frozen=True)
class ExampleBinding:
    """
    A provider attached to a code site.

    ``PARAMETER`` bindings with a ``parameter`` name target that argument;
    without one they are declared on the endpoint function itself.
    """

    scope: BindingScope
    schema_type: Any
    provider: ExampleProvider
    parameter: str | None = None


def as_provider(value: ExampleProvider | type) -> ExampleProvider:
    """Coerce a provider instance or a model class into a provider."""
    if isinstance(value, ExampleProvider):
        return value
    if isinstance(value, type) and issubclass(value, ExampleProvider):
        return value()
    return ModelExample(value)


class ExampleRegistry:
    """
    Registration table of example bindings.

    Populated at import time by decorators and group registrations, then only
    read while documents are generated.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._types: dict[Any, list[ExampleBinding]] = {}
        self._sites: dict[Callable[..., Any], list[ExampleBinding]] = {}
        self._groups: list[tuple[str, ExampleBinding]] = []

    def register_type(self, schema_type: Any, provider: ExampleProvider | type | None = None) -> None:
        """Attach an example to a schema type wherever it appears."""
        binding = ExampleBinding(
            scope=BindingScope.TYPE,
            schema_type=schema_type,
            provider=as_provider(provider or schema_type),
        )
        with self._lock:
            self._types.setdefault(schema_type, []).append(binding)

    def register_operation(self, endpoint: Callable[..., Any], *providers: ExampleProvider | type) -> None:
        """Attach examples to an endpoint function, matched by schema type."""
        bindings = [
            ExampleBinding(BindingScope.PARAMETER, provider.schema_type, provider)
            for provider in map(as_provider, providers)
        ]
        with self._lock:
            self._sites.setdefault(endpoint, []).extend(bindings)

    def register_parameter(
        self,
        endpoint: Callable[..., Any],
        parameter: str,
        provider: ExampleProvider | type,
    ) -> None:
        """Attach an example to one argument of an endpoint function."""
        provider = as_provider(provider)
        binding = ExampleBinding(BindingScope.PARAMETER, provider.schema_type, provider, parameter)
        with self._lock:
            self._sites.setdefault(endpoint, []).append(binding)

    def register_group(self, prefix: str, *providers: ExampleProvider | type) -> None:
        """Attach fallback examples to every route under a path prefix."""
        bindings = [
            (prefix.rstrip("/"), ExampleBinding(BindingScope.OPERATION_GROUP, provider.schema_type, provider))
            for provider in map(as_provider, providers)
        ]
        with self._lock:
            self._groups.extend(bindings)

    def type_bindings(self, schema_type: Any) -> tuple[ExampleBinding, ...]:
        """Bindings declared on a schema type, empty for unknown or unhashable types."""
        try:
            return tuple(self._types.get(schema_type, ()))
        except TypeError:
            return ()

    def site_bindings(self, endpoint: Callable[..., Any] | None, path: str = "") -> tuple[ExampleBinding, ...]:
        """All bindings that apply to an operation: its own site bindings, then its groups'."""
        site = tuple(self._sites.get(endpoint, ())) if endpoint is not None else ()
        groups = tuple(
            binding
            for prefix, binding in self._groups
            if path == prefix or path.startswith(prefix + "/")
        )
        return site + groups


# Global registry populated by the decorators below
example_registry = ExampleRegistry()


def openapi_example(*providers: ExampleProvider | type, registry: ExampleRegistry | None = None):
    """
    Declare examples on a model class or an endpoint function.

    On a class without arguments the class itself must provide
    ``generate_example()``; on an endpoint function each provider is matched
    against the operation's parameters, request body and responses by type.
    """
    registry = registry or example_registry

    def decorator(target):
        if isinstance(target, type):
            if providers:
                for provider in providers:
                    registry.register_type(target, as_provider(provider))
            else:
                registry.register_type(target)
        else:
            registry.register_operation(target, *providers)
        return target

    return decorator


def openapi_parameter_example(
    parameter: str,
    provider: ExampleProvider | type,
    registry: ExampleRegistry | None = None,
):
    """Declare the example for one named argument of an endpoint function."""
    registry = registry or example_registry

    def decorator(endpoint):
        registry.register_parameter(endpoint, parameter, provider)
        return endpoint

    return decorator
