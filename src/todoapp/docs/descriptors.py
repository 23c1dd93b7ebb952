"""
Generator-neutral Descriptors

Views of operations and schemas that the enrichment engine works on. Each
backend adapter builds them fresh from its own native document objects; the
slots inside them write straight back into those objects.
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from todoapp.docs.examples import ExampleBinding


@dataclass
class Slot:
    """A mutable output target inside a native document."""

    getter: Callable[[], Any]
    setter: Callable[[Any], None]

    def get(self) -> Any:
        return self.getter()

    def set(self, value: Any) -> None:
        self.setter(value)

    def is_empty(self) -> bool:
        return self.getter() is None

    def fill(self, value: Any) -> bool:
        """Write the value unless the slot already holds one."""
        if value is None or not self.is_empty():
            return False
        self.setter(value)
        return True


def key_slot(mapping: MutableMapping[str, Any], key: str) -> Slot:
    """Slot over a dictionary key (absent keys read as empty)."""
    return Slot(lambda: mapping.get(key), lambda value: mapping.__setitem__(key, value))


def attribute_slot(target: Any, name: str) -> Slot:
    """Slot over an object attribute."""
    return Slot(lambda: getattr(target, name, None), lambda value: setattr(target, name, value))


@dataclass
class ParameterDescriptor:
    name: str
    declared_type: Any
    example: Slot


@dataclass
class RequestBodyDescriptor:
    declared_type: Any
    example: Slot


@dataclass
class ResponseDescriptor:
    status_code: int
    media_type: str
    response_type: Any
    example: Slot


@dataclass
class OperationDescriptor:
    """One API operation as seen by the enrichment engine."""

    operation_id: str
    parameters: list[ParameterDescriptor] = field(default_factory=list)
    request_body: RequestBodyDescriptor | None = None
    responses: list[ResponseDescriptor] = field(default_factory=list)
    bindings: tuple[ExampleBinding, ...] = ()


@dataclass
class PropertyDescriptor:
    name: str
    description: Slot


@dataclass
class SchemaDescriptor:
    """One component schema and its writable documentation slots."""

    schema_type: Any
    description: Slot
    example: Slot
    additional_properties: Slot
    properties: list[PropertyDescriptor] = field(default_factory=list)
