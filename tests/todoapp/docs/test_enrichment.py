"""
Tests for applying examples and descriptions to descriptors.
"""

from __future__ import annotations

import uuid

import pytest

from todoapp.docs.descriptions import DescriptionResolver
from todoapp.docs.descriptors import (
    OperationDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    RequestBodyDescriptor,
    ResponseDescriptor,
    SchemaDescriptor,
    key_slot,
)
from todoapp.docs.encoder import encode
from todoapp.docs.enrichment import ExampleEnricher, is_json_media_type, is_success_status
from todoapp.docs.examples import ExampleProvider, ExampleRegistry, ValueExample
from todoapp.docs.resolver import ExampleResolver
from todoapp.models.problem import ProblemDetails, ProblemDetailsExample
from todoapp.models.todo import CreateTodoItemModel, TodoItemModel

TODO_ID = uuid.UUID("a03952ca-880e-4af7-9cfa-630be0feb4a5")


class FailingExample(ExampleProvider[TodoItemModel]):
    schema_type = TodoItemModel

    def generate(self) -> TodoItemModel:
        raise RuntimeError("boom")


@pytest.fixture
def registry() -> ExampleRegistry:
    registry = ExampleRegistry()
    registry.register_type(TodoItemModel)
    registry.register_type(CreateTodoItemModel)
    registry.register_type(ProblemDetails, ProblemDetailsExample())
    return registry


@pytest.fixture
def enricher(registry) -> ExampleEnricher:
    return ExampleEnricher(
        ExampleResolver(registry),
        DescriptionResolver(["todoapp.models.todo", "todoapp.models.problem"]),
        problem_types=[ProblemDetails],
    )


def endpoint():
    return None


def make_operation(registry: ExampleRegistry, document: dict) -> OperationDescriptor:
    return OperationDescriptor(
        operation_id="GetTodo",
        parameters=[ParameterDescriptor("id", uuid.UUID, key_slot(document["parameter"], "example"))],
        request_body=RequestBodyDescriptor(CreateTodoItemModel, key_slot(document["body"], "example")),
        responses=[
            ResponseDescriptor(200, "application/json", TodoItemModel, key_slot(document["ok"], "example")),
            ResponseDescriptor(404, "application/problem+json", ProblemDetails, key_slot(document["error"], "example")),
            ResponseDescriptor(200, "text/plain", TodoItemModel, key_slot(document["text"], "example")),
        ],
        bindings=registry.site_bindings(endpoint, "/api/items/{id}"),
    )


def make_schema(schema_type, schema: dict) -> SchemaDescriptor:
    return SchemaDescriptor(
        schema_type=schema_type,
        description=key_slot(schema, "description"),
        example=key_slot(schema, "example"),
        additional_properties=key_slot(schema, "additionalProperties"),
        properties=[PropertyDescriptor(name, key_slot(prop, "description")) for name, prop in schema["properties"].items()],
    )


def test_media_type_helpers():
    assert is_success_status(204)
    assert is_success_status("200")
    assert not is_success_status("404")
    assert is_json_media_type("application/json")
    assert is_json_media_type("application/problem+json")
    assert not is_json_media_type("text/plain")


def test_enrich_operation(registry, enricher):
    """Test that each JSON slot of an operation receives its example."""
    registry.register_group("/api/items", ValueExample(TODO_ID))
    document = {"parameter": {}, "body": {}, "ok": {}, "error": {}, "text": {}}

    enricher.enrich_operation(make_operation(registry, document))

    assert document["parameter"]["example"] == str(TODO_ID)
    assert document["body"]["example"] == {"text": "Buy eggs 🥚"}
    assert document["ok"]["example"] == encode(TodoItemModel.generate_example())
    assert document["error"]["example"]["status"] == 400
    assert "example" not in document["text"]


def test_enrich_operation_first_writer_wins(registry, enricher):
    """Test that populated slots are never overwritten."""
    document = {"parameter": {"example": "explicit"}, "body": {}, "ok": {}, "error": {}, "text": {}}
    operation = make_operation(registry, document)

    enricher.enrich_operation(operation)
    first = {key: dict(value) for key, value in document.items()}

    registry.register_operation(endpoint, ValueExample(CreateTodoItemModel(text="other")))
    enricher.enrich_operation(make_operation(registry, document))

    assert document == first
    assert document["parameter"]["example"] == "explicit"


def test_site_binding_written_instead_of_type_binding(registry, enricher):
    """Test that an endpoint example replaces the type example for its slot."""
    registry.register_operation(endpoint, ValueExample(CreateTodoItemModel(text="From endpoint")))
    document = {"parameter": {}, "body": {}, "ok": {}, "error": {}, "text": {}}

    enricher.enrich_operation(make_operation(registry, document))

    assert document["body"]["example"] == {"text": "From endpoint"}


def test_failing_provider_is_skipped(registry, enricher):
    """Test that a provider error leaves the slot empty and enrichment continues."""
    registry.register_operation(endpoint, FailingExample())
    document = {"parameter": {}, "body": {}, "ok": {}, "error": {}, "text": {}}

    enricher.enrich_operation(make_operation(registry, document))

    assert "example" not in document["ok"]
    assert document["body"]["example"] == {"text": "Buy eggs 🥚"}


def test_enrich_schema(enricher):
    """Test descriptions and the type example of a schema."""
    schema = {"properties": {"id": {}, "isCompleted": {}, "text": {"description": "explicit"}}}

    enricher.enrich_schema(make_schema(TodoItemModel, schema))

    assert schema["description"] == "Represents a Todo item."
    assert schema["example"] == encode(TodoItemModel.generate_example())
    assert schema["properties"]["id"]["description"] == "The ID of the Todo item."
    assert schema["properties"]["isCompleted"]["description"] == (
        "A value indicating whether the Todo item has been completed."
    )
    assert schema["properties"]["text"]["description"] == "explicit"
    assert "additionalProperties" not in schema


def test_problem_schema_allows_additional_properties(enricher):
    """Test that only problem schemas are relaxed."""
    schema = {"properties": {"type": {}, "status": {}}}

    enricher.enrich_schema(make_schema(ProblemDetails, schema))

    assert schema["additionalProperties"] is True
    assert schema["example"]["title"] == "Bad Request"
    assert enricher.is_problem_type(ProblemDetails)
    assert not enricher.is_problem_type(TodoItemModel)


def test_enrich_schema_without_provider(enricher):
    """Test that schemas without examples only get descriptions."""
    schema = {"properties": {}}

    enricher.enrich_schema(make_schema(int, schema))

    assert schema == {"properties": {}}
