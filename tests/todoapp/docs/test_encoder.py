"""
Tests for the canonical example encoder.
"""

from __future__ import annotations

import json
import uuid
from datetime import UTC, datetime
from enum import Enum

from todoapp.docs.encoder import encode, encode_json
from todoapp.models.problem import ProblemDetails, ProblemDetailsExample
from todoapp.models.todo import TodoItemModel, TodoListViewModel


class Colour(str, Enum):
    RED = "red"


def test_encode_none():
    assert encode(None) is None
    assert encode(None, TodoItemModel) is None


def test_encode_primitives():
    """Test primitive values and their JSON representation."""
    assert encode(42) == 42
    assert encode(True) is True
    assert encode("text") == "text"
    assert encode(uuid.UUID("a03952ca-880e-4af7-9cfa-630be0feb4a5")) == "a03952ca-880e-4af7-9cfa-630be0feb4a5"
    assert encode(Colour.RED) == "red"
    assert encode(datetime(2024, 2, 23, 15, 23, tzinfo=UTC)) == "2024-02-23T15:23:00Z"


def test_encode_uses_wire_names_and_declared_order():
    """Test that models use camelCase names in declaration order."""
    encoded = encode(TodoItemModel.generate_example())

    assert list(encoded) == ["id", "text", "isCompleted", "lastUpdated"]


def test_encode_omits_null_members():
    """Test that unset optional members are left out."""
    encoded = encode(ProblemDetailsExample().generate(), ProblemDetails)

    assert "instance" not in encoded
    assert encoded["status"] == 400


def test_encode_is_deterministic():
    """Test that encoding the same example twice gives identical output."""
    example = TodoListViewModel.generate_example()

    assert encode_json(example) == encode_json(example)
    assert encode_json(example, TodoListViewModel) == encode_json(TodoListViewModel.generate_example())


def test_encoded_example_round_trips():
    """Test that decoding an encoded example gives back an equal value."""
    example = TodoListViewModel.generate_example()

    decoded = TodoListViewModel.model_validate(json.loads(encode_json(example)))

    assert decoded == example


def test_encode_json_keeps_unicode():
    """Test that non-ASCII text is written as-is."""
    assert "🥚".encode() in encode_json(TodoItemModel.generate_example())


def test_encode_nested_collections():
    """Test lists and dictionaries of models."""
    item = TodoItemModel.generate_example()

    assert encode([item], list[TodoItemModel]) == [encode(item)]
    assert encode({"first": item}, dict[str, TodoItemModel]) == {"first": encode(item)}
