"""
Todo Models

Request and response models for todo items. Attribute docstrings are the
source of the property descriptions in the OpenAPI documents.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from todoapp.docs.examples import ValueExample, openapi_example

TODO_ID_EXAMPLE = ValueExample(uuid.UUID("a03952ca-880e-4af7-9cfa-630be0feb4a5"))


class ApiModel(BaseModel):
    """Base model using the API's camelCase wire format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@openapi_example()
class TodoItemModel(ApiModel):
    """Represents a Todo item."""

    id: str
    """The ID of the Todo item."""

    text: str
    """The text of the Todo item."""

    is_completed: bool
    """A value indicating whether the Todo item has been completed."""

    last_updated: str
    """The date and time the Todo item was last updated."""

    @classmethod
    def generate_example(cls) -> TodoItemModel:
        return cls(
            id=str(TODO_ID_EXAMPLE.value),
            text="Buy eggs 🥚",
            is_completed=False,
            last_updated="2024-02-23 15:23:00Z",
        )


@openapi_example()
class TodoListViewModel(ApiModel):
    """Represents a collection of Todo items."""

    items: list[TodoItemModel]
    """The Todo items."""

    @classmethod
    def generate_example(cls) -> TodoListViewModel:
        return cls(items=[TodoItemModel.generate_example()])


@openapi_example()
class CreateTodoItemModel(ApiModel):
    """Represents the model for creating a new Todo item."""

    text: str
    """The text of the Todo item."""

    @classmethod
    def generate_example(cls) -> CreateTodoItemModel:
        return cls(text="Buy eggs 🥚")


@openapi_example()
class CreatedTodoItemModel(ApiModel):
    """Represents the model for a created Todo item."""

    id: str
    """The ID of the created Todo item."""

    @classmethod
    def generate_example(cls) -> CreatedTodoItemModel:
        return cls(id=str(TODO_ID_EXAMPLE.value))
