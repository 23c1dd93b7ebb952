"""
API Models

Pydantic models exchanged by the Todo API.
"""

from todoapp.models.problem import ProblemDetails, ProblemDetailsExample
from todoapp.models.todo import (
    TODO_ID_EXAMPLE,
    CreatedTodoItemModel,
    CreateTodoItemModel,
    TodoItemModel,
    TodoListViewModel,
)

__all__ = [
    "TODO_ID_EXAMPLE",
    "CreateTodoItemModel",
    "CreatedTodoItemModel",
    "ProblemDetails",
    "ProblemDetailsExample",
    "TodoItemModel",
    "TodoListViewModel",
]
