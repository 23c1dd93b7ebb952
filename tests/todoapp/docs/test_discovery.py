"""
Tests for route discovery.
"""

import uuid

from todoapp.docs.discovery import api_routes, describe_routes, model_types, parameter_schema, schema_types
from todoapp.models.problem import ProblemDetails
from todoapp.models.todo import (
    CreatedTodoItemModel,
    CreateTodoItemModel,
    TodoItemModel,
    TodoListViewModel,
)


def test_only_documented_routes(app):
    """Test that document and UI routes are not described."""
    paths = {route.path_format for route in api_routes(app.routes)}

    assert paths == {"/api/items", "/api/items/{id}", "/api/items/{id}/complete"}


def test_describe_routes(app):
    """Test the metadata of each operation."""
    routes = {route.operation_id: route for route in describe_routes(app.routes)}

    assert set(routes) == {"ListTodos", "GetTodo", "CreateTodo", "CompleteTodo", "DeleteTodo"}

    get_todo = routes["GetTodo"]
    assert get_todo.method == "get"
    assert get_todo.path == "/api/items/{id}"
    assert [(p.name, p.location, p.declared_type) for p in get_todo.parameters] == [("id", "path", uuid.UUID)]
    assert get_todo.response_type(200) is TodoItemModel
    assert get_todo.response_type("404") is ProblemDetails

    create_todo = routes["CreateTodo"]
    assert create_todo.body_type is CreateTodoItemModel
    assert create_todo.body_required is True
    assert create_todo.parameters == []
    assert create_todo.response_type(201) is CreatedTodoItemModel

    complete_todo = routes["CompleteTodo"]
    assert [response.status_code for response in complete_todo.responses] == [204, 400, 404]
    assert complete_todo.response_type(204) is None


def test_schema_types(app):
    """Test that nested models are collected by name."""
    assert schema_types(describe_routes(app.routes)) == {
        "TodoListViewModel": TodoListViewModel,
        "TodoItemModel": TodoItemModel,
        "CreateTodoItemModel": CreateTodoItemModel,
        "CreatedTodoItemModel": CreatedTodoItemModel,
        "ProblemDetails": ProblemDetails,
    }
    assert model_types(list[TodoListViewModel]) == [TodoListViewModel, TodoItemModel]


def test_parameter_schema_has_no_title():
    assert parameter_schema(uuid.UUID) == {"type": "string", "format": "uuid"}


def test_parameters_of_dependencies():
    """Test that dependency parameters are found once, grouped by location."""
    from typing import Annotated

    from fastapi import Depends, FastAPI, Header, Query

    def paging(limit: int = Query(10), tenant: str = Header(...)) -> int:
        return limit

    def scoped(tenant: str = Header(...), paged: int = Depends(paging)) -> str:
        return tenant

    app = FastAPI()

    @app.get("/things/{name}", operation_id="ListThings")
    async def list_things(name: str, scope: Annotated[str, Depends(scoped)], limit: int = Query(10)):
        return []

    (route,) = describe_routes(app.routes)

    assert [(p.name, p.location, p.declared_type, p.required) for p in route.parameters] == [
        ("name", "path", str, True),
        ("limit", "query", int, False),
        ("tenant", "header", str, True),
    ]
