"""
Todo Item Endpoints

CRUD endpoints for the current user's Todo items.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Response, status

from todoapp.docs.examples import example_registry, openapi_example
from todoapp.docs.openapi_metadata import OPENAPI_TAG
from todoapp.models.problem import ProblemDetails, ProblemDetailsExample
from todoapp.models.todo import (
    TODO_ID_EXAMPLE,
    CreatedTodoItemModel,
    CreateTodoItemModel,
    TodoItemModel,
    TodoListViewModel,
)
from todoapp.routes.errors import problem_response
from todoapp.services.todo_service import TodoService, get_todo_service

ITEMS_PREFIX = "/api/items"

router = APIRouter(prefix=ITEMS_PREFIX, tags=[OPENAPI_TAG])
logger = structlog.get_logger()

# Fallback examples for every operation in the group
example_registry.register_group(ITEMS_PREFIX, ProblemDetailsExample(), TODO_ID_EXAMPLE)

TodoServiceDep = Annotated[TodoService, Depends(get_todo_service)]

NOT_FOUND = {404: {"model": ProblemDetails, "description": "Not Found"}}
BAD_REQUEST = {400: {"model": ProblemDetails, "description": "Bad Request"}}


@router.get(
    "",
    response_model=TodoListViewModel,
    operation_id="ListTodos",
    summary="Get all Todo items",
    description="Gets all of the current user's todo items.",
    response_description="OK",
    response_model_exclude_none=True,
)
@openapi_example(TodoListViewModel)
async def list_todos(service: TodoServiceDep) -> TodoListViewModel:
    return await service.get_list()


@router.get(
    "/{id}",
    response_model=TodoItemModel,
    operation_id="GetTodo",
    summary="Get a specific Todo item",
    description="Gets the todo item with the specified ID.",
    response_description="OK",
    response_model_exclude_none=True,
    responses=NOT_FOUND,
)
@openapi_example(ProblemDetailsExample(), TodoItemModel)
async def get_todo(id: UUID, service: TodoServiceDep):
    model = await service.get(id)
    if model is None:
        return problem_response(status.HTTP_404_NOT_FOUND, "Item not found.")
    return model


@router.post(
    "",
    response_model=CreatedTodoItemModel,
    status_code=status.HTTP_201_CREATED,
    operation_id="CreateTodo",
    summary="Create a new Todo item",
    description="Creates a new todo item for the current user and returns its ID.",
    response_description="Created",
    response_model_exclude_none=True,
    responses=BAD_REQUEST,
)
@openapi_example(CreateTodoItemModel, CreatedTodoItemModel, ProblemDetailsExample())
async def create_todo(model: CreateTodoItemModel, response: Response, service: TodoServiceDep):
    if not model.text or not model.text.strip():
        return problem_response(status.HTTP_400_BAD_REQUEST, "No item text specified.")

    item_id = await service.add_item(model.text)
    logger.info("Todo item created", item_id=item_id)

    response.headers["Location"] = f"{ITEMS_PREFIX}/{item_id}"
    return CreatedTodoItemModel(id=item_id)


@router.post(
    "/{id}/complete",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    operation_id="CompleteTodo",
    summary="Mark a Todo item as completed",
    description="Marks the todo item with the specified ID as complete.",
    response_description="No Content",
    responses={**BAD_REQUEST, **NOT_FOUND},
)
@openapi_example(ProblemDetailsExample())
async def complete_todo(id: UUID, service: TodoServiceDep):
    was_completed = await service.complete_item(id)

    if was_completed is None:
        return problem_response(status.HTTP_404_NOT_FOUND, "Item not found.")
    if not was_completed:
        return problem_response(status.HTTP_400_BAD_REQUEST, "Item already completed.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    operation_id="DeleteTodo",
    summary="Delete a Todo item",
    description="Deletes the todo item with the specified ID.",
    response_description="No Content",
    responses=NOT_FOUND,
)
@openapi_example(ProblemDetailsExample())
async def delete_todo(id: UUID, service: TodoServiceDep):
    if not await service.delete_item(id):
        return problem_response(status.HTTP_404_NOT_FOUND, "Item not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
