"""
Todo Service

Todo item operations for the API layer, mapping stored items to API models.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.database.connection import get_session
from todoapp.database.models import TodoItemDB
from todoapp.database.repositories import TodoRepository, utc_now
from todoapp.models.todo import TodoItemModel, TodoListViewModel

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as universal sortable date/time (``2024-02-23 15:23:00Z``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%SZ")


class TodoService:
    """
    Todo item service.

    Each operation runs in its own unit of work, committed before the
    operation returns.
    """

    def __init__(
        self,
        session_factory: SessionFactory = get_session,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session_factory = session_factory
        self.clock = clock

    async def add_item(self, text: str) -> str:
        async with self.session_factory() as session:
            item = await TodoRepository(session, self.clock).add_item(text)
            return str(item.id)

    async def complete_item(self, item_id: UUID) -> bool | None:
        async with self.session_factory() as session:
            return await TodoRepository(session, self.clock).complete_item(item_id)

    async def delete_item(self, item_id: UUID) -> bool:
        async with self.session_factory() as session:
            return await TodoRepository(session, self.clock).delete_item(item_id)

    async def get(self, item_id: UUID) -> TodoItemModel | None:
        async with self.session_factory() as session:
            item = await TodoRepository(session, self.clock).get_item(item_id)
            return None if item is None else self._map_item(item)

    async def get_list(self) -> TodoListViewModel:
        async with self.session_factory() as session:
            items = await TodoRepository(session, self.clock).get_items()
            return TodoListViewModel(items=[self._map_item(item) for item in items])

    @staticmethod
    def _map_item(item: TodoItemDB) -> TodoItemModel:
        return TodoItemModel(
            id=str(item.id),
            text=item.text,
            is_completed=item.completed_at is not None,
            last_updated=format_timestamp(item.completed_at or item.created_at),
        )


def get_todo_service() -> TodoService:
    """FastAPI dependency providing the todo service."""
    return TodoService()
