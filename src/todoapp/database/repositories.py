"""
Database Repositories

Repository pattern for database operations on todo items.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.database.models import TodoItemDB

logger = structlog.get_logger()


def utc_now() -> datetime:
    """Current UTC time."""
    return datetime.now(UTC)


class TodoRepository:
    """Repository for todo item database operations."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utc_now) -> None:
        self.session = session
        self.clock = clock

    async def add_item(self, text: str) -> TodoItemDB:
        """Create a new, incomplete item."""
        item = TodoItemDB(text=text, created_at=self.clock())
        self.session.add(item)
        await self.session.flush()

        logger.debug("Todo item created", item_id=str(item.id))
        return item

    async def complete_item(self, item_id: UUID) -> bool | None:
        """
        Mark an item as completed.

        Returns:
            True if the item was completed, False if it was already completed,
            None if no item has the ID
        """
        item = await self.get_item(item_id)

        if item is None:
            return None

        if item.completed_at is not None:
            return False

        item.completed_at = self.clock()
        await self.session.flush()

        logger.debug("Todo item completed", item_id=str(item_id))
        return True

    async def delete_item(self, item_id: UUID) -> bool:
        """Delete an item, returning whether it existed."""
        item = await self.get_item(item_id)

        if item is None:
            return False

        await self.session.delete(item)
        await self.session.flush()

        logger.debug("Todo item deleted", item_id=str(item_id))
        return True

    async def get_item(self, item_id: UUID) -> TodoItemDB | None:
        """Get item by ID."""
        return await self.session.get(TodoItemDB, item_id)

    async def get_items(self) -> list[TodoItemDB]:
        """Get all items, incomplete items first, then oldest first."""
        result = await self.session.execute(
            select(TodoItemDB).order_by(
                TodoItemDB.completed_at.is_not(None),
                TodoItemDB.created_at,
            )
        )
        return list(result.scalars().all())
