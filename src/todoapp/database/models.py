"""
Database Models

SQLAlchemy ORM model for todo items.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Text, Uuid

from todoapp.database.connection import Base


class TodoItemDB(Base):
    """Todo item database model."""

    __tablename__ = "items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<TodoItemDB(id={self.id}, completed={self.completed_at is not None})>"
