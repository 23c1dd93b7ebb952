"""
Database Package

SQLAlchemy async engine, ORM models, and repositories for todo items.
"""

from todoapp.database.connection import Base, close_db, get_session, init_db

__all__ = ["Base", "close_db", "get_session", "init_db"]
