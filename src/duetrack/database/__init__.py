"""Database layer for duetrack application."""

from duetrack.database.base import Database
from duetrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
