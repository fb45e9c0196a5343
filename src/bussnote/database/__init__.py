"""Database layer for bussnote application."""

from bussnote.database.base import Database
from bussnote.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
