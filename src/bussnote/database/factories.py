"""Factories for the ledger database gateway."""

from typing import Optional

from bussnote.config import default_database_path
from bussnote.database.sqlalchemy_db import SQLAlchemyDatabase


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Open a gateway on any SQLAlchemy URL (e.g. 'sqlite:///:memory:')."""
    return SQLAlchemyDatabase(database_url)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open a gateway on a SQLite file.

    Args:
        database_path: SQLite file. When omitted, BUSSNOTE_DB_PATH is used,
            falling back to ~/.bussnote/bussnote.db

    Returns:
        SQLAlchemyDatabase bound to the file
    """
    return create_database(f"sqlite:///{database_path or default_database_path()}")
