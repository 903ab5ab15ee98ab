"""Factories for the export history database."""

import os
from pathlib import Path
from typing import Optional

from chaintrack.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "CHAINTRACK_DB_PATH"


def default_database_path() -> Path:
    """``~/.chaintrack/chaintrack.db``, creating the directory if needed."""
    db_dir = Path.home() / ".chaintrack"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / "chaintrack.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create the SQLite-backed export history database.

    Resolution order: ``database_path``, then ``$CHAINTRACK_DB_PATH``, then
    ``default_database_path()``.
    """
    path = database_path or os.environ.get(DB_PATH_ENV) or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
