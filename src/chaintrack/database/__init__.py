"""Database layer for chaintrack export history."""

from chaintrack.database.base import Database
from chaintrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
