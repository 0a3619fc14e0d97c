"""Database layer for ledgerbook application."""

from ledgerbook.database.base import Database, LedgerUnit
from ledgerbook.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "LedgerUnit", "create_database", "create_sqlite_database"]
