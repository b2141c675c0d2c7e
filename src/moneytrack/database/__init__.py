"""Document store layer for moneytrack application."""

from moneytrack.database.base import DocumentStore
from moneytrack.database.factories import create_sqlite_store

__all__ = ["DocumentStore", "create_sqlite_store"]
