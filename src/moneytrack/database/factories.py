"""Document store factory functions."""

import os
from pathlib import Path
from typing import Optional

from moneytrack.database.sqlalchemy_store import SQLAlchemyDocumentStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyDocumentStore:
    """Create a SQLite-backed document store.

    Args:
        database_path: Path to SQLite database file. If None, checks MONEYTRACK_DB_PATH
            environment variable, then defaults to ~/.moneytrack/moneytrack.db

    Returns:
        SQLAlchemyDocumentStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("MONEYTRACK_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".moneytrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "moneytrack.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDocumentStore(database_url)
