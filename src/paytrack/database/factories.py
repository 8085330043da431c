"""Factory functions for creating stores and identity providers."""

import os
from pathlib import Path
from typing import Optional

from paytrack.database.identity import LocalIdentityProvider
from paytrack.database.sqlalchemy_store import SQLAlchemyStore

DEFAULT_APP_ID = "default-app"


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed document store.

    Args:
        database_path: Path to SQLite database file. If None, checks PAYTRACK_DB_PATH
            environment variable, then defaults to ~/.paytrack/paytrack.db

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("PAYTRACK_DB_PATH")

    if database_path is None:
        # Default to ~/.paytrack/paytrack.db
        db_dir = Path.home() / ".paytrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "paytrack.db")

    return SQLAlchemyStore(f"sqlite:///{database_path}")


def create_identity_provider(uid: Optional[str] = None) -> LocalIdentityProvider:
    """Create the anonymous identity provider."""
    return LocalIdentityProvider(uid=uid)


def resolve_app_id(app_id: Optional[str] = None) -> str:
    """Return the collection path segment from the argument, PAYTRACK_APP_ID, or the default."""
    if app_id:
        return app_id
    return os.environ.get("PAYTRACK_APP_ID") or DEFAULT_APP_ID
