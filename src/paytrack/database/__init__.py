"""Store layer for paytrack application."""

from paytrack.database.base import DocumentStore, IdentityProvider, Subscription, SERVER_TIMESTAMP
from paytrack.database.factories import create_sqlite_store, create_identity_provider

__all__ = [
    "DocumentStore",
    "IdentityProvider",
    "Subscription",
    "SERVER_TIMESTAMP",
    "create_sqlite_store",
    "create_identity_provider",
]
