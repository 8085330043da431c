"""SQLAlchemy implementation of the realtime document store.

Snapshots are pushed in-process: every committed write re-runs the query of
each active subscription on the written collection and hands the full result
to its callback.
"""

import uuid
from datetime import datetime, UTC
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from paytrack.database.base import (
    DocumentStore,
    Subscription,
    SnapshotCallback,
    ErrorCallback,
    SERVER_TIMESTAMP,
    DESCENDING,
)
from paytrack.database.models import FIELD_COLUMNS, create_session_factory
from paytrack.database.mappers import row_to_document, document_to_row_values, model_for
from paytrack.domain.errors import (
    MissingDocumentError,
    SubscriptionError,
    WriteError,
    document_not_found,
    subscription_failed,
)
from paytrack.logging_setup import get_logger

logger = get_logger(__name__)


class _Listener(Subscription):
    """A registered snapshot callback."""

    def __init__(
        self,
        store: "SQLAlchemyStore",
        app_id: str,
        collection: str,
        order_by: str,
        direction: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ):
        self.store = store
        self.app_id = app_id
        self.collection = collection
        self.order_by = order_by
        self.direction = direction
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self._active = True

    @property
    def key(self) -> tuple[str, str]:
        return (self.app_id, self.collection)

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self.store._remove_listener(self)


class SQLAlchemyStore(DocumentStore):
    """SQLAlchemy-based implementation of DocumentStore."""

    def __init__(self, database_url: str, clock: Optional[Callable[[], datetime]] = None):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
            clock: Server clock used for SERVER_TIMESTAMP fields
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self.clock = clock or (lambda: datetime.now(UTC))
        self._session: Optional[Session] = None
        self._listeners: dict[tuple[str, str], list[_Listener]] = {}

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the store and drop every subscription."""
        for listeners in list(self._listeners.values()):
            for listener in list(listeners):
                listener.cancel()
        self._listeners.clear()
        if self._session is not None:
            self._session.close()
            self._session = None

    def listener_count(self, app_id: str, collection: str) -> int:
        """Return the number of active subscriptions on a collection."""
        return len(self._listeners.get((app_id, collection), []))

    # Subscriptions
    def subscribe(
        self,
        app_id: str,
        collection: str,
        order_by: str,
        direction: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        """Subscribe to an ordered collection query."""
        listener = _Listener(self, app_id, collection, order_by, direction, on_snapshot, on_error)

        if collection not in FIELD_COLUMNS or order_by not in FIELD_COLUMNS[collection]:
            listener._active = False
            on_error(
                SubscriptionError(
                    collection,
                    subscription_failed(collection, ValueError(f"cannot order by '{order_by}'")),
                )
            )
            return listener

        self._listeners.setdefault(listener.key, []).append(listener)
        logger.debug("Subscribed to %s/%s ordered by %s %s", app_id, collection, order_by, direction)
        self._deliver(listener)
        return listener

    def _remove_listener(self, listener: _Listener) -> None:
        listeners = self._listeners.get(listener.key, [])
        if listener in listeners:
            listeners.remove(listener)
            logger.debug("Unsubscribed from %s/%s", listener.app_id, listener.collection)

    def _query(self, listener: _Listener) -> list[dict[str, Any]]:
        model = model_for(listener.collection)
        column = getattr(model, FIELD_COLUMNS[listener.collection][listener.order_by])
        if listener.direction == DESCENDING:
            ordering = (column.desc(), model.seq.desc())
        else:
            ordering = (column.asc(), model.seq.asc())

        session = self._get_session()
        rows = session.query(model).filter(model.app_id == listener.app_id).order_by(*ordering).all()
        return [row_to_document(listener.collection, row) for row in rows]

    def _deliver(self, listener: _Listener) -> None:
        try:
            documents = self._query(listener)
        except SQLAlchemyError as e:
            self._get_session().rollback()
            listener.cancel()
            logger.error("Snapshot query for %s/%s failed: %s", listener.app_id, listener.collection, e)
            listener.on_error(SubscriptionError(listener.collection, subscription_failed(listener.collection, e)))
            return
        listener.on_snapshot(documents)

    def _notify(self, app_id: str, collection: str) -> None:
        # Callbacks may cancel subscriptions, so iterate over a copy
        for listener in list(self._listeners.get((app_id, collection), [])):
            if listener.active:
                self._deliver(listener)

    # Writes
    def _row_values(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        if collection not in FIELD_COLUMNS:
            raise WriteError(f"Unknown collection '{collection}'")
        now = self.clock()
        resolved = {
            field: (now if value is SERVER_TIMESTAMP else value)
            for field, value in fields.items()
            if field != "id"
        }
        try:
            return document_to_row_values(collection, resolved)
        except KeyError as e:
            raise WriteError(f"Unknown field {e} for collection '{collection}'")

    def _commit(self, action: str, collection: str) -> None:
        session = self._get_session()
        try:
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise WriteError(f"Could not {action} {collection} document: {e}") from e

    def _find_row(self, app_id: str, collection: str, document_id: str):
        model = model_for(collection)
        session = self._get_session()
        row = session.query(model).filter(model.app_id == app_id, model.id == document_id).first()
        if row is None:
            raise MissingDocumentError(document_not_found(collection, document_id))
        return row

    def insert(self, app_id: str, collection: str, fields: dict[str, Any]) -> str:
        """Insert a document. Returns the new document ID."""
        values = self._row_values(collection, fields)
        document_id = uuid.uuid4().hex[:20]
        model = model_for(collection)
        self._get_session().add(model(id=document_id, app_id=app_id, **values))
        self._commit("insert", collection)
        logger.info("Inserted %s/%s/%s", app_id, collection, document_id)
        self._notify(app_id, collection)
        return document_id

    def update(self, app_id: str, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document."""
        values = self._row_values(collection, fields)
        row = self._find_row(app_id, collection, document_id)
        for column, value in values.items():
            setattr(row, column, value)
        self._commit("update", collection)
        logger.info("Updated %s/%s/%s", app_id, collection, document_id)
        self._notify(app_id, collection)

    def delete(self, app_id: str, collection: str, document_id: str) -> None:
        """Delete a document."""
        if collection not in FIELD_COLUMNS:
            raise WriteError(f"Unknown collection '{collection}'")
        row = self._find_row(app_id, collection, document_id)
        self._get_session().delete(row)
        self._commit("delete", collection)
        logger.info("Deleted %s/%s/%s", app_id, collection, document_id)
        self._notify(app_id, collection)
