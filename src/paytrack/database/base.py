"""Abstract document store and identity provider interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from paytrack.domain.entities import Session

Document = dict[str, Any]
SnapshotCallback = Callable[[list[Document]], None]
ErrorCallback = Callable[[Exception], None]
SessionHandler = Callable[[Optional[Session]], None]


class _ServerTimestamp:
    """Placeholder replaced with the store's clock at write time."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

ASCENDING = "asc"
DESCENDING = "desc"


class Subscription(ABC):
    """Handle for an open snapshot subscription."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop delivering snapshots. Calling it again has no effect."""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        """True until the subscription is cancelled or fails."""
        pass


class DocumentStore(ABC):
    """Realtime document store addressed by (app_id, collection)."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store and drop every subscription."""
        pass

    @abstractmethod
    def subscribe(
        self,
        app_id: str,
        collection: str,
        order_by: str,
        direction: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        """Subscribe to an ordered collection query.

        The current snapshot is delivered before this returns, and a new full
        snapshot follows every committed write to the collection. Failures are
        passed to on_error, after which the subscription is inactive.
        """
        pass

    @abstractmethod
    def insert(self, app_id: str, collection: str, fields: Document) -> str:
        """Insert a document. Returns the new document ID.

        Raises:
            WriteError: If the write fails
        """
        pass

    @abstractmethod
    def update(self, app_id: str, collection: str, document_id: str, fields: Document) -> None:
        """Merge fields into an existing document.

        Raises:
            MissingDocumentError: If the document does not exist
            WriteError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, app_id: str, collection: str, document_id: str) -> None:
        """Delete a document.

        Raises:
            MissingDocumentError: If the document does not exist
            WriteError: If the write fails
        """
        pass


class IdentityProvider(ABC):
    """Issues anonymous sessions and reports session changes."""

    @abstractmethod
    def establish_anonymous_session(self) -> Session:
        """Sign in anonymously.

        Raises:
            AuthError: If no session could be established
        """
        pass

    @abstractmethod
    def on_session_change(self, handler: SessionHandler) -> Callable[[], None]:
        """Register a handler called with the current session, then on every change.

        Returns:
            Callable that unregisters the handler
        """
        pass

    @abstractmethod
    def sign_out(self) -> None:
        """Drop the current session."""
        pass

    @property
    @abstractmethod
    def current_session(self) -> Optional[Session]:
        """The current session, or None."""
        pass
