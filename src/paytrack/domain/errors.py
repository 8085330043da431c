"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class AuthError(DomainError):
    """Anonymous session could not be established."""


class SubscriptionError(DomainError):
    """A collection's realtime feed failed."""

    def __init__(self, collection: str, message: str):
        super().__init__(message)
        self.collection = collection


class WriteError(DomainError):
    """A create, update or delete against the store failed."""


class MissingDocumentError(WriteError, NotFoundError):
    """Update or delete addressed a document that does not exist."""


class EditorStateError(DomainError):
    """Operation is not allowed in the editor's current state."""


def document_not_found(collection: str, document_id: str) -> str:
    """Return message for a missing document."""
    return f"{collection[:-1].capitalize()} '{document_id}' not found"


def name_required(kind: str) -> str:
    """Return message for an empty entity name."""
    return f"{kind.capitalize()} name is required"


def unknown_choice(kind: str, value: Optional[str], choices: list[str]) -> str:
    """Return message for a value outside a fixed set of choices."""
    return f"Unknown {kind} '{value}'. Expected one of: {', '.join(choices)}"


def no_session() -> str:
    """Return message for writes attempted before a session exists."""
    return "Not connected: no session has been established"


def subscription_failed(collection: str, error: BaseException) -> str:
    """Return message for a failed collection feed."""
    return f"Subscription to '{collection}' failed: {error}"
