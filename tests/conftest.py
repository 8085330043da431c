"""Shared pytest fixtures for paytrack tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
from decimal import Decimal
from typing import Optional

import pytest

from paytrack.database.base import DocumentStore, IdentityProvider, Subscription
from paytrack.database.factories import create_sqlite_store
from paytrack.database.identity import LocalIdentityProvider
from paytrack.database.sqlalchemy_store import SQLAlchemyStore
from paytrack.domain.editor import PaymentEditor
from paytrack.domain.entities import Payment
from paytrack.domain.errors import AuthError, MissingDocumentError, WriteError
from paytrack.domain.tracker import PaymentTracker


class FakeSubscription(Subscription):
    """Subscription handle that counts cancellations."""

    def __init__(self, store, collection, on_snapshot, on_error):
        self.store = store
        self.collection = collection
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.cancel_count = 0

    @property
    def active(self):
        return self.cancel_count == 0

    def cancel(self):
        self.cancel_count += 1


class FakeStore(DocumentStore):
    """In-memory store that records calls and can be told to fail."""

    def __init__(self):
        self.documents: dict[str, dict[str, dict]] = {"projects": {}, "vendors": {}, "payments": {}}
        self.subscriptions: list[FakeSubscription] = []
        self.calls: list[tuple] = []
        self.failing_subscriptions: set[str] = set()
        self.fail_writes = False
        self._next_id = 0

    def connect(self):
        pass

    def disconnect(self):
        pass

    def active_subscriptions(self, collection: Optional[str] = None):
        return [
            s for s in self.subscriptions
            if s.active and (collection is None or s.collection == collection)
        ]

    def subscribe(self, app_id, collection, order_by, direction, on_snapshot, on_error):
        self.calls.append(("subscribe", collection, order_by, direction))
        subscription = FakeSubscription(self, collection, on_snapshot, on_error)
        self.subscriptions.append(subscription)
        if collection in self.failing_subscriptions:
            on_error(RuntimeError("permission denied"))
        else:
            on_snapshot(list(self.documents[collection].values()))
        return subscription

    def emit(self, collection, documents):
        """Push a snapshot to every active subscription on a collection."""
        for subscription in self.active_subscriptions(collection):
            subscription.on_snapshot(documents)

    def emit_error(self, collection, error):
        for subscription in self.active_subscriptions(collection):
            subscription.on_error(error)

    def _publish(self, collection):
        self.emit(collection, list(self.documents[collection].values()))

    def insert(self, app_id, collection, fields):
        self.calls.append(("insert", collection, None, dict(fields)))
        if self.fail_writes:
            raise WriteError("network unavailable")
        self._next_id += 1
        document_id = f"{collection[0]}{self._next_id}"
        self.documents[collection][document_id] = {"id": document_id, **fields}
        self._publish(collection)
        return document_id

    def update(self, app_id, collection, document_id, fields):
        self.calls.append(("update", collection, document_id, dict(fields)))
        if self.fail_writes:
            raise WriteError("network unavailable")
        if document_id not in self.documents[collection]:
            raise MissingDocumentError(f"{document_id} not found")
        self.documents[collection][document_id].update(fields)
        self._publish(collection)

    def delete(self, app_id, collection, document_id):
        self.calls.append(("delete", collection, document_id, None))
        if self.fail_writes:
            raise WriteError("network unavailable")
        if document_id not in self.documents[collection]:
            raise MissingDocumentError(f"{document_id} not found")
        del self.documents[collection][document_id]
        self._publish(collection)

    def write_calls(self):
        return [call for call in self.calls if call[0] != "subscribe"]


class FailingIdentityProvider(IdentityProvider):
    """Identity provider whose sign-in always fails."""

    def __init__(self):
        self.handlers = []
        self.attempts = 0

    @property
    def current_session(self):
        return None

    def establish_anonymous_session(self):
        self.attempts += 1
        raise AuthError("anonymous sign-in is disabled")

    def on_session_change(self, handler):
        self.handlers.append(handler)
        handler(None)
        return lambda: self.handlers.remove(handler)

    def sign_out(self):
        pass


class StepClock:
    """Server clock that advances one second per reading."""

    def __init__(self, start=datetime(2024, 5, 1, 9, 0, 0, tzinfo=UTC)):
        self.current = start

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def temp_store():
    """Create a temporary SQLite-backed store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clocked_store():
    """Create a temporary store whose server clock advances one second per write."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = SQLAlchemyStore(f"sqlite:///{db_path}", clock=StepClock())
    store.database_path = db_path

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def identity():
    """Create a local anonymous identity provider."""
    return LocalIdentityProvider()


@pytest.fixture
def tracker(temp_store, identity):
    """Create a started PaymentTracker over the temporary store."""
    tracker = PaymentTracker(temp_store, identity, app_id="test-app")
    tracker.start()
    yield tracker
    tracker.stop()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fake_tracker(fake_store, identity):
    """Create a started PaymentTracker over the in-memory fake store."""
    tracker = PaymentTracker(fake_store, identity, app_id="test-app")
    tracker.start()
    yield tracker
    tracker.stop()


@pytest.fixture
def editor(tracker):
    return PaymentEditor(tracker)


@pytest.fixture
def sample_project(tracker):
    """Create a sample project for testing."""
    result = tracker.save_project({"name": "Site A"})
    return tracker.get_project(result.id)


@pytest.fixture
def sample_vendor(tracker):
    """Create a sample vendor for testing."""
    result = tracker.save_vendor({"name": "ACME Electric", "type": "electrical"})
    return tracker.get_vendor(result.id)


@pytest.fixture
def make_payment():
    """Build Payment entities with sensible defaults."""
    counter = {"n": 0}

    def _make(status="draft", amount=Decimal("0"), expected_date="2024-05-01", **overrides):
        counter["n"] += 1
        values = dict(
            id=f"pay{counter['n']}",
            project_id="p1",
            project_name="Site A",
            vendor_id="v1",
            vendor_name="ACME Electric",
            item="Wiring",
            amount=amount,
            expected_date=expected_date,
            status=status,
            created_at=None,
            updated_at=None,
        )
        values.update(overrides)
        return Payment(**values)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
