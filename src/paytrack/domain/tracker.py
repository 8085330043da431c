"""Domain state container for projects, vendors and payments.

PaymentTracker mirrors the three store collections in memory. Mirrors are
replaced wholesale by snapshot callbacks and are never edited locally; every
change goes through the save and delete methods, and comes back as a new
snapshot.
"""

from typing import Any, Callable, Mapping, Optional

from paytrack.database.base import (
    DocumentStore,
    IdentityProvider,
    Subscription,
    SERVER_TIMESTAMP,
    DESCENDING,
)
from paytrack.database.factories import DEFAULT_APP_ID
from paytrack.database.mappers import (
    project_from_document,
    vendor_from_document,
    payment_from_document,
)
from paytrack.domain.dashboard import DashboardAggregator, DashboardSummary
from paytrack.domain.entities import (
    Collection,
    DEFAULT_VENDOR_TYPE,
    Payment,
    Project,
    Session,
    Vendor,
    VendorType,
    WriteResult,
)
from paytrack.domain.errors import (
    AuthError,
    SubscriptionError,
    ValidationError,
    WriteError,
    name_required,
    no_session,
    subscription_failed,
    unknown_choice,
)
from paytrack.domain.status import is_known_status, status_choices
from paytrack.logging_setup import get_logger
from paytrack.utils.amount_parser import coerce_amount

logger = get_logger(__name__)

# Collection -> (order field, direction)
ORDERING = {
    Collection.PROJECTS: ("createdAt", DESCENDING),
    Collection.VENDORS: ("createdAt", DESCENDING),
    Collection.PAYMENTS: ("date", DESCENDING),
}

# Payment form field -> document field
PAYMENT_FIELDS = {
    "project_id": "projectId",
    "project_name": "projectName",
    "vendor_id": "vendorId",
    "vendor_name": "vendorName",
    "item": "item",
    "amount": "amount",
    "expected_date": "date",
    "status": "status",
}

READ_ONLY_FIELDS = {"id", "created_at", "updated_at"}

Listener = Callable[["PaymentTracker"], None]


class PaymentTracker:
    """Mirrors the store collections and owns the save/delete contract."""

    def __init__(self, store: DocumentStore, identity: IdentityProvider, app_id: str = DEFAULT_APP_ID):
        """Initialize tracker.

        Args:
            store: Document store holding the collections
            identity: Identity provider gating store access
            app_id: Path segment the collections live under
        """
        self.store = store
        self.identity = identity
        self.app_id = app_id

        self.session: Optional[Session] = None
        self.auth_error: Optional[AuthError] = None
        self.errors: dict[str, SubscriptionError] = {}

        self.projects: tuple[Project, ...] = ()
        self.vendors: tuple[Vendor, ...] = ()
        self.payments: tuple[Payment, ...] = ()

        self._subscriptions: list[Subscription] = []
        self._generation = 0
        self._loaded: set[Collection] = set()
        self._listeners: list[Listener] = []
        self._unregister_session: Optional[Callable[[], None]] = None
        self._aggregator = DashboardAggregator()

    # Lifecycle
    @property
    def ready(self) -> bool:
        """True once every collection has delivered a snapshot for the current session."""
        return self.session is not None and len(self._loaded) == len(ORDERING)

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def start(self) -> "PaymentTracker":
        """Watch the session and sign in anonymously.

        An AuthError is logged and kept in auth_error; the tracker then stays
        in the connecting state.
        """
        if self._unregister_session is None:
            self._unregister_session = self.identity.on_session_change(self._handle_session_change)

        if self.identity.current_session is None:
            try:
                self.identity.establish_anonymous_session()
                self.auth_error = None
            except AuthError as e:
                self.auth_error = e
                logger.error("Could not establish session: %s", e)
        return self

    def stop(self) -> None:
        """Cancel every subscription and stop watching the session."""
        self._cancel_subscriptions()
        if self._unregister_session is not None:
            self._unregister_session()
            self._unregister_session = None
        self.session = None

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every mirror replacement.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _handle_session_change(self, session: Optional[Session]) -> None:
        self._cancel_subscriptions()
        self.session = session
        self._loaded.clear()
        self.errors.clear()

        if session is None:
            logger.info("Session ended; subscriptions closed")
            return

        logger.info("Session %s established; subscribing to %s", session.uid, self.app_id)
        for collection, (order_by, direction) in ORDERING.items():
            self._subscribe(collection, order_by, direction)

    def _subscribe(self, collection: Collection, order_by: str, direction: str) -> None:
        generation = self._generation

        def on_snapshot(documents: list[dict[str, Any]]) -> None:
            if generation == self._generation:
                self._apply_snapshot(collection, documents)

        def on_error(error: Exception) -> None:
            if generation == self._generation:
                self._record_error(collection, error)

        try:
            subscription = self.store.subscribe(
                self.app_id, collection.value, order_by, direction, on_snapshot, on_error
            )
        except Exception as e:
            self._record_error(collection, e)
            return
        self._subscriptions.append(subscription)

    def _cancel_subscriptions(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        # Snapshots from earlier batches are ignored from here on
        self._generation += 1
        for subscription in subscriptions:
            subscription.cancel()

    def _apply_snapshot(self, collection: Collection, documents: list[dict[str, Any]]) -> None:
        if collection is Collection.PROJECTS:
            self.projects = tuple(project_from_document(doc) for doc in documents)
        elif collection is Collection.VENDORS:
            self.vendors = tuple(vendor_from_document(doc) for doc in documents)
        else:
            self.payments = tuple(payment_from_document(doc) for doc in documents)

        self._loaded.add(collection)
        logger.debug("Snapshot for %s: %d documents", collection.value, len(documents))
        self._notify_listeners()

    def _record_error(self, collection: Collection, error: Exception) -> None:
        if not isinstance(error, SubscriptionError):
            error = SubscriptionError(collection.value, subscription_failed(collection.value, error))
        self.errors[collection.value] = error
        logger.error("%s", error)
        self._notify_listeners()

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Tracker listener %r failed", listener)

    # Lookups
    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def get_vendor(self, vendor_id: str) -> Optional[Vendor]:
        return next((v for v in self.vendors if v.id == vendor_id), None)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return next((p for p in self.payments if p.id == payment_id), None)

    def find_project(self, name_or_id: str) -> Optional[Project]:
        """Find a project by ID, then by exact name."""
        return self.get_project(name_or_id) or next(
            (p for p in self.projects if p.name == name_or_id), None
        )

    def find_vendor(self, name_or_id: str) -> Optional[Vendor]:
        """Find a vendor by ID, then by exact name."""
        return self.get_vendor(name_or_id) or next(
            (v for v in self.vendors if v.name == name_or_id), None
        )

    def dashboard(self, today=None) -> DashboardSummary:
        """Dashboard summary of the current payments, recomputed only when they change."""
        return self._aggregator.summary(self.payments, today=today)

    # Writes
    def save_project(self, data: Mapping[str, Any]) -> WriteResult:
        """Create or update a project.

        Args:
            data: Project fields; with "id" the fields are merged into that project

        Returns:
            WriteResult with the project ID

        Raises:
            ValidationError: If the name is missing or empty
        """
        fields: dict[str, Any] = {}
        if "name" in data or not data.get("id"):
            fields["name"] = self._require_name("project", data.get("name"))
        self._reject_unknown(data, {"name"})
        return self._save(Collection.PROJECTS, data.get("id"), fields)

    def save_vendor(self, data: Mapping[str, Any]) -> WriteResult:
        """Create or update a vendor.

        Args:
            data: Vendor fields (name, type); with "id" the fields are merged

        Returns:
            WriteResult with the vendor ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
        """
        is_insert = not data.get("id")
        fields: dict[str, Any] = {}
        if "name" in data or is_insert:
            fields["name"] = self._require_name("vendor", data.get("name"))
        if "type" in data or is_insert:
            vendor_type = data.get("type") or DEFAULT_VENDOR_TYPE.value
            if isinstance(vendor_type, VendorType):
                vendor_type = vendor_type.value
            choices = [t.value for t in VendorType]
            if vendor_type not in choices:
                raise ValidationError(unknown_choice("vendor type", vendor_type, choices))
            fields["type"] = vendor_type
        self._reject_unknown(data, {"name", "type"})
        return self._save(Collection.VENDORS, data.get("id"), fields)

    def save_payment(self, data: Mapping[str, Any]) -> WriteResult:
        """Create or update a payment.

        Only the fields present in data are written on update. The amount is
        coerced (empty or invalid becomes 0). New payments get createdAt and
        updatedAt stamps; updates get updatedAt.

        Args:
            data: Payment form fields, optionally with "id"

        Returns:
            WriteResult with the payment ID

        Raises:
            ValidationError: If the status is not a known status
                (a stored unknown status may be written back unchanged)
        """
        self._reject_unknown(data, set(PAYMENT_FIELDS))
        fields: dict[str, Any] = {}
        for key, document_field in PAYMENT_FIELDS.items():
            if key not in data:
                continue
            value = data[key]
            if key == "amount":
                value = coerce_amount(value)
            elif key == "status":
                value = getattr(value, "value", value)
                if not is_known_status(value) and not self._is_stored_status(data.get("id"), value):
                    raise ValidationError(unknown_choice("status", value, status_choices()))
            elif value is None:
                value = ""
            fields[document_field] = value

        is_insert = not data.get("id")
        if is_insert:
            fields.setdefault("status", status_choices()[0])
            fields.setdefault("amount", coerce_amount(None))
        return self._save(Collection.PAYMENTS, data.get("id"), fields, stamp_updated_on_insert=True)

    def delete_project(self, project_id: str) -> WriteResult:
        """Delete a project immediately. Payments keep their copied project name."""
        return self._delete(Collection.PROJECTS, project_id)

    def delete_vendor(self, vendor_id: str) -> WriteResult:
        """Delete a vendor immediately. Payments keep their copied vendor name."""
        return self._delete(Collection.VENDORS, vendor_id)

    def delete_payment(self, payment_id: str) -> WriteResult:
        """Delete a payment immediately."""
        return self._delete(Collection.PAYMENTS, payment_id)

    def _is_stored_status(self, payment_id: Optional[str], status: Any) -> bool:
        payment = self.get_payment(payment_id) if payment_id else None
        return payment is not None and payment.status == status

    @staticmethod
    def _require_name(kind: str, name: Any) -> str:
        name = str(name or "").strip()
        if not name:
            raise ValidationError(name_required(kind))
        return name

    @staticmethod
    def _reject_unknown(data: Mapping[str, Any], allowed: set[str]) -> None:
        unknown = set(data) - allowed - READ_ONLY_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    def _not_connected(self, document_id: Optional[str]) -> WriteResult:
        message = no_session()
        logger.warning("%s; write skipped", message)
        return WriteResult(ok=False, id=document_id, error=WriteError(message))

    def _save(
        self,
        collection: Collection,
        document_id: Optional[str],
        fields: dict[str, Any],
        stamp_updated_on_insert: bool = False,
    ) -> WriteResult:
        if self.session is None:
            return self._not_connected(document_id)

        try:
            if document_id:
                fields["updatedAt"] = SERVER_TIMESTAMP
                self.store.update(self.app_id, collection.value, document_id, fields)
                return WriteResult(ok=True, id=document_id)

            fields["createdAt"] = SERVER_TIMESTAMP
            if stamp_updated_on_insert:
                fields["updatedAt"] = SERVER_TIMESTAMP
            new_id = self.store.insert(self.app_id, collection.value, fields)
            return WriteResult(ok=True, id=new_id)
        except WriteError as e:
            logger.error("Saving to %s failed: %s", collection.value, e)
            return WriteResult(ok=False, id=document_id, error=e)

    def _delete(self, collection: Collection, document_id: str) -> WriteResult:
        if self.session is None:
            return self._not_connected(document_id)

        try:
            self.store.delete(self.app_id, collection.value, document_id)
        except WriteError as e:
            logger.error("Deleting from %s failed: %s", collection.value, e)
            return WriteResult(ok=False, id=document_id, error=e)
        return WriteResult(ok=True, id=document_id)
