"""Payment editor state machine.

One editor instance models the payment form. It is either closed, open for a
new payment, open on an existing payment, or submitting. Submitting waits for
the tracker's write result: on success the editor closes, on failure it goes
back to the open state with the form intact and ``error`` set.
"""

from enum import Enum
from typing import Any, Optional

from paytrack.domain.entities import Payment, PaymentStatus, Project, Vendor, WriteResult
from paytrack.domain.errors import EditorStateError, ValidationError
from paytrack.domain.tracker import PaymentTracker
from paytrack.logging_setup import get_logger

logger = get_logger(__name__)


class EditorState(str, Enum):
    CLOSED = "closed"
    OPEN_FOR_CREATE = "open_for_create"
    OPEN_FOR_EDIT = "open_for_edit"
    SUBMITTING = "submitting"


DEFAULT_FORM: dict[str, Any] = {
    "project_id": "",
    "project_name": "",
    "vendor_id": "",
    "vendor_name": "",
    "item": "",
    "amount": "",
    "expected_date": "",
    "status": PaymentStatus.DRAFT.value,
}

# Reference fields are only set through select_project/select_vendor
EDITABLE_FIELDS = ("item", "amount", "expected_date", "status")

OPEN_STATES = (EditorState.OPEN_FOR_CREATE, EditorState.OPEN_FOR_EDIT)


class PaymentEditor:
    """Form state for creating or editing a single payment."""

    def __init__(self, tracker: PaymentTracker):
        self.tracker = tracker
        self.state = EditorState.CLOSED
        self.form: dict[str, Any] = {}
        self.payment_id: Optional[str] = None
        self.error: Optional[Exception] = None

    @property
    def is_open(self) -> bool:
        return self.state in OPEN_STATES

    def open(self, payment: Optional[Payment] = None) -> None:
        """Open the form, in create mode without a payment, in edit mode with one."""
        if self.state is EditorState.SUBMITTING:
            raise EditorStateError("Cannot open the editor while a submission is in progress")

        self.form = dict(DEFAULT_FORM)
        self.error = None
        if payment is None:
            self.payment_id = None
            self.state = EditorState.OPEN_FOR_CREATE
            return

        for field in DEFAULT_FORM:
            self.form[field] = getattr(payment, field)
        self.payment_id = payment.id
        self.state = EditorState.OPEN_FOR_EDIT

    def select_project(self, project: Optional[Project]) -> None:
        """Set the project reference and its name snapshot together."""
        self._require_open()
        self.form["project_id"] = project.id if project else ""
        self.form["project_name"] = project.name if project else ""

    def select_vendor(self, vendor: Optional[Vendor]) -> None:
        """Set the vendor reference and its name snapshot together."""
        self._require_open()
        self.form["vendor_id"] = vendor.id if vendor else ""
        self.form["vendor_name"] = vendor.name if vendor else ""

    def set_field(self, name: str, value: Any) -> None:
        self._require_open()
        if name not in EDITABLE_FIELDS:
            raise ValidationError(f"Field '{name}' cannot be edited directly")
        self.form[name] = value

    def submit(self) -> WriteResult:
        """Save the form through the tracker and close on success."""
        self._require_open()
        data = dict(self.form)
        if self.payment_id:
            data["id"] = self.payment_id

        previous = self.state
        self.state = EditorState.SUBMITTING
        try:
            result = self.tracker.save_payment(data)
        except ValidationError as e:
            result = WriteResult(ok=False, id=self.payment_id, error=e)
        finally:
            self.state = previous

        return self._finish(result)

    def delete(self) -> WriteResult:
        """Delete the payment being edited. The caller confirms beforehand."""
        if self.state is not EditorState.OPEN_FOR_EDIT:
            raise EditorStateError("Only an existing payment can be deleted")

        self.state = EditorState.SUBMITTING
        try:
            result = self.tracker.delete_payment(self.payment_id)
        finally:
            self.state = EditorState.OPEN_FOR_EDIT

        return self._finish(result)

    def cancel(self) -> None:
        """Discard the form without touching the store."""
        if self.state is EditorState.SUBMITTING:
            raise EditorStateError("Cannot cancel while a submission is in progress")
        self._close()

    def _finish(self, result: WriteResult) -> WriteResult:
        if result.ok:
            self._close()
        else:
            self.error = result.error
            logger.warning("Payment editor write failed: %s", result.error)
        return result

    def _close(self) -> None:
        self.state = EditorState.CLOSED
        self.form = {}
        self.payment_id = None
        self.error = None

    def _require_open(self) -> None:
        if self.state is EditorState.SUBMITTING:
            raise EditorStateError("A submission is already in progress")
        if not self.is_open:
            raise EditorStateError("The editor is closed")
