"""Payment status registry.

Maps each status code to a display label and presentation class. The set of
codes is closed; lookups for anything else return UNKNOWN_STATUS.
"""

from dataclasses import dataclass
from typing import Optional

from paytrack.domain.entities import PaymentStatus


@dataclass(frozen=True)
class StatusInfo:
    """Display information for a payment status."""

    code: str
    label: str
    css_class: str
    color: Optional[str] = None


STATUS_REGISTRY: dict[str, StatusInfo] = {
    PaymentStatus.DRAFT.value: StatusInfo(
        code="draft", label="Draft", css_class="bg-gray-100 text-gray-700", color="white"
    ),
    PaymentStatus.ISSUE.value: StatusInfo(
        code="issue", label="Invoice issued", css_class="bg-yellow-100 text-yellow-800", color="yellow"
    ),
    PaymentStatus.PLANNED.value: StatusInfo(
        code="planned", label="Planned", css_class="bg-blue-100 text-blue-800", color="blue"
    ),
    PaymentStatus.CONFIRMED.value: StatusInfo(
        code="confirmed", label="Confirmed", css_class="bg-purple-100 text-purple-800", color="magenta"
    ),
    PaymentStatus.PAID.value: StatusInfo(
        code="paid", label="Paid", css_class="bg-green-100 text-green-800", color="green"
    ),
}

UNKNOWN_STATUS = StatusInfo(code="", label="Unknown", css_class="bg-gray-50 text-gray-400")


def get_status_info(code: Optional[str]) -> StatusInfo:
    """Look up display information for a status code.

    Args:
        code: Status code (e.g., "planned"), a PaymentStatus, or None

    Returns:
        StatusInfo for the code, or UNKNOWN_STATUS if the code is not registered
    """
    if isinstance(code, PaymentStatus):
        code = code.value
    if not isinstance(code, str):
        return UNKNOWN_STATUS
    return STATUS_REGISTRY.get(code, UNKNOWN_STATUS)


def is_known_status(code: Optional[str]) -> bool:
    """Return True if code is one of the registered statuses."""
    return get_status_info(code) is not UNKNOWN_STATUS


def status_choices() -> list[str]:
    """Return status codes in lifecycle order."""
    return [status.value for status in PaymentStatus]
