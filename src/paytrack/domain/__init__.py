"""Domain layer for paytrack application.

The tracker and editor modules import the store interfaces, so they are not
re-exported here; import them from their modules.
"""

from paytrack.domain.entities import Payment, PaymentStatus, Project, Vendor, VendorType
from paytrack.domain.status import get_status_info
from paytrack.domain.dashboard import summarize_payments

__all__ = [
    "Payment",
    "PaymentStatus",
    "Project",
    "Vendor",
    "VendorType",
    "get_status_info",
    "summarize_payments",
]
