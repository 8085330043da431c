"""Domain model entities for paytrack.

These are pure data classes representing business concepts, independent of
how documents are laid out in the store. Payments carry denormalized copies of
the project and vendor names taken when they were selected; those copies are
not refreshed when a project or vendor is renamed.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    """Payment lifecycle status, in lifecycle order."""

    DRAFT = "draft"
    ISSUE = "issue"
    PLANNED = "planned"
    CONFIRMED = "confirmed"
    PAID = "paid"


class VendorType(str, Enum):
    """Trade category of a vendor. The first member is the default."""

    GENERAL = "general"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    HVAC = "hvac"
    CARPENTRY = "carpentry"
    MATERIALS = "materials"
    OTHER = "other"


DEFAULT_VENDOR_TYPE = list(VendorType)[0]


class Collection(str, Enum):
    """Store collections, each ordered by its own field."""

    PROJECTS = "projects"
    VENDORS = "vendors"
    PAYMENTS = "payments"


@dataclass(frozen=True)
class Session:
    """An established anonymous identity."""

    uid: str
    is_anonymous: bool = True


@dataclass(frozen=True)
class Project:
    """Construction project domain entity."""

    id: str
    name: str
    created_at: Optional[datetime]


@dataclass(frozen=True)
class Vendor:
    """Vendor domain entity."""

    id: str
    name: str
    type: str
    created_at: Optional[datetime]


@dataclass(frozen=True)
class Payment:
    """Payment request domain entity."""

    id: str
    project_id: str
    project_name: str
    vendor_id: str
    vendor_name: str
    item: str
    amount: Decimal
    expected_date: str
    status: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID.value


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a save or delete issued through the tracker."""

    ok: bool
    id: Optional[str] = None
    error: Optional[Exception] = None
