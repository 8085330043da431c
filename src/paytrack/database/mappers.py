"""Mapper functions between stored rows, documents and domain entities.

Documents are the plain dicts the store delivers in snapshots. Reading a
document into an entity is lenient: missing fields become empty values and
amounts go through coerce_amount.
"""

from datetime import datetime
from typing import Any, Optional

from paytrack.domain import entities as domain
from paytrack.database.models import FIELD_COLUMNS, COLLECTION_MODELS
from paytrack.utils.amount_parser import coerce_amount


def row_to_document(collection: str, row: Any) -> dict[str, Any]:
    """Convert a stored row to a document dict keyed by document field names."""
    document = {"id": row.id}
    for field, column in FIELD_COLUMNS[collection].items():
        document[field] = getattr(row, column)
    return document


def document_to_row_values(collection: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Translate document fields to column values.

    Raises:
        KeyError: If a field is not part of the collection
    """
    columns = FIELD_COLUMNS[collection]
    return {columns[field]: value for field, value in fields.items()}


def model_for(collection: str):
    """Return the SQLAlchemy model class for a collection."""
    return COLLECTION_MODELS[collection]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _timestamp(value: Any) -> Optional[datetime]:
    return value if isinstance(value, datetime) else None


def project_from_document(document: dict[str, Any]) -> domain.Project:
    """Convert a project document to a domain Project entity."""
    return domain.Project(
        id=_text(document.get("id")),
        name=_text(document.get("name")),
        created_at=_timestamp(document.get("createdAt")),
    )


def vendor_from_document(document: dict[str, Any]) -> domain.Vendor:
    """Convert a vendor document to a domain Vendor entity."""
    return domain.Vendor(
        id=_text(document.get("id")),
        name=_text(document.get("name")),
        type=_text(document.get("type")) or domain.DEFAULT_VENDOR_TYPE.value,
        created_at=_timestamp(document.get("createdAt")),
    )


def payment_from_document(document: dict[str, Any]) -> domain.Payment:
    """Convert a payment document to a domain Payment entity."""
    return domain.Payment(
        id=_text(document.get("id")),
        project_id=_text(document.get("projectId")),
        project_name=_text(document.get("projectName")),
        vendor_id=_text(document.get("vendorId")),
        vendor_name=_text(document.get("vendorName")),
        item=_text(document.get("item")),
        amount=coerce_amount(document.get("amount")),
        expected_date=_text(document.get("date")),
        status=_text(document.get("status")),
        created_at=_timestamp(document.get("createdAt")),
        updated_at=_timestamp(document.get("updatedAt")),
    )
