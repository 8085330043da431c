"""SQLAlchemy models backing the paytrack document store."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class ProjectDocument(Base):
    """Project document."""

    __tablename__ = "projects"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False)
    app_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("app_id", "id", name="uq_project_app_id"),)


class VendorDocument(Base):
    """Vendor document."""

    __tablename__ = "vendors"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False)
    app_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False, default="")
    type = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("app_id", "id", name="uq_vendor_app_id"),)


class PaymentDocument(Base):
    """Payment request document.

    project_name and vendor_name are copies taken when the payment was edited.
    """

    __tablename__ = "payments"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False)
    app_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=True)
    project_name = Column(String, nullable=True)
    vendor_id = Column(String, nullable=True)
    vendor_name = Column(String, nullable=True)
    item = Column(String, nullable=True)
    amount = Column(Numeric(14, 2), nullable=True)
    date = Column(String, nullable=True)
    status = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("app_id", "id", name="uq_payment_app_id"),)


# Document field name -> column attribute, per collection
FIELD_COLUMNS: dict[str, dict[str, str]] = {
    "projects": {
        "name": "name",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    },
    "vendors": {
        "name": "name",
        "type": "type",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    },
    "payments": {
        "projectId": "project_id",
        "projectName": "project_name",
        "vendorId": "vendor_id",
        "vendorName": "vendor_name",
        "item": "item",
        "amount": "amount",
        "date": "date",
        "status": "status",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    },
}

COLLECTION_MODELS = {
    "projects": ProjectDocument,
    "vendors": VendorDocument,
    "payments": PaymentDocument,
}


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
