"""Billing tables using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from outpatient.models.base import metadata

billing = Table(
    "billing",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("bill_number", String(32), nullable=False, unique=True),
    Column(
        "patient_id",
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column("bill_date", DateTime(timezone=True), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("paid_amount", Numeric(12, 2), nullable=False, server_default="0"),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("created_by", Uuid, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "status IN ('pending', 'partial', 'paid', 'cancelled')",
        name="billing_status_check",
    ),
)

billing_items = Table(
    "billing_items",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "billing_id",
        Uuid,
        ForeignKey("billing.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("description", Text, nullable=False),
    Column("qty", Integer, nullable=False, server_default="1"),
    Column("unit_amount", Numeric(12, 2), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("line_type", String(20), nullable=False),
)
