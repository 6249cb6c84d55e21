"""Outpatient queue table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Time,
    UniqueConstraint,
    Uuid,
    func,
    text,
)

from outpatient.models.base import metadata

# Partial unique index predicate, shared by the index and ON CONFLICT targets.
ACTIVE_ENTRY_PREDICATE = text("status <> 'cancelled'")

outpatient_queue = Table(
    "outpatient_queue",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "patient_id",
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("queue_number", Integer, nullable=False),
    Column("registration_date", Date, nullable=False, index=True),
    Column("registration_time", Time, nullable=False),
    Column("status", String(20), nullable=False, server_default="waiting"),
    Column("priority", Integer, nullable=False, server_default="0"),
    Column("notes", Text),
    Column("staff_id", Uuid, nullable=True),
    # Transition stamps
    Column("called_at", DateTime(timezone=True)),
    Column("completed_at", DateTime(timezone=True)),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    # Constraints
    UniqueConstraint(
        "registration_date",
        "queue_number",
        name="uq_outpatient_queue_date_number",
    ),
    CheckConstraint(
        "status IN ('waiting', 'in_progress', 'completed', 'cancelled')",
        name="outpatient_queue_status_check",
    ),
    CheckConstraint(
        "priority IN (0, 1, 2)",
        name="outpatient_queue_priority_check",
    ),
)

# One active (non-cancelled) entry per patient per day
Index(
    "uq_outpatient_queue_active_patient_day",
    outpatient_queue.c.patient_id,
    outpatient_queue.c.registration_date,
    unique=True,
    postgresql_where=ACTIVE_ENTRY_PREDICATE,
    sqlite_where=ACTIVE_ENTRY_PREDICATE,
)
