"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Time,
    Uuid,
    func,
)

from outpatient.models.base import metadata

# Appointments table
appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("appointment_number", String(32), nullable=False, unique=True),
    # Ownership / references
    Column(
        "patient_id",
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctors.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    # Appointment details
    Column("appointment_date", Date, nullable=False),
    Column("appointment_time", Time, nullable=False),
    Column("duration_minutes", Integer, nullable=False, server_default="30"),
    Column("type", String(20), nullable=False, server_default="consultation"),
    Column("status", String(20), nullable=False, server_default="scheduled"),
    Column("booking_method", String(20), nullable=False, server_default="walk_in"),
    Column("chief_complaint", Text),
    Column("notes", Text),
    # Audit fields
    Column("created_by", Uuid, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    # Constraints
    CheckConstraint(
        "status IN ('scheduled', 'confirmed', 'in_progress', 'completed', 'cancelled', 'no_show')",
        name="appointments_status_check",
    ),
    CheckConstraint(
        "booking_method IN ('walk_in', 'call', 'online')",
        name="appointments_booking_method_check",
    ),
)
