"""Patient model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from outpatient.models.base import metadata

patients = Table(
    "patients",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("uhid", String(32), unique=True, index=True),
    # Identity
    Column("name", Text, nullable=False),
    Column("phone", String(20)),
    Column("gender", String(20)),
    Column("date_of_birth", Date),
    Column("primary_complaint", Text),
    # Vitals (written only by vitals completion)
    Column("height", Numeric(6, 2)),
    Column("weight", Numeric(6, 2)),
    Column("bmi", Numeric(5, 1)),
    Column("temperature", Numeric(5, 2)),
    Column("temp_unit", String(12)),
    Column("bp_systolic", Integer),
    Column("bp_diastolic", Integer),
    Column("pulse", Integer),
    Column("spo2", Integer),
    Column("respiratory_rate", Integer),
    Column("random_blood_sugar", Text),
    Column("vital_notes", Text),
    Column("vitals_recorded_by", Uuid),
    Column("vitals_recorded_at", DateTime(timezone=True)),
    # Registration (written only by the queue completion signal)
    Column("registration_status", String(20), nullable=False, server_default="pending_vitals"),
    Column("vitals_completed_at", DateTime(timezone=True)),
    # Metadata
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "registration_status IN ('pending_vitals', 'completed')",
        name="patients_registration_status_check",
    ),
)
