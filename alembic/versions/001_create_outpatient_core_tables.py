"""Create outpatient core tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade database schema."""
    # Sequence counters
    op.create_table(
        "sequence_counters",
        sa.Column("scope", sa.String(length=32), nullable=False),
        sa.Column("period", sa.String(length=16), nullable=False),
        sa.Column("last_value", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("scope", "period"),
    )

    # Patients
    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("uhid", sa.String(length=32), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("primary_complaint", sa.Text(), nullable=True),
        sa.Column("height", sa.Numeric(6, 2), nullable=True),
        sa.Column("weight", sa.Numeric(6, 2), nullable=True),
        sa.Column("bmi", sa.Numeric(5, 1), nullable=True),
        sa.Column("temperature", sa.Numeric(5, 2), nullable=True),
        sa.Column("temp_unit", sa.String(length=12), nullable=True),
        sa.Column("bp_systolic", sa.Integer(), nullable=True),
        sa.Column("bp_diastolic", sa.Integer(), nullable=True),
        sa.Column("pulse", sa.Integer(), nullable=True),
        sa.Column("spo2", sa.Integer(), nullable=True),
        sa.Column("respiratory_rate", sa.Integer(), nullable=True),
        sa.Column("random_blood_sugar", sa.Text(), nullable=True),
        sa.Column("vital_notes", sa.Text(), nullable=True),
        sa.Column("vitals_recorded_by", sa.Uuid(), nullable=True),
        sa.Column("vitals_recorded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "registration_status",
            sa.String(length=20),
            server_default="pending_vitals",
            nullable=False,
        ),
        sa.Column("vitals_completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "registration_status IN ('pending_vitals', 'completed')",
            name="patients_registration_status_check",
        ),
    )
    op.create_index("ix_patients_uhid", "patients", ["uhid"], unique=True)

    # Doctors
    op.create_table(
        "doctors",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("specialization", sa.String(length=200), nullable=True),
        sa.Column("consultation_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_doctors_specialization", "doctors", ["specialization"])
    op.create_index("ix_doctors_is_active", "doctors", ["is_active"])

    # Outpatient queue
    op.create_table(
        "outpatient_queue",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("queue_number", sa.Integer(), nullable=False),
        sa.Column("registration_date", sa.Date(), nullable=False),
        sa.Column("registration_time", sa.Time(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="waiting", nullable=False),
        sa.Column("priority", sa.Integer(), server_default="0", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("staff_id", sa.Uuid(), nullable=True),
        sa.Column("called_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "registration_date", "queue_number", name="uq_outpatient_queue_date_number"
        ),
        sa.CheckConstraint(
            "status IN ('waiting', 'in_progress', 'completed', 'cancelled')",
            name="outpatient_queue_status_check",
        ),
        sa.CheckConstraint("priority IN (0, 1, 2)", name="outpatient_queue_priority_check"),
    )
    op.create_index(
        "ix_outpatient_queue_registration_date", "outpatient_queue", ["registration_date"]
    )
    # One active (non-cancelled) entry per patient per day
    op.create_index(
        "uq_outpatient_queue_active_patient_day",
        "outpatient_queue",
        ["patient_id", "registration_date"],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled'"),
        sqlite_where=sa.text("status <> 'cancelled'"),
    )

    # Appointments
    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("appointment_number", sa.String(length=32), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=True),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), server_default="30", nullable=False),
        sa.Column("type", sa.String(length=20), server_default="consultation", nullable=False),
        sa.Column("status", sa.String(length=20), server_default="scheduled", nullable=False),
        sa.Column(
            "booking_method", sa.String(length=20), server_default="walk_in", nullable=False
        ),
        sa.Column("chief_complaint", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("appointment_number"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('scheduled', 'confirmed', 'in_progress', 'completed', 'cancelled', "
            "'no_show')",
            name="appointments_status_check",
        ),
        sa.CheckConstraint(
            "booking_method IN ('walk_in', 'call', 'online')",
            name="appointments_booking_method_check",
        ),
    )
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])

    # Billing
    op.create_table(
        "billing",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("bill_number", sa.String(length=32), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("appointment_id", sa.Uuid(), nullable=True),
        sa.Column("bill_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("status", sa.String(length=20), server_default="pending", nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("bill_number"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["appointment_id"], ["appointments.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('pending', 'partial', 'paid', 'cancelled')",
            name="billing_status_check",
        ),
    )
    op.create_index("ix_billing_patient_id", "billing", ["patient_id"])
    op.create_index("ix_billing_appointment_id", "billing", ["appointment_id"])

    op.create_table(
        "billing_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("billing_id", sa.Uuid(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("qty", sa.Integer(), server_default="1", nullable=False),
        sa.Column("unit_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("line_type", sa.String(length=20), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["billing_id"], ["billing.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_billing_items_billing_id", "billing_items", ["billing_id"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("billing_items")
    op.drop_table("billing")
    op.drop_table("appointments")
    op.drop_table("outpatient_queue")
    op.drop_table("doctors")
    op.drop_table("patients")
    op.drop_table("sequence_counters")
