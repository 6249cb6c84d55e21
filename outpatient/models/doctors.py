"""Doctor model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
    true,
)

from outpatient.models.base import metadata

doctors = Table(
    "doctors",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("name", Text, nullable=False),
    Column("specialization", String(200), index=True),
    # Practice information
    Column("consultation_fee", Numeric(10, 2)),
    Column("is_active", Boolean, nullable=False, server_default=true(), index=True),
    # Metadata
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
