"""Sequence counter table model using SQLAlchemy Core."""

from sqlalchemy import BigInteger, Column, String, Table

from outpatient.models.base import metadata

# One row per (scope, period); last_value is the highest number issued.
sequence_counters = Table(
    "sequence_counters",
    metadata,
    Column("scope", String(32), primary_key=True),
    Column("period", String(16), primary_key=True),
    Column("last_value", BigInteger, nullable=False),
)
