"""Database models."""

from outpatient.models.appointments import appointments
from outpatient.models.base import metadata
from outpatient.models.billing import billing, billing_items
from outpatient.models.doctors import doctors
from outpatient.models.outpatient_queue import outpatient_queue
from outpatient.models.patients import patients
from outpatient.models.sequence_counters import sequence_counters

__all__ = [
    "appointments",
    "billing",
    "billing_items",
    "doctors",
    "metadata",
    "outpatient_queue",
    "patients",
    "sequence_counters",
]
