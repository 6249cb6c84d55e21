"""Patient schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class PatientVitalsResponse(BaseModel):
    """Patient record as returned after vitals are saved."""

    id: UUID
    uhid: str | None = None
    name: str
    primary_complaint: str | None = None
    height: Decimal | None = None
    weight: Decimal | None = None
    bmi: Decimal | None = None
    temperature: Decimal | None = None
    temp_unit: str | None = None
    bp_systolic: int | None = None
    bp_diastolic: int | None = None
    pulse: int | None = None
    spo2: int | None = None
    respiratory_rate: int | None = None
    random_blood_sugar: str | None = None
    vital_notes: str | None = None
    registration_status: str
    vitals_recorded_at: datetime | None = None

    model_config = {"from_attributes": True}


class PatientSummary(BaseModel):
    """Identity fields shown alongside a queue entry."""

    id: UUID
    uhid: str | None = None
    name: str
    phone: str | None = None
    gender: str | None = None
    date_of_birth: date | None = None
    primary_complaint: str | None = None

    model_config = {"from_attributes": True}


class PendingVitalsPatient(PatientSummary):
    """Registered patient still waiting for vitals."""

    registration_status: str
    created_at: datetime
