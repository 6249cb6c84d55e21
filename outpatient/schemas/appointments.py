"""Appointment schemas for request/response validation."""

from datetime import date, datetime, time
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class BookingMethod(str, Enum):
    """How the appointment was booked."""

    WALK_IN = "walk_in"
    CALL = "call"
    ONLINE = "online"


class AppointmentType(str, Enum):
    """Appointment type enumeration."""

    CONSULTATION = "consultation"
    FOLLOW_UP = "follow_up"


class AppointmentCreate(BaseModel):
    """Schema for creating a new appointment."""

    patient_id: UUID
    doctor_id: UUID
    appointment_date: date
    appointment_time: time
    duration_minutes: int = Field(default=30, ge=5, le=240)
    type: AppointmentType = AppointmentType.CONSULTATION
    booking_method: BookingMethod = BookingMethod.WALK_IN
    chief_complaint: str | None = Field(None, max_length=1000)
    notes: str | None = Field(None, max_length=1000)
    created_by: UUID | None = None


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    appointment_number: str
    patient_id: UUID
    doctor_id: UUID | None
    appointment_date: date
    appointment_time: time
    duration_minutes: int
    type: AppointmentType
    status: AppointmentStatus
    booking_method: BookingMethod
    chief_complaint: str | None = None
    notes: str | None = None
    created_by: UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
