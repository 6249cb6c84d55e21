"""Vitals and vitals-completion schemas."""

import math
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from outpatient.core.exceptions import SideEffectWarning
from outpatient.schemas.appointments import AppointmentResponse
from outpatient.schemas.billing import BillResponse

DECIMAL_VITALS = ("height", "weight", "bmi", "temperature")
INTEGER_VITALS = ("bp_systolic", "bp_diastolic", "pulse", "spo2", "respiratory_rate")


class TemperatureUnit(str, Enum):
    """Temperature unit enumeration."""

    FAHRENHEIT = "fahrenheit"
    CELSIUS = "celsius"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _parse_number(value: Any) -> float | None:
    """Parse a form value; blank means absent, anything non-numeric is rejected."""
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("must be a number") from None
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number


class VitalsPayload(BaseModel):
    """Clinical vitals captured at the end of registration."""

    model_config = ConfigDict(extra="forbid")

    height: float | None = Field(None, ge=0, description="Height in cm")
    weight: float | None = Field(None, ge=0, description="Weight in kg")
    bmi: float | None = Field(None, ge=0)
    temperature: float | None = None
    temp_unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT
    bp_systolic: int | None = Field(None, ge=0)
    bp_diastolic: int | None = Field(None, ge=0)
    pulse: int | None = Field(None, ge=0)
    spo2: int | None = Field(None, ge=0, le=100)
    respiratory_rate: int | None = Field(None, ge=0)
    random_blood_sugar: str | None = Field(None, max_length=50)
    vital_notes: str | None = Field(None, max_length=2000)

    @field_validator(*DECIMAL_VITALS, mode="before")
    @classmethod
    def parse_decimal_vital(cls, v: Any) -> float | None:
        """Convert blank input to None and reject non-numeric input."""
        return _parse_number(v)

    @field_validator(*INTEGER_VITALS, mode="before")
    @classmethod
    def parse_integer_vital(cls, v: Any) -> int | None:
        """Parse like decimals, then truncate toward zero."""
        number = _parse_number(v)
        return None if number is None else math.trunc(number)

    @field_validator("random_blood_sugar", "vital_notes", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Treat blank text as absent."""
        return _blank_to_none(v)

    @field_validator("temp_unit", mode="before")
    @classmethod
    def default_temp_unit(cls, v: Any) -> Any:
        """Fall back to fahrenheit when the unit is left blank."""
        v = _blank_to_none(v)
        return TemperatureUnit.FAHRENHEIT if v is None else v

    @model_validator(mode="after")
    def derive_bmi(self) -> "VitalsPayload":
        """Derive BMI from height (cm) and weight (kg) when not supplied."""
        if self.bmi is None and self.height and self.weight:
            metres = self.height / 100
            self.bmi = round(self.weight / (metres * metres), 1)
        return self


class DoctorSelection(BaseModel):
    """Consulting doctor picked during vitals entry."""

    doctor_id: UUID
    consultation_fee: Decimal | None = Field(None, ge=0)


class VitalsCompletionRequest(BaseModel):
    """Schema for completing vitals for a queued patient."""

    patient_id: UUID
    queue_id: UUID | None = None
    vitals: VitalsPayload
    doctor: DoctorSelection | None = None
    staff_id: UUID | None = None


class VitalsCompletionResult(BaseModel):
    """Outcome of vitals completion, including recorded side-effect warnings."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = True
    queue_completed: bool = False
    appointment: AppointmentResponse | None = None
    bill: BillResponse | None = None
    warnings: list[SideEffectWarning] = Field(default_factory=list)


class VitalsCompletionResponse(BaseModel):
    """Schema for vitals completion response."""

    success: bool
    queue_completed: bool
    appointment: AppointmentResponse | None = None
    bill: BillResponse | None = None
