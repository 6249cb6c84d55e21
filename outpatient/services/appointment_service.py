"""Appointment store boundary for walk-in consultations."""

from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

import structlog
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.core.clock import clinic_now
from outpatient.models.appointments import appointments
from outpatient.schemas.appointments import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatus,
)
from outpatient.services.sequence_service import SequenceService

logger = structlog.get_logger()

APPOINTMENT_SCOPE = "appointment"


class AppointmentService:
    """Service for creating appointments."""

    def __init__(
        self,
        db: AsyncSession,
        sequences: SequenceService | None = None,
        clock: Callable[[], datetime] = clinic_now,
    ):
        """Initialize service with database session."""
        self.db = db
        self.sequences = sequences or SequenceService(db)
        self.clock = clock

    async def create_appointment(self, data: AppointmentCreate) -> AppointmentResponse:
        """
        Create a new appointment.

        The appointment number has the form ``APT{YYYYMMDD}{NNNN}`` and is
        sequenced per appointment date.

        Args:
            data: Appointment creation data

        Returns:
            Created appointment
        """
        day = data.appointment_date.strftime("%Y%m%d")
        sequence = await self.sequences.next_value(APPOINTMENT_SCOPE, day)

        values = {
            "id": uuid4(),
            "appointment_number": f"APT{day}{sequence:04d}",
            "patient_id": data.patient_id,
            "doctor_id": data.doctor_id,
            "appointment_date": data.appointment_date,
            "appointment_time": data.appointment_time,
            "duration_minutes": data.duration_minutes,
            "type": data.type.value,
            "status": AppointmentStatus.SCHEDULED.value,
            "booking_method": data.booking_method.value,
            "chief_complaint": data.chief_complaint,
            "notes": data.notes,
            "created_by": data.created_by,
            "created_at": self.clock(),
        }

        stmt = insert(appointments).values(**values).returning(appointments)
        result = await self.db.execute(stmt)
        row = result.fetchone()
        await self.db.commit()

        appointment = AppointmentResponse.model_validate(dict(row._mapping))
        logger.info(
            "appointment_created",
            appointment_id=str(appointment.id),
            appointment_number=appointment.appointment_number,
            booking_method=appointment.booking_method.value,
        )
        return appointment
