"""Vitals completion: save vitals, then run the visit's best-effort follow-ups."""

from collections.abc import Callable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.config import settings
from outpatient.core.clock import clinic_now
from outpatient.core.exceptions import NotFoundException, SideEffectWarning, StateException
from outpatient.schemas.appointments import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentType,
    BookingMethod,
)
from outpatient.schemas.queue import QueueStatus
from outpatient.schemas.vitals import DoctorSelection, VitalsCompletionResult, VitalsPayload
from outpatient.services.appointment_service import AppointmentService
from outpatient.services.billing_service import BillingService
from outpatient.services.doctor_service import DoctorService
from outpatient.services.patient_service import PatientService
from outpatient.services.queue_service import QueueService
from outpatient.services.slot_scheduler import Slot, next_slot

logger = structlog.get_logger()


class VitalsCompletionService:
    """
    Coordinates vitals completion for a queued patient.

    Saving the vitals is the only step that can fail the call. Completing the
    queue entry, booking the walk-in appointment and billing the consultation
    each run on their own; a failure is logged, recorded as a
    ``SideEffectWarning`` on the result, and the remaining steps carry on.
    """

    def __init__(
        self,
        db: AsyncSession,
        patients: PatientService | None = None,
        queue: QueueService | None = None,
        doctors: DoctorService | None = None,
        appointments: AppointmentService | None = None,
        billing: BillingService | None = None,
        clock: Callable[[], datetime] = clinic_now,
        scheduler: Callable[[datetime], Slot] = next_slot,
    ):
        """Initialize service; collaborators default to ones on the same session."""
        self.db = db
        self.clock = clock
        self.scheduler = scheduler
        self.patients = patients or PatientService(db)
        self.queue = queue or QueueService(db, patients=self.patients, clock=clock)
        self.doctors = doctors or DoctorService(db)
        self.appointments = appointments or AppointmentService(db, clock=clock)
        self.billing = billing or BillingService(db, clock=clock)

    async def complete_vitals(
        self,
        queue_id: UUID | None,
        patient_id: UUID,
        vitals: VitalsPayload | Mapping[str, Any],
        doctor_selection: DoctorSelection | None = None,
        staff_id: UUID | None = None,
    ) -> VitalsCompletionResult:
        """
        Record vitals and run the follow-up steps.

        Args:
            queue_id: Queue entry to complete, if the patient was queued
            patient_id: Patient whose vitals were taken
            vitals: Vitals payload or raw form fields
            doctor_selection: Consulting doctor and optional fee override
            staff_id: Staff member recording the vitals

        Returns:
            Result with the optional appointment and bill

        Raises:
            ValidationException: If the vitals are malformed
            NotFoundException: If the patient does not exist
        """
        now = self.clock()
        patient = await self.patients.update_vitals(
            patient_id, vitals, recorded_at=now, staff_id=staff_id
        )
        result = VitalsCompletionResult(success=True)

        if queue_id is not None:
            try:
                entry = await self.queue.get_entry(queue_id)
                if entry.patient_id != patient_id:
                    raise StateException("Queue entry belongs to a different patient")
                await self.queue.transition(queue_id, QueueStatus.COMPLETED, staff_id)
                result.queue_completed = True
            except Exception as e:
                await self._record_failure(result, "queue_transition", e, patient_id)

        if doctor_selection is None:
            return result

        appointment, fee, doctor_label = await self._book_walk_in(
            patient_id, doctor_selection, patient.primary_complaint, staff_id, now, result
        )
        result.appointment = appointment

        # No appointment or no fee means there is nothing to bill.
        if appointment is None or fee <= 0:
            return result

        try:
            result.bill = await self.billing.create_consultation_bill(
                patient_id=patient_id,
                appointment_id=appointment.id,
                fee=fee,
                doctor_label=doctor_label,
                staff_id=staff_id,
            )
        except Exception as e:
            await self._record_failure(result, "billing", e, patient_id)

        return result

    async def _book_walk_in(
        self,
        patient_id: UUID,
        selection: DoctorSelection,
        chief_complaint: str | None,
        staff_id: UUID | None,
        now: datetime,
        result: VitalsCompletionResult,
    ) -> tuple[AppointmentResponse | None, Decimal, str]:
        """Book the next free slot with the selected doctor; returns (appointment, fee, label)."""
        fee = selection.consultation_fee or Decimal("0")
        doctor_label = str(selection.doctor_id)
        try:
            doctor = await self.doctors.get_doctor(selection.doctor_id)
            if doctor is None:
                raise NotFoundException("Doctor not found")
            doctor_label = doctor.label
            if selection.consultation_fee is None:
                fee = doctor.consultation_fee or Decimal("0")

            slot = self.scheduler(now)
            appointment = await self.appointments.create_appointment(
                AppointmentCreate(
                    patient_id=patient_id,
                    doctor_id=selection.doctor_id,
                    appointment_date=slot.date,
                    appointment_time=slot.time,
                    duration_minutes=settings.appointment_duration_minutes,
                    type=AppointmentType.CONSULTATION,
                    booking_method=BookingMethod.WALK_IN,
                    chief_complaint=chief_complaint,
                    created_by=staff_id,
                )
            )
        except Exception as e:
            await self._record_failure(result, "appointment", e, patient_id)
            return None, fee, doctor_label

        return appointment, fee, doctor_label

    async def _record_failure(
        self,
        result: VitalsCompletionResult,
        step: str,
        error: Exception,
        patient_id: UUID,
    ) -> None:
        try:
            await self.db.rollback()
        except Exception as rollback_error:
            logger.warning("session_rollback_failed", step=step, error=str(rollback_error))
        result.warnings.append(SideEffectWarning(step, str(error)))
        logger.warning(
            "vitals_side_effect_failed",
            step=step,
            patient_id=str(patient_id),
            error=str(error),
        )
