"""Vitals completion endpoints."""

from fastapi import APIRouter, status

from outpatient.dependencies import Cache, DatabaseSession
from outpatient.schemas.vitals import VitalsCompletionRequest, VitalsCompletionResponse
from outpatient.services.doctor_service import DoctorService
from outpatient.services.vitals_service import VitalsCompletionService

router = APIRouter()


@router.post(
    "/complete",
    response_model=VitalsCompletionResponse,
    status_code=status.HTTP_200_OK,
    summary="Record vitals and complete the visit's registration",
)
async def complete_vitals(
    data: VitalsCompletionRequest,
    db: DatabaseSession,
    cache: Cache,
) -> VitalsCompletionResponse:
    """
    Save vitals, complete the queue entry, and book and bill the consultation.

    Succeeds once the vitals are saved. The appointment and bill are
    optional in the response and are absent when they could not be created.

    Args:
        data: Vitals completion data
        db: Database session
        cache: Optional cache for the doctor directory

    Returns:
        Completion outcome
    """
    service = VitalsCompletionService(db, doctors=DoctorService(db, cache))
    result = await service.complete_vitals(
        queue_id=data.queue_id,
        patient_id=data.patient_id,
        vitals=data.vitals,
        doctor_selection=data.doctor,
        staff_id=data.staff_id,
    )
    return VitalsCompletionResponse(
        success=result.success,
        queue_completed=result.queue_completed,
        appointment=result.appointment,
        bill=result.bill,
    )
