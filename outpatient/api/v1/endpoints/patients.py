"""Patient registration endpoints."""

from datetime import date

from fastapi import APIRouter, Query, status

from outpatient.dependencies import DatabaseSession
from outpatient.schemas.patients import PendingVitalsPatient
from outpatient.services.patient_service import PatientService

router = APIRouter()


@router.get(
    "/pending-vitals",
    response_model=list[PendingVitalsPatient],
    status_code=status.HTTP_200_OK,
    summary="List patients waiting for vitals",
)
async def list_pending_vitals(
    db: DatabaseSession,
    registration_date: date | None = Query(None, alias="date"),
) -> list[PendingVitalsPatient]:
    """
    List registered patients whose vitals have not been recorded, newest first.

    Args:
        db: Database session
        registration_date: Optional clinic date to restrict registrations to

    Returns:
        Patients pending vitals
    """
    service = PatientService(db)
    return await service.list_pending_vitals(registration_date)
