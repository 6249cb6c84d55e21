"""Doctor directory endpoints."""

from fastapi import APIRouter, status

from outpatient.dependencies import Cache, DatabaseSession
from outpatient.schemas.doctors import DoctorSummary
from outpatient.services.doctor_service import DoctorService

router = APIRouter()


@router.get(
    "/active",
    response_model=list[DoctorSummary],
    status_code=status.HTTP_200_OK,
    summary="List active doctors",
)
async def list_active_doctors(db: DatabaseSession, cache: Cache) -> list[DoctorSummary]:
    """
    List doctors available for consultation, with their default fees.

    Returns:
        Active doctors
    """
    service = DoctorService(db, cache)
    return await service.list_active()
