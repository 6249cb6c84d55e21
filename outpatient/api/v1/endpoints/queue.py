"""Outpatient queue endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from outpatient.core.clock import clinic_today
from outpatient.dependencies import DatabaseSession
from outpatient.schemas.queue import (
    QueueEntryCreate,
    QueueEntryResponse,
    QueueStats,
    QueueStatus,
    QueueStatusUpdate,
)
from outpatient.services.queue_service import QueueService

router = APIRouter()


@router.post(
    "/",
    response_model=QueueEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add patient to the day's queue",
)
async def enqueue(
    data: QueueEntryCreate,
    response: Response,
    db: DatabaseSession,
) -> QueueEntryResponse:
    """
    Add a registered patient to the outpatient queue.

    Re-submitting for a patient already queued that day returns the
    existing entry with status 200.

    Args:
        data: Queue entry data
        response: Outgoing response, used to signal reuse
        db: Database session

    Returns:
        Queue entry
    """
    service = QueueService(db)
    entry, created = await service.insert_or_fetch(
        patient_id=data.patient_id,
        registration_date=data.registration_date,
        priority=data.priority,
        notes=data.notes,
        staff_id=data.staff_id,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return entry


@router.get(
    "/waiting",
    response_model=list[QueueEntryResponse],
    status_code=status.HTTP_200_OK,
    summary="List waiting patients in serving order",
)
async def list_waiting(
    db: DatabaseSession,
    registration_date: date | None = Query(None, alias="date"),
) -> list[QueueEntryResponse]:
    """
    List waiting entries, urgent first, then by queue number.

    Args:
        db: Database session
        registration_date: Clinic date, defaults to today

    Returns:
        Waiting queue entries
    """
    service = QueueService(db)
    return await service.list_waiting(registration_date or clinic_today())


@router.get(
    "/stats",
    response_model=QueueStats,
    status_code=status.HTTP_200_OK,
    summary="Queue statistics for a day",
)
async def queue_stats(
    db: DatabaseSession,
    registration_date: date | None = Query(None, alias="date"),
) -> QueueStats:
    """
    Get status counts and average wait time for a day.

    Args:
        db: Database session
        registration_date: Clinic date, defaults to today

    Returns:
        Queue statistics
    """
    service = QueueService(db)
    return await service.stats(registration_date or clinic_today())


@router.get(
    "/",
    response_model=list[QueueEntryResponse],
    status_code=status.HTTP_200_OK,
    summary="List queue entries",
)
async def list_entries(
    db: DatabaseSession,
    registration_date: date | None = Query(None, alias="date"),
    status_filter: QueueStatus | None = Query(None, alias="status"),
) -> list[QueueEntryResponse]:
    """
    List all entries for a day in serving order.

    Args:
        db: Database session
        registration_date: Clinic date, defaults to today
        status_filter: Filter by status

    Returns:
        Queue entries
    """
    service = QueueService(db)
    return await service.list_entries(registration_date or clinic_today(), status_filter)


@router.get(
    "/{queue_id}",
    response_model=QueueEntryResponse,
    status_code=status.HTTP_200_OK,
    summary="Get queue entry by ID",
)
async def get_entry(queue_id: UUID, db: DatabaseSession) -> QueueEntryResponse:
    """Get a specific queue entry."""
    service = QueueService(db)
    return await service.get_entry(queue_id)


@router.patch(
    "/{queue_id}/status",
    response_model=QueueEntryResponse,
    status_code=status.HTTP_200_OK,
    summary="Change queue entry status",
)
async def update_status(
    queue_id: UUID,
    data: QueueStatusUpdate,
    db: DatabaseSession,
) -> QueueEntryResponse:
    """
    Move a queue entry forward (call, complete or cancel).

    Args:
        queue_id: Queue entry ID
        data: Target status
        db: Database session

    Returns:
        Updated queue entry

    Raises:
        StateException: If the transition is not allowed
    """
    service = QueueService(db)
    return await service.transition(queue_id, data.status, data.staff_id)
