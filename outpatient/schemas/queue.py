"""Outpatient queue schemas for request/response validation."""

from datetime import date, datetime, time
from enum import Enum, IntEnum
from uuid import UUID

from pydantic import BaseModel, Field

from outpatient.schemas.patients import PatientSummary


class QueueStatus(str, Enum):
    """Queue entry status enumeration."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QueuePriority(IntEnum):
    """Queue priority; higher values are served first."""

    NORMAL = 0
    HIGH = 1
    URGENT = 2


# Legal forward moves; completed and cancelled are terminal.
QUEUE_TRANSITIONS: dict[QueueStatus, frozenset[QueueStatus]] = {
    QueueStatus.WAITING: frozenset(
        {QueueStatus.IN_PROGRESS, QueueStatus.COMPLETED, QueueStatus.CANCELLED}
    ),
    QueueStatus.IN_PROGRESS: frozenset({QueueStatus.COMPLETED, QueueStatus.CANCELLED}),
    QueueStatus.COMPLETED: frozenset(),
    QueueStatus.CANCELLED: frozenset(),
}


class QueueEntryCreate(BaseModel):
    """Schema for adding a registered patient to the day's queue."""

    patient_id: UUID
    registration_date: date | None = None
    priority: QueuePriority = QueuePriority.NORMAL
    notes: str | None = Field(None, max_length=1000)
    staff_id: UUID | None = None


class QueueStatusUpdate(BaseModel):
    """Schema for a queue status transition."""

    status: QueueStatus
    staff_id: UUID | None = None


class QueueEntryResponse(BaseModel):
    """Schema for queue entry response."""

    id: UUID
    patient_id: UUID
    queue_number: int
    registration_date: date
    registration_time: time
    status: QueueStatus
    priority: QueuePriority
    notes: str | None = None
    staff_id: UUID | None = None
    called_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    patient: PatientSummary | None = None

    model_config = {"from_attributes": True}


class QueueStats(BaseModel):
    """Per-day queue counters and average wait in minutes."""

    total_waiting: int
    total_in_progress: int
    total_completed: int
    average_wait_time: int
