"""Outpatient queue service: daily numbering, ordering and status transitions."""

import math
from collections.abc import Callable
from datetime import date, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.core.clock import clinic_now
from outpatient.core.exceptions import (
    ConcurrencyException,
    NotFoundException,
    StateException,
    ValidationException,
)
from outpatient.database import dialect_insert
from outpatient.models.outpatient_queue import ACTIVE_ENTRY_PREDICATE, outpatient_queue
from outpatient.models.patients import patients
from outpatient.schemas.queue import (
    QUEUE_TRANSITIONS,
    QueueEntryResponse,
    QueuePriority,
    QueueStats,
    QueueStatus,
)
from outpatient.services.patient_service import PatientService
from outpatient.services.sequence_service import SequenceService

logger = structlog.get_logger()

# Serving order: highest priority first, then arrival order.
QUEUE_ORDER = (outpatient_queue.c.priority.desc(), outpatient_queue.c.queue_number.asc())


def coerce_registration_date(value: date | str) -> date:
    """Accept a calendar date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        raise ValidationException("registration_date must be a date without a time component")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationException(f"Invalid registration date: {value!r}")


def coerce_priority(value: int) -> QueuePriority:
    """Map an integer priority onto the supported levels."""
    if isinstance(value, bool):
        raise ValidationException("priority must be 0 (normal), 1 (high) or 2 (urgent)")
    try:
        return QueuePriority(value)
    except ValueError:
        raise ValidationException("priority must be 0 (normal), 1 (high) or 2 (urgent)") from None


PATIENT_SUMMARY_FIELDS = ("uhid", "name", "phone", "gender", "date_of_birth", "primary_complaint")

# Patient columns are labelled "patient_<field>" so they never shadow queue columns.
PATIENT_SUMMARY_COLUMNS = [
    patients.c[field].label(f"patient_{field}") for field in PATIENT_SUMMARY_FIELDS
]


def _select_entries():
    return select(outpatient_queue, *PATIENT_SUMMARY_COLUMNS).select_from(
        outpatient_queue.outerjoin(patients, patients.c.id == outpatient_queue.c.patient_id)
    )


def _to_entry(row, patient: dict | None = None) -> QueueEntryResponse:
    data = dict(row._mapping)
    summary = {field: data.pop(f"patient_{field}", None) for field in PATIENT_SUMMARY_FIELDS}
    if patient is not None:
        summary = {field: patient.get(field) for field in PATIENT_SUMMARY_FIELDS}
    if summary["name"] is not None:
        data["patient"] = {"id": data["patient_id"], **summary}
    return QueueEntryResponse.model_validate(data)


class QueueService:
    """Service for the same-day outpatient queue."""

    def __init__(
        self,
        db: AsyncSession,
        patients: PatientService | None = None,
        sequences: SequenceService | None = None,
        clock: Callable[[], datetime] = clinic_now,
    ):
        """
        Initialize service with database session.

        Args:
            db: Database session
            patients: Patient store, defaults to one on the same session
            sequences: Sequence generator, defaults to one on the same session
            clock: Source of the current clinic time
        """
        self.db = db
        self.patients = patients or PatientService(db)
        self.sequences = sequences or SequenceService(db)
        self.clock = clock

    async def insert_or_fetch(
        self,
        patient_id: UUID,
        registration_date: date | str | None = None,
        priority: int = QueuePriority.NORMAL,
        notes: str | None = None,
        staff_id: UUID | None = None,
    ) -> tuple[QueueEntryResponse, bool]:
        """
        Add a patient to a day's queue, or return their existing active entry.

        Args:
            patient_id: Registered patient
            registration_date: Clinic date, defaults to today
            priority: 0 normal, 1 high, 2 urgent
            notes: Free text carried from registration
            staff_id: Staff member enqueuing the patient

        Returns:
            The queue entry and whether it was created by this call

        Raises:
            ValidationException: If the date or priority is malformed
            NotFoundException: If the patient does not exist
            ConcurrencyException: If no queue number could be allocated
        """
        now = self.clock()
        reg_date = (
            now.date() if registration_date is None else coerce_registration_date(registration_date)
        )
        level = coerce_priority(priority)

        patient = await self.patients.find_by_id(patient_id)
        if patient is None:
            raise NotFoundException("Patient not found")

        existing = await self.get_patient_entry(patient_id, reg_date)
        if existing is not None:
            logger.info(
                "queue_entry_reused",
                queue_id=str(existing.id),
                queue_number=existing.queue_number,
            )
            return existing, False

        try:
            queue_number = await self.sequences.next_queue_number(reg_date)
        except ConcurrencyException:
            await self.db.rollback()
            raise

        stmt = (
            dialect_insert(self.db, outpatient_queue)
            .values(
                id=uuid4(),
                patient_id=patient_id,
                queue_number=queue_number,
                registration_date=reg_date,
                registration_time=now.time().replace(microsecond=0, tzinfo=None),
                status=QueueStatus.WAITING.value,
                priority=int(level),
                notes=notes,
                staff_id=staff_id,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(
                index_elements=[
                    outpatient_queue.c.patient_id,
                    outpatient_queue.c.registration_date,
                ],
                index_where=ACTIVE_ENTRY_PREDICATE,
            )
            .returning(outpatient_queue)
        )
        result = await self.db.execute(stmt)
        row = result.fetchone()

        if row is None:
            # Lost a race for the same patient/day; rolling back also returns the number.
            await self.db.rollback()
            existing = await self.get_patient_entry(patient_id, reg_date)
            if existing is None:
                raise ConcurrencyException("Queue entry changed during enqueue, please retry")
            logger.info("queue_entry_reused", queue_id=str(existing.id))
            return existing, False

        await self.db.commit()

        entry = _to_entry(row, patient)
        logger.info(
            "queue_entry_created",
            queue_id=str(entry.id),
            patient_id=str(patient_id),
            registration_date=reg_date.isoformat(),
            queue_number=entry.queue_number,
            priority=int(level),
        )
        return entry, True

    async def enqueue(
        self,
        patient_id: UUID,
        registration_date: date | str | None = None,
        priority: int = QueuePriority.NORMAL,
        notes: str | None = None,
        staff_id: UUID | None = None,
    ) -> QueueEntryResponse:
        """Add a patient to the queue; re-enqueueing returns the existing entry unchanged."""
        entry, _ = await self.insert_or_fetch(
            patient_id, registration_date, priority, notes, staff_id
        )
        return entry

    async def get_entry(self, queue_id: UUID) -> QueueEntryResponse:
        """
        Get queue entry by ID.

        Raises:
            NotFoundException: If the entry does not exist
        """
        result = await self.db.execute(
            _select_entries().where(outpatient_queue.c.id == queue_id)
        )
        row = result.fetchone()
        if not row:
            raise NotFoundException("Queue entry not found")
        return _to_entry(row)

    async def get_patient_entry(
        self,
        patient_id: UUID,
        registration_date: date | str,
    ) -> QueueEntryResponse | None:
        """Get the patient's active (non-cancelled) entry for a date."""
        reg_date = coerce_registration_date(registration_date)
        stmt = _select_entries().where(
            and_(
                outpatient_queue.c.patient_id == patient_id,
                outpatient_queue.c.registration_date == reg_date,
                outpatient_queue.c.status != QueueStatus.CANCELLED.value,
            )
        )
        result = await self.db.execute(stmt)
        row = result.fetchone()
        return _to_entry(row) if row else None

    async def list_entries(
        self,
        registration_date: date | str,
        status: QueueStatus | None = None,
    ) -> list[QueueEntryResponse]:
        """
        List a day's entries in serving order.

        Args:
            registration_date: Clinic date
            status: Optional status filter

        Returns:
            Entries ordered by priority (descending) then queue number
        """
        conditions = [
            outpatient_queue.c.registration_date == coerce_registration_date(registration_date)
        ]
        if status is not None:
            conditions.append(outpatient_queue.c.status == QueueStatus(status).value)

        stmt = _select_entries().where(and_(*conditions)).order_by(*QUEUE_ORDER)
        result = await self.db.execute(stmt)
        return [_to_entry(row) for row in result.fetchall()]

    async def list_waiting(self, registration_date: date | str) -> list[QueueEntryResponse]:
        """Waiting entries for a day: urgent before high before normal, then by arrival."""
        return await self.list_entries(registration_date, QueueStatus.WAITING)

    async def transition(
        self,
        queue_id: UUID,
        new_status: QueueStatus | str,
        staff_id: UUID | None = None,
    ) -> QueueEntryResponse:
        """
        Move a queue entry to a new status.

        Args:
            queue_id: Queue entry ID
            new_status: Target status
            staff_id: Staff member performing the transition

        Returns:
            Updated queue entry

        Raises:
            ValidationException: If the status is unknown
            NotFoundException: If the entry does not exist
            StateException: If the move is not allowed from the current status
        """
        try:
            target = QueueStatus(new_status)
        except ValueError:
            raise ValidationException(f"Unknown queue status: {new_status!r}") from None

        sources = [
            source.value for source, targets in QUEUE_TRANSITIONS.items() if target in targets
        ]
        now = self.clock()

        values: dict = {"status": target.value, "updated_at": now}
        if target == QueueStatus.IN_PROGRESS:
            values["called_at"] = now
        elif target == QueueStatus.COMPLETED:
            values["completed_at"] = now
        if staff_id:
            values["staff_id"] = staff_id

        # Guarded update: the status check and the write happen in one statement.
        stmt = (
            update(outpatient_queue)
            .where(
                and_(
                    outpatient_queue.c.id == queue_id,
                    outpatient_queue.c.status.in_(sources),
                )
            )
            .values(**values)
            .returning(outpatient_queue)
        )
        result = await self.db.execute(stmt)
        row = result.fetchone()

        if row is None:
            await self.db.rollback()
            current = await self.get_entry(queue_id)
            raise StateException(
                f"Cannot move queue entry from {current.status.value} to {target.value}"
            )

        await self.db.commit()

        entry = _to_entry(row)
        logger.info(
            "queue_status_changed",
            queue_id=str(queue_id),
            queue_number=entry.queue_number,
            status=target.value,
        )

        if target == QueueStatus.COMPLETED:
            await self._signal_registration_complete(entry.patient_id, now)

        return entry

    async def cancel(self, queue_id: UUID, staff_id: UUID | None = None) -> QueueEntryResponse:
        """Cancel a waiting or in-progress entry. Its number is not reused."""
        return await self.transition(queue_id, QueueStatus.CANCELLED, staff_id)

    async def _signal_registration_complete(self, patient_id: UUID, completed_at: datetime) -> None:
        """Tell the patient store the visit is done; failures never undo the transition."""
        try:
            await self.patients.mark_registration_complete(patient_id, completed_at)
        except Exception as e:
            await self.db.rollback()
            logger.warning(
                "registration_complete_signal_failed",
                patient_id=str(patient_id),
                error=str(e),
            )

    async def stats(self, registration_date: date | str) -> QueueStats:
        """
        Counts per status and average wait for a day.

        The average covers completed entries only, from enqueue to completion,
        rounded to whole minutes; 0 when nothing has completed.
        """
        reg_date = coerce_registration_date(registration_date)

        count_stmt = (
            select(outpatient_queue.c.status, func.count())
            .where(outpatient_queue.c.registration_date == reg_date)
            .group_by(outpatient_queue.c.status)
        )
        result = await self.db.execute(count_stmt)
        counts = {status: total for status, total in result.all()}

        wait_stmt = select(outpatient_queue.c.created_at, outpatient_queue.c.completed_at).where(
            and_(
                outpatient_queue.c.registration_date == reg_date,
                outpatient_queue.c.status == QueueStatus.COMPLETED.value,
                outpatient_queue.c.completed_at.is_not(None),
            )
        )
        result = await self.db.execute(wait_stmt)
        waits = [
            (completed_at - created_at).total_seconds() / 60
            for created_at, completed_at in result.all()
        ]
        average = math.floor(sum(waits) / len(waits) + 0.5) if waits else 0

        return QueueStats(
            total_waiting=counts.get(QueueStatus.WAITING.value, 0),
            total_in_progress=counts.get(QueueStatus.IN_PROGRESS.value, 0),
            total_completed=counts.get(QueueStatus.COMPLETED.value, 0),
            average_wait_time=average,
        )
