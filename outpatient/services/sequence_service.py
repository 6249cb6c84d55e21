"""Atomic per-period sequence numbers."""

from datetime import date

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.core.exceptions import ConcurrencyException, ValidationException
from outpatient.database import dialect_insert
from outpatient.models.sequence_counters import sequence_counters

logger = structlog.get_logger()

QUEUE_SCOPE = "queue"


class SequenceService:
    """
    Issues gapless numbers per (scope, period).

    The increment is one upsert evaluated by the store and runs inside the
    caller's transaction: the counter row stays locked until the caller
    commits, and a rollback returns the number.
    """

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def next_value(self, scope: str, period: str) -> int:
        """
        Allocate the next number for a scope and period.

        Args:
            scope: Counter family, e.g. "queue" or "bill"
            period: Partition key within the scope

        Returns:
            Number strictly greater than any issued before for the period

        Raises:
            ConcurrencyException: If the store could not perform the increment
        """
        stmt = dialect_insert(self.db, sequence_counters).values(
            scope=scope,
            period=period,
            last_value=1,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[sequence_counters.c.scope, sequence_counters.c.period],
            set_={"last_value": sequence_counters.c.last_value + 1},
        ).returning(sequence_counters.c.last_value)

        try:
            result = await self.db.execute(stmt)
            value = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("sequence_allocation_failed", scope=scope, period=period, error=str(e))
            raise ConcurrencyException(f"Could not allocate {scope} number for {period}") from e

        if value is None:
            raise ConcurrencyException(f"Could not allocate {scope} number for {period}")
        return int(value)

    async def next_queue_number(self, registration_date: date) -> int:
        """Allocate the next queue number for a clinic date."""
        if not isinstance(registration_date, date):
            raise ValidationException("registration_date must be a calendar date")
        return await self.next_value(QUEUE_SCOPE, registration_date.isoformat())
