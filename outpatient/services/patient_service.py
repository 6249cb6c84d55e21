"""Patient store boundary used by the outpatient flow."""

from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

import structlog
from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.config import settings
from outpatient.core.exceptions import NotFoundException, ValidationException
from outpatient.models.patients import patients
from outpatient.schemas.patients import PatientVitalsResponse, PendingVitalsPatient
from outpatient.schemas.vitals import DECIMAL_VITALS, VitalsPayload

logger = structlog.get_logger()


def parse_vitals(vitals: VitalsPayload | Mapping[str, Any]) -> VitalsPayload:
    """
    Validate raw vitals input.

    Args:
        vitals: Parsed payload or raw form fields

    Returns:
        Validated payload

    Raises:
        ValidationException: If any field is not numeric where a number is required
    """
    if isinstance(vitals, VitalsPayload):
        return vitals
    try:
        return VitalsPayload.model_validate(dict(vitals))
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "vitals" for error in e.errors()
        )
        raise ValidationException(f"Invalid vitals: {fields}") from e


class PatientService:
    """Service for the patient fields this core reads and writes."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def find_by_id(self, patient_id: UUID) -> dict | None:
        """Get patient by ID."""
        result = await self.db.execute(select(patients).where(patients.c.id == patient_id))
        row = result.mappings().first()
        return dict(row) if row else None

    async def update_vitals(
        self,
        patient_id: UUID,
        vitals: VitalsPayload | Mapping[str, Any],
        recorded_at: datetime,
        staff_id: UUID | None = None,
    ) -> PatientVitalsResponse:
        """
        Persist vitals against the patient record.

        Args:
            patient_id: Patient ID
            vitals: Vitals payload or raw form fields
            recorded_at: Time the vitals were taken
            staff_id: Staff member recording the vitals

        Returns:
            Updated patient record

        Raises:
            ValidationException: If the vitals are malformed (nothing is written)
            NotFoundException: If the patient does not exist
        """
        payload = parse_vitals(vitals)

        values: dict[str, Any] = payload.model_dump(mode="python")
        for field in DECIMAL_VITALS:
            if values[field] is not None:
                values[field] = Decimal(str(values[field]))
        values["temp_unit"] = payload.temp_unit.value
        values["vitals_recorded_by"] = staff_id
        values["vitals_recorded_at"] = recorded_at
        values["updated_at"] = recorded_at

        stmt = (
            update(patients)
            .where(patients.c.id == patient_id)
            .values(**values)
            .returning(patients)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()

        if row is None:
            await self.db.rollback()
            raise NotFoundException("Patient not found")

        await self.db.commit()
        logger.info("vitals_saved", patient_id=str(patient_id))
        return PatientVitalsResponse.model_validate(dict(row))

    async def mark_registration_complete(self, patient_id: UUID, completed_at: datetime) -> None:
        """Flag the patient's registration as complete once their visit leaves the queue."""
        stmt = (
            update(patients)
            .where(patients.c.id == patient_id)
            .values(registration_status="completed", vitals_completed_at=completed_at)
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def list_pending_vitals(
        self, registration_date: date | None = None
    ) -> list[PendingVitalsPatient]:
        """
        List patients registered but still waiting for vitals, newest first.

        Args:
            registration_date: Restrict to patients registered on this clinic date

        Returns:
            Patients whose registration is still pending vitals
        """
        stmt = select(patients).where(patients.c.registration_status == "pending_vitals")
        if registration_date is not None:
            start = datetime.combine(
                registration_date, time.min, tzinfo=ZoneInfo(settings.clinic_timezone)
            )
            stmt = stmt.where(
                patients.c.created_at >= start,
                patients.c.created_at < start + timedelta(days=1),
            )
        stmt = stmt.order_by(patients.c.created_at.desc())

        result = await self.db.execute(stmt)
        return [PendingVitalsPatient.model_validate(dict(row)) for row in result.mappings().all()]
