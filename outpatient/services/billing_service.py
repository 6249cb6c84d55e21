"""Consultation billing."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

import structlog
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.config import settings
from outpatient.core.clock import clinic_now
from outpatient.core.exceptions import ValidationException
from outpatient.models.billing import billing, billing_items
from outpatient.schemas.billing import (
    BillItemResponse,
    BillLineType,
    BillResponse,
    BillStatus,
)
from outpatient.services.sequence_service import SequenceService

logger = structlog.get_logger()

BILL_SCOPE = "bill"


class BillingService:
    """Creates consultation bills for walk-in appointments. Does not retry."""

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

    async def create_consultation_bill(
        self,
        patient_id: UUID,
        appointment_id: UUID,
        fee: Decimal,
        doctor_label: str,
        staff_id: UUID | None = None,
    ) -> BillResponse:
        """
        Create a pending bill with one consultation line.

        Header and line are written in one transaction. The bill number is
        ``{prefix}{YY}{NNNNN}``, sequenced per year.

        Args:
            patient_id: Billed patient
            appointment_id: Appointment the consultation belongs to
            fee: Consultation fee, must be positive
            doctor_label: Doctor name shown on the line item
            staff_id: Staff member creating the bill

        Returns:
            Created bill with its items

        Raises:
            ValidationException: If the fee is not positive
        """
        amount = Decimal(str(fee))
        if amount <= 0:
            raise ValidationException("Consultation fee must be greater than zero")

        now = self.clock()
        year = now.strftime("%y")
        try:
            sequence = await self.sequences.next_value(BILL_SCOPE, year)
            bill_id = uuid4()
            bill_values = {
                "id": bill_id,
                "bill_number": f"{settings.bill_number_prefix}{year}{sequence:05d}",
                "patient_id": patient_id,
                "appointment_id": appointment_id,
                "bill_date": now,
                "total_amount": amount,
                "paid_amount": Decimal("0"),
                "status": BillStatus.PENDING.value,
                "created_by": staff_id,
                "created_at": now,
            }
            result = await self.db.execute(
                insert(billing).values(**bill_values).returning(billing)
            )
            bill_row = result.fetchone()

            item_values = {
                "id": uuid4(),
                "billing_id": bill_id,
                "description": f"Consultation - {doctor_label}",
                "qty": 1,
                "unit_amount": amount,
                "total_amount": amount,
                "line_type": BillLineType.CONSULTATION.value,
            }
            result = await self.db.execute(
                insert(billing_items).values(**item_values).returning(billing_items)
            )
            item_row = result.fetchone()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        bill = BillResponse.model_validate(
            {
                **dict(bill_row._mapping),
                "items": [BillItemResponse.model_validate(dict(item_row._mapping))],
            }
        )
        logger.info(
            "consultation_bill_created",
            bill_id=str(bill.id),
            bill_number=bill.bill_number,
            appointment_id=str(appointment_id),
            total_amount=str(bill.total_amount),
        )
        return bill
