"""Billing schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class BillStatus(str, Enum):
    """Bill status enumeration."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    CANCELLED = "cancelled"


class BillLineType(str, Enum):
    """Bill line type enumeration."""

    CONSULTATION = "consultation"
    SERVICE = "service"


class BillItemResponse(BaseModel):
    """Schema for a bill line."""

    id: UUID
    description: str
    qty: int
    unit_amount: Decimal
    total_amount: Decimal
    line_type: BillLineType

    model_config = {"from_attributes": True}


class BillResponse(BaseModel):
    """Schema for bill response with its items."""

    id: UUID
    bill_number: str
    patient_id: UUID
    appointment_id: UUID | None
    bill_date: datetime
    total_amount: Decimal
    paid_amount: Decimal
    status: BillStatus
    created_by: UUID | None = None
    items: list[BillItemResponse] = []

    model_config = {"from_attributes": True}
