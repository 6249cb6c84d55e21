"""Doctor directory schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class DoctorSummary(BaseModel):
    """Active doctor as listed for selection during vitals entry."""

    id: UUID
    name: str
    specialization: str | None = None
    consultation_fee: Decimal | None = None

    model_config = {"from_attributes": True}

    @property
    def label(self) -> str:
        """Display label used on consultation bills."""
        if self.specialization:
            return f"{self.name} ({self.specialization})"
        return self.name
