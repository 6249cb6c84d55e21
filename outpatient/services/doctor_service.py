"""Doctor directory service."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.core.redis_client import CacheManager
from outpatient.models.doctors import doctors
from outpatient.schemas.doctors import DoctorSummary


class DoctorService:
    """Read-only view of the doctor directory."""

    # Cache TTL in seconds
    DOCTOR_CACHE_TTL = 900  # 15 minutes for individual doctors
    DOCTOR_LIST_CACHE_TTL = 300  # 5 minutes for lists

    ACTIVE_LIST_CACHE_KEY = "doctor:list:active"

    def __init__(self, db: AsyncSession, cache_manager: CacheManager | None = None):
        """Initialize service with database session and optional cache manager."""
        self.db = db
        self.cache = cache_manager

    @staticmethod
    def _get_doctor_cache_key(doctor_id: UUID) -> str:
        """Generate cache key for doctor."""
        return f"doctor:{doctor_id}"

    async def list_active(self) -> list[DoctorSummary]:
        """List active doctors with their consultation fees."""
        if self.cache:
            cached = self.cache.get_json(self.ACTIVE_LIST_CACHE_KEY)
            if cached is not None:
                return [DoctorSummary.model_validate(item) for item in cached]

        query = (
            select(
                doctors.c.id,
                doctors.c.name,
                doctors.c.specialization,
                doctors.c.consultation_fee,
            )
            .where(doctors.c.is_active.is_(True))
            .order_by(doctors.c.name.asc())
        )
        result = await self.db.execute(query)
        items = [DoctorSummary.model_validate(dict(row)) for row in result.mappings().all()]

        if self.cache:
            self.cache.set_json(
                self.ACTIVE_LIST_CACHE_KEY,
                [item.model_dump(mode="json") for item in items],
                ttl=self.DOCTOR_LIST_CACHE_TTL,
            )

        return items

    async def get_doctor(self, doctor_id: UUID) -> DoctorSummary | None:
        """Get an active doctor by ID with caching; inactive doctors are not bookable."""
        if self.cache:
            cached = self.cache.get_json(self._get_doctor_cache_key(doctor_id))
            if cached:
                return DoctorSummary.model_validate(cached)

        query = select(
            doctors.c.id,
            doctors.c.name,
            doctors.c.specialization,
            doctors.c.consultation_fee,
        ).where(doctors.c.id == doctor_id, doctors.c.is_active.is_(True))
        result = await self.db.execute(query)
        row = result.mappings().first()

        if not row:
            return None

        doctor = DoctorSummary.model_validate(dict(row))

        if self.cache:
            self.cache.set_json(
                self._get_doctor_cache_key(doctor_id),
                doctor.model_dump(mode="json"),
                ttl=self.DOCTOR_CACHE_TTL,
            )

        return doctor
