import os
import tempfile
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
load_dotenv()

# Test database URL - MUST be different from production.
# Defaults to a throwaway SQLite file; set TEST_DATABASE_URL to run against PostgreSQL.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL") or (
    f"sqlite+aiosqlite:///{Path(tempfile.gettempdir()) / 'outpatient_test.db'}"
)
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["CACHE_ENABLED"] = "false"
os.environ.setdefault("LOG_FORMAT", "console")

from outpatient.config import settings  # noqa: E402
from outpatient.database import get_db  # noqa: E402
from outpatient.main import app  # noqa: E402
from outpatient.models import doctors, metadata, patients  # noqa: E402

CLINIC_TZ = ZoneInfo("Asia/Kolkata")

# Use NullPool so every session gets its own connection
test_engine = create_async_engine(
    settings.async_database_url,
    echo=False,
    poolclass=NullPool,
    connect_args={"timeout": 30} if settings.async_database_url.startswith("sqlite") else {},
)

# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class FakeClock:
    """Controllable clinic clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on freshly created tables."""
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def session_factory(db_session: AsyncSession) -> async_sessionmaker[AsyncSession]:
    """Factory for extra sessions on the same test database."""
    return TestSessionLocal


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def clock() -> FakeClock:
    """Clinic clock fixed at 10:10 on 15 Jan 2026."""
    return FakeClock(datetime(2026, 1, 15, 10, 10, 0, tzinfo=CLINIC_TZ))


@pytest.fixture
def create_patient(db_session: AsyncSession) -> Callable[..., Awaitable[UUID]]:
    """Factory inserting a registered patient awaiting vitals."""

    async def _create(name: str = "Test Patient", complaint: str | None = "Fever") -> UUID:
        patient_id = uuid4()
        await db_session.execute(
            insert(patients).values(
                id=patient_id,
                uhid=f"UH{patient_id.hex[:10].upper()}",
                name=name,
                phone="+919800000000",
                primary_complaint=complaint,
            )
        )
        await db_session.commit()
        return patient_id

    return _create


@pytest_asyncio.fixture
async def test_patient(create_patient) -> UUID:
    """A single registered patient."""
    return await create_patient()


@pytest_asyncio.fixture
async def test_doctor(db_session: AsyncSession) -> UUID:
    """An active general physician with a 500.00 consultation fee."""
    doctor_id = uuid4()
    await db_session.execute(
        insert(doctors).values(
            id=doctor_id,
            name="Dr. Asha Menon",
            specialization="General Medicine",
            consultation_fee=Decimal("500.00"),
            is_active=True,
        )
    )
    await db_session.commit()
    return doctor_id
