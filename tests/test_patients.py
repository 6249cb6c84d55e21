"""Tests for the patient registration listings."""

from datetime import date, datetime
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest
from httpx import AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.models import patients
from outpatient.schemas.queue import QueueStatus
from outpatient.services.patient_service import PatientService
from outpatient.services.queue_service import QueueService

CLINIC_TZ = ZoneInfo("Asia/Kolkata")


async def register(
    db: AsyncSession,
    name: str,
    created_at: datetime,
    registration_status: str = "pending_vitals",
) -> UUID:
    patient_id = uuid4()
    await db.execute(
        insert(patients).values(
            id=patient_id,
            uhid=f"UH{patient_id.hex[:10].upper()}",
            name=name,
            phone="+919811111111",
            gender="female",
            date_of_birth=date(1990, 4, 2),
            primary_complaint="Cough",
            registration_status=registration_status,
            created_at=created_at,
            updated_at=created_at,
        )
    )
    await db.commit()
    return patient_id


@pytest.mark.asyncio
async def test_pending_vitals_newest_first(db_session: AsyncSession) -> None:
    """Only patients still pending vitals are listed, latest registration first."""
    early = await register(db_session, "Early", datetime(2026, 1, 15, 9, 5, tzinfo=CLINIC_TZ))
    late = await register(db_session, "Late", datetime(2026, 1, 15, 11, 40, tzinfo=CLINIC_TZ))
    await register(
        db_session,
        "Done",
        datetime(2026, 1, 15, 10, 0, tzinfo=CLINIC_TZ),
        registration_status="completed",
    )

    pending = await PatientService(db_session).list_pending_vitals()

    assert [patient.id for patient in pending] == [late, early]
    assert pending[0].name == "Late"
    assert pending[0].registration_status == "pending_vitals"
    assert pending[0].date_of_birth == date(1990, 4, 2)


@pytest.mark.asyncio
async def test_pending_vitals_for_a_date(db_session: AsyncSession) -> None:
    """A date restricts the list to that clinic day's registrations."""
    await register(db_session, "Yesterday", datetime(2026, 1, 14, 23, 50, tzinfo=CLINIC_TZ))
    today = await register(db_session, "Today", datetime(2026, 1, 15, 0, 10, tzinfo=CLINIC_TZ))
    await register(db_session, "Tomorrow", datetime(2026, 1, 16, 8, 0, tzinfo=CLINIC_TZ))

    pending = await PatientService(db_session).list_pending_vitals(date(2026, 1, 15))

    assert [patient.id for patient in pending] == [today]


@pytest.mark.asyncio
async def test_completed_visit_leaves_pending_list(db_session: AsyncSession, clock) -> None:
    """Completing the queue entry removes the patient from the pending list."""
    patient_id = await register(db_session, "Meera", datetime(2026, 1, 15, 9, 30, tzinfo=CLINIC_TZ))
    queue = QueueService(db_session, clock=clock)
    entry = await queue.enqueue(patient_id)

    service = PatientService(db_session)
    assert [p.id for p in await service.list_pending_vitals(date(2026, 1, 15))] == [patient_id]

    await queue.transition(entry.id, QueueStatus.COMPLETED)

    assert await service.list_pending_vitals(date(2026, 1, 15)) == []


@pytest.mark.asyncio
async def test_pending_vitals_endpoint(client: AsyncClient, db_session: AsyncSession) -> None:
    """The endpoint lists pending patients and honours the date filter."""
    patient_id = await register(
        db_session, "Kavya", datetime(2026, 1, 15, 9, 45, tzinfo=CLINIC_TZ)
    )

    response = await client.get("/api/v1/patients/pending-vitals")
    assert response.status_code == 200
    [patient] = response.json()
    assert patient["id"] == str(patient_id)
    assert patient["name"] == "Kavya"
    assert patient["primary_complaint"] == "Cough"

    response = await client.get("/api/v1/patients/pending-vitals", params={"date": "2026-01-15"})
    assert [p["id"] for p in response.json()] == [str(patient_id)]

    response = await client.get("/api/v1/patients/pending-vitals", params={"date": "2026-01-16"})
    assert response.json() == []

    response = await client.get("/api/v1/patients/pending-vitals", params={"date": "15-01-2026"})
    assert response.status_code == 422
