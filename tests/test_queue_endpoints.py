"""Tests for queue and vitals endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_enqueue_endpoint(client: AsyncClient, test_patient) -> None:
    """First enqueue creates the entry, a repeat returns it unchanged."""
    response = await client.post(
        "/api/v1/queue/", json={"patient_id": str(test_patient), "priority": 2}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["queue_number"] == 1
    assert data["status"] == "waiting"
    assert data["priority"] == 2

    repeat = await client.post("/api/v1/queue/", json={"patient_id": str(test_patient)})
    assert repeat.status_code == 200
    assert repeat.json()["id"] == data["id"]
    assert repeat.json()["priority"] == 2


@pytest.mark.asyncio
async def test_enqueue_validation(client: AsyncClient, test_patient) -> None:
    """Bad priority and unknown patients are rejected."""
    response = await client.post(
        "/api/v1/queue/", json={"patient_id": str(test_patient), "priority": 7}
    )
    assert response.status_code == 422

    response = await client.post("/api/v1/queue/", json={"patient_id": str(uuid4())})
    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundException"


@pytest.mark.asyncio
async def test_waiting_and_status_flow(client: AsyncClient, create_patient) -> None:
    """Call a patient, complete them, and watch the lists and stats follow."""
    first = (
        await client.post("/api/v1/queue/", json={"patient_id": str(await create_patient())})
    ).json()
    second = (
        await client.post(
            "/api/v1/queue/",
            json={"patient_id": str(await create_patient()), "priority": 1},
        )
    ).json()

    waiting = await client.get("/api/v1/queue/waiting")
    assert waiting.status_code == 200
    assert [entry["id"] for entry in waiting.json()] == [second["id"], first["id"]]
    assert waiting.json()[0]["patient"]["name"] == "Test Patient"
    assert waiting.json()[0]["patient"]["primary_complaint"] == "Fever"

    response = await client.patch(
        f"/api/v1/queue/{second['id']}/status", json={"status": "in_progress"}
    )
    assert response.status_code == 200
    assert response.json()["called_at"] is not None

    response = await client.patch(
        f"/api/v1/queue/{second['id']}/status", json={"status": "completed"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "completed"

    response = await client.patch(
        f"/api/v1/queue/{second['id']}/status", json={"status": "cancelled"}
    )
    assert response.status_code == 409
    assert response.json()["error"] == "StateException"

    listing = await client.get("/api/v1/queue/", params={"status": "completed"})
    assert [entry["id"] for entry in listing.json()] == [second["id"]]

    stats = await client.get("/api/v1/queue/stats")
    assert stats.status_code == 200
    assert stats.json()["total_waiting"] == 1
    assert stats.json()["total_completed"] == 1
    assert stats.json()["total_in_progress"] == 0


@pytest.mark.asyncio
async def test_get_entry(client: AsyncClient, test_patient) -> None:
    """Entries can be fetched by id; unknown ids are 404."""
    created = (
        await client.post("/api/v1/queue/", json={"patient_id": str(test_patient)})
    ).json()

    response = await client.get(f"/api/v1/queue/{created['id']}")
    assert response.status_code == 200
    assert response.json()["patient_id"] == str(test_patient)

    response = await client.get(f"/api/v1/queue/{uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_by_date(client: AsyncClient, test_patient) -> None:
    """Listing is scoped to the requested clinic date."""
    await client.post(
        "/api/v1/queue/",
        json={"patient_id": str(test_patient), "registration_date": "2030-05-01"},
    )

    response = await client.get("/api/v1/queue/", params={"date": "2030-05-01"})
    assert len(response.json()) == 1

    response = await client.get("/api/v1/queue/", params={"date": "2030-05-02"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_complete_vitals_endpoint(client: AsyncClient, test_patient, test_doctor) -> None:
    """Completing vitals returns the booked appointment and bill."""
    entry = (await client.post("/api/v1/queue/", json={"patient_id": str(test_patient)})).json()

    response = await client.post(
        "/api/v1/vitals/complete",
        json={
            "patient_id": str(test_patient),
            "queue_id": entry["id"],
            "vitals": {"height": "172", "weight": "70", "pulse": "76", "temperature": ""},
            "doctor": {"doctor_id": str(test_doctor)},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["queue_completed"] is True
    assert data["appointment"]["booking_method"] == "walk_in"
    assert data["bill"]["status"] == "pending"
    assert "warnings" not in data

    entry = (await client.get(f"/api/v1/queue/{entry['id']}")).json()
    assert entry["status"] == "completed"


@pytest.mark.asyncio
async def test_complete_vitals_rejects_bad_vitals(client: AsyncClient, test_patient) -> None:
    """Non-numeric vitals fail validation."""
    response = await client.post(
        "/api/v1/vitals/complete",
        json={"patient_id": str(test_patient), "vitals": {"pulse": "fast"}},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_complete_vitals_unknown_patient(client: AsyncClient) -> None:
    """Vitals for a missing patient are 404."""
    response = await client.post(
        "/api/v1/vitals/complete",
        json={"patient_id": str(uuid4()), "vitals": {"pulse": "70"}},
    )
    assert response.status_code == 404
