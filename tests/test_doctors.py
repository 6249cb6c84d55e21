"""Tests for the doctor directory and its caching."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from outpatient.core.redis_client import CacheManager, get_cache_manager
from outpatient.models import doctors
from outpatient.services.doctor_service import DoctorService


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    assert cache_manager.get_json("doctor:list:active") is None
    mock_redis.get.assert_called_once_with("doctor:list:active")

    # Test cache hit
    mock_redis.reset_mock()
    mock_redis.get.return_value = '[{"name": "Dr. A", "consultation_fee": "500.00"}]'
    assert cache_manager.get_json("doctor:list:active") == [
        {"name": "Dr. A", "consultation_fee": "500.00"}
    ]


def test_cache_manager_errors_are_misses():
    """Redis outages degrade to cache misses."""
    mock_redis = MagicMock()
    mock_redis.get.side_effect = ConnectionError("redis down")
    mock_redis.setex.side_effect = ConnectionError("redis down")
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.get_json("doctor:1") is None
    assert cache_manager.set_json("doctor:1", {"name": "Dr. A"}, ttl=60) is False


def test_cache_manager_set_json():
    """Test CacheManager set_json serializes decimals and applies the TTL."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.set_json("doctor:1", {"fee": Decimal("500")}, ttl=300) is True
    mock_redis.setex.assert_called_once_with("doctor:1", 300, '{"fee": "500"}')


def test_cache_disabled_by_default():
    """No cache manager is handed out while caching is disabled."""
    assert get_cache_manager() is None


@pytest.mark.asyncio
async def test_active_doctors_served_from_cache():
    """A cached list is returned without touching the database."""
    cache = MagicMock()
    cache.get_json.return_value = [
        {
            "id": str(uuid4()),
            "name": "Dr. Cached",
            "specialization": None,
            "consultation_fee": "400.00",
        }
    ]
    db = AsyncMock()

    result = await DoctorService(db, cache).list_active()

    assert [doctor.name for doctor in result] == ["Dr. Cached"]
    assert result[0].consultation_fee == Decimal("400.00")
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_active_doctors_cached_after_query(db_session: AsyncSession, test_doctor):
    """A cache miss queries the database and stores the list."""
    cache = MagicMock()
    cache.get_json.return_value = None

    result = await DoctorService(db_session, cache).list_active()

    assert [doctor.id for doctor in result] == [test_doctor]
    cache.set_json.assert_called_once()
    key, value = cache.set_json.call_args.args
    assert key == "doctor:list:active"
    assert value[0]["name"] == "Dr. Asha Menon"
    assert cache.set_json.call_args.kwargs["ttl"] == DoctorService.DOCTOR_LIST_CACHE_TTL


@pytest.mark.asyncio
async def test_active_doctors_endpoint(client: AsyncClient, db_session: AsyncSession, test_doctor):
    """Only active doctors are listed, by name."""
    await db_session.execute(
        insert(doctors).values(
            id=uuid4(), name="Dr. Retired", consultation_fee=Decimal("300"), is_active=False
        )
    )
    await db_session.execute(
        insert(doctors).values(id=uuid4(), name="Dr. Anil Kapoor", specialization="ENT")
    )
    await db_session.commit()

    response = await client.get("/api/v1/doctors/active")

    assert response.status_code == 200
    names = [doctor["name"] for doctor in response.json()]
    assert names == ["Dr. Anil Kapoor", "Dr. Asha Menon"]
    assert response.json()[0]["consultation_fee"] is None


@pytest.mark.asyncio
async def test_get_doctor_missing(db_session: AsyncSession):
    """Unknown doctors come back as None."""
    assert await DoctorService(db_session).get_doctor(uuid4()) is None


@pytest.mark.asyncio
async def test_get_doctor_skips_inactive(db_session: AsyncSession, test_doctor):
    """Deactivated doctors are not returned for booking."""
    retired_id = uuid4()
    await db_session.execute(
        insert(doctors).values(
            id=retired_id, name="Dr. Retired", consultation_fee=Decimal("300"), is_active=False
        )
    )
    await db_session.commit()

    service = DoctorService(db_session)

    assert await service.get_doctor(retired_id) is None
    assert (await service.get_doctor(test_doctor)).name == "Dr. Asha Menon"
