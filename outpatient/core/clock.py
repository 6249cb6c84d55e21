"""Clinic wall clock."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from outpatient.config import settings


def clinic_now() -> datetime:
    """Current time in the clinic's time zone."""
    return datetime.now(ZoneInfo(settings.clinic_timezone))


def clinic_today() -> date:
    """Current calendar date at the clinic."""
    return clinic_now().date()
