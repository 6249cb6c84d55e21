"""Tests for walk-in slot assignment."""

from datetime import date, datetime, time

import pytest

from outpatient.services.slot_scheduler import Slot, next_slot

DAY = date(2026, 1, 15)
NEXT_DAY = date(2026, 1, 16)


def at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2026, 1, 15, hour, minute, second)


@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (at(9, 5), Slot(DAY, time(9, 30))),
        (at(10, 0), Slot(DAY, time(10, 0))),
        (at(10, 10), Slot(DAY, time(10, 30))),
        (at(10, 30), Slot(DAY, time(10, 30))),
        (at(10, 31), Slot(DAY, time(11, 0))),
        (at(10, 59), Slot(DAY, time(11, 0))),
        (at(16, 15), Slot(DAY, time(16, 30))),
        (at(16, 45), Slot(NEXT_DAY, time(9, 0))),
        (at(17, 0), Slot(NEXT_DAY, time(9, 0))),
        (at(18, 0), Slot(NEXT_DAY, time(9, 0))),
        (at(23, 59), Slot(NEXT_DAY, time(9, 0))),
    ],
)
def test_next_slot(now: datetime, expected: Slot) -> None:
    """Minutes round up to the half hour; anything past closing moves to next morning."""
    assert next_slot(now) == expected


def test_next_slot_ignores_seconds() -> None:
    """Seconds never push a slot boundary forward."""
    assert next_slot(at(10, 30, 59)) == Slot(DAY, time(10, 30))


def test_next_slot_before_opening_waits_for_opening() -> None:
    """Early arrivals get the first slot of the day."""
    assert next_slot(at(7, 45)) == Slot(DAY, time(9, 0))
    assert next_slot(at(8, 40)) == Slot(DAY, time(9, 0))


def test_next_slot_crosses_month_end() -> None:
    """Next-day rollover follows the calendar."""
    assert next_slot(datetime(2026, 1, 31, 18, 0)) == Slot(date(2026, 2, 1), time(9, 0))


def test_next_slot_is_within_clinic_hours() -> None:
    """Every minute of the day maps to a slot between 09:00 and 16:30."""
    for hour in range(24):
        for minute in range(60):
            slot = next_slot(at(hour, minute))
            assert time(9, 0) <= slot.time <= time(16, 30)
            assert slot.time.minute in (0, 30)
            assert slot.date in (DAY, NEXT_DAY)
