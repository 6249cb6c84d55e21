"""Walk-in consultation slot assignment."""

from datetime import date, datetime, time, timedelta
from typing import NamedTuple

CLINIC_OPEN_HOUR = 9
CLINIC_CLOSE_HOUR = 17
SLOT_MINUTES = 30


class Slot(NamedTuple):
    """Start of a consultation slot."""

    date: date
    time: time


def next_slot(now: datetime) -> Slot:
    """
    Earliest bookable slot at or after ``now``.

    Minutes are rounded up to the next slot boundary (seconds are ignored).
    Anything landing at or after closing moves to the next day's opening.
    A rounded time before opening is not returned as is: early arrivals are
    held to the 09:00 slot, so 07:45 books 09:00 rather than 08:00.

    Args:
        now: Current clinic wall-clock time

    Returns:
        Slot date and start time
    """
    today = now.date()
    next_opening = Slot(today + timedelta(days=1), time(CLINIC_OPEN_HOUR, 0))

    if now.hour >= CLINIC_CLOSE_HOUR:
        return next_opening

    rounded = -(-now.minute // SLOT_MINUTES) * SLOT_MINUTES
    hour = now.hour + rounded // 60
    minute = rounded % 60

    if hour >= CLINIC_CLOSE_HOUR:
        return next_opening
    if hour < CLINIC_OPEN_HOUR:
        return Slot(today, time(CLINIC_OPEN_HOUR, 0))
    return Slot(today, time(hour, minute))
