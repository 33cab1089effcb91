"""
Date and time utility functions for Clinic-Slots.

Schedules are published in clinic wall-clock time, so the domain works with
naive local datetimes. Services take a ``clock`` callable so tests can pin
"now".
"""

from datetime import date, datetime, time, timezone
from typing import Callable

Clock = Callable[[], datetime]


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def clinic_now() -> datetime:
    """Current clinic wall-clock time (naive, local)."""
    return datetime.now()


def combine(day: date, at: time) -> datetime:
    """Naive datetime for a schedule date and a time of day."""
    return datetime.combine(day, at)
