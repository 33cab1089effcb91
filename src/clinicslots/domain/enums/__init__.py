"""
Domain enums package.
"""

from .scheduling import (
    RESERVATION_TRANSITIONS,
    Gender,
    ReservationStatus,
    ScheduleStatus,
    SlotCategory,
)

__all__ = [
    "SlotCategory",
    "ScheduleStatus",
    "ReservationStatus",
    "RESERVATION_TRANSITIONS",
    "Gender",
]
