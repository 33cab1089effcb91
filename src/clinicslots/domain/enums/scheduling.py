"""
Closed status and category enums for schedules and reservations.
"""

from enum import Enum


class SlotCategory(str, Enum):
    """Coarse time-of-day bucket a schedule belongs to."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class ScheduleStatus(str, Enum):
    """Derived schedule status."""
    NORMAL = "normal"
    FULL = "full"
    WITHDRAWN = "withdrawn"  # Stopped by an operator; sticky


class ReservationStatus(str, Enum):
    """Reservation lifecycle status."""
    BOOKED = "booked"
    CANCELLED = "cancelled"    # Terminal
    COMPLETED = "completed"    # Terminal


# booked -> cancelled | completed; nothing leaves a terminal state
RESERVATION_TRANSITIONS = {
    ReservationStatus.BOOKED: frozenset({ReservationStatus.CANCELLED, ReservationStatus.COMPLETED}),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


class Gender(str, Enum):
    """Patient gender as recorded by the directory."""
    MALE = "M"
    FEMALE = "F"


# Reservations in these states occupy one unit of their schedule's capacity.
# Completion keeps the unit; only cancellation gives it back.
HOLDING_STATUSES = (ReservationStatus.BOOKED, ReservationStatus.COMPLETED)
