"""
Domain entities package.
"""

from .department import Department
from .doctor import Doctor
from .patient import Patient
from .reservation import Reservation
from .schedule import DEFAULT_CAPACITY, Schedule

__all__ = [
    "Schedule",
    "Reservation",
    "Doctor",
    "Patient",
    "Department",
    "DEFAULT_CAPACITY",
]
