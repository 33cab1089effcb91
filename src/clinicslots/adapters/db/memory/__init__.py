"""
In-memory repository implementations.

Entities are copied on the way in and out so no caller ever holds a
reference into the store.
"""

from .directory_repository import (
    InMemoryDepartmentRepository,
    InMemoryDoctorRepository,
    InMemoryPatientRepository,
)
from .reservation_repository import InMemoryReservationRepository
from .schedule_repository import InMemoryScheduleRepository

__all__ = [
    "InMemoryScheduleRepository",
    "InMemoryReservationRepository",
    "InMemoryDoctorRepository",
    "InMemoryPatientRepository",
    "InMemoryDepartmentRepository",
]
