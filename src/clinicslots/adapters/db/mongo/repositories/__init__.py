"""MongoDB repository implementations."""

from .directory_repository import (
    MongoDepartmentRepository,
    MongoDoctorRepository,
    MongoPatientRepository,
)
from .reservation_repository import MongoReservationRepository
from .schedule_repository import MongoScheduleRepository

__all__ = [
    "MongoScheduleRepository",
    "MongoReservationRepository",
    "MongoDoctorRepository",
    "MongoPatientRepository",
    "MongoDepartmentRepository",
]
