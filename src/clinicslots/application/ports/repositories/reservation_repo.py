"""
Reservation repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.reservation import Reservation
from ....domain.enums.scheduling import ReservationStatus
from ....domain.value_objects.identifiers import (
    DoctorId,
    PatientId,
    ReservationId,
    ScheduleId,
)


class ReservationRepository(ABC):
    """Abstract repository for reservation data access."""

    @abstractmethod
    async def save(self, reservation: Reservation) -> Reservation:
        """Insert or update a reservation."""
        pass

    @abstractmethod
    async def find_by_id(self, reservation_id: ReservationId) -> Optional[Reservation]:
        """Find a reservation by ID."""
        pass

    @abstractmethod
    async def exists_by_id(self, reservation_id: ReservationId) -> bool:
        """Check if a reservation exists by ID."""
        pass

    @abstractmethod
    async def find_by_patient(self, patient_id: PatientId) -> List[Reservation]:
        """Find all reservations of a patient, newest first."""
        pass

    @abstractmethod
    async def find_by_doctor(self, doctor_id: DoctorId) -> List[Reservation]:
        """Find all reservations with a doctor, ordered by scheduled time."""
        pass

    @abstractmethod
    async def find_by_schedule(
        self, schedule_id: ScheduleId, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        """Find reservations against a schedule, optionally filtered by status."""
        pass

    @abstractmethod
    async def count_by_schedule(self, schedule_id: ScheduleId, status: ReservationStatus) -> int:
        """Count reservations against a schedule in a given status."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Reservation]:
        """Find all reservations with pagination."""
        pass

    @abstractmethod
    async def delete(self, reservation_id: ReservationId) -> bool:
        """Delete a reservation by ID (data repair only; the core never deletes)."""
        pass
