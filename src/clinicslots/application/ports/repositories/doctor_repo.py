"""
Doctor repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.doctor import Doctor
from ....domain.value_objects.identifiers import DoctorId


class DoctorRepository(ABC):
    """Abstract repository for doctor data access."""

    @abstractmethod
    async def save(self, doctor: Doctor) -> Doctor:
        """Insert or update a doctor."""
        pass

    @abstractmethod
    async def find_by_id(self, doctor_id: DoctorId) -> Optional[Doctor]:
        """Find a doctor by ID."""
        pass

    @abstractmethod
    async def exists_by_id(self, doctor_id: DoctorId) -> bool:
        """Check if a doctor exists by ID."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Doctor]:
        """Find all doctors with pagination."""
        pass

    @abstractmethod
    async def delete(self, doctor_id: DoctorId) -> bool:
        """Delete a doctor by ID."""
        pass
