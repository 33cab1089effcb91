"""
Patient repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.patient import Patient
from ....domain.value_objects.identifiers import PatientId


class PatientRepository(ABC):
    """Abstract repository for patient data access."""

    @abstractmethod
    async def save(self, patient: Patient) -> Patient:
        """Insert or update a patient."""
        pass

    @abstractmethod
    async def find_by_id(self, patient_id: PatientId) -> Optional[Patient]:
        """Find a patient by ID."""
        pass

    @abstractmethod
    async def exists_by_id(self, patient_id: PatientId) -> bool:
        """Check if a patient exists by ID."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Patient]:
        """Find all patients with pagination."""
        pass

    @abstractmethod
    async def delete(self, patient_id: PatientId) -> bool:
        """Delete a patient by ID."""
        pass
