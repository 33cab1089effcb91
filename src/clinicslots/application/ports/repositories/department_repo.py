"""
Department repository interface.

Besides the department records themselves this port owns the membership
relation (department name -> ordered doctor IDs).
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.department import Department
from ....domain.value_objects.identifiers import DoctorId


class DepartmentRepository(ABC):
    """Abstract repository for departments and their doctor membership."""

    @abstractmethod
    async def save(self, department: Department) -> Department:
        """Insert or update a department."""
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Department]:
        """Find a department by name."""
        pass

    @abstractmethod
    async def find_all(self) -> List[Department]:
        """Find all departments ordered by name."""
        pass

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Delete a department and its membership rows."""
        pass

    @abstractmethod
    async def add_member(self, name: str, doctor_id: DoctorId) -> bool:
        """Append a doctor to a department. Returns False if already a member."""
        pass

    @abstractmethod
    async def remove_member(self, name: str, doctor_id: DoctorId) -> bool:
        """Remove a doctor from a department. Returns False if not a member."""
        pass

    @abstractmethod
    async def list_members(self, name: str) -> List[DoctorId]:
        """Doctor IDs of a department in the order they were added."""
        pass
