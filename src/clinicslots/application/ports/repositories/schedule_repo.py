"""
Schedule repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from ....domain.entities.schedule import Schedule
from ....domain.value_objects.identifiers import DoctorId, ScheduleId


class ScheduleRepository(ABC):
    """Abstract repository for schedule data access."""

    @abstractmethod
    async def save(self, schedule: Schedule) -> Schedule:
        """Insert or update a schedule."""
        pass

    @abstractmethod
    async def find_by_id(self, schedule_id: ScheduleId) -> Optional[Schedule]:
        """Find a schedule by ID."""
        pass

    @abstractmethod
    async def exists_by_id(self, schedule_id: ScheduleId) -> bool:
        """Check if a schedule exists by ID."""
        pass

    @abstractmethod
    async def find_by_doctor(
        self,
        doctor_id: DoctorId,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Schedule]:
        """Find a doctor's schedules, optionally within an inclusive date range, ordered by start."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Schedule]:
        """Find all schedules with pagination."""
        pass

    @abstractmethod
    async def delete(self, schedule_id: ScheduleId) -> bool:
        """Delete a schedule by ID."""
        pass
