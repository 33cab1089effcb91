"""
In-memory implementation of ScheduleRepository.
"""

import copy
from datetime import date
from typing import Dict, List, Optional

from clinicslots.application.ports.repositories.schedule_repo import ScheduleRepository
from clinicslots.domain.entities.schedule import Schedule
from clinicslots.domain.value_objects.identifiers import DoctorId, ScheduleId


class InMemoryScheduleRepository(ScheduleRepository):
    """Dict-backed schedule store."""

    def __init__(self) -> None:
        self._schedules: Dict[str, Schedule] = {}

    async def save(self, schedule: Schedule) -> Schedule:
        self._schedules[schedule.schedule_id.value] = copy.deepcopy(schedule)
        return copy.deepcopy(schedule)

    async def find_by_id(self, schedule_id: ScheduleId) -> Optional[Schedule]:
        schedule = self._schedules.get(schedule_id.value)
        return copy.deepcopy(schedule) if schedule else None

    async def exists_by_id(self, schedule_id: ScheduleId) -> bool:
        return schedule_id.value in self._schedules

    async def find_by_doctor(
        self,
        doctor_id: DoctorId,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Schedule]:
        matches = [
            s for s in self._schedules.values()
            if s.doctor_id == doctor_id
            and (start_date is None or s.schedule_date >= start_date)
            and (end_date is None or s.schedule_date <= end_date)
        ]
        matches.sort(key=lambda s: (s.starts_at, s.schedule_id.value))
        return [copy.deepcopy(s) for s in matches]

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Schedule]:
        ordered = sorted(self._schedules.values(), key=lambda s: (s.starts_at, s.schedule_id.value))
        return [copy.deepcopy(s) for s in ordered[offset:offset + limit]]

    async def delete(self, schedule_id: ScheduleId) -> bool:
        return self._schedules.pop(schedule_id.value, None) is not None
