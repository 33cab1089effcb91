"""
Schedule Ledger: owns each schedule's capacity accounting.

Every capacity-affecting write (reserve, release, capacity change,
withdrawal) runs under the schedule's lock and persists before returning.
"""

import logging
from datetime import date, time
from typing import List, Optional, Union

from ...core.locks import KeyedLockManager
from ...core.utils.datetime_utils import Clock, clinic_now
from ...domain.entities.schedule import DEFAULT_CAPACITY, Schedule
from ...domain.enums.scheduling import SlotCategory
from ...domain.errors import DoctorNotFoundError, PastDateError, ScheduleNotFoundError
from ...domain.value_objects.identifiers import DoctorId, ScheduleId
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.repositories.schedule_repo import ScheduleRepository
from .identifier_issuer import IdentifierIssuer

logger = logging.getLogger("clinicslots")


class ScheduleLedger:
    """Creates schedules and moves their booked counts."""

    def __init__(
        self,
        schedule_repository: ScheduleRepository,
        doctor_repository: DoctorRepository,
        issuer: IdentifierIssuer,
        locks: KeyedLockManager,
        clock: Clock = clinic_now,
        default_capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        self._schedules = schedule_repository
        self._doctors = doctor_repository
        self._issuer = issuer
        self._locks = locks
        self._clock = clock
        self._default_capacity = default_capacity

    async def create(
        self,
        doctor_id: DoctorId,
        schedule_date: date,
        start_time: time,
        end_time: time,
        slot_category: Union[SlotCategory, str],
        capacity: Optional[int] = None,
    ) -> Schedule:
        """Publish a new schedule with nothing booked."""
        today = self._clock().date()
        if schedule_date < today:
            raise PastDateError(schedule_date, today)

        if not await self._doctors.exists_by_id(doctor_id):
            raise DoctorNotFoundError(doctor_id.value)

        schedule_id = await self._issuer.issue_schedule_id()
        schedule = Schedule(
            schedule_id=schedule_id,
            doctor_id=doctor_id,
            schedule_date=schedule_date,
            start_time=start_time,
            end_time=end_time,
            slot_category=slot_category,
            capacity=self._default_capacity if capacity is None else capacity,
            created_at=self._clock(),
        )
        schedule = await self._schedules.save(schedule)
        logger.info(
            f"Schedule created: id={schedule_id.value} doctor={doctor_id.value} "
            f"date={schedule_date} capacity={schedule.capacity}"
        )
        return schedule

    async def get(self, schedule_id: ScheduleId) -> Schedule:
        schedule = await self._schedules.find_by_id(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id.value)
        return schedule

    async def try_reserve_unit(self, schedule_id: ScheduleId) -> bool:
        """Take one unit if the schedule is open and not full."""
        async with self._locks.hold(schedule_id.value):
            schedule = await self.get(schedule_id)
            if not schedule.reserve_unit():
                return False
            await self._schedules.save(schedule)
            return True

    async def release_unit(self, schedule_id: ScheduleId) -> bool:
        """Give back one unit; False when nothing was booked."""
        async with self._locks.hold(schedule_id.value):
            schedule = await self.get(schedule_id)
            if not schedule.release_unit():
                logger.warning(f"Release on schedule {schedule_id.value} with nothing booked")
                return False
            await self._schedules.save(schedule)
            return True

    async def adjust_capacity(self, schedule_id: ScheduleId, capacity: int) -> Schedule:
        async with self._locks.hold(schedule_id.value):
            schedule = await self.get(schedule_id)
            schedule.change_capacity(capacity)
            schedule = await self._schedules.save(schedule)
        logger.info(f"Schedule {schedule_id.value} capacity set to {capacity}")
        return schedule

    async def mark_withdrawn(self, schedule_id: ScheduleId) -> Schedule:
        """Stop further bookings. Capacity already taken is untouched."""
        async with self._locks.hold(schedule_id.value):
            schedule = await self.get(schedule_id)
            schedule.withdraw(self._clock())
            return await self._schedules.save(schedule)

    async def find_free_slots(
        self,
        doctor_id: DoctorId,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Schedule]:
        """Bookable schedules of a doctor in an inclusive date range, by start time.

        Schedules that have already started are left out; they can no longer
        be booked.
        """
        now = self._clock()
        schedules = await self._schedules.find_by_doctor(doctor_id, start_date, end_date)
        return [s for s in schedules if s.is_bookable and s.starts_at > now]

    async def list_by_doctor(self, doctor_id: DoctorId) -> List[Schedule]:
        return await self._schedules.find_by_doctor(doctor_id)
