"""
MongoDB implementation of ScheduleRepository.
"""

from datetime import date, time
from typing import List, Optional

from clinicslots.application.ports.repositories.schedule_repo import ScheduleRepository
from clinicslots.domain.entities.schedule import Schedule
from clinicslots.domain.value_objects.identifiers import DoctorId, ScheduleId

from ..models.scheduling_m import ScheduleMongo


class MongoScheduleRepository(ScheduleRepository):
    """MongoDB implementation of ScheduleRepository."""

    async def save(self, schedule: Schedule) -> Schedule:
        """Save a schedule to MongoDB."""
        schedule_mongo = await self._domain_to_mongo(schedule)
        await schedule_mongo.save()
        return self._mongo_to_domain(schedule_mongo)

    async def find_by_id(self, schedule_id: ScheduleId) -> Optional[Schedule]:
        schedule_mongo = await ScheduleMongo.find_one(ScheduleMongo.schedule_id == schedule_id.value)
        if not schedule_mongo:
            return None
        return self._mongo_to_domain(schedule_mongo)

    async def exists_by_id(self, schedule_id: ScheduleId) -> bool:
        count = await ScheduleMongo.find(ScheduleMongo.schedule_id == schedule_id.value).count()
        return count > 0

    async def find_by_doctor(
        self,
        doctor_id: DoctorId,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Schedule]:
        query = {"doctor_id": doctor_id.value}
        date_range = {}
        if start_date is not None:
            date_range["$gte"] = start_date.isoformat()
        if end_date is not None:
            date_range["$lte"] = end_date.isoformat()
        if date_range:
            query["schedule_date"] = date_range

        schedules_mongo = await ScheduleMongo.find(query).sort("+starts_at", "+schedule_id").to_list()
        return [self._mongo_to_domain(s) for s in schedules_mongo]

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Schedule]:
        schedules_mongo = await ScheduleMongo.find().sort("+starts_at").skip(offset).limit(limit).to_list()
        return [self._mongo_to_domain(s) for s in schedules_mongo]

    async def delete(self, schedule_id: ScheduleId) -> bool:
        schedule_mongo = await ScheduleMongo.find_one(ScheduleMongo.schedule_id == schedule_id.value)
        if not schedule_mongo:
            return False
        await schedule_mongo.delete()
        return True

    async def _domain_to_mongo(self, schedule: Schedule) -> ScheduleMongo:
        """Convert domain entity to MongoDB model."""
        existing = await ScheduleMongo.find_one(ScheduleMongo.schedule_id == schedule.schedule_id.value)
        if existing:
            existing.capacity = schedule.capacity
            existing.booked_count = schedule.booked_count
            existing.status = schedule.status.value
            existing.withdrawn_at = schedule.withdrawn_at
            return existing

        return ScheduleMongo(
            schedule_id=schedule.schedule_id.value,
            doctor_id=schedule.doctor_id.value,
            schedule_date=schedule.schedule_date.isoformat(),
            start_time=schedule.start_time.isoformat(),
            end_time=schedule.end_time.isoformat(),
            starts_at=schedule.starts_at,
            slot_category=schedule.slot_category.value,
            capacity=schedule.capacity,
            booked_count=schedule.booked_count,
            status=schedule.status.value,
            withdrawn_at=schedule.withdrawn_at,
            created_at=schedule.created_at,
        )

    def _mongo_to_domain(self, schedule_mongo: ScheduleMongo) -> Schedule:
        """Convert MongoDB model to domain entity."""
        return Schedule(
            schedule_id=ScheduleId(schedule_mongo.schedule_id),
            doctor_id=DoctorId(schedule_mongo.doctor_id),
            schedule_date=date.fromisoformat(schedule_mongo.schedule_date),
            start_time=time.fromisoformat(schedule_mongo.start_time),
            end_time=time.fromisoformat(schedule_mongo.end_time),
            slot_category=schedule_mongo.slot_category,
            capacity=schedule_mongo.capacity,
            booked_count=schedule_mongo.booked_count,
            status=schedule_mongo.status,
            withdrawn_at=schedule_mongo.withdrawn_at,
            created_at=schedule_mongo.created_at,
        )
