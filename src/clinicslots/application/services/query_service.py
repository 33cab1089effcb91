"""
Read-only views over schedules and reservations.

Queries read snapshots straight from the repositories and take no locks.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ...domain.entities.reservation import Reservation
from ...domain.entities.schedule import Schedule
from ...domain.enums.scheduling import ReservationStatus, ScheduleStatus
from ...domain.errors import DepartmentNotFoundError, DoctorNotFoundError
from ...domain.value_objects.identifiers import DoctorId, PatientId, ReservationId, ScheduleId
from ..ports.repositories.department_repo import DepartmentRepository
from ..ports.repositories.doctor_repo import DoctorRepository
from .reservation_registry import ReservationRegistry
from .schedule_ledger import ScheduleLedger


@dataclass(frozen=True)
class ScheduleOccupancy:
    schedule_id: str
    capacity: int
    booked_count: int
    remaining: int
    status: ScheduleStatus


class QueryService:
    """Free-slot, history and agenda lookups."""

    def __init__(
        self,
        ledger: ScheduleLedger,
        registry: ReservationRegistry,
        doctor_repository: DoctorRepository,
        department_repository: DepartmentRepository,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._doctors = doctor_repository
        self._departments = department_repository

    async def free_slots(
        self,
        doctor_id: DoctorId,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Schedule]:
        """Schedules of a doctor that still take bookings, by start time."""
        if not await self._doctors.exists_by_id(doctor_id):
            raise DoctorNotFoundError(doctor_id.value)
        return await self._ledger.find_free_slots(doctor_id, start_date, end_date)

    async def reservation(self, reservation_id: ReservationId) -> Reservation:
        return await self._registry.get(reservation_id)

    async def patient_history(
        self, patient_id: PatientId, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        """A patient's reservations, newest first."""
        return await self._registry.list_by_patient(patient_id, status)

    async def doctor_agenda(self, doctor_id: DoctorId, on_date: date) -> List[Reservation]:
        """Booked reservations of one doctor on one day, in time order."""
        if not await self._doctors.exists_by_id(doctor_id):
            raise DoctorNotFoundError(doctor_id.value)
        reservations = await self._registry.list_by_doctor(doctor_id)
        return [
            r for r in reservations
            if r.status == ReservationStatus.BOOKED and r.scheduled_at.date() == on_date
        ]

    async def schedule_occupancy(self, schedule_id: ScheduleId) -> ScheduleOccupancy:
        schedule = await self._ledger.get(schedule_id)
        return ScheduleOccupancy(
            schedule_id=schedule.schedule_id.value,
            capacity=schedule.capacity,
            booked_count=schedule.booked_count,
            remaining=schedule.remaining,
            status=schedule.status,
        )

    async def department_free_slots(
        self,
        department_name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Schedule]:
        """Free slots of every doctor in a department, grouped in membership order."""
        if await self._departments.find_by_name(department_name) is None:
            raise DepartmentNotFoundError(department_name)

        slots: List[Schedule] = []
        for doctor_id in await self._departments.list_members(department_name):
            slots.extend(await self._ledger.find_free_slots(doctor_id, start_date, end_date))
        return slots
