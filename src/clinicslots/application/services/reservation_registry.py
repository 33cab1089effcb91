"""
Reservation Registry: creates reservations and applies status transitions.

The registry never touches schedule capacity; pairing a reservation with a
capacity unit is the booking coordinator's job.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from ...core.utils.datetime_utils import Clock, clinic_now
from ...domain.entities.reservation import Reservation
from ...domain.enums.scheduling import HOLDING_STATUSES, ReservationStatus
from ...domain.errors import (
    InvalidTimeError,
    OutsideWindowError,
    ReservationNotFoundError,
    ScheduleNotFoundError,
    ValidationError,
)
from ...domain.value_objects.identifiers import DoctorId, PatientId, ReservationId, ScheduleId
from ..ports.repositories.reservation_repo import ReservationRepository
from ..ports.repositories.schedule_repo import ScheduleRepository
from .identifier_issuer import IdentifierIssuer

logger = logging.getLogger("clinicslots")


class ReservationRegistry:
    """Reservation lifecycle store."""

    def __init__(
        self,
        reservation_repository: ReservationRepository,
        schedule_repository: ScheduleRepository,
        issuer: IdentifierIssuer,
        clock: Clock = clinic_now,
    ) -> None:
        self._reservations = reservation_repository
        self._schedules = schedule_repository
        self._issuer = issuer
        self._clock = clock

    async def create(
        self,
        patient_id: PatientId,
        doctor_id: DoctorId,
        schedule_id: ScheduleId,
        scheduled_at: datetime,
    ) -> Reservation:
        """Record a booked reservation for a future moment inside the schedule's window.

        Raises:
            InvalidTimeError, ScheduleNotFoundError, OutsideWindowError,
            ValidationError (doctor does not own the schedule)
        """
        now = self._clock()
        if scheduled_at <= now:
            raise InvalidTimeError(scheduled_at, now)

        schedule = await self._schedules.find_by_id(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id.value)
        if schedule.doctor_id != doctor_id:
            raise ValidationError(
                f"Schedule '{schedule_id.value}' belongs to doctor '{schedule.doctor_id.value}'",
                "DOCTOR_MISMATCH",
                {"schedule_id": schedule_id.value, "doctor_id": doctor_id.value},
            )
        if not schedule.covers(scheduled_at):
            raise OutsideWindowError(scheduled_at, schedule.starts_at, schedule.ends_at)

        reservation = Reservation(
            reservation_id=await self._issuer.issue_reservation_id(),
            patient_id=patient_id,
            doctor_id=doctor_id,
            schedule_id=schedule_id,
            scheduled_at=scheduled_at,
            created_at=now,
        )
        return await self._reservations.save(reservation)

    async def get(self, reservation_id: ReservationId) -> Reservation:
        reservation = await self._reservations.find_by_id(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id.value)
        return reservation

    async def transition(
        self, reservation_id: ReservationId, target: Union[ReservationStatus, str]
    ) -> Reservation:
        """Move a reservation forward (booked -> cancelled/completed) and persist it."""
        reservation = await self.get(reservation_id)
        reservation.transition_to(ReservationStatus(target), self._clock())
        reservation = await self._reservations.save(reservation)
        logger.info(f"Reservation {reservation_id.value} -> {reservation.status.value}")
        return reservation

    async def list_by_patient(
        self, patient_id: PatientId, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        reservations = await self._reservations.find_by_patient(patient_id)
        if status is not None:
            reservations = [r for r in reservations if r.status == status]
        return reservations

    async def list_by_doctor(self, doctor_id: DoctorId) -> List[Reservation]:
        return await self._reservations.find_by_doctor(doctor_id)

    async def list_by_schedule(
        self, schedule_id: ScheduleId, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        return await self._reservations.find_by_schedule(schedule_id, status)

    async def count_booked(self, schedule_id: ScheduleId) -> int:
        return await self._reservations.count_by_schedule(schedule_id, ReservationStatus.BOOKED)

    async def count_holding(self, schedule_id: ScheduleId) -> int:
        """Reservations that still occupy a unit: booked and completed ones."""
        total = 0
        for status in HOLDING_STATUSES:
            total += await self._reservations.count_by_schedule(schedule_id, status)
        return total
