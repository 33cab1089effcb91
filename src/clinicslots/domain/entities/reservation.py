"""Reservation domain entity: one patient's claim on one unit of a schedule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums.scheduling import RESERVATION_TRANSITIONS, ReservationStatus
from ..errors import InvalidTransitionError
from ..value_objects.identifiers import DoctorId, PatientId, ReservationId, ScheduleId


@dataclass
class Reservation:
    """Reservation record.

    Status only moves forward (booked -> cancelled, booked -> completed).
    ``cancelled_at`` / ``completed_at`` are written once, by the matching
    transition, and never overwritten. Reservations are never deleted.
    """

    reservation_id: ReservationId
    patient_id: PatientId
    doctor_id: DoctorId
    schedule_id: ScheduleId
    scheduled_at: datetime
    created_at: datetime
    status: ReservationStatus = ReservationStatus.BOOKED
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.status = ReservationStatus(self.status)

    @property
    def is_booked(self) -> bool:
        return self.status == ReservationStatus.BOOKED

    def can_transition_to(self, target: ReservationStatus) -> bool:
        return ReservationStatus(target) in RESERVATION_TRANSITIONS[self.status]

    def transition_to(self, target: ReservationStatus, at: datetime) -> None:
        """Apply a status transition and stamp its timestamp."""
        target = ReservationStatus(target)
        if not self.can_transition_to(target):
            raise InvalidTransitionError(self.reservation_id.value, self.status.value, target.value)

        self.status = target
        if target == ReservationStatus.CANCELLED and self.cancelled_at is None:
            self.cancelled_at = at
        elif target == ReservationStatus.COMPLETED and self.completed_at is None:
            self.completed_at = at
