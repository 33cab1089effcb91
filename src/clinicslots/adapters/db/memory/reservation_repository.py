"""
In-memory implementation of ReservationRepository.
"""

import copy
from typing import Dict, List, Optional

from clinicslots.application.ports.repositories.reservation_repo import ReservationRepository
from clinicslots.domain.entities.reservation import Reservation
from clinicslots.domain.enums.scheduling import ReservationStatus
from clinicslots.domain.value_objects.identifiers import (
    DoctorId,
    PatientId,
    ReservationId,
    ScheduleId,
)


class InMemoryReservationRepository(ReservationRepository):
    """Dict-backed reservation store."""

    def __init__(self) -> None:
        self._reservations: Dict[str, Reservation] = {}

    async def save(self, reservation: Reservation) -> Reservation:
        self._reservations[reservation.reservation_id.value] = copy.deepcopy(reservation)
        return copy.deepcopy(reservation)

    async def find_by_id(self, reservation_id: ReservationId) -> Optional[Reservation]:
        reservation = self._reservations.get(reservation_id.value)
        return copy.deepcopy(reservation) if reservation else None

    async def exists_by_id(self, reservation_id: ReservationId) -> bool:
        return reservation_id.value in self._reservations

    async def find_by_patient(self, patient_id: PatientId) -> List[Reservation]:
        matches = [r for r in self._reservations.values() if r.patient_id == patient_id]
        matches.sort(key=lambda r: (r.created_at, r.reservation_id.value), reverse=True)
        return [copy.deepcopy(r) for r in matches]

    async def find_by_doctor(self, doctor_id: DoctorId) -> List[Reservation]:
        matches = [r for r in self._reservations.values() if r.doctor_id == doctor_id]
        matches.sort(key=lambda r: (r.scheduled_at, r.created_at))
        return [copy.deepcopy(r) for r in matches]

    async def find_by_schedule(
        self, schedule_id: ScheduleId, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        matches = [
            r for r in self._reservations.values()
            if r.schedule_id == schedule_id and (status is None or r.status == status)
        ]
        matches.sort(key=lambda r: (r.created_at, r.reservation_id.value))
        return [copy.deepcopy(r) for r in matches]

    async def count_by_schedule(self, schedule_id: ScheduleId, status: ReservationStatus) -> int:
        return sum(
            1 for r in self._reservations.values()
            if r.schedule_id == schedule_id and r.status == status
        )

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Reservation]:
        ordered = sorted(self._reservations.values(), key=lambda r: (r.created_at, r.reservation_id.value))
        return [copy.deepcopy(r) for r in ordered[offset:offset + limit]]

    async def delete(self, reservation_id: ReservationId) -> bool:
        return self._reservations.pop(reservation_id.value, None) is not None
