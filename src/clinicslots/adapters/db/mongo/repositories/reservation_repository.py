"""
MongoDB implementation of ReservationRepository.
"""

from typing import List, Optional

from clinicslots.application.ports.repositories.reservation_repo import ReservationRepository
from clinicslots.domain.entities.reservation import Reservation
from clinicslots.domain.enums.scheduling import ReservationStatus
from clinicslots.domain.value_objects.identifiers import (
    DoctorId,
    PatientId,
    ReservationId,
    ScheduleId,
)

from ..models.scheduling_m import ReservationMongo


class MongoReservationRepository(ReservationRepository):
    """MongoDB implementation of ReservationRepository."""

    async def save(self, reservation: Reservation) -> Reservation:
        reservation_mongo = await self._domain_to_mongo(reservation)
        await reservation_mongo.save()
        return self._mongo_to_domain(reservation_mongo)

    async def find_by_id(self, reservation_id: ReservationId) -> Optional[Reservation]:
        reservation_mongo = await ReservationMongo.find_one(
            ReservationMongo.reservation_id == reservation_id.value
        )
        if not reservation_mongo:
            return None
        return self._mongo_to_domain(reservation_mongo)

    async def exists_by_id(self, reservation_id: ReservationId) -> bool:
        count = await ReservationMongo.find(
            ReservationMongo.reservation_id == reservation_id.value
        ).count()
        return count > 0

    async def find_by_patient(self, patient_id: PatientId) -> List[Reservation]:
        reservations_mongo = await ReservationMongo.find(
            ReservationMongo.patient_id == patient_id.value
        ).sort("-created_at", "-reservation_id").to_list()
        return [self._mongo_to_domain(r) for r in reservations_mongo]

    async def find_by_doctor(self, doctor_id: DoctorId) -> List[Reservation]:
        reservations_mongo = await ReservationMongo.find(
            ReservationMongo.doctor_id == doctor_id.value
        ).sort("+scheduled_at", "+created_at").to_list()
        return [self._mongo_to_domain(r) for r in reservations_mongo]

    async def find_by_schedule(
        self, schedule_id: ScheduleId, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        query = {"schedule_id": schedule_id.value}
        if status is not None:
            query["status"] = ReservationStatus(status).value
        reservations_mongo = await ReservationMongo.find(query).sort(
            "+created_at", "+reservation_id"
        ).to_list()
        return [self._mongo_to_domain(r) for r in reservations_mongo]

    async def count_by_schedule(self, schedule_id: ScheduleId, status: ReservationStatus) -> int:
        return await ReservationMongo.find(
            ReservationMongo.schedule_id == schedule_id.value,
            ReservationMongo.status == ReservationStatus(status).value,
        ).count()

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Reservation]:
        reservations_mongo = await ReservationMongo.find().sort("+created_at").skip(offset).limit(limit).to_list()
        return [self._mongo_to_domain(r) for r in reservations_mongo]

    async def delete(self, reservation_id: ReservationId) -> bool:
        reservation_mongo = await ReservationMongo.find_one(
            ReservationMongo.reservation_id == reservation_id.value
        )
        if not reservation_mongo:
            return False
        await reservation_mongo.delete()
        return True

    async def _domain_to_mongo(self, reservation: Reservation) -> ReservationMongo:
        """Convert domain entity to MongoDB model."""
        existing = await ReservationMongo.find_one(
            ReservationMongo.reservation_id == reservation.reservation_id.value
        )
        if existing:
            existing.status = reservation.status.value
            existing.cancelled_at = reservation.cancelled_at
            existing.completed_at = reservation.completed_at
            return existing

        return ReservationMongo(
            reservation_id=reservation.reservation_id.value,
            patient_id=reservation.patient_id.value,
            doctor_id=reservation.doctor_id.value,
            schedule_id=reservation.schedule_id.value,
            scheduled_at=reservation.scheduled_at,
            status=reservation.status.value,
            created_at=reservation.created_at,
            cancelled_at=reservation.cancelled_at,
            completed_at=reservation.completed_at,
        )

    def _mongo_to_domain(self, reservation_mongo: ReservationMongo) -> Reservation:
        """Convert MongoDB model to domain entity."""
        return Reservation(
            reservation_id=ReservationId(reservation_mongo.reservation_id),
            patient_id=PatientId(reservation_mongo.patient_id),
            doctor_id=DoctorId(reservation_mongo.doctor_id),
            schedule_id=ScheduleId(reservation_mongo.schedule_id),
            scheduled_at=reservation_mongo.scheduled_at,
            created_at=reservation_mongo.created_at,
            status=reservation_mongo.status,
            cancelled_at=reservation_mongo.cancelled_at,
            completed_at=reservation_mongo.completed_at,
        )
