"""
Booking Coordinator: pairs capacity units with reservations.

The coordinator is the only writer that keeps the two sides in step:
``schedule.booked_count`` equals the number of booked reservations against
that schedule, plus any releases still waiting on the retry queue. Each
book/cancel/withdraw runs as one unit under the schedule's lock, shielded
from caller cancellation so a dropped client cannot leave it half done.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Dict, List, TypeVar

from ...core.locks import KeyedLockManager
from ...domain.entities.reservation import Reservation
from ...domain.enums.scheduling import ReservationStatus
from ...domain.errors import (
    InconsistentStateError,
    NotBookedError,
    PatientNotFoundError,
    ScheduleFullError,
    ScheduleWithdrawnError,
)
from ...domain.value_objects.identifiers import PatientId, ReservationId, ScheduleId
from ...observability.audit import audit_log_event
from ..ports.repositories.patient_repo import PatientRepository
from .reservation_registry import ReservationRegistry
from .schedule_ledger import ScheduleLedger

logger = logging.getLogger("clinicslots")

T = TypeVar("T")


@dataclass(frozen=True)
class ConsistencyReport:
    """Result of a successful consistency check on one schedule."""

    schedule_id: str
    booked_count: int
    booked_reservations: int
    completed_reservations: int
    pending_releases: int


class BookingCoordinator:
    """Atomic book / cancel / complete / withdraw operations."""

    def __init__(
        self,
        ledger: ScheduleLedger,
        registry: ReservationRegistry,
        patient_repository: PatientRepository,
        locks: KeyedLockManager,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._patients = patient_repository
        self._locks = locks
        # schedule id -> units whose release failed and still has to be applied
        self._pending_releases: Dict[str, int] = {}

    @property
    def pending_releases(self) -> Dict[str, int]:
        return dict(self._pending_releases)

    async def book(self, patient_id: PatientId, schedule_id: ScheduleId) -> Reservation:
        """Claim one unit of ``schedule_id`` for ``patient_id``.

        Raises:
            PatientNotFoundError, ScheduleNotFoundError, ScheduleFullError,
            ScheduleWithdrawnError, BusyError
        """
        if not await self._patients.exists_by_id(patient_id):
            raise PatientNotFoundError(patient_id.value)
        reservation = await self._shielded(self._book(patient_id, schedule_id))
        await audit_log_event(
            event="reservation_booked",
            reservation_id=reservation.reservation_id.value,
            schedule_id=schedule_id.value,
            patient_id=patient_id.value,
            payload={"scheduled_at": reservation.scheduled_at.isoformat()},
        )
        return reservation

    async def _book(self, patient_id: PatientId, schedule_id: ScheduleId) -> Reservation:
        async with self._locks.hold(schedule_id.value):
            schedule = await self._ledger.get(schedule_id)
            if not await self._ledger.try_reserve_unit(schedule_id):
                schedule = await self._ledger.get(schedule_id)
                if schedule.is_withdrawn:
                    raise ScheduleWithdrawnError(schedule_id.value)
                raise ScheduleFullError(schedule_id.value, schedule.capacity)

            try:
                reservation = await self._registry.create(
                    patient_id, schedule.doctor_id, schedule_id, schedule.starts_at
                )
            except Exception:
                logger.warning(
                    f"Reservation step failed on schedule {schedule_id.value}; rolling back unit"
                )
                await self._release_or_queue(schedule_id)
                raise

        logger.info(
            f"Booked reservation {reservation.reservation_id.value} "
            f"patient={patient_id.value} schedule={schedule_id.value}"
        )
        return reservation

    async def cancel(self, reservation_id: ReservationId) -> Reservation:
        """Cancel a booked reservation and give its unit back."""
        reservation = await self._shielded(self._cancel(reservation_id))
        await audit_log_event(
            event="reservation_cancelled",
            reservation_id=reservation_id.value,
            schedule_id=reservation.schedule_id.value,
            patient_id=reservation.patient_id.value,
        )
        return reservation

    async def _cancel(self, reservation_id: ReservationId) -> Reservation:
        schedule_id = (await self._registry.get(reservation_id)).schedule_id
        async with self._locks.hold(schedule_id.value):
            current = await self._registry.get(reservation_id)
            if not current.is_booked:
                raise NotBookedError(reservation_id.value, current.status.value)
            reservation = await self._registry.transition(reservation_id, ReservationStatus.CANCELLED)
            await self._release_or_queue(schedule_id)
        return reservation

    async def complete(self, reservation_id: ReservationId) -> Reservation:
        """Mark a booked reservation completed. Capacity is not affected."""
        schedule_id = (await self._registry.get(reservation_id)).schedule_id
        async with self._locks.hold(schedule_id.value):
            current = await self._registry.get(reservation_id)
            if not current.is_booked:
                raise NotBookedError(reservation_id.value, current.status.value)
            reservation = await self._registry.transition(reservation_id, ReservationStatus.COMPLETED)

        await audit_log_event(
            event="reservation_completed",
            reservation_id=reservation_id.value,
            schedule_id=schedule_id.value,
            patient_id=reservation.patient_id.value,
        )
        return reservation

    async def withdraw_schedule(self, schedule_id: ScheduleId) -> List[Reservation]:
        """Withdraw a schedule and cancel every booked reservation on it.

        Returns the reservations that were cancelled.
        """
        cancelled = await self._shielded(self._withdraw(schedule_id))
        await audit_log_event(
            event="schedule_withdrawn",
            schedule_id=schedule_id.value,
            payload={"cancelled": [r.reservation_id.value for r in cancelled]},
        )
        return cancelled

    async def _withdraw(self, schedule_id: ScheduleId) -> List[Reservation]:
        cancelled: List[Reservation] = []
        async with self._locks.hold(schedule_id.value):
            await self._ledger.mark_withdrawn(schedule_id)
            booked = await self._registry.list_by_schedule(schedule_id, ReservationStatus.BOOKED)
            for reservation in booked:
                cancelled.append(
                    await self._registry.transition(reservation.reservation_id, ReservationStatus.CANCELLED)
                )
                await self._release_or_queue(schedule_id)

        logger.info(f"Schedule {schedule_id.value} withdrawn, {len(cancelled)} reservations cancelled")
        return cancelled

    async def verify_schedule(self, schedule_id: ScheduleId) -> ConsistencyReport:
        """Check booked_count against the reservations that hold a unit.

        Booked and completed reservations each hold one unit; cancelled ones
        hold none, and releases still on the retry queue count as held.

        Raises:
            InconsistentStateError: the counts disagree. Nothing is corrected.
        """
        async with self._locks.hold(schedule_id.value):
            schedule = await self._ledger.get(schedule_id)
            booked = await self._registry.count_booked(schedule_id)
            holding = await self._registry.count_holding(schedule_id)
            pending = self._pending_releases.get(schedule_id.value, 0)

        completed = holding - booked
        if schedule.booked_count != holding + pending:
            logger.critical(
                f"Inconsistent schedule {schedule_id.value}: booked_count={schedule.booked_count} "
                f"booked_reservations={booked} completed_reservations={completed} "
                f"pending_releases={pending}"
            )
            raise InconsistentStateError(
                schedule_id.value, schedule.booked_count, booked, completed, pending
            )

        return ConsistencyReport(
            schedule_id=schedule_id.value,
            booked_count=schedule.booked_count,
            booked_reservations=booked,
            completed_reservations=completed,
            pending_releases=pending,
        )

    async def retry_pending_releases(self) -> int:
        """Re-apply queued releases. Returns how many went through."""
        succeeded = 0
        for key in list(self._pending_releases):
            schedule_id = ScheduleId(key)
            while self._pending_releases.get(key, 0) > 0:
                try:
                    async with self._locks.hold(key):
                        released = await self._ledger.release_unit(schedule_id)
                        self._dequeue_release(key)
                except Exception:
                    logger.error(f"Pending release for schedule {key} failed again", exc_info=True)
                    break
                if released:
                    succeeded += 1
                else:
                    logger.critical(f"Pending release for schedule {key} found nothing booked")
        return succeeded

    async def _release_or_queue(self, schedule_id: ScheduleId) -> None:
        """Release one unit; on failure park it on the retry queue."""
        try:
            released = await self._ledger.release_unit(schedule_id)
        except Exception:
            logger.error(
                f"Releasing a unit of schedule {schedule_id.value} failed; queued for retry",
                exc_info=True,
            )
            self._pending_releases[schedule_id.value] = self._pending_releases.get(schedule_id.value, 0) + 1
            await audit_log_event(event="release_failed", schedule_id=schedule_id.value)
            return
        if not released:
            logger.critical(f"Schedule {schedule_id.value} had no booked unit to release")

    def _dequeue_release(self, key: str) -> None:
        remaining = self._pending_releases.get(key, 0) - 1
        if remaining > 0:
            self._pending_releases[key] = remaining
        else:
            self._pending_releases.pop(key, None)

    @staticmethod
    async def _shielded(operation: Awaitable[T]) -> T:
        # The inner task runs to completion even if the awaiting caller is cancelled.
        task = asyncio.ensure_future(operation)
        task.add_done_callback(_consume_orphan_result)
        return await asyncio.shield(task)


def _consume_orphan_result(task: "asyncio.Future") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Shielded booking operation finished with {type(exc).__name__}: {exc}")
