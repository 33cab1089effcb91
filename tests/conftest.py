"""
Shared fixtures: in-memory repositories, a pinned clock and the wired
booking services.
"""

import asyncio
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest

from clinicslots.adapters.db.memory import (
    InMemoryDepartmentRepository,
    InMemoryDoctorRepository,
    InMemoryPatientRepository,
    InMemoryReservationRepository,
    InMemoryScheduleRepository,
)
from clinicslots.application.services import (
    BookingCoordinator,
    DirectoryService,
    IdentifierIssuer,
    QueryService,
    ReservationRegistry,
    ScheduleLedger,
)
from clinicslots.core.exceptions import DatabaseError
from clinicslots.core.locks import KeyedLockManager

NOW = datetime(2030, 1, 14, 8, 0)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


class FrozenClock:
    """Callable clock pinned to a moment; tests move it explicitly."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class JitteringScheduleRepository(InMemoryScheduleRepository):
    """Yields to the event loop for a random moment around every read and write."""

    def __init__(self, seed: int = 0) -> None:
        super().__init__()
        self._rng = random.Random(seed)

    async def _jitter(self) -> None:
        await asyncio.sleep(self._rng.random() / 2000)

    async def find_by_id(self, schedule_id):
        await self._jitter()
        return await super().find_by_id(schedule_id)

    async def save(self, schedule):
        await self._jitter()
        return await super().save(schedule)


class FlakyScheduleRepository(InMemoryScheduleRepository):
    """Fails the next ``fail_saves`` saves with a DatabaseError."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_saves = 0

    async def save(self, schedule):
        if self.fail_saves > 0:
            self.fail_saves -= 1
            raise DatabaseError("schedule store unavailable")
        return await super().save(schedule)


class FlakyReservationRepository(InMemoryReservationRepository):
    """Fails the next ``fail_saves`` saves with a DatabaseError."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_saves = 0

    async def save(self, reservation):
        if self.fail_saves > 0:
            self.fail_saves -= 1
            raise DatabaseError("reservation store unavailable")
        return await super().save(reservation)


@dataclass
class Services:
    clock: FrozenClock
    schedules: InMemoryScheduleRepository
    reservations: InMemoryReservationRepository
    doctors: InMemoryDoctorRepository
    patients: InMemoryPatientRepository
    departments: InMemoryDepartmentRepository
    locks: KeyedLockManager
    issuer: IdentifierIssuer
    ledger: ScheduleLedger
    registry: ReservationRegistry
    coordinator: BookingCoordinator
    queries: QueryService
    directory: DirectoryService


def build_services(
    clock: Optional[FrozenClock] = None,
    schedules: Optional[InMemoryScheduleRepository] = None,
    reservations: Optional[InMemoryReservationRepository] = None,
    lock_timeout: float = 5.0,
) -> Services:
    clock = clock or FrozenClock()
    schedules = schedules or InMemoryScheduleRepository()
    reservations = reservations or InMemoryReservationRepository()
    doctors = InMemoryDoctorRepository()
    patients = InMemoryPatientRepository()
    departments = InMemoryDepartmentRepository()

    locks = KeyedLockManager(timeout_seconds=lock_timeout)
    issuer = IdentifierIssuer.from_repositories(doctors, patients, schedules, reservations)
    ledger = ScheduleLedger(schedules, doctors, issuer, locks, clock=clock)
    registry = ReservationRegistry(reservations, schedules, issuer, clock=clock)
    return Services(
        clock=clock,
        schedules=schedules,
        reservations=reservations,
        doctors=doctors,
        patients=patients,
        departments=departments,
        locks=locks,
        issuer=issuer,
        ledger=ledger,
        registry=registry,
        coordinator=BookingCoordinator(ledger, registry, patients, locks),
        queries=QueryService(ledger, registry, doctors, departments),
        directory=DirectoryService(doctors, patients, departments, issuer),
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def services(clock) -> Services:
    return build_services(clock)


@pytest.fixture
def make_doctor(services):
    async def _make(name: str = "Dr. Li", department_name: Optional[str] = None):
        return await services.directory.register_doctor(name, department_name=department_name)

    return _make


@pytest.fixture
def make_patient(services):
    counter = {"n": 0}

    async def _make(name: str = "Zhang San"):
        counter["n"] += 1
        return await services.directory.register_patient(
            name, identity_number=f"11010119900101{counter['n']:04d}", phone="13800138000"
        )

    return _make


@pytest.fixture
def make_schedule(services, make_doctor):
    async def _make(
        capacity: int = 10,
        doctor_id=None,
        schedule_date: date = TOMORROW,
        start: time = time(9, 0),
        end: time = time(12, 0),
        category: str = "morning",
    ):
        if doctor_id is None:
            doctor_id = (await make_doctor()).doctor_id
        return await services.ledger.create(doctor_id, schedule_date, start, end, category, capacity)

    return _make
