"""
Concurrent booking: a schedule never over-sells and stays consistent no
matter how the event loop interleaves competing requests.
"""

import asyncio
import random
from datetime import time

import pytest

from clinicslots.domain.enums.scheduling import ReservationStatus, ScheduleStatus
from clinicslots.domain.errors import ScheduleFullError

from conftest import TOMORROW, FrozenClock, JitteringScheduleRepository, build_services


async def _setup(seed: int, capacity: int, patients: int):
    services = build_services(FrozenClock(), schedules=JitteringScheduleRepository(seed))
    doctor = await services.directory.register_doctor("Dr. Lin")
    schedule = await services.ledger.create(
        doctor.doctor_id, TOMORROW, time(9, 0), time(12, 0), "morning", capacity
    )
    people = [
        await services.directory.register_patient(f"Patient {i}", f"1101011990010{i:05d}", "13800138000")
        for i in range(patients)
    ]
    return services, schedule, people


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", [1, 7, 42, 1234])
@pytest.mark.parametrize("capacity,extra", [(1, 5), (5, 7), (10, 10)])
async def test_concurrent_bookings_never_oversell(seed, capacity, extra):
    services, schedule, people = await _setup(seed, capacity, capacity + extra)
    random.Random(seed).shuffle(people)

    results = await asyncio.gather(
        *(services.coordinator.book(p.patient_id, schedule.schedule_id) for p in people),
        return_exceptions=True,
    )

    booked = [r for r in results if not isinstance(r, BaseException)]
    rejected = [r for r in results if isinstance(r, BaseException)]
    assert len(booked) == capacity
    assert len(rejected) == extra
    assert all(isinstance(e, ScheduleFullError) for e in rejected)
    assert len({r.reservation_id for r in booked}) == capacity

    final = await services.ledger.get(schedule.schedule_id)
    assert final.booked_count == capacity
    assert final.status == ScheduleStatus.FULL
    await services.coordinator.verify_schedule(schedule.schedule_id)


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", [3, 99])
async def test_interleaved_book_and_cancel_stay_consistent(seed):
    services, schedule, people = await _setup(seed, capacity=4, patients=12)
    first_wave = [
        await services.coordinator.book(p.patient_id, schedule.schedule_id) for p in people[:4]
    ]

    operations = [services.coordinator.cancel(r.reservation_id) for r in first_wave]
    operations += [services.coordinator.book(p.patient_id, schedule.schedule_id) for p in people[4:]]
    random.Random(seed).shuffle(operations)
    results = await asyncio.gather(*operations, return_exceptions=True)

    failures = [r for r in results if isinstance(r, BaseException)]
    assert all(isinstance(e, ScheduleFullError) for e in failures)

    final = await services.ledger.get(schedule.schedule_id)
    booked = await services.registry.list_by_schedule(schedule.schedule_id, ReservationStatus.BOOKED)
    assert final.booked_count == len(booked)
    assert final.booked_count <= final.capacity
    await services.coordinator.verify_schedule(schedule.schedule_id)


@pytest.mark.asyncio
async def test_independent_schedules_do_not_block_each_other():
    services = build_services(FrozenClock(), schedules=JitteringScheduleRepository(5), lock_timeout=0.5)
    doctor = await services.directory.register_doctor("Dr. Lin")
    morning = await services.ledger.create(doctor.doctor_id, TOMORROW, time(9, 0), time(12, 0), "morning", 3)
    evening = await services.ledger.create(doctor.doctor_id, TOMORROW, time(18, 0), time(21, 0), "evening", 3)
    patient = await services.directory.register_patient("Qian Jiu", "110101199001010044", "13800138000")

    async with services.locks.hold(morning.schedule_id.value):
        reservations = await asyncio.gather(
            *(services.coordinator.book(patient.patient_id, evening.schedule_id) for _ in range(3))
        )

    assert len(reservations) == 3
    assert (await services.ledger.get(evening.schedule_id)).booked_count == 3
    assert (await services.ledger.get(morning.schedule_id)).booked_count == 0
