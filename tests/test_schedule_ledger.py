"""
Schedule Ledger tests: creation rules and capacity accounting.
"""

import asyncio
from datetime import time, timedelta

import pytest

from clinicslots.domain.enums.scheduling import ScheduleStatus, SlotCategory
from clinicslots.domain.errors import (
    DoctorNotFoundError,
    InvalidCapacityError,
    InvalidCategoryError,
    InvalidWindowError,
    PastDateError,
    ScheduleNotFoundError,
)
from clinicslots.domain.value_objects.identifiers import DoctorId, ScheduleId

from conftest import TODAY, TOMORROW


@pytest.mark.asyncio
async def test_create_schedule_defaults(services, make_doctor):
    doctor = await make_doctor()

    schedule = await services.ledger.create(
        doctor.doctor_id, TOMORROW, time(9, 0), time(12, 0), "morning"
    )

    assert len(schedule.schedule_id.value) == 10
    assert schedule.capacity == 10
    assert schedule.booked_count == 0
    assert schedule.status == ScheduleStatus.NORMAL
    assert schedule.slot_category == SlotCategory.MORNING
    assert await services.ledger.get(schedule.schedule_id) == schedule


@pytest.mark.asyncio
async def test_schedule_for_today_is_allowed(services, make_doctor):
    doctor = await make_doctor()

    schedule = await services.ledger.create(doctor.doctor_id, TODAY, time(14, 0), time(17, 0), "afternoon")

    assert schedule.schedule_date == TODAY


@pytest.mark.asyncio
async def test_create_rejects_end_not_after_start(services, make_doctor):
    doctor = await make_doctor()

    with pytest.raises(InvalidWindowError):
        await services.ledger.create(doctor.doctor_id, TOMORROW, time(12, 0), time(12, 0), "morning")


@pytest.mark.asyncio
async def test_create_rejects_unknown_category(services, make_doctor):
    doctor = await make_doctor()

    with pytest.raises(InvalidCategoryError):
        await services.ledger.create(doctor.doctor_id, TOMORROW, time(9, 0), time(12, 0), "night")


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [0, -1])
async def test_create_rejects_non_positive_capacity(services, make_doctor, capacity):
    doctor = await make_doctor()

    with pytest.raises(InvalidCapacityError):
        await services.ledger.create(doctor.doctor_id, TOMORROW, time(9, 0), time(12, 0), "morning", capacity)


@pytest.mark.asyncio
async def test_create_rejects_past_date(services, make_doctor):
    doctor = await make_doctor()

    with pytest.raises(PastDateError):
        await services.ledger.create(
            doctor.doctor_id, TODAY - timedelta(days=1), time(9, 0), time(12, 0), "morning"
        )


@pytest.mark.asyncio
async def test_create_requires_known_doctor(services):
    with pytest.raises(DoctorNotFoundError):
        await services.ledger.create(DoctorId("12345678"), TOMORROW, time(9, 0), time(12, 0), "morning")


@pytest.mark.asyncio
async def test_get_unknown_schedule(services):
    with pytest.raises(ScheduleNotFoundError):
        await services.ledger.get(ScheduleId("0000000000"))


@pytest.mark.asyncio
async def test_reserve_until_full_then_refuse(services, make_schedule):
    schedule = await make_schedule(capacity=2)

    assert await services.ledger.try_reserve_unit(schedule.schedule_id) is True
    assert (await services.ledger.get(schedule.schedule_id)).status == ScheduleStatus.NORMAL
    assert await services.ledger.try_reserve_unit(schedule.schedule_id) is True
    assert await services.ledger.try_reserve_unit(schedule.schedule_id) is False

    stored = await services.ledger.get(schedule.schedule_id)
    assert stored.booked_count == 2
    assert stored.status == ScheduleStatus.FULL


@pytest.mark.asyncio
async def test_release_reopens_full_schedule(services, make_schedule):
    schedule = await make_schedule(capacity=1)
    await services.ledger.try_reserve_unit(schedule.schedule_id)

    assert await services.ledger.release_unit(schedule.schedule_id) is True

    stored = await services.ledger.get(schedule.schedule_id)
    assert stored.booked_count == 0
    assert stored.status == ScheduleStatus.NORMAL


@pytest.mark.asyncio
async def test_release_with_nothing_booked_is_refused(services, make_schedule):
    schedule = await make_schedule()

    assert await services.ledger.release_unit(schedule.schedule_id) is False
    assert (await services.ledger.get(schedule.schedule_id)).booked_count == 0


@pytest.mark.asyncio
async def test_concurrent_reserves_never_exceed_capacity(services, make_schedule):
    schedule = await make_schedule(capacity=5)

    results = await asyncio.gather(
        *(services.ledger.try_reserve_unit(schedule.schedule_id) for _ in range(12))
    )

    assert results.count(True) == 5
    assert (await services.ledger.get(schedule.schedule_id)).booked_count == 5


@pytest.mark.asyncio
async def test_adjust_capacity_recomputes_status(services, make_schedule):
    schedule = await make_schedule(capacity=2)
    await services.ledger.try_reserve_unit(schedule.schedule_id)
    await services.ledger.try_reserve_unit(schedule.schedule_id)

    raised = await services.ledger.adjust_capacity(schedule.schedule_id, 3)
    assert raised.status == ScheduleStatus.NORMAL
    assert raised.remaining == 1

    lowered = await services.ledger.adjust_capacity(schedule.schedule_id, 2)
    assert lowered.status == ScheduleStatus.FULL


@pytest.mark.asyncio
async def test_adjust_capacity_below_booked_is_rejected(services, make_schedule):
    schedule = await make_schedule(capacity=3)
    await services.ledger.try_reserve_unit(schedule.schedule_id)
    await services.ledger.try_reserve_unit(schedule.schedule_id)

    with pytest.raises(InvalidCapacityError):
        await services.ledger.adjust_capacity(schedule.schedule_id, 1)

    assert (await services.ledger.get(schedule.schedule_id)).capacity == 3


@pytest.mark.asyncio
async def test_withdrawn_schedule_stays_withdrawn(services, make_schedule):
    schedule = await make_schedule(capacity=1)
    await services.ledger.try_reserve_unit(schedule.schedule_id)

    withdrawn = await services.ledger.mark_withdrawn(schedule.schedule_id)
    assert withdrawn.status == ScheduleStatus.WITHDRAWN
    assert withdrawn.withdrawn_at == services.clock.now

    await services.ledger.release_unit(schedule.schedule_id)
    stored = await services.ledger.get(schedule.schedule_id)
    assert stored.status == ScheduleStatus.WITHDRAWN
    assert await services.ledger.try_reserve_unit(schedule.schedule_id) is False


@pytest.mark.asyncio
async def test_free_slots_excludes_full_and_withdrawn(services, make_doctor, make_schedule):
    doctor = await make_doctor()
    afternoon = await make_schedule(
        doctor_id=doctor.doctor_id, start=time(14, 0), end=time(17, 0), category="afternoon"
    )
    morning = await make_schedule(doctor_id=doctor.doctor_id)
    full = await make_schedule(
        capacity=1, doctor_id=doctor.doctor_id, start=time(18, 0), end=time(20, 0), category="evening"
    )
    withdrawn = await make_schedule(
        doctor_id=doctor.doctor_id, schedule_date=TOMORROW + timedelta(days=1)
    )
    await services.ledger.try_reserve_unit(full.schedule_id)
    await services.ledger.mark_withdrawn(withdrawn.schedule_id)

    free = await services.ledger.find_free_slots(doctor.doctor_id, TOMORROW, TOMORROW + timedelta(days=7))

    assert [s.schedule_id for s in free] == [morning.schedule_id, afternoon.schedule_id]


@pytest.mark.asyncio
async def test_free_slots_respects_date_range(services, make_doctor, make_schedule):
    doctor = await make_doctor()
    first = await make_schedule(doctor_id=doctor.doctor_id)
    await make_schedule(doctor_id=doctor.doctor_id, schedule_date=TOMORROW + timedelta(days=3))

    free = await services.ledger.find_free_slots(doctor.doctor_id, TOMORROW, TOMORROW)

    assert [s.schedule_id for s in free] == [first.schedule_id]


@pytest.mark.asyncio
async def test_free_slots_skip_schedules_already_started(services, make_doctor, make_schedule):
    doctor = await make_doctor()
    running = await make_schedule(doctor_id=doctor.doctor_id, schedule_date=TODAY)
    evening = await make_schedule(
        doctor_id=doctor.doctor_id, schedule_date=TODAY, start=time(18, 0), end=time(20, 0), category="evening"
    )
    services.clock.advance(hours=2)

    free = await services.ledger.find_free_slots(doctor.doctor_id, TODAY, TOMORROW)

    assert [s.schedule_id for s in free] == [evening.schedule_id]
    assert (await services.ledger.get(running.schedule_id)).is_bookable
