"""
Identifier issuance tests.
"""

import asyncio
import pytest

from clinicslots.application.services.identifier_issuer import IdentifierIssuer
from clinicslots.domain.errors import IssuanceConflictError
from clinicslots.domain.value_objects.identifiers import (
    DoctorId,
    IdentifierKind,
    PatientId,
    ReservationId,
    ScheduleId,
)


@pytest.mark.asyncio
async def test_issued_values_have_fixed_length_digit_format():
    issuer = IdentifierIssuer()

    doctor_id = await issuer.issue(IdentifierKind.DOCTOR)
    patient_id = await issuer.issue("patient")
    schedule_id = await issuer.issue_schedule_id()
    reservation_id = await issuer.issue_reservation_id()

    assert isinstance(doctor_id, DoctorId) and len(doctor_id.value) == 8
    assert isinstance(patient_id, PatientId) and len(patient_id.value) == 10
    assert isinstance(schedule_id, ScheduleId) and len(schedule_id.value) == 10
    assert isinstance(reservation_id, ReservationId) and len(reservation_id.value) == 12
    for identifier in (doctor_id, patient_id, schedule_id, reservation_id):
        assert identifier.value.isdigit()


@pytest.mark.asyncio
async def test_ten_thousand_concurrent_reservation_ids_are_distinct():
    issuer = IdentifierIssuer()

    ids = await asyncio.gather(*(issuer.issue_reservation_id() for _ in range(10_000)))

    values = [i.value for i in ids]
    assert len(set(values)) == 10_000
    assert all(len(v) == 12 and v.isdigit() for v in values)


@pytest.mark.asyncio
async def test_candidate_already_issued_is_skipped():
    candidates = iter(["00000001", "00000001", "00000002"])
    issuer = IdentifierIssuer(candidate_source=lambda length: next(candidates))

    first = await issuer.issue_doctor_id()
    second = await issuer.issue_doctor_id()

    assert first.value == "00000001"
    assert second.value == "00000002"


@pytest.mark.asyncio
async def test_candidate_existing_in_persistence_is_skipped():
    taken = {"0000000001"}

    async def exists(identifier):
        return identifier.value in taken

    candidates = iter(["0000000001", "0000000002"])
    issuer = IdentifierIssuer(
        existence_checks={IdentifierKind.PATIENT: exists},
        candidate_source=lambda length: next(candidates),
    )

    patient_id = await issuer.issue_patient_id()

    assert patient_id.value == "0000000002"


@pytest.mark.asyncio
async def test_conflict_after_max_attempts():
    issuer = IdentifierIssuer(max_attempts=3, candidate_source=lambda length: "1" * length)
    await issuer.issue_schedule_id()

    with pytest.raises(IssuanceConflictError) as exc_info:
        await issuer.issue_schedule_id()

    assert exc_info.value.details["attempts"] == 3
    assert exc_info.value.details["kind"] == "schedule"


@pytest.mark.asyncio
async def test_kinds_are_tracked_independently():
    issuer = IdentifierIssuer(candidate_source=lambda length: "1" * length)

    await issuer.issue_patient_id()
    schedule_id = await issuer.issue_schedule_id()

    assert schedule_id.value == "1111111111"
    assert issuer.recent_count(IdentifierKind.PATIENT) == 1
    assert issuer.recent_count(IdentifierKind.SCHEDULE) == 1


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        IdentifierIssuer(max_attempts=0)
    with pytest.raises(ValueError):
        IdentifierIssuer(recent_limit=0)


@pytest.mark.asyncio
async def test_persisted_identifiers_are_forgotten():
    saved = set()

    async def exists(identifier):
        return identifier.value in saved

    candidates = iter(["000000000001", "000000000002", "000000000003", "000000000004"])
    issuer = IdentifierIssuer(
        existence_checks={IdentifierKind.RESERVATION: exists},
        candidate_source=lambda length: next(candidates),
    )

    first = await issuer.issue_reservation_id()
    second = await issuer.issue_reservation_id()
    assert issuer.recent_count(IdentifierKind.RESERVATION) == 2

    saved.add(first.value)
    third = await issuer.issue_reservation_id()

    assert third.value == "000000000003"
    # The unsaved second value is still remembered.
    assert issuer.recent_count(IdentifierKind.RESERVATION) == 2
    saved.update({second.value, third.value})
    fourth = await issuer.issue_reservation_id()
    assert issuer.recent_count(IdentifierKind.RESERVATION) == 1
    assert fourth.value == "000000000004"


@pytest.mark.asyncio
async def test_recent_identifiers_are_capped():
    issuer = IdentifierIssuer(recent_limit=3)

    for _ in range(10):
        await issuer.issue_doctor_id()

    assert issuer.recent_count(IdentifierKind.DOCTOR) == 3
