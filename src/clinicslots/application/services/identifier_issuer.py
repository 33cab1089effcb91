"""
Identifier issuance for doctors, patients, schedules and reservations.

Candidates come from the ``secrets`` RNG. Each one is checked against the
identifiers this issuer handed out recently and against the persistence
layer before it is reserved; the check and the reservation happen under a
per-kind lock so two racing callers can never receive the same value.

The recent set only has to cover identifiers that are not persisted yet.
Every issue re-checks a few of its oldest entries and forgets those the
persistence layer now knows about; a hard limit caps it for kinds with no
persistence check.
"""

import asyncio
import logging
import secrets
from collections import OrderedDict
from typing import Awaitable, Callable, Dict, Mapping, Optional, Union

from ...domain.errors import IssuanceConflictError
from ...domain.value_objects.identifiers import (
    DoctorId,
    IdentifierKind,
    NumericIdentifier,
    PatientId,
    ReservationId,
    ScheduleId,
)
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.repositories.patient_repo import PatientRepository
from ..ports.repositories.reservation_repo import ReservationRepository
from ..ports.repositories.schedule_repo import ScheduleRepository

logger = logging.getLogger("clinicslots")

ExistenceCheck = Callable[[NumericIdentifier], Awaitable[bool]]
CandidateSource = Callable[[int], str]

DEFAULT_MAX_ATTEMPTS = 8
DEFAULT_RECENT_LIMIT = 100_000
# Oldest recent entries re-checked against persistence on each issue.
PRUNE_BATCH = 8


def random_digits(length: int) -> str:
    """Uniformly random string of ``length`` ASCII digits."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class IdentifierIssuer:
    """Issues unique fixed-length numeric identifiers."""

    def __init__(
        self,
        existence_checks: Optional[Mapping[IdentifierKind, ExistenceCheck]] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        candidate_source: CandidateSource = random_digits,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if recent_limit <= 0:
            raise ValueError("recent_limit must be positive")
        self._existence_checks: Dict[IdentifierKind, ExistenceCheck] = dict(existence_checks or {})
        self._max_attempts = max_attempts
        self._candidate_source = candidate_source
        self._locks: Dict[IdentifierKind, asyncio.Lock] = {kind: asyncio.Lock() for kind in IdentifierKind}
        self._recent_limit = recent_limit
        self._recent: Dict[IdentifierKind, "OrderedDict[str, None]"] = {
            kind: OrderedDict() for kind in IdentifierKind
        }

    @classmethod
    def from_repositories(
        cls,
        doctor_repository: DoctorRepository,
        patient_repository: PatientRepository,
        schedule_repository: ScheduleRepository,
        reservation_repository: ReservationRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ) -> "IdentifierIssuer":
        """Issuer whose persistence checks go through the repository ports."""
        return cls(
            existence_checks={
                IdentifierKind.DOCTOR: doctor_repository.exists_by_id,
                IdentifierKind.PATIENT: patient_repository.exists_by_id,
                IdentifierKind.SCHEDULE: schedule_repository.exists_by_id,
                IdentifierKind.RESERVATION: reservation_repository.exists_by_id,
            },
            max_attempts=max_attempts,
            recent_limit=recent_limit,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def recent_count(self, kind: Union[IdentifierKind, str]) -> int:
        """Identifiers of ``kind`` still remembered as handed out."""
        return len(self._recent[IdentifierKind(kind)])

    async def issue(self, kind: Union[IdentifierKind, str]) -> NumericIdentifier:
        """Issue a fresh identifier of ``kind``.

        Raises:
            IssuanceConflictError: every one of ``max_attempts`` candidates was taken.
        """
        kind = IdentifierKind(kind)
        value_type = kind.value_type
        check = self._existence_checks.get(kind)

        async with self._locks[kind]:
            recent = self._recent[kind]
            if check is not None:
                await self._forget_persisted(kind, recent, check)
            for _ in range(self._max_attempts):
                candidate = value_type(self._candidate_source(kind.length))
                if candidate.value in recent:
                    continue
                if check is not None and await check(candidate):
                    continue
                recent[candidate.value] = None
                while len(recent) > self._recent_limit:
                    recent.popitem(last=False)
                return candidate

        logger.error(
            f"Identifier issuance for kind={kind.value} collided {self._max_attempts} times "
            f"(recent={self.recent_count(kind)})"
        )
        raise IssuanceConflictError(kind.value, self._max_attempts)

    async def _forget_persisted(
        self,
        kind: IdentifierKind,
        recent: "OrderedDict[str, None]",
        check: ExistenceCheck,
    ) -> None:
        # Persisted values are covered by the check; unsaved ones rotate to the back.
        for value in list(recent)[:PRUNE_BATCH]:
            if await check(kind.value_type(value)):
                del recent[value]
            else:
                recent.move_to_end(value)

    async def issue_doctor_id(self) -> DoctorId:
        return await self.issue(IdentifierKind.DOCTOR)  # type: ignore[return-value]

    async def issue_patient_id(self) -> PatientId:
        return await self.issue(IdentifierKind.PATIENT)  # type: ignore[return-value]

    async def issue_schedule_id(self) -> ScheduleId:
        return await self.issue(IdentifierKind.SCHEDULE)  # type: ignore[return-value]

    async def issue_reservation_id(self) -> ReservationId:
        return await self.issue(IdentifierKind.RESERVATION)  # type: ignore[return-value]
