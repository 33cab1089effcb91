"""
Fixed-length numeric identifier value objects.

Formats:
    DoctorId       8 digits
    PatientId     10 digits
    ScheduleId    10 digits
    ReservationId 12 digits
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Type

from ..errors import InvalidIdentifierError


@dataclass(frozen=True)
class NumericIdentifier:
    """Immutable all-digit identifier of a fixed length."""

    value: str

    KIND: ClassVar[str] = "identifier"
    LENGTH: ClassVar[int] = 0

    def __post_init__(self) -> None:
        """Validate identifier format."""
        if not isinstance(self.value, str) or len(self.value) != self.LENGTH:
            raise InvalidIdentifierError(self.KIND, self.value, self.LENGTH)
        # ASCII only: str.isdigit() alone accepts '²' and friends
        if not (self.value.isascii() and self.value.isdigit()):
            raise InvalidIdentifierError(self.KIND, self.value, self.LENGTH)

    def __str__(self) -> str:
        """String representation."""
        return self.value


@dataclass(frozen=True)
class DoctorId(NumericIdentifier):
    KIND: ClassVar[str] = "doctor"
    LENGTH: ClassVar[int] = 8


@dataclass(frozen=True)
class PatientId(NumericIdentifier):
    KIND: ClassVar[str] = "patient"
    LENGTH: ClassVar[int] = 10


@dataclass(frozen=True)
class ScheduleId(NumericIdentifier):
    KIND: ClassVar[str] = "schedule"
    LENGTH: ClassVar[int] = 10


@dataclass(frozen=True)
class ReservationId(NumericIdentifier):
    KIND: ClassVar[str] = "reservation"
    LENGTH: ClassVar[int] = 12


class IdentifierKind(str, Enum):
    """Kinds of identifiers the issuer hands out."""

    DOCTOR = "doctor"
    PATIENT = "patient"
    SCHEDULE = "schedule"
    RESERVATION = "reservation"

    @property
    def value_type(self) -> Type[NumericIdentifier]:
        return _VALUE_TYPES[self]

    @property
    def length(self) -> int:
        return self.value_type.LENGTH


_VALUE_TYPES = {
    IdentifierKind.DOCTOR: DoctorId,
    IdentifierKind.PATIENT: PatientId,
    IdentifierKind.SCHEDULE: ScheduleId,
    IdentifierKind.RESERVATION: ReservationId,
}
