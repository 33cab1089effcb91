"""
Value objects package for domain layer.
"""

from .identifiers import (
    DoctorId,
    IdentifierKind,
    NumericIdentifier,
    PatientId,
    ReservationId,
    ScheduleId,
)

__all__ = [
    "NumericIdentifier",
    "DoctorId",
    "PatientId",
    "ScheduleId",
    "ReservationId",
    "IdentifierKind",
]
