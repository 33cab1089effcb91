"""Beanie document models."""

from .directory_m import DepartmentMembershipMongo, DepartmentMongo, DoctorMongo, PatientMongo
from .scheduling_m import ReservationMongo, ScheduleMongo

DOCUMENT_MODELS = [
    ScheduleMongo,
    ReservationMongo,
    DoctorMongo,
    PatientMongo,
    DepartmentMongo,
    DepartmentMembershipMongo,
]

__all__ = [
    "ScheduleMongo",
    "ReservationMongo",
    "DoctorMongo",
    "PatientMongo",
    "DepartmentMongo",
    "DepartmentMembershipMongo",
    "DOCUMENT_MODELS",
]
