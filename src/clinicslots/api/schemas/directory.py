"""
Pydantic schemas for the doctor / patient / department directory.

Field shapes (name lengths, phone pattern, identity number) are enforced
here; the domain layer only rejects empty names.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...domain.entities.department import Department
from ...domain.entities.doctor import Doctor
from ...domain.entities.patient import Patient
from ...domain.enums.scheduling import Gender

IDENTITY_NUMBER_PATTERN = re.compile(r"^\d{17}[\dXx]$")


def _strip_name(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Name cannot be empty")
    return v.strip()


class RegisterDoctorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=40, description="Doctor name")
    department_name: Optional[str] = Field(None, max_length=40, description="Department to join")
    specialty: Optional[str] = Field(None, max_length=60, description="Specialty")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)


class UpdateDoctorRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=40)
    department_name: Optional[str] = Field(None, max_length=40)
    specialty: Optional[str] = Field(None, max_length=60)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _strip_name(v)


class DoctorResponse(BaseModel):
    doctor_id: str
    name: str
    department_name: Optional[str] = None
    specialty: Optional[str] = None

    @classmethod
    def from_domain(cls, doctor: Doctor) -> "DoctorResponse":
        return cls(
            doctor_id=doctor.doctor_id.value,
            name=doctor.name,
            department_name=doctor.department_name,
            specialty=doctor.specialty,
        )


class RegisterPatientRequest(BaseModel):
    """Request schema for patient registration."""

    name: str = Field(..., min_length=1, max_length=40, description="Patient name")
    identity_number: str = Field(..., description="18-character national identity number")
    phone: str = Field(..., min_length=8, max_length=16, description="Phone number")
    gender: Optional[Gender] = Field(None, description="M or F")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)

    @field_validator("identity_number")
    @classmethod
    def validate_identity_number(cls, v: str) -> str:
        s = (v or "").strip()
        if not IDENTITY_NUMBER_PATTERN.fullmatch(s):
            raise ValueError("Identity number must be 17 digits followed by a digit or X")
        return s.upper()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        # Accept either E.164 (+country and 7-14 digits) or 8-16 local digits
        s = (v or "").strip()
        if re.fullmatch(r"^\+[1-9]\d{7,14}$", s):
            return s
        if re.fullmatch(r"^\d{8,16}$", s):
            return s
        raise ValueError("Phone must be E.164 (+country code and 7-14 digits) or 8-16 local digits")


class PatientResponse(BaseModel):
    patient_id: str
    name: str
    phone: str
    gender: Optional[Gender] = None

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientResponse":
        return cls(
            patient_id=patient.patient_id.value,
            name=patient.name,
            phone=patient.phone,
            gender=patient.gender,
        )


class CreateDepartmentRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=40, description="Department name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)


class DepartmentResponse(BaseModel):
    name: str

    @classmethod
    def from_domain(cls, department: Department) -> "DepartmentResponse":
        return cls(name=department.name)
