"""
MongoDB Beanie models for the doctor / patient / department directory.
"""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field


class DoctorMongo(Document):
    """MongoDB model for Doctor entity."""

    doctor_id: str = Field(..., description="Doctor ID")
    name: str = Field(..., description="Doctor name")
    department_name: Optional[str] = Field(None, description="Department the doctor belongs to")
    specialty: Optional[str] = Field(None, description="Specialty")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "doctors"
        indexes = ["doctor_id", "department_name"]


class PatientMongo(Document):
    """MongoDB model for Patient entity."""

    patient_id: str = Field(..., description="Patient ID")
    name: str = Field(..., description="Patient name")
    identity_number: str = Field(..., description="National identity number")
    phone: str = Field(..., description="Phone number")
    gender: Optional[str] = Field(None, description="M or F")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "patients"
        indexes = ["patient_id", "identity_number"]


class DepartmentMongo(Document):
    """MongoDB model for Department entity."""

    name: str = Field(..., description="Department name")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "departments"
        indexes = ["name"]


class DepartmentMembershipMongo(Document):
    """One doctor's membership row in a department; ``position`` keeps join order."""

    department_name: str = Field(..., description="Department name")
    doctor_id: str = Field(..., description="Doctor ID")
    position: int = Field(..., description="Join order within the department")

    class Settings:
        name = "department_members"
        indexes = [[("department_name", 1), ("position", 1)], "doctor_id"]
