"""Doctor directory entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..errors import ValidationError
from ..value_objects.identifiers import DoctorId


@dataclass
class Doctor:
    """Doctor directory record.

    Note: field shapes are enforced by the API schemas; here we only keep
    the invariants the booking core relies on (a non-empty name).
    """

    doctor_id: DoctorId
    name: str
    department_name: Optional[str] = None
    specialty: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self._validate_doctor_data()

    def _validate_doctor_data(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError(
                "Doctor name cannot be empty",
                "INVALID_DOCTOR_DATA",
                {"field": "name", "value": self.name},
            )

    def update_profile(
        self,
        name: Optional[str] = None,
        department_name: Optional[str] = None,
        specialty: Optional[str] = None,
    ) -> None:
        """Update the mutable profile fields that were provided."""
        if name is not None:
            self.name = name
        if department_name is not None:
            self.department_name = department_name
        if specialty is not None:
            self.specialty = specialty
        self._validate_doctor_data()
        self.updated_at = datetime.utcnow()
