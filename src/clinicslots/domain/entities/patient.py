"""Patient directory entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..enums.scheduling import Gender
from ..errors import ValidationError
from ..value_objects.identifiers import PatientId


@dataclass
class Patient:
    """Patient directory record.

    Age is deliberately not derived from ``identity_number``; callers that
    need it must supply it from a validated source.
    """

    patient_id: PatientId
    name: str
    identity_number: str
    phone: str
    gender: Optional[Gender] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.gender is not None:
            self.gender = Gender(self.gender)
        if not self.name or not self.name.strip():
            raise ValidationError(
                "Patient name cannot be empty",
                "INVALID_PATIENT_DATA",
                {"field": "name", "value": self.name},
            )
