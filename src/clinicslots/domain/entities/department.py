"""Department directory entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..errors import ValidationError


@dataclass
class Department:
    """Department record.

    Membership (which doctors belong, in which order) lives in the
    department repository as its own relation, not on this object.
    """

    name: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError(
                "Department name cannot be empty",
                "INVALID_DEPARTMENT_DATA",
                {"field": "name", "value": self.name},
            )
        self.name = self.name.strip()
