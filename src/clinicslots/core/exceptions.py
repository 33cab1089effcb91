"""
Exception handling for Clinic-Slots infrastructure.

Business rule violations live in ``clinicslots.domain.errors``; the classes
here cover configuration and persistence failures.
"""

from typing import Any, Dict, Optional


class ClinicSlotsException(Exception):
    """Base exception class for Clinic-Slots infrastructure."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ClinicSlotsException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class DatabaseError(ClinicSlotsException):
    """Raised when there's a database operation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "DATABASE_ERROR", details)
