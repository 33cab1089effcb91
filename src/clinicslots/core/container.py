"""
Dependency injection container for Clinic-Slots.

This module provides a lightweight dependency injection container
for managing application dependencies and their lifecycle.
"""

from typing import Any, Dict

from .exceptions import ConfigurationError


class Container:
    """Lightweight dependency injection container."""

    def __init__(self) -> None:
        self._singletons: Dict[str, Any] = {}

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[name] = instance

    def get(self, name: str) -> Any:
        """Get a service by name."""
        if name in self._singletons:
            return self._singletons[name]
        raise ConfigurationError(f"Service '{name}' not found")

    def has(self, name: str) -> bool:
        """Check if a service is registered."""
        return name in self._singletons

    def clear(self) -> None:
        """Clear all registered services."""
        self._singletons.clear()


# Common service names
class ServiceNames:
    """Service names used throughout the application."""

    # Core services
    SETTINGS = "settings"
    LOCK_MANAGER = "lock_manager"

    # Repositories
    SCHEDULE_REPOSITORY = "schedule_repository"
    RESERVATION_REPOSITORY = "reservation_repository"
    DOCTOR_REPOSITORY = "doctor_repository"
    PATIENT_REPOSITORY = "patient_repository"
    DEPARTMENT_REPOSITORY = "department_repository"

    # Application services
    IDENTIFIER_ISSUER = "identifier_issuer"
    SCHEDULE_LEDGER = "schedule_ledger"
    RESERVATION_REGISTRY = "reservation_registry"
    BOOKING_COORDINATOR = "booking_coordinator"
    QUERY_SERVICE = "query_service"
    DIRECTORY_SERVICE = "directory_service"
