"""
Domain-specific error types for business rule violations.

Each error carries a stable ``error_code`` and the HTTP status the API layer
reports it with.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    http_status: int = 400

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


# ---------------------------------------------------------------------------
# Input reaching the core in a shape it cannot accept
# ---------------------------------------------------------------------------


class ValidationError(DomainError):
    """Malformed input reached the domain layer."""

    http_status = 422

    def __init__(
        self,
        message: str,
        error_code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, error_code, details)


class InvalidIdentifierError(ValidationError):
    """Identifier does not match its fixed-length numeric format."""

    def __init__(self, kind: str, value: Any, length: int) -> None:
        message = f"{kind} ID must be a {length}-digit numeric string, got '{value}'"
        super().__init__(
            message, "INVALID_IDENTIFIER", {"kind": kind, "value": value, "length": length}
        )


class InvalidCategoryError(ValidationError):
    """Slot category outside the enumerated set."""

    def __init__(self, category: Any) -> None:
        message = f"Slot category must be one of morning, afternoon, evening; got '{category}'"
        super().__init__(message, "INVALID_CATEGORY", {"slot_category": category})


class InvalidCapacityError(ValidationError):
    """Capacity is not a positive integer or is below the booked count."""

    def __init__(self, capacity: Any, booked_count: int = 0) -> None:
        if booked_count:
            message = f"Capacity {capacity} is below the {booked_count} units already booked"
        else:
            message = f"Capacity must be a positive integer, got {capacity}"
        super().__init__(
            message, "INVALID_CAPACITY", {"capacity": capacity, "booked_count": booked_count}
        )


class InvalidWindowError(ValidationError):
    """Schedule end time is not after its start time."""

    def __init__(self, start_time: Any, end_time: Any) -> None:
        message = f"End time {end_time} must be later than start time {start_time}"
        super().__init__(
            message,
            "INVALID_WINDOW",
            {"start_time": str(start_time), "end_time": str(end_time)},
        )


class PastDateError(ValidationError):
    """Schedule date lies before the current date."""

    def __init__(self, schedule_date: Any, today: Any) -> None:
        message = f"Schedule date {schedule_date} is before today ({today})"
        super().__init__(
            message, "PAST_DATE", {"schedule_date": str(schedule_date), "today": str(today)}
        )


class InvalidTimeError(ValidationError):
    """Reservation time is not strictly in the future."""

    def __init__(self, scheduled_at: Any, now: Any) -> None:
        message = f"Reservation time {scheduled_at} must be later than {now}"
        super().__init__(
            message, "INVALID_TIME", {"scheduled_at": str(scheduled_at), "now": str(now)}
        )


class OutsideWindowError(ValidationError):
    """Reservation time falls outside its schedule's window."""

    def __init__(self, scheduled_at: Any, starts_at: Any, ends_at: Any) -> None:
        message = f"Reservation time {scheduled_at} is outside the schedule window {starts_at} - {ends_at}"
        super().__init__(
            message,
            "OUTSIDE_WINDOW",
            {"scheduled_at": str(scheduled_at), "starts_at": str(starts_at), "ends_at": str(ends_at)},
        )


# ---------------------------------------------------------------------------
# Booking outcomes
# ---------------------------------------------------------------------------


class ScheduleFullError(DomainError):
    """No capacity left on the schedule."""

    http_status = 409

    def __init__(self, schedule_id: str, capacity: int) -> None:
        message = f"Schedule '{schedule_id}' is full ({capacity} of {capacity} booked)"
        super().__init__(
            message, "SCHEDULE_FULL", {"schedule_id": schedule_id, "capacity": capacity}
        )


class ScheduleWithdrawnError(DomainError):
    """Schedule was withdrawn by an operator and no longer takes bookings."""

    http_status = 409

    def __init__(self, schedule_id: str) -> None:
        message = f"Schedule '{schedule_id}' has been withdrawn"
        super().__init__(message, "SCHEDULE_WITHDRAWN", {"schedule_id": schedule_id})


class InvalidTransitionError(DomainError):
    """Reservation status change not allowed by the one-way rules."""

    http_status = 409

    def __init__(self, reservation_id: str, current: str, target: str) -> None:
        message = f"Reservation '{reservation_id}' cannot move from {current} to {target}"
        super().__init__(
            message,
            "INVALID_TRANSITION",
            {"reservation_id": reservation_id, "current": current, "target": target},
        )


class NotBookedError(DomainError):
    """Operation requires a reservation in booked status."""

    http_status = 409

    def __init__(self, reservation_id: str, status: str) -> None:
        message = f"Reservation '{reservation_id}' is {status}, not booked"
        super().__init__(
            message, "NOT_BOOKED", {"reservation_id": reservation_id, "status": status}
        )


class BusyError(DomainError):
    """Per-schedule lock could not be acquired in time. Safe to retry."""

    http_status = 503

    def __init__(self, resource_id: str, timeout_seconds: float) -> None:
        message = f"Resource '{resource_id}' is busy, retry later (waited {timeout_seconds}s)"
        super().__init__(
            message,
            "BUSY",
            {"resource_id": resource_id, "timeout_seconds": timeout_seconds, "retryable": True},
        )


class IssuanceConflictError(DomainError):
    """Identifier issuance kept colliding with identifiers already in use."""

    http_status = 503

    def __init__(self, kind: str, attempts: int) -> None:
        message = f"Could not issue a unique {kind} ID after {attempts} attempts"
        super().__init__(
            message, "ISSUANCE_CONFLICT", {"kind": kind, "attempts": attempts, "retryable": True}
        )


class InconsistentStateError(DomainError):
    """Capacity accounting disagrees with the reservation ledger."""

    http_status = 500

    def __init__(
        self,
        schedule_id: str,
        booked_count: int,
        booked_reservations: int,
        completed_reservations: int = 0,
        pending_releases: int = 0,
    ) -> None:
        message = (
            f"Schedule '{schedule_id}' records {booked_count} booked units but "
            f"{booked_reservations} booked and {completed_reservations} completed reservations "
            f"and {pending_releases} pending releases exist"
        )
        super().__init__(
            message,
            "INCONSISTENT_STATE",
            {
                "schedule_id": schedule_id,
                "booked_count": booked_count,
                "booked_reservations": booked_reservations,
                "completed_reservations": completed_reservations,
                "pending_releases": pending_releases,
            },
        )


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class NotFoundError(DomainError):
    """Base for missing records."""

    http_status = 404


class ScheduleNotFoundError(NotFoundError):
    """Schedule not found."""

    def __init__(self, schedule_id: str) -> None:
        message = f"Schedule with ID '{schedule_id}' not found"
        super().__init__(message, "SCHEDULE_NOT_FOUND", {"schedule_id": schedule_id})


class ReservationNotFoundError(NotFoundError):
    """Reservation not found."""

    def __init__(self, reservation_id: str) -> None:
        message = f"Reservation with ID '{reservation_id}' not found"
        super().__init__(message, "RESERVATION_NOT_FOUND", {"reservation_id": reservation_id})


class DoctorNotFoundError(NotFoundError):
    """Doctor not found."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' not found"
        super().__init__(message, "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class PatientNotFoundError(NotFoundError):
    """Patient not found."""

    def __init__(self, patient_id: str) -> None:
        message = f"Patient with ID '{patient_id}' not found"
        super().__init__(message, "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class DepartmentNotFoundError(NotFoundError):
    """Department not found."""

    def __init__(self, department_name: str) -> None:
        message = f"Department '{department_name}' not found"
        super().__init__(message, "DEPARTMENT_NOT_FOUND", {"department_name": department_name})


class DuplicateDepartmentError(DomainError):
    """Department already exists."""

    http_status = 409

    def __init__(self, department_name: str) -> None:
        message = f"Department '{department_name}' already exists"
        super().__init__(message, "DUPLICATE_DEPARTMENT", {"department_name": department_name})
