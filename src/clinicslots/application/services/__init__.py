"""Application services: the slot-allocation core and its collaborators."""

from .booking_coordinator import BookingCoordinator, ConsistencyReport
from .directory_service import DirectoryService
from .identifier_issuer import IdentifierIssuer
from .query_service import QueryService, ScheduleOccupancy
from .reservation_registry import ReservationRegistry
from .schedule_ledger import ScheduleLedger

__all__ = [
    "IdentifierIssuer",
    "ScheduleLedger",
    "ReservationRegistry",
    "BookingCoordinator",
    "ConsistencyReport",
    "QueryService",
    "ScheduleOccupancy",
    "DirectoryService",
]
