"""FastAPI dependency providers.

Services live in the application's DI container (``app.state.container``),
which the lifespan fills from settings.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..application.services.booking_coordinator import BookingCoordinator
from ..application.services.directory_service import DirectoryService
from ..application.services.query_service import QueryService
from ..application.services.schedule_ledger import ScheduleLedger
from ..core.container import Container, ServiceNames


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_schedule_ledger(request: Request) -> ScheduleLedger:
    return get_container(request).get(ServiceNames.SCHEDULE_LEDGER)


def get_booking_coordinator(request: Request) -> BookingCoordinator:
    return get_container(request).get(ServiceNames.BOOKING_COORDINATOR)


def get_query_service(request: Request) -> QueryService:
    return get_container(request).get(ServiceNames.QUERY_SERVICE)


def get_directory_service(request: Request) -> DirectoryService:
    return get_container(request).get(ServiceNames.DIRECTORY_SERVICE)


ScheduleLedgerDep = Annotated[ScheduleLedger, Depends(get_schedule_ledger)]
BookingCoordinatorDep = Annotated[BookingCoordinator, Depends(get_booking_coordinator)]
QueryServiceDep = Annotated[QueryService, Depends(get_query_service)]
DirectoryServiceDep = Annotated[DirectoryService, Depends(get_directory_service)]
