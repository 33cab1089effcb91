"""
Reservation endpoints: book, cancel, complete and patient history.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...domain.enums.scheduling import ReservationStatus
from ...domain.value_objects.identifiers import PatientId, ReservationId, ScheduleId
from ..deps import BookingCoordinatorDep, QueryServiceDep
from ..schemas.common import ApiResponse
from ..schemas.scheduling import BookReservationRequest, ReservationResponse
from ..utils.responses import ok

router = APIRouter(tags=["Reservations"])


@router.post(
    "/reservations",
    response_model=ApiResponse[ReservationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def book_reservation(
    request: Request, payload: BookReservationRequest, coordinator: BookingCoordinatorDep
):
    """Claim one unit of a schedule for a patient."""
    reservation = await coordinator.book(PatientId(payload.patient_id), ScheduleId(payload.schedule_id))
    return ok(request, data=ReservationResponse.from_domain(reservation), message="Reservation booked")


@router.get("/reservations/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def get_reservation(request: Request, reservation_id: str, queries: QueryServiceDep):
    reservation = await queries.reservation(ReservationId(reservation_id))
    return ok(request, data=ReservationResponse.from_domain(reservation))


@router.post("/reservations/{reservation_id}/cancel", response_model=ApiResponse[ReservationResponse])
async def cancel_reservation(request: Request, reservation_id: str, coordinator: BookingCoordinatorDep):
    reservation = await coordinator.cancel(ReservationId(reservation_id))
    return ok(request, data=ReservationResponse.from_domain(reservation), message="Reservation cancelled")


@router.post("/reservations/{reservation_id}/complete", response_model=ApiResponse[ReservationResponse])
async def complete_reservation(request: Request, reservation_id: str, coordinator: BookingCoordinatorDep):
    reservation = await coordinator.complete(ReservationId(reservation_id))
    return ok(request, data=ReservationResponse.from_domain(reservation), message="Reservation completed")


@router.get("/patients/{patient_id}/reservations", response_model=ApiResponse[List[ReservationResponse]])
async def patient_reservations(
    request: Request,
    patient_id: str,
    queries: QueryServiceDep,
    status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
):
    """A patient's reservations, newest first."""
    reservations = await queries.patient_history(PatientId(patient_id), status_filter)
    return ok(request, data=[ReservationResponse.from_domain(r) for r in reservations])
