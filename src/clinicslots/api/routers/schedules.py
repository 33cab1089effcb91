"""
Schedule endpoints: publishing, capacity, withdrawal and free-slot lookups.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...domain.value_objects.identifiers import DoctorId, ScheduleId
from ..deps import BookingCoordinatorDep, QueryServiceDep, ScheduleLedgerDep
from ..schemas.common import ApiResponse
from ..schemas.scheduling import (
    AdjustCapacityRequest,
    ConsistencyResponse,
    CreateScheduleRequest,
    OccupancyResponse,
    ReservationResponse,
    ScheduleResponse,
    WithdrawScheduleResponse,
)
from ..utils.responses import ok

router = APIRouter(tags=["Schedules"])

@router.post(
    "/schedules",
    response_model=ApiResponse[ScheduleResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_schedule(request: Request, payload: CreateScheduleRequest, ledger: ScheduleLedgerDep):
    """Publish a schedule for a doctor."""
    schedule = await ledger.create(
        doctor_id=DoctorId(payload.doctor_id),
        schedule_date=payload.schedule_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        slot_category=payload.slot_category,
        capacity=payload.capacity,
    )
    return ok(request, data=ScheduleResponse.from_domain(schedule), message="Schedule created")


@router.get("/schedules/{schedule_id}", response_model=ApiResponse[ScheduleResponse])
async def get_schedule(request: Request, schedule_id: str, ledger: ScheduleLedgerDep):
    schedule = await ledger.get(ScheduleId(schedule_id))
    return ok(request, data=ScheduleResponse.from_domain(schedule))


@router.patch("/schedules/{schedule_id}/capacity", response_model=ApiResponse[ScheduleResponse])
async def adjust_capacity(
    request: Request, schedule_id: str, payload: AdjustCapacityRequest, ledger: ScheduleLedgerDep
):
    schedule = await ledger.adjust_capacity(ScheduleId(schedule_id), payload.capacity)
    return ok(request, data=ScheduleResponse.from_domain(schedule), message="Capacity updated")


@router.post("/schedules/{schedule_id}/withdraw", response_model=ApiResponse[WithdrawScheduleResponse])
async def withdraw_schedule(
    request: Request,
    schedule_id: str,
    coordinator: BookingCoordinatorDep,
    ledger: ScheduleLedgerDep,
):
    """Withdraw a schedule; every booked reservation on it is cancelled."""
    sid = ScheduleId(schedule_id)
    cancelled = await coordinator.withdraw_schedule(sid)
    schedule = await ledger.get(sid)
    return ok(
        request,
        data=WithdrawScheduleResponse(
            schedule=ScheduleResponse.from_domain(schedule),
            cancelled_reservations=[ReservationResponse.from_domain(r) for r in cancelled],
        ),
        message=f"Schedule withdrawn, {len(cancelled)} reservations cancelled",
    )


@router.get("/schedules/{schedule_id}/occupancy", response_model=ApiResponse[OccupancyResponse])
async def schedule_occupancy(request: Request, schedule_id: str, queries: QueryServiceDep):
    occupancy = await queries.schedule_occupancy(ScheduleId(schedule_id))
    return ok(request, data=OccupancyResponse.from_domain(occupancy))


@router.get("/schedules/{schedule_id}/verify", response_model=ApiResponse[ConsistencyResponse])
async def verify_schedule(request: Request, schedule_id: str, coordinator: BookingCoordinatorDep):
    """Check the schedule's booked count against its booked reservations."""
    report = await coordinator.verify_schedule(ScheduleId(schedule_id))
    return ok(request, data=ConsistencyResponse.from_domain(report))


@router.get("/doctors/{doctor_id}/free-slots", response_model=ApiResponse[List[ScheduleResponse]])
async def doctor_free_slots(
    request: Request,
    doctor_id: str,
    queries: QueryServiceDep,
    start_date: Optional[date] = Query(None, description="First date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Last date (inclusive)"),
):
    slots = await queries.free_slots(DoctorId(doctor_id), start_date, end_date)
    return ok(request, data=[ScheduleResponse.from_domain(s) for s in slots])


@router.get("/doctors/{doctor_id}/agenda", response_model=ApiResponse[List[ReservationResponse]])
async def doctor_agenda(
    request: Request,
    doctor_id: str,
    queries: QueryServiceDep,
    on_date: date = Query(..., description="Clinic date"),
):
    reservations = await queries.doctor_agenda(DoctorId(doctor_id), on_date)
    return ok(request, data=[ReservationResponse.from_domain(r) for r in reservations])
