"""
Pydantic schemas for schedule and reservation endpoints.
"""

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field

from ...application.services.booking_coordinator import ConsistencyReport
from ...application.services.query_service import ScheduleOccupancy
from ...domain.entities.reservation import Reservation
from ...domain.entities.schedule import Schedule
from ...domain.enums.scheduling import ReservationStatus, ScheduleStatus, SlotCategory

DOCTOR_ID_PATTERN = r"^\d{8}$"
PATIENT_ID_PATTERN = r"^\d{10}$"
SCHEDULE_ID_PATTERN = r"^\d{10}$"
RESERVATION_ID_PATTERN = r"^\d{12}$"


class CreateScheduleRequest(BaseModel):
    """Request schema for publishing a schedule."""

    doctor_id: str = Field(..., pattern=DOCTOR_ID_PATTERN, description="8-digit doctor ID")
    schedule_date: date = Field(..., description="Clinic date of the schedule")
    start_time: time = Field(..., description="Window start")
    end_time: time = Field(..., description="Window end (after start)")
    slot_category: SlotCategory = Field(..., description="morning, afternoon or evening")
    capacity: Optional[int] = Field(None, description="Bookable units (default from configuration)")


class AdjustCapacityRequest(BaseModel):
    capacity: int = Field(..., description="New capacity; not below the units already booked")


class ScheduleResponse(BaseModel):
    """Schedule as exposed over the API."""

    schedule_id: str
    doctor_id: str
    schedule_date: date
    start_time: time
    end_time: time
    slot_category: SlotCategory
    capacity: int
    booked_count: int
    remaining: int
    status: ScheduleStatus
    withdrawn_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, schedule: Schedule) -> "ScheduleResponse":
        return cls(
            schedule_id=schedule.schedule_id.value,
            doctor_id=schedule.doctor_id.value,
            schedule_date=schedule.schedule_date,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            slot_category=schedule.slot_category,
            capacity=schedule.capacity,
            booked_count=schedule.booked_count,
            remaining=schedule.remaining,
            status=schedule.status,
            withdrawn_at=schedule.withdrawn_at,
        )


class OccupancyResponse(BaseModel):
    schedule_id: str
    capacity: int
    booked_count: int
    remaining: int
    status: ScheduleStatus

    @classmethod
    def from_domain(cls, occupancy: ScheduleOccupancy) -> "OccupancyResponse":
        return cls(
            schedule_id=occupancy.schedule_id,
            capacity=occupancy.capacity,
            booked_count=occupancy.booked_count,
            remaining=occupancy.remaining,
            status=occupancy.status,
        )


class ConsistencyResponse(BaseModel):
    schedule_id: str
    booked_count: int
    booked_reservations: int
    completed_reservations: int
    pending_releases: int
    consistent: bool = True

    @classmethod
    def from_domain(cls, report: ConsistencyReport) -> "ConsistencyResponse":
        return cls(
            schedule_id=report.schedule_id,
            booked_count=report.booked_count,
            booked_reservations=report.booked_reservations,
            completed_reservations=report.completed_reservations,
            pending_releases=report.pending_releases,
        )


class BookReservationRequest(BaseModel):
    """Request schema for booking one unit of a schedule."""

    patient_id: str = Field(..., pattern=PATIENT_ID_PATTERN, description="10-digit patient ID")
    schedule_id: str = Field(..., pattern=SCHEDULE_ID_PATTERN, description="10-digit schedule ID")


class ReservationResponse(BaseModel):
    """Reservation as exposed over the API."""

    reservation_id: str
    patient_id: str
    doctor_id: str
    schedule_id: str
    scheduled_at: datetime
    status: ReservationStatus
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            reservation_id=reservation.reservation_id.value,
            patient_id=reservation.patient_id.value,
            doctor_id=reservation.doctor_id.value,
            schedule_id=reservation.schedule_id.value,
            scheduled_at=reservation.scheduled_at,
            status=reservation.status,
            created_at=reservation.created_at,
            cancelled_at=reservation.cancelled_at,
            completed_at=reservation.completed_at,
        )


class WithdrawScheduleResponse(BaseModel):
    schedule: ScheduleResponse
    cancelled_reservations: List[ReservationResponse]

