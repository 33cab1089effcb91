"""
MongoDB Beanie models for schedules and reservations.

BSON has no date-only or time-only type, so ``schedule_date`` is stored as an
ISO date string (which sorts correctly) and the window bounds as ``HH:MM:SS``
strings. ``starts_at`` is denormalized for ordering.
"""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field


class ScheduleMongo(Document):
    """MongoDB model for Schedule entity."""

    schedule_id: str = Field(..., description="Schedule ID")
    doctor_id: str = Field(..., description="Doctor ID reference")
    schedule_date: str = Field(..., description="Schedule date (YYYY-MM-DD)")
    start_time: str = Field(..., description="Window start (HH:MM:SS)")
    end_time: str = Field(..., description="Window end (HH:MM:SS)")
    starts_at: datetime = Field(..., description="Schedule date combined with start time")
    slot_category: str = Field(..., description="morning, afternoon or evening")
    capacity: int = Field(..., description="Total bookable units")
    booked_count: int = Field(default=0, description="Units currently booked")
    status: str = Field(default="normal", description="normal, full or withdrawn")
    withdrawn_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)

    class Settings:
        name = "schedules"
        indexes = [
            "schedule_id",
            [("doctor_id", 1), ("starts_at", 1)],
            "status",
        ]


class ReservationMongo(Document):
    """MongoDB model for Reservation entity."""

    reservation_id: str = Field(..., description="Reservation ID")
    patient_id: str = Field(..., description="Patient ID reference")
    doctor_id: str = Field(..., description="Doctor ID reference")
    schedule_id: str = Field(..., description="Schedule ID reference")
    scheduled_at: datetime = Field(..., description="Appointment time")
    status: str = Field(default="booked", description="booked, cancelled or completed")
    created_at: datetime = Field(..., description="Creation time")
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Settings:
        name = "reservations"
        indexes = [
            "reservation_id",
            [("patient_id", 1), ("created_at", -1)],
            [("doctor_id", 1), ("scheduled_at", 1)],
            [("schedule_id", 1), ("status", 1)],
        ]
