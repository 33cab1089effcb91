"""Schedule domain entity: one bookable block of a doctor's time."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from ..enums.scheduling import ScheduleStatus, SlotCategory
from ..errors import InvalidCapacityError, InvalidCategoryError, InvalidWindowError
from ..value_objects.identifiers import DoctorId, ScheduleId
from ...core.utils.datetime_utils import combine

DEFAULT_CAPACITY = 10


@dataclass
class Schedule:
    """Capacity-bounded availability window published by a doctor.

    ``booked_count`` is only ever changed through :meth:`reserve_unit` and
    :meth:`release_unit`; both recompute ``status``. A withdrawn schedule
    stays withdrawn.
    """

    schedule_id: ScheduleId
    doctor_id: DoctorId
    schedule_date: date
    start_time: time
    end_time: time
    slot_category: SlotCategory
    capacity: int = DEFAULT_CAPACITY
    booked_count: int = 0
    status: ScheduleStatus = ScheduleStatus.NORMAL
    withdrawn_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self._validate_schedule_data()
        self._refresh_status()

    def _validate_schedule_data(self) -> None:
        """Validate window, category and capacity accounting."""
        try:
            self.slot_category = SlotCategory(self.slot_category)
        except ValueError:
            raise InvalidCategoryError(self.slot_category) from None

        if self.end_time <= self.start_time:
            raise InvalidWindowError(self.start_time, self.end_time)

        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity <= 0:
            raise InvalidCapacityError(self.capacity)

        if not 0 <= self.booked_count <= self.capacity:
            raise InvalidCapacityError(self.capacity, self.booked_count)

        self.status = ScheduleStatus(self.status)

    @property
    def remaining(self) -> int:
        """Units still available."""
        return self.capacity - self.booked_count

    @property
    def starts_at(self) -> datetime:
        return combine(self.schedule_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return combine(self.schedule_date, self.end_time)

    @property
    def is_withdrawn(self) -> bool:
        return self.status == ScheduleStatus.WITHDRAWN

    @property
    def is_bookable(self) -> bool:
        return not self.is_withdrawn and self.booked_count < self.capacity

    def covers(self, moment: datetime) -> bool:
        """Whether ``moment`` lies inside the schedule's window."""
        return self.starts_at <= moment < self.ends_at

    def reserve_unit(self) -> bool:
        """Take one unit of capacity. Returns False when full or withdrawn."""
        if not self.is_bookable:
            return False
        self.booked_count += 1
        self._refresh_status()
        return True

    def release_unit(self) -> bool:
        """Give back one unit of capacity. Returns False when nothing is booked."""
        if self.booked_count <= 0:
            return False
        self.booked_count -= 1
        self._refresh_status()
        return True

    def change_capacity(self, capacity: int) -> None:
        """Set a new capacity; it may not drop below the units already booked."""
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidCapacityError(capacity)
        if capacity < self.booked_count:
            raise InvalidCapacityError(capacity, self.booked_count)
        self.capacity = capacity
        self._refresh_status()

    def withdraw(self, at: datetime) -> None:
        """Stop the schedule. Idempotent; the first withdrawal time is kept."""
        if self.withdrawn_at is None:
            self.withdrawn_at = at
        self.status = ScheduleStatus.WITHDRAWN

    def _refresh_status(self) -> None:
        if self.status == ScheduleStatus.WITHDRAWN:
            return
        if self.booked_count >= self.capacity:
            self.status = ScheduleStatus.FULL
        else:
            self.status = ScheduleStatus.NORMAL
