"""
Domain models for work calendars, services, appointments and time options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from .clock import Interval, from_minutes
from .exceptions import InvalidDuration, InvalidWorkCalendar

WEEKDAY_NAMES = {
    0: "Monday",
    1: "Tuesday",
    2: "Wednesday",
    3: "Thursday",
    4: "Friday",
    5: "Saturday",
    6: "Sunday",
}


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"

    @property
    def occupies_time(self) -> bool:
        """Only non-terminal appointments block the calendar."""
        return self in OCCUPYING_STATUSES


OCCUPYING_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED}
)


@dataclass(frozen=True)
class WorkCalendar:
    """
    Recurring weekly work configuration of a staff member.

    Weekdays use 0=Monday ... 6=Sunday. Times are minutes since midnight.
    Work hours may be unset (a configuration gap surfaced at resolve time);
    the lunch break is only considered when both of its bounds are set.
    """
    active_weekdays: FrozenSet[int]
    work_start: Optional[int] = None
    work_end: Optional[int] = None
    lunch_start: Optional[int] = None
    lunch_end: Optional[int] = None
    slot_step_minutes: Optional[int] = None  # overrides the deployment step

    def __post_init__(self):
        weekdays = frozenset(self.active_weekdays)
        invalid = sorted(day for day in weekdays if day not in range(7))
        if invalid:
            raise InvalidWorkCalendar(f"Weekdays must be between 0 and 6, got {invalid}")
        object.__setattr__(self, "active_weekdays", weekdays)

        if self.has_work_hours and self.work_end <= self.work_start:
            raise InvalidWorkCalendar(
                f"Work end {from_minutes(self.work_end)} must be after "
                f"work start {from_minutes(self.work_start)}"
            )

        if self.has_lunch:
            if self.lunch_start >= self.lunch_end:
                raise InvalidWorkCalendar("Lunch start must be before lunch end")
            if self.has_work_hours and not self.work_window.contains(self.lunch_window):
                raise InvalidWorkCalendar("Lunch break must lie within the work hours")

        if self.slot_step_minutes is not None and self.slot_step_minutes <= 0:
            raise InvalidWorkCalendar("Slot step must be greater than zero")

    @property
    def has_work_hours(self) -> bool:
        return self.work_start is not None and self.work_end is not None

    @property
    def has_lunch(self) -> bool:
        return self.lunch_start is not None and self.lunch_end is not None

    @property
    def work_window(self) -> Optional[Interval]:
        if not self.has_work_hours:
            return None
        return Interval(start=self.work_start, end=self.work_end)

    @property
    def lunch_window(self) -> Optional[Interval]:
        if not self.has_lunch:
            return None
        return Interval(start=self.lunch_start, end=self.lunch_end)

    def is_working_day(self, day: date) -> bool:
        """Check if the staff member works on the weekday of ``day``."""
        return day.weekday() in self.active_weekdays


@dataclass(frozen=True)
class ServiceDefinition:
    """A bookable service with a fixed duration."""
    id: str
    duration_minutes: int
    name: str = ""

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise InvalidDuration(
                f"Service duration must be greater than zero, got {self.duration_minutes}"
            )


@dataclass(frozen=True)
class Appointment:
    """
    A committed appointment. The end is derived from the service duration.
    """
    id: str
    staff_id: str
    client_id: str
    service: ServiceDefinition
    day: date
    start_minute: int
    status: AppointmentStatus = AppointmentStatus.PENDING
    staff_name: str = ""

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.service.duration_minutes

    @property
    def interval(self) -> Interval:
        return Interval(start=self.start_minute, end=self.end_minute)

    @property
    def occupies_time(self) -> bool:
        return self.status.occupies_time

    def __str__(self) -> str:
        service = self.service.name or self.service.id
        staff = self.staff_name or self.staff_id
        return f"{service} with {staff}, {self.interval}"


@dataclass(frozen=True)
class StaffBlock:
    """An ad-hoc period on a specific date during which a staff member is unavailable."""
    staff_id: str
    day: date
    start_minute: int
    end_minute: int
    reason: Optional[str] = None

    def __post_init__(self):
        if self.end_minute <= self.start_minute:
            raise ValueError("Block end must be after block start")

    @property
    def interval(self) -> Interval:
        return Interval(start=self.start_minute, end=self.end_minute)


@dataclass(frozen=True)
class WorkDay:
    """A work calendar resolved for one concrete date."""
    working: bool
    work_window: Optional[Interval] = None
    break_window: Optional[Interval] = None
    slot_step_minutes: Optional[int] = None


@dataclass(frozen=True)
class TimeOption:
    """One candidate start time in the day grid."""
    start_minute: int
    available: bool
    reason: Optional[str] = None

    @property
    def time(self) -> str:
        return from_minutes(self.start_minute)

    def format_display(self) -> str:
        if self.available:
            return f"{self.time}  available"
        return f"{self.time}  unavailable ({self.reason})"


@dataclass
class Availability:
    """Result of an availability request for a staff member and date."""
    working: bool
    slots: List[TimeOption] = field(default_factory=list)
    free_gaps: List[Interval] = field(default_factory=list)
    appointment_count: int = 0

    @property
    def available_slots(self) -> List[TimeOption]:
        return [slot for slot in self.slots if slot.available]

    def statistics(self) -> dict:
        available = len(self.available_slots)
        return {
            "total": len(self.slots),
            "available": available,
            "unavailable": len(self.slots) - available,
            "appointments": self.appointment_count,
        }


def weekday_names(weekdays: Iterable[int]) -> List[str]:
    """Return the English names for a set of weekday numbers, Monday first."""
    return [WEEKDAY_NAMES[day] for day in sorted(weekdays)]
