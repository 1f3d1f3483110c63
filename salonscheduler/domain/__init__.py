"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .booking_validator import (
    BookingConflictValidator,
    BookingRequest,
    ClientDoubleBooked,
    StaffSlotUnavailable,
    ValidationResult,
)
from .calendar_resolver import resolve_work_day
from .clock import Interval, from_minutes, overlaps, to_minutes
from .models import (
    Appointment,
    AppointmentStatus,
    Availability,
    ServiceDefinition,
    StaffBlock,
    TimeOption,
    WorkCalendar,
    WorkDay,
)
from .occupancy import BusyInterval, BusySource, OccupancyAggregator, Subject
from .slot_grid import SlotGridGenerator

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Availability",
    "BookingConflictValidator",
    "BookingRequest",
    "BusyInterval",
    "BusySource",
    "ClientDoubleBooked",
    "Interval",
    "OccupancyAggregator",
    "ServiceDefinition",
    "SlotGridGenerator",
    "StaffBlock",
    "StaffSlotUnavailable",
    "Subject",
    "TimeOption",
    "ValidationResult",
    "WorkCalendar",
    "WorkDay",
    "from_minutes",
    "overlaps",
    "resolve_work_day",
    "to_minutes",
]
