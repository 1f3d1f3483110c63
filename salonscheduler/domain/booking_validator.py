"""
Booking conflict validation - the write path of the scheduling engine.

A proposed appointment (new or rescheduled) passes only if it overlaps
nothing in the staff member's occupancy and nothing in the client's
occupancy across all staff members. Conflicts are returned as values.

Precondition: the validator reads a snapshot of existing appointments and
takes no locks. Callers must run validate-then-write inside a serializable
transaction or an equivalent optimistic-concurrency guard (a uniqueness
constraint on staff and start, or a per-staff version check), otherwise
two concurrent requests can both pass and double-book.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

from .clock import MINUTES_PER_DAY, Interval
from .exceptions import BookingConflictError, InvalidDuration, InvalidTimeFormat
from .models import Appointment, StaffBlock, WorkDay
from .occupancy import BusyInterval, BusySource, OccupancyAggregator, first_overlap


@dataclass(frozen=True)
class BookingRequest:
    """A proposed appointment time for a staff member and a client."""
    staff_id: str
    client_id: str
    day: date
    start_minute: int
    duration_minutes: int
    exclude_appointment_id: Optional[str] = None

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise InvalidDuration(
                f"Requested duration must be greater than zero, got {self.duration_minutes}"
            )
        if not 0 <= self.start_minute < MINUTES_PER_DAY:
            raise InvalidTimeFormat(f"Start minute out of range: {self.start_minute}")

    @property
    def interval(self) -> Interval:
        return Interval.from_duration(self.start_minute, self.duration_minutes)


@dataclass(frozen=True)
class StaffSlotUnavailable:
    """The staff member is already busy during the requested time."""
    staff_id: str
    requested: Interval
    busy: BusyInterval

    kind = "staff_slot_unavailable"

    @property
    def appointment(self) -> Optional[Appointment]:
        return self.busy.appointment

    @property
    def appointment_id(self) -> Optional[str]:
        return self.appointment.id if self.appointment else None

    @property
    def source(self) -> BusySource:
        return self.busy.source

    def message(self) -> str:
        return (
            "This time is not available for this staff member "
            f"({self.busy.interval}, {self.busy.reason})"
        )


@dataclass(frozen=True)
class ClientDoubleBooked:
    """The client already has an appointment, with any staff member, overlapping the request."""
    client_id: str
    requested: Interval
    appointment: Appointment

    kind = "client_double_booked"

    @property
    def appointment_id(self) -> str:
        return self.appointment.id

    @property
    def service_name(self) -> str:
        return self.appointment.service.name or self.appointment.service.id

    @property
    def staff_name(self) -> str:
        return self.appointment.staff_name or self.appointment.staff_id

    @property
    def time_range(self) -> Interval:
        return self.appointment.interval

    def message(self) -> str:
        return (
            "You already have an appointment at this time: "
            f"{self.service_name} with {self.staff_name}, {self.time_range}"
        )


BookingConflict = Union[StaffSlotUnavailable, ClientDoubleBooked]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a booking validation; falsy when a conflict was found."""
    conflict: Optional[BookingConflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_conflict(self) -> None:
        """Raise ``BookingConflictError`` if the booking was rejected."""
        if self.conflict is not None:
            raise BookingConflictError(self.conflict)


class BookingConflictValidator:
    """
    Validates a booking request against staff and client occupancy.

    The staff check runs first by convention; it only affects which
    conflict is reported when both would fail.
    """

    def __init__(self, aggregator: Optional[OccupancyAggregator] = None):
        self._aggregator = aggregator or OccupancyAggregator()

    def validate(
        self,
        request: BookingRequest,
        *,
        staff_appointments: Iterable[Appointment],
        client_appointments: Iterable[Appointment],
        work_day: Optional[WorkDay] = None,
        blocks: Iterable[StaffBlock] = (),
    ) -> ValidationResult:
        """
        Check a booking request, short-circuiting on the first conflict.

        Args:
            request: The proposed appointment
            staff_appointments: Existing appointments of the staff member
            client_appointments: Existing appointments of the client with any staff member
            work_day: Resolved work day; its break window is busy for the staff member
            blocks: Ad-hoc staff blocks

        Returns:
            ValidationResult carrying the first conflict, if any
        """
        requested = request.interval

        staff_busy = self._aggregator.for_staff(
            staff_appointments,
            request.day,
            request.staff_id,
            work_day=work_day,
            blocks=blocks,
            exclude_appointment_id=request.exclude_appointment_id,
        )
        staff_conflict = first_overlap(requested, staff_busy)
        if staff_conflict is not None:
            return ValidationResult(
                conflict=StaffSlotUnavailable(
                    staff_id=request.staff_id,
                    requested=requested,
                    busy=staff_conflict,
                )
            )

        client_busy = self._aggregator.for_client(
            client_appointments,
            request.day,
            request.client_id,
            exclude_appointment_id=request.exclude_appointment_id,
        )
        client_conflict = first_overlap(requested, client_busy)
        if client_conflict is not None:
            return ValidationResult(
                conflict=ClientDoubleBooked(
                    client_id=request.client_id,
                    requested=requested,
                    appointment=client_conflict.appointment,
                )
            )

        return ValidationResult()
