"""
Domain-specific exception hierarchy for the scheduling engine.

Booking conflicts are ordinary results (see ``booking_validator``), not
members of this hierarchy, except for ``BookingConflictError`` which only
exists for callers that explicitly ask for an exception.
"""

from __future__ import annotations

from typing import Optional


class SchedulingError(Exception):
    """Base class for all scheduling errors."""


class InvalidTimeFormat(SchedulingError, ValueError):
    """Raised when a time of day is not a valid ``HH:MM`` value."""


class InvalidDuration(SchedulingError, ValueError):
    """Raised when a requested service duration is not positive."""


class InvalidWorkCalendar(SchedulingError, ValueError):
    """Raised when a work calendar violates its own invariants."""


class ScheduleNotConfigured(SchedulingError):
    """
    Raised when a staff member works a weekday but has no work hours set.

    This is a configuration problem, distinct from "not working today".
    """

    def __init__(self, staff_id: Optional[str] = None):
        self.staff_id = staff_id
        subject = f"Staff member '{staff_id}'" if staff_id else "Staff member"
        super().__init__(
            f"{subject} is scheduled to work but has no work hours configured; "
            "cannot compute availability."
        )


class DataSourceError(SchedulingError):
    """Raised when collaborator data cannot be fetched or parsed."""


class UnknownStaffMember(DataSourceError):
    """Raised when a staff member cannot be found in the data source."""

    def __init__(self, staff_id: str):
        self.staff_id = staff_id
        super().__init__(f"Unknown staff member: '{staff_id}'")


class BookingConflictError(SchedulingError):
    """Raised by ``ValidationResult.raise_for_conflict`` for a rejected booking."""

    def __init__(self, conflict):
        self.conflict = conflict
        super().__init__(conflict.message())
