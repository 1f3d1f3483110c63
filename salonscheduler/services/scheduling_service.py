"""
Application service exposing the two scheduling operations to collaborators.

The service fetches work calendars, appointments and blocks through a
data-source protocol and hands them to the pure domain components. This
keeps the engine free of storage concerns and lets tests plug in simple
in-memory stubs.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..domain.booking_validator import (
    BookingConflictValidator,
    BookingRequest,
    ValidationResult,
)
from ..domain.calendar_resolver import resolve_work_day
from ..domain.exceptions import InvalidDuration
from ..domain.models import (
    Appointment,
    Availability,
    StaffBlock,
    WorkCalendar,
)
from ..domain.occupancy import OccupancyAggregator, find_free_gaps
from ..domain.slot_grid import SlotGridGenerator

logger = logging.getLogger(__name__)


class ScheduleSourceProtocol(Protocol):
    """Protocol describing the collaborator data the service needs."""

    def get_work_calendar(self, staff_id: str) -> WorkCalendar:
        """Return the recurring work calendar of a staff member."""

    def get_staff_appointments(self, staff_id: str, day: date) -> List[Appointment]:
        """Return the staff member's appointments on ``day``."""

    def get_client_appointments(self, client_id: str, day: date) -> List[Appointment]:
        """Return the client's appointments with any staff member on ``day``."""

    def get_staff_blocks(self, staff_id: str, day: date) -> List[StaffBlock]:
        """Return ad-hoc blocks of the staff member on ``day``."""


class SchedulingService:
    """
    Orchestrates data retrieval and the availability/validation engine.

    ``validate_booking`` only reads. The caller performs the write and must
    wrap validate-then-write in a serializable transaction or an
    optimistic-concurrency guard; the service provides neither.

    ``timezone`` is the deployment's single clock. The source must place
    appointment starts on the same clock (see ``JsonScheduleSource`` and
    ``HttpScheduleSource``); "now" is converted to it before past slots
    are marked.
    """

    def __init__(
        self,
        source: ScheduleSourceProtocol,
        slot_grid: Optional[SlotGridGenerator] = None,
        validator: Optional[BookingConflictValidator] = None,
        *,
        timezone: str = "UTC",
        hide_past_slots: bool = True,
        clock: Optional[Callable[[str], DateTime]] = None,
    ) -> None:
        self._source = source
        self._slot_grid = slot_grid or SlotGridGenerator()
        self._aggregator = OccupancyAggregator()
        self._validator = validator or BookingConflictValidator(self._aggregator)
        self._timezone = timezone
        self._hide_past_slots = hide_past_slots
        self._clock = clock or pendulum.now

    def get_availability(
        self,
        *,
        staff_id: str,
        day: date,
        duration_minutes: int,
    ) -> Availability:
        """
        Compute the day grid of a staff member for a service duration.
        """
        _ensure_positive_duration(duration_minutes)

        calendar = self._source.get_work_calendar(staff_id)
        if not calendar.is_working_day(day):
            logger.debug("Staff %s does not work on %s", staff_id, day)
            return Availability(working=False)

        appointments = self._source.get_staff_appointments(staff_id, day)
        blocks = self._source.get_staff_blocks(staff_id, day)

        availability = self.calculate_availability(
            staff_id=staff_id,
            calendar=calendar,
            day=day,
            duration_minutes=duration_minutes,
            appointments=appointments,
            blocks=blocks,
            not_before_minute=self._not_before_minute(day),
        )
        logger.info(
            "Availability for staff %s on %s (%s min): %s",
            staff_id,
            day,
            duration_minutes,
            availability.statistics(),
        )
        return availability

    def calculate_availability(
        self,
        *,
        staff_id: str,
        calendar: WorkCalendar,
        day: date,
        duration_minutes: int,
        appointments: Sequence[Appointment],
        blocks: Sequence[StaffBlock] = (),
        not_before_minute: Optional[int] = None,
    ) -> Availability:
        """Compute availability from already fetched data."""
        _ensure_positive_duration(duration_minutes)

        work_day = resolve_work_day(calendar, day, staff_id=staff_id)
        if not work_day.working:
            return Availability(working=False)

        busy = self._aggregator.for_staff(
            appointments,
            day,
            staff_id,
            work_day=work_day,
            blocks=blocks,
        )
        slot_grid = self._slot_grid
        if work_day.slot_step_minutes is not None:
            slot_grid = SlotGridGenerator(step_minutes=work_day.slot_step_minutes)

        slots = slot_grid.generate(
            work_day.work_window,
            busy,
            duration_minutes,
            not_before_minute=not_before_minute,
        )

        return Availability(
            working=True,
            slots=slots,
            free_gaps=find_free_gaps(work_day.work_window, busy),
            appointment_count=sum(1 for b in busy if b.appointment is not None),
        )

    def validate_booking(
        self,
        *,
        staff_id: str,
        client_id: str,
        day: date,
        start_minute: int,
        duration_minutes: int,
        exclude_appointment_id: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate a new or rescheduled appointment before it is written.

        Pass ``exclude_appointment_id`` when rescheduling so the appointment's
        own current interval is ignored.
        """
        request = BookingRequest(
            staff_id=staff_id,
            client_id=client_id,
            day=day,
            start_minute=start_minute,
            duration_minutes=duration_minutes,
            exclude_appointment_id=exclude_appointment_id,
        )

        calendar = self._source.get_work_calendar(staff_id)
        work_day = resolve_work_day(calendar, day, staff_id=staff_id)

        result = self._validator.validate(
            request,
            staff_appointments=self._source.get_staff_appointments(staff_id, day),
            client_appointments=self._source.get_client_appointments(client_id, day),
            work_day=work_day,
            blocks=self._source.get_staff_blocks(staff_id, day),
        )

        if not result.ok:
            logger.info(
                "Rejected booking for client %s with staff %s at %s %s: %s",
                client_id,
                staff_id,
                day,
                request.interval,
                result.conflict.kind,
            )
        return result

    def _not_before_minute(self, day: date) -> Optional[int]:
        """Return the current minute if ``day`` is today and past slots are hidden."""
        if not self._hide_past_slots:
            return None

        now = self._clock(self._timezone).in_timezone(self._timezone)
        if now.date() != day:
            return None
        return now.hour * 60 + now.minute


def _ensure_positive_duration(duration_minutes: int) -> None:
    if duration_minutes <= 0:
        raise InvalidDuration(
            f"Requested duration must be greater than zero, got {duration_minutes}"
        )
