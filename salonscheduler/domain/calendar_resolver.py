"""
Resolves a recurring work calendar into concrete windows for one date.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from .exceptions import ScheduleNotConfigured
from .models import WorkCalendar, WorkDay


def resolve_work_day(
    calendar: WorkCalendar,
    day: date,
    staff_id: Optional[str] = None,
) -> WorkDay:
    """
    Derive the working and break windows of a staff member for ``day``.

    A weekday outside the active set yields ``working=False`` with no
    windows, which callers treat as zero availability. A working weekday
    without work hours is a configuration error.

    Args:
        calendar: The staff member's recurring weekly configuration
        day: Target date
        staff_id: Only used to make the configuration error explicit

    Returns:
        WorkDay for the date

    Raises:
        ScheduleNotConfigured: If the day is a working day but work hours are unset
    """
    if not calendar.is_working_day(day):
        return WorkDay(working=False)

    if not calendar.has_work_hours:
        raise ScheduleNotConfigured(staff_id)

    return WorkDay(
        working=True,
        work_window=calendar.work_window,
        break_window=calendar.lunch_window,
        slot_step_minutes=calendar.slot_step_minutes,
    )
