"""
Tests for resolving work calendars to concrete dates.
"""

import pendulum
import pytest

from salonscheduler.domain.calendar_resolver import resolve_work_day
from salonscheduler.domain.clock import Interval, to_minutes
from salonscheduler.domain.exceptions import ScheduleNotConfigured
from salonscheduler.domain.models import WorkCalendar

MONDAY = pendulum.date(2024, 11, 25)
SUNDAY = pendulum.date(2024, 11, 24)


class TestResolveWorkDay:
    """Tests for resolve_work_day."""

    def test_working_day_with_lunch(self):
        """Test that work and break windows are resolved."""
        calendar = WorkCalendar(
            active_weekdays={0, 1, 2, 3, 4},
            work_start=to_minutes("09:00"),
            work_end=to_minutes("18:00"),
            lunch_start=to_minutes("12:00"),
            lunch_end=to_minutes("13:00"),
        )

        work_day = resolve_work_day(calendar, MONDAY)

        assert work_day.working
        assert work_day.work_window == Interval(540, 1080)
        assert work_day.break_window == Interval(720, 780)

    def test_working_day_without_lunch(self):
        """Test that the break window is absent without lunch bounds."""
        calendar = WorkCalendar(
            active_weekdays={0},
            work_start=to_minutes("10:00"),
            work_end=to_minutes("16:00"),
            slot_step_minutes=30,
        )

        work_day = resolve_work_day(calendar, MONDAY)

        assert work_day.working
        assert work_day.break_window is None
        assert work_day.slot_step_minutes == 30

    def test_non_working_day(self):
        """A weekday outside the active set is not an error."""
        calendar = WorkCalendar(
            active_weekdays={0, 1, 2, 3, 4},
            work_start=to_minutes("09:00"),
            work_end=to_minutes("18:00"),
        )

        work_day = resolve_work_day(calendar, SUNDAY)

        assert not work_day.working
        assert work_day.work_window is None
        assert work_day.break_window is None

    def test_non_working_day_ignores_missing_hours(self):
        """Missing hours only matter on days the staff member works."""
        calendar = WorkCalendar(active_weekdays={0})

        assert not resolve_work_day(calendar, SUNDAY).working

    def test_missing_hours_on_working_day(self):
        """Working a weekday without work hours is a configuration error."""
        calendar = WorkCalendar(active_weekdays={0}, work_start=to_minutes("09:00"))

        with pytest.raises(ScheduleNotConfigured) as excinfo:
            resolve_work_day(calendar, MONDAY, staff_id="ana")

        assert excinfo.value.staff_id == "ana"
        assert "ana" in str(excinfo.value)
