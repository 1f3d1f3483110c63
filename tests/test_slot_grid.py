"""
Tests for slot grid generation.
"""

import pytest

from salonscheduler.domain.calendar_resolver import resolve_work_day
from salonscheduler.domain.clock import Interval, to_minutes
from salonscheduler.domain.exceptions import InvalidDuration
from salonscheduler.domain.models import StaffBlock
from salonscheduler.domain.occupancy import OccupancyAggregator
from salonscheduler.domain.slot_grid import SlotGridGenerator

from tests.helpers import MONDAY, make_appointment, salon_calendar


def _grid(appointments=(), duration=30, step=15, blocks=(), not_before_minute=None):
    work_day = resolve_work_day(salon_calendar(), MONDAY)
    busy = OccupancyAggregator().for_staff(
        appointments, MONDAY, "ana", work_day=work_day, blocks=blocks
    )
    slots = SlotGridGenerator(step_minutes=step).generate(
        work_day.work_window, busy, duration, not_before_minute=not_before_minute
    )
    return {slot.time: slot for slot in slots}


class TestSlotGridGenerator:
    """Tests for SlotGridGenerator."""

    def test_lunch_break_and_end_of_day(self):
        """Test the standard day around lunch and closing time."""
        grid = _grid(duration=30)

        assert grid["11:30"].available
        for time in ("11:45", "12:00", "12:15", "12:30", "12:45"):
            assert not grid[time].available
            assert grid[time].reason == "lunch break"
        assert grid["13:00"].available
        assert grid["17:30"].available
        assert grid["17:45"].reason == "exceeds working hours"

    def test_full_grid_is_returned(self):
        """Every step in the work window is present, in order."""
        slots = list(_grid(duration=30).values())

        assert len(slots) == 36
        assert slots[0].time == "09:00"
        assert slots[-1].time == "17:45"
        assert [s.start_minute for s in slots] == sorted(s.start_minute for s in slots)

    def test_existing_appointment_blocks_overlapping_starts(self):
        """Test that a confirmed 45 minute appointment blocks nearby starts."""
        grid = _grid([make_appointment("b1", "10:00", 45)], duration=30)

        assert grid["09:30"].available
        assert grid["09:45"].reason == "already booked"
        assert grid["10:00"].reason == "already booked"
        assert grid["10:30"].reason == "already booked"
        assert grid["10:45"].available

    def test_longer_duration_blocks_more_slots(self):
        """Increasing the duration can only turn available slots unavailable."""
        appointments = [make_appointment("b1", "10:00", 45)]
        short = _grid(appointments, duration=30)
        long = _grid(appointments, duration=90)

        for time, slot in long.items():
            if slot.available:
                assert short[time].available

    def test_adjacent_appointment_does_not_block(self):
        """Back to back appointments touch but do not overlap."""
        grid = _grid([make_appointment("b1", "10:00", 30)], duration=30)

        assert grid["09:30"].available
        assert grid["10:30"].available

    def test_exceeds_takes_precedence_over_booking(self):
        """A slot running past closing time reports the closing time."""
        grid = _grid([make_appointment("b1", "17:30", 30)], duration=60)

        assert grid["17:15"].reason == "exceeds working hours"
        assert grid["17:00"].reason == "already booked"

    def test_first_busy_interval_wins(self):
        """When several busy intervals overlap, the earliest one is reported."""
        grid = _grid([make_appointment("b1", "11:30", 30)], duration=90)

        assert grid["11:00"].reason == "already booked"
        assert grid["12:00"].reason == "lunch break"

    def test_blocks_make_slots_unavailable(self):
        """Staff blocks carry their own reason, or a generic one."""
        blocks = [
            StaffBlock("ana", MONDAY, to_minutes("15:00"), to_minutes("16:00"), reason="training"),
            StaffBlock("ana", MONDAY, to_minutes("09:00"), to_minutes("09:30")),
        ]
        grid = _grid(blocks=blocks, duration=30)

        assert grid["09:00"].reason == "blocked"
        assert grid["09:30"].available
        assert grid["15:30"].reason == "training"
        assert grid["16:00"].available

    def test_past_slots(self):
        """Starts at or before the current minute are already passed."""
        grid = _grid(duration=30, not_before_minute=to_minutes("10:05"))

        assert grid["10:00"].reason == "already passed"
        assert grid["10:15"].available

    def test_past_takes_precedence(self):
        """A passed slot is reported as passed even if it is also booked."""
        grid = _grid(
            [make_appointment("b1", "09:00", 30)],
            duration=30,
            not_before_minute=to_minutes("09:00"),
        )

        assert grid["09:00"].reason == "already passed"
        assert grid["09:15"].reason == "already booked"

    def test_custom_step(self):
        """The grid step is configurable."""
        grid = _grid(duration=30, step=30)

        assert len(grid) == 18
        assert "09:15" not in grid
        assert grid["11:30"].available
        assert grid["12:00"].reason == "lunch break"

    def test_step_must_be_positive(self):
        """Test that a zero step is rejected."""
        with pytest.raises(ValueError):
            SlotGridGenerator(step_minutes=0)

    @pytest.mark.parametrize("duration", [0, -15])
    def test_invalid_duration(self, duration):
        """Test that non-positive durations are rejected."""
        with pytest.raises(InvalidDuration):
            SlotGridGenerator().generate(Interval(540, 1080), [], duration)

    def test_empty_window(self):
        """A zero-length window yields no slots."""
        assert SlotGridGenerator().generate(Interval(540, 540), [], 30) == []

    def test_format_display(self):
        """Test the human readable slot rendering."""
        grid = _grid(duration=30)

        assert grid["11:30"].format_display() == "11:30  available"
        assert grid["12:00"].format_display() == "12:00  unavailable (lunch break)"
