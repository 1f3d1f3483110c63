"""
Tests for clock and interval utilities.
"""

import pytest

from salonscheduler.domain.clock import Interval, from_minutes, overlaps, to_minutes
from salonscheduler.domain.exceptions import InvalidTimeFormat


class TestTimeConversion:
    """Tests for HH:MM <-> minutes conversion."""

    def test_to_minutes(self):
        """Test parsing valid times."""
        assert to_minutes("00:00") == 0
        assert to_minutes("09:30") == 570
        assert to_minutes("23:59") == 1439

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "ab:cd", "", "12:00:00", " 09:00", "09:00\n"])
    def test_invalid_times_raise(self, value):
        """Test that malformed or out-of-range times are rejected."""
        with pytest.raises(InvalidTimeFormat):
            to_minutes(value)

    def test_non_string_raises(self):
        """Test that non-string input is rejected."""
        with pytest.raises(InvalidTimeFormat):
            to_minutes(930)

    def test_from_minutes(self):
        """Test formatting minutes."""
        assert from_minutes(0) == "00:00"
        assert from_minutes(545) == "09:05"
        assert from_minutes(1440) == "24:00"

    def test_from_minutes_out_of_range(self):
        """Test that minutes outside the day are rejected."""
        with pytest.raises(InvalidTimeFormat):
            from_minutes(-1)
        with pytest.raises(InvalidTimeFormat):
            from_minutes(1441)

    def test_round_trip_every_minute(self):
        """Every valid HH:MM string survives a round trip."""
        for hour in range(24):
            for minute in range(60):
                value = f"{hour:02d}:{minute:02d}"
                assert from_minutes(to_minutes(value)) == value


class TestInterval:
    """Tests for Interval and overlap detection."""

    def test_invalid_interval_raises_error(self):
        """Test that an interval ending before it starts is rejected."""
        with pytest.raises(ValueError, match="before start"):
            Interval(start=600, end=540)

    def test_duration_and_str(self):
        """Test derived values."""
        interval = Interval.from_duration(600, 45)
        assert interval.end == 645
        assert interval.duration_minutes() == 45
        assert str(interval) == "10:00 - 10:45"

    def test_overlap_cases(self):
        """Start inside, end inside, containment and equality all overlap."""
        existing = Interval(600, 660)

        assert overlaps(Interval(630, 690), existing)  # starts inside
        assert overlaps(Interval(570, 630), existing)  # ends inside
        assert overlaps(Interval(540, 720), existing)  # contains
        assert overlaps(Interval(610, 620), existing)  # contained
        assert overlaps(Interval(600, 660), existing)  # equal

    def test_overlap_is_symmetric(self):
        """Test that overlap does not depend on argument order."""
        a = Interval(600, 660)
        b = Interval(645, 700)
        assert overlaps(a, b) == overlaps(b, a) is True

    def test_touching_intervals_do_not_overlap(self):
        """Test half-open semantics at the boundaries."""
        assert not overlaps(Interval(540, 600), Interval(600, 660))
        assert not overlaps(Interval(660, 700), Interval(600, 660))

    def test_zero_length_never_overlaps(self):
        """Zero-length intervals overlap nothing, not even a containing interval."""
        assert not overlaps(Interval(630, 630), Interval(600, 660))
        assert not overlaps(Interval(600, 660), Interval(630, 630))
        assert not Interval(630, 630).overlaps(Interval(630, 630))

    def test_contains(self):
        """Test containment."""
        window = Interval(540, 1080)
        assert window.contains(Interval(720, 780))
        assert window.contains(window)
        assert not window.contains(Interval(1050, 1110))
