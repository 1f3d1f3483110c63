"""
Minute-precision clock and interval arithmetic.

All times of day are expressed as minutes since midnight in the
deployment's canonical (UTC-normalized) clock.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import InvalidTimeFormat

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

_TIME_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})")


def to_minutes(value: str) -> int:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    Args:
        value: Time of day, zero-padded 24h format (``"09:30"``)

    Returns:
        Minutes since midnight

    Raises:
        InvalidTimeFormat: If the value is not ``HH:MM`` or out of range
    """
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Expected an HH:MM string, got {value!r}")

    match = _TIME_PATTERN.fullmatch(value)
    if not match:
        raise InvalidTimeFormat(f"Time must be in HH:MM format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(f"Time out of range: {value!r}")

    return hours * MINUTES_PER_HOUR + minutes


def from_minutes(minutes: int) -> str:
    """
    Format minutes since midnight as ``HH:MM``.

    ``MINUTES_PER_DAY`` itself is accepted and rendered as ``"24:00"`` so
    that intervals ending at midnight can be displayed.
    """
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise InvalidTimeFormat(f"Minutes out of range for a day: {minutes}")

    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{mins:02d}"


@dataclass(frozen=True)
class Interval:
    """
    Half-open interval ``[start, end)`` in minutes since midnight.

    Invariant: end is not before start. Zero-length intervals are allowed
    but never overlap anything.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Interval end {self.end} is before start {self.start}")

    @classmethod
    def from_duration(cls, start: int, duration_minutes: int) -> "Interval":
        """Build the interval covering ``duration_minutes`` from ``start``."""
        return cls(start=start, end=start + duration_minutes)

    def duration_minutes(self) -> int:
        """Return the length in minutes."""
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: "Interval") -> bool:
        """Check if this interval overlaps with another."""
        return overlaps(self, other)

    def contains(self, other: "Interval") -> bool:
        """Check if ``other`` lies entirely within this interval."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{from_minutes(self.start)} - {from_minutes(self.end)}"


def overlaps(a: Interval, b: Interval) -> bool:
    """
    Check if two half-open intervals share at least one minute.

    Covers ``a`` starting inside ``b``, ending inside ``b``, containing
    ``b`` and being equal to ``b``. Touching intervals (``a.end == b.start``)
    do not overlap.
    """
    if a.is_empty() or b.is_empty():
        return False
    return a.start < b.end and b.start < a.end
