"""
Slot grid generation - the read path of the scheduling engine.

Walks the working window in fixed steps and classifies every candidate
start time. The full grid is returned, blocked slots included, so callers
can render a complete day view.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .clock import Interval
from .exceptions import InvalidDuration
from .models import TimeOption
from .occupancy import BusyInterval, first_overlap

DEFAULT_STEP_MINUTES = 15

REASON_EXCEEDS_WORKING_HOURS = "exceeds working hours"
REASON_PASSED = "already passed"


class SlotGridGenerator:
    """
    Classifies candidate start times for a requested service duration.

    Rules per candidate ``t``, first match wins:
    1. ``t`` is not after ``not_before_minute`` -> "already passed"
    2. ``t + duration`` exceeds the work window -> "exceeds working hours"
    3. ``[t, t + duration)`` overlaps a busy interval -> that interval's reason
    4. Otherwise available

    The scan is O(grid size x busy count); busy lists are short per day.
    """

    def __init__(self, step_minutes: int = DEFAULT_STEP_MINUTES):
        if step_minutes <= 0:
            raise ValueError(f"Step must be greater than zero, got {step_minutes}")
        self.step_minutes = step_minutes

    def generate(
        self,
        work_window: Interval,
        busy: Sequence[BusyInterval],
        duration_minutes: int,
        *,
        not_before_minute: Optional[int] = None,
    ) -> List[TimeOption]:
        """
        Build the grid covering every step in ``[work_window.start, work_window.end)``.

        Args:
            work_window: Working window of the day
            busy: Busy intervals in aggregation order
            duration_minutes: Requested service duration
            not_before_minute: Slots starting at or before this minute are in the past

        Returns:
            TimeOption per candidate start, in ascending order

        Raises:
            InvalidDuration: If duration_minutes is not positive
        """
        if duration_minutes <= 0:
            raise InvalidDuration(
                f"Requested duration must be greater than zero, got {duration_minutes}"
            )

        return [
            self._classify(start, work_window, busy, duration_minutes, not_before_minute)
            for start in range(work_window.start, work_window.end, self.step_minutes)
        ]

    @staticmethod
    def _classify(
        start: int,
        work_window: Interval,
        busy: Sequence[BusyInterval],
        duration_minutes: int,
        not_before_minute: Optional[int],
    ) -> TimeOption:
        if not_before_minute is not None and start <= not_before_minute:
            return TimeOption(start_minute=start, available=False, reason=REASON_PASSED)

        candidate = Interval.from_duration(start, duration_minutes)

        if candidate.end > work_window.end:
            return TimeOption(
                start_minute=start,
                available=False,
                reason=REASON_EXCEEDS_WORKING_HOURS,
            )

        conflict = first_overlap(candidate, busy)
        if conflict is not None:
            return TimeOption(start_minute=start, available=False, reason=conflict.reason)

        return TimeOption(start_minute=start, available=True)
