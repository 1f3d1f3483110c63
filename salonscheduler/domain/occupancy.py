"""
Occupancy aggregation: turns committed appointments, lunch breaks and
staff blocks into the busy intervals of a staff member or a client.

Busy intervals are never merged into unions. Consumers need to know which
specific interval conflicts (lunch, a block, or a named appointment).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .clock import Interval, overlaps
from .models import Appointment, StaffBlock, WorkDay

REASON_LUNCH = "lunch break"
REASON_BOOKED = "already booked"
REASON_BLOCKED = "blocked"


class BusySource(str, Enum):
    """What makes an interval busy."""
    LUNCH = "lunch"
    APPOINTMENT = "appointment"
    BLOCK = "block"


class SubjectKind(str, Enum):
    STAFF = "staff"
    CLIENT = "client"


@dataclass(frozen=True)
class Subject:
    """Whose occupancy is being aggregated: a staff member or a client."""
    kind: SubjectKind
    id: str

    @classmethod
    def staff(cls, staff_id: str) -> "Subject":
        return cls(kind=SubjectKind.STAFF, id=staff_id)

    @classmethod
    def client(cls, client_id: str) -> "Subject":
        return cls(kind=SubjectKind.CLIENT, id=client_id)

    def owns(self, appointment: Appointment) -> bool:
        if self.kind is SubjectKind.STAFF:
            return appointment.staff_id == self.id
        return appointment.client_id == self.id


@dataclass(frozen=True)
class BusyInterval:
    """A busy period tagged with the thing that occupies it."""
    interval: Interval
    source: BusySource
    appointment: Optional[Appointment] = None
    label: Optional[str] = None

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end

    @property
    def reason(self) -> str:
        """Human-readable reason shown for slots blocked by this interval."""
        if self.source is BusySource.LUNCH:
            return REASON_LUNCH
        if self.source is BusySource.BLOCK:
            return self.label or REASON_BLOCKED
        return REASON_BOOKED


class OccupancyAggregator:
    """
    Builds the sorted list of busy intervals of a subject on a date.

    Only PENDING and CONFIRMED appointments occupy time. The lunch break
    and staff blocks apply to staff subjects only.
    """

    def aggregate(
        self,
        appointments: Iterable[Appointment],
        day: date,
        subject: Subject,
        *,
        work_day: Optional[WorkDay] = None,
        blocks: Iterable[StaffBlock] = (),
        exclude_appointment_id: Optional[str] = None,
    ) -> List[BusyInterval]:
        """
        Aggregate busy intervals for ``subject`` on ``day``.

        Args:
            appointments: Candidate appointments, possibly for other subjects or dates
            day: Target date
            subject: Staff member or client
            work_day: Resolved work day; its break window is used for staff subjects
            blocks: Ad-hoc staff blocks, filtered to the subject and date
            exclude_appointment_id: Appointment to ignore (the one being rescheduled)

        Returns:
            Busy intervals sorted by start; lunch comes first on equal starts
        """
        busy: List[BusyInterval] = []

        if subject.kind is SubjectKind.STAFF:
            if work_day is not None and work_day.break_window is not None:
                busy.append(
                    BusyInterval(interval=work_day.break_window, source=BusySource.LUNCH)
                )

        for appointment in self.active_appointments(
            appointments,
            day,
            subject,
            exclude_appointment_id=exclude_appointment_id,
        ):
            busy.append(
                BusyInterval(
                    interval=appointment.interval,
                    source=BusySource.APPOINTMENT,
                    appointment=appointment,
                )
            )

        if subject.kind is SubjectKind.STAFF:
            for block in blocks:
                if block.staff_id != subject.id or block.day != day:
                    continue
                busy.append(
                    BusyInterval(
                        interval=block.interval,
                        source=BusySource.BLOCK,
                        label=block.reason,
                    )
                )

        # Stable sort keeps lunch ahead of anything starting at the same minute
        busy.sort(key=lambda b: b.start)
        return busy

    def for_staff(
        self,
        appointments: Iterable[Appointment],
        day: date,
        staff_id: str,
        *,
        work_day: Optional[WorkDay] = None,
        blocks: Iterable[StaffBlock] = (),
        exclude_appointment_id: Optional[str] = None,
    ) -> List[BusyInterval]:
        return self.aggregate(
            appointments,
            day,
            Subject.staff(staff_id),
            work_day=work_day,
            blocks=blocks,
            exclude_appointment_id=exclude_appointment_id,
        )

    def for_client(
        self,
        appointments: Iterable[Appointment],
        day: date,
        client_id: str,
        *,
        exclude_appointment_id: Optional[str] = None,
    ) -> List[BusyInterval]:
        """Client occupancy spans appointments with any staff member."""
        return self.aggregate(
            appointments,
            day,
            Subject.client(client_id),
            exclude_appointment_id=exclude_appointment_id,
        )

    @staticmethod
    def active_appointments(
        appointments: Iterable[Appointment],
        day: date,
        subject: Subject,
        *,
        exclude_appointment_id: Optional[str] = None,
    ) -> List[Appointment]:
        """
        Filter to the subject's time-occupying appointments on ``day``.

        Only the appointment's own start date is matched: an appointment
        running past midnight does not occupy the start of the next day.
        """
        return [
            appointment
            for appointment in appointments
            if subject.owns(appointment)
            and appointment.day == day
            and appointment.occupies_time
            and appointment.id != exclude_appointment_id
        ]


def first_overlap(
    candidate: Interval,
    busy: Sequence[BusyInterval],
) -> Optional[BusyInterval]:
    """Return the first busy interval, in list order, overlapping ``candidate``."""
    for busy_interval in busy:
        if overlaps(candidate, busy_interval.interval):
            return busy_interval
    return None


def find_free_gaps(
    window: Interval,
    busy: Sequence[BusyInterval],
) -> List[Interval]:
    """
    Compute the parts of ``window`` not covered by any busy interval.

    Example:
    Window: 09:00 - 18:00
    Busy: [12:00-13:00, 10:00-10:45]
    Result: [09:00-10:00, 10:45-12:00, 13:00-18:00]

    The busy list itself is left untouched.
    """
    gaps: List[Interval] = []
    current_start = window.start

    for busy_interval in sorted(busy, key=lambda b: b.start):
        # Clip busy interval to the window
        clipped_start = max(busy_interval.start, window.start)
        clipped_end = min(busy_interval.end, window.end)
        if clipped_start >= clipped_end:
            continue

        if current_start < clipped_start:
            gaps.append(Interval(start=current_start, end=clipped_start))

        current_start = max(current_start, clipped_end)

    if current_start < window.end:
        gaps.append(Interval(start=current_start, end=window.end))

    return gaps
