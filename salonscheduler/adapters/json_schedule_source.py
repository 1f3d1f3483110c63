"""
File-backed schedule data source.

Reads staff profiles, services, bookings and blocks from a single JSON
document. Useful for local runs, demos and integration tests without the
booking backend.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import DataSourceError, UnknownStaffMember
from ..domain.models import Appointment, ServiceDefinition, StaffBlock, WorkCalendar
from .profile_mapper import (
    appointment_from_record,
    block_from_record,
    service_from_record,
    work_calendar_from_record,
)

logger = logging.getLogger(__name__)


class JsonScheduleSource:
    """
    Data source loading everything from a JSON file at construction time.

    Expected document layout::

        {
            "staff": [{"id": "s1", "name": "Ana", "workDays": "1,2,3,4,5",
                       "workStart": "09:00", "workEnd": "18:00",
                       "lunchStart": "12:00", "lunchEnd": "13:00"}],
            "services": [{"id": "cut", "name": "Haircut", "duration": 30}],
            "bookings": [{"id": "b1", "staffId": "s1", "clientId": "c1",
                          "serviceId": "cut", "date": "2024-11-25T10:00:00Z",
                          "status": "CONFIRMED"}],
            "blocks": [{"staffId": "s1", "date": "2024-11-25",
                        "startTime": "15:00", "endTime": "16:00"}]
        }

    Booking instants are converted to ``timezone``, the clock that work
    hours and blocks are written in.
    """

    def __init__(self, data_file: Path, timezone: str = "UTC"):
        self.data_file = data_file
        self.timezone = timezone
        self._load()

    def _load(self) -> None:
        if not self.data_file.exists():
            raise DataSourceError(f"Schedule data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataSourceError("Schedule data must contain an object at the root level.")

        self._staff: Dict[str, Dict[str, Any]] = {}
        for record in data.get("staff", []):
            if "id" not in record:
                raise DataSourceError(f"Staff record is missing field 'id': {record!r}")
            self._staff[str(record["id"])] = record

        self._services: Dict[str, ServiceDefinition] = {}
        for record in data.get("services", []):
            service = service_from_record(record)
            self._services[service.id] = service

        self._appointments: List[Appointment] = []
        for record in data.get("bookings", []):
            appointment = appointment_from_record(record, self._services, self.timezone)
            if not appointment.staff_name and appointment.staff_id in self._staff:
                appointment = _with_staff_name(
                    appointment, self._staff[appointment.staff_id].get("name", "")
                )
            self._appointments.append(appointment)

        self._blocks: List[StaffBlock] = [
            block_from_record(record) for record in data.get("blocks", [])
        ]

        logger.debug(
            "Loaded %d staff, %d services, %d bookings, %d blocks from %s",
            len(self._staff),
            len(self._services),
            len(self._appointments),
            len(self._blocks),
            self.data_file,
        )

    def staff_members(self) -> List[Dict[str, Any]]:
        """Return the raw staff profile records."""
        return list(self._staff.values())

    def get_work_calendar(self, staff_id: str) -> WorkCalendar:
        record = self._staff.get(staff_id)
        if record is None:
            raise UnknownStaffMember(staff_id)
        return work_calendar_from_record(record)

    def get_staff_appointments(self, staff_id: str, day: date) -> List[Appointment]:
        return [
            appointment
            for appointment in self._appointments
            if appointment.staff_id == staff_id and appointment.day == day
        ]

    def get_client_appointments(self, client_id: str, day: date) -> List[Appointment]:
        return [
            appointment
            for appointment in self._appointments
            if appointment.client_id == client_id and appointment.day == day
        ]

    def get_staff_blocks(self, staff_id: str, day: date) -> List[StaffBlock]:
        return [
            block
            for block in self._blocks
            if block.staff_id == staff_id and block.day == day
        ]


def _with_staff_name(appointment: Appointment, staff_name: str) -> Appointment:
    return replace(appointment, staff_name=staff_name)
