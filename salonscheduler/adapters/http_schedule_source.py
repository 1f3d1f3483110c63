"""
HTTP data source reading from the booking backend's REST API.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import DataSourceError, UnknownStaffMember
from ..domain.models import Appointment, StaffBlock, WorkCalendar
from .profile_mapper import (
    appointment_from_record,
    block_from_record,
    work_calendar_from_record,
)

logger = logging.getLogger(__name__)


class HttpScheduleSource:
    """
    Client for the profile and booking endpoints of the backend.

    Endpoints used:
    - ``GET /staff/{id}`` - staff profile with work hours
    - ``GET /bookings?staffId=..&date=YYYY-MM-DD`` - bookings with embedded service
    - ``GET /bookings?clientId=..&date=YYYY-MM-DD`` - client bookings, any staff
    - ``GET /staff/{id}/blocks?date=YYYY-MM-DD`` - ad-hoc blocks
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        timezone: str = "UTC",
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. ``https://salon.example.com/api``
            timeout_seconds: Per-request timeout
            session: Optional pre-configured requests session
            timezone: Clock that booking instants are converted to
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.timezone = timezone
        self.session.headers.setdefault("Accept", "application/json")

    def get_work_calendar(self, staff_id: str) -> WorkCalendar:
        record = self._get(f"/staff/{staff_id}")
        if record is None:
            raise UnknownStaffMember(staff_id)
        if not isinstance(record, dict):
            raise DataSourceError(f"Unexpected staff payload for {staff_id!r}")
        return work_calendar_from_record(record)

    def get_staff_appointments(self, staff_id: str, day: date) -> List[Appointment]:
        records = self._get_list("/bookings", {"staffId": staff_id, "date": day.isoformat()})
        return [appointment_from_record(record, timezone=self.timezone) for record in records]

    def get_client_appointments(self, client_id: str, day: date) -> List[Appointment]:
        records = self._get_list("/bookings", {"clientId": client_id, "date": day.isoformat()})
        return [appointment_from_record(record, timezone=self.timezone) for record in records]

    def get_staff_blocks(self, staff_id: str, day: date) -> List[StaffBlock]:
        records = self._get_list(f"/staff/{staff_id}/blocks", {"date": day.isoformat()})
        return [block_from_record(record) for record in records]

    def _get_list(self, path: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        payload = self._get(path, params)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise DataSourceError(f"Expected a list from {path}, got {type(payload).__name__}")
        return payload

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Perform a GET request and decode the JSON body.

        Returns:
            Decoded payload, or None for a 404 response

        Raises:
            DataSourceError: If the request fails or the body is not JSON
        """
        url = f"{self.base_url}{path}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
            if response.status_code == 404:
                logger.debug("GET %s returned 404", url)
                return None
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise DataSourceError(f"Failed to fetch {url}: {e}") from e
        except ValueError as e:
            raise DataSourceError(f"Invalid JSON from {url}: {e}") from e
