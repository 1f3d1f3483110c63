"""
Mapping of collaborator records (profile, catalog and booking subsystems)
into domain objects.

Records use the collaborators' field names (camelCase). Work days are
stored as a comma separated string where 0 is Sunday; the domain uses
0 for Monday.
"""

from __future__ import annotations

from datetime import date
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

import pendulum
from pendulum import DateTime

from ..domain.clock import to_minutes
from ..domain.exceptions import DataSourceError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    ServiceDefinition,
    StaffBlock,
    WorkCalendar,
)


def parse_work_days(value: Union[str, Iterable[int], None]) -> FrozenSet[int]:
    """
    Convert stored work days (0=Sunday) to domain weekdays (0=Monday).

    Accepts ``"1,2,3,4,5"`` as well as a list of integers.
    """
    if value is None or value == "":
        return frozenset()

    if isinstance(value, str):
        tokens = [token.strip() for token in value.split(",") if token.strip()]
    else:
        tokens = list(value)

    weekdays = set()
    for token in tokens:
        try:
            stored_day = int(token)
        except (TypeError, ValueError):
            raise DataSourceError(f"Invalid work day: {token!r}") from None
        if stored_day not in range(7):
            raise DataSourceError(f"Work day out of range: {stored_day}")
        weekdays.add((stored_day + 6) % 7)

    return frozenset(weekdays)


def parse_optional_time(value: Optional[str]) -> Optional[int]:
    """Convert an optional ``HH:MM`` string; empty values mean "not set"."""
    if value is None or value == "":
        return None
    return to_minutes(value)


def parse_start(value: str, timezone: str = "UTC") -> Tuple[date, int]:
    """
    Split a stored start instant into its date and minute of day.

    Instants carrying an offset are converted to ``timezone``; naive
    values are taken to be in ``timezone`` already.

    Args:
        value: ISO 8601 datetime string
        timezone: The deployment's canonical clock

    Returns:
        (date, minutes since midnight) on the canonical clock
    """
    try:
        parsed = pendulum.parse(value, tz=timezone)
    except (ValueError, TypeError) as exc:
        raise DataSourceError(f"Could not parse start instant: {value!r}") from exc

    if not isinstance(parsed, DateTime):
        raise DataSourceError(f"Start instant is not a datetime: {value!r}")

    local = parsed.in_timezone(timezone)
    return local.date(), local.hour * 60 + local.minute


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` (or ISO datetime) string to a date."""
    try:
        parsed = pendulum.parse(value, tz="UTC")
    except (ValueError, TypeError) as exc:
        raise DataSourceError(f"Could not parse date: {value!r}") from exc

    if isinstance(parsed, DateTime):
        return parsed.date()
    if isinstance(parsed, date):
        return parsed
    raise DataSourceError(f"Value is not a date: {value!r}")


def parse_slot_interval(value: Union[str, int, None]) -> Optional[int]:
    """Convert a per-staff slot interval; empty and zero mean "use the default"."""
    if value is None or value == "":
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise DataSourceError(f"Invalid slot interval: {value!r}") from None
    return minutes or None


def work_calendar_from_record(record: Mapping[str, Any]) -> WorkCalendar:
    """Build a WorkCalendar from a staff profile record."""
    return WorkCalendar(
        active_weekdays=parse_work_days(record.get("workDays")),
        work_start=parse_optional_time(record.get("workStart")),
        work_end=parse_optional_time(record.get("workEnd")),
        lunch_start=parse_optional_time(record.get("lunchStart")),
        lunch_end=parse_optional_time(record.get("lunchEnd")),
        slot_step_minutes=parse_slot_interval(record.get("slotInterval")),
    )


def service_from_record(record: Mapping[str, Any]) -> ServiceDefinition:
    """Build a ServiceDefinition from a catalog record."""
    try:
        return ServiceDefinition(
            id=str(record["id"]),
            duration_minutes=int(record["duration"]),
            name=record.get("name", ""),
        )
    except KeyError as exc:
        raise DataSourceError(f"Service record is missing field {exc}") from exc


def appointment_from_record(
    record: Mapping[str, Any],
    services: Optional[Mapping[str, ServiceDefinition]] = None,
    timezone: str = "UTC",
) -> Appointment:
    """
    Build an Appointment from a booking record.

    The service is taken from an embedded ``service`` object when present,
    otherwise looked up by ``serviceId`` in ``services``. The start instant
    is placed on the ``timezone`` clock.
    """
    try:
        embedded_service = record.get("service")
        if isinstance(embedded_service, Mapping):
            service = service_from_record(embedded_service)
        else:
            service_id = str(record["serviceId"])
            if not services or service_id not in services:
                raise DataSourceError(
                    f"Booking {record.get('id')} references unknown service {service_id!r}"
                )
            service = services[service_id]

        day, start_minute = parse_start(record["date"], timezone)

        staff = record.get("staff")
        staff_name = staff.get("name", "") if isinstance(staff, Mapping) else ""

        return Appointment(
            id=str(record["id"]),
            staff_id=str(record["staffId"]),
            client_id=str(record["clientId"]),
            service=service,
            day=day,
            start_minute=start_minute,
            status=AppointmentStatus(str(record.get("status", "PENDING")).upper()),
            staff_name=staff_name or record.get("staffName", ""),
        )
    except KeyError as exc:
        raise DataSourceError(f"Booking record is missing field {exc}") from exc
    except ValueError as exc:
        raise DataSourceError(f"Invalid booking record {record.get('id')!r}: {exc}") from exc


def block_from_record(record: Mapping[str, Any]) -> StaffBlock:
    """Build a StaffBlock from a block record."""
    try:
        return StaffBlock(
            staff_id=str(record["staffId"]),
            day=parse_date(record["date"]),
            start_minute=to_minutes(record["startTime"]),
            end_minute=to_minutes(record["endTime"]),
            reason=record.get("reason") or None,
        )
    except KeyError as exc:
        raise DataSourceError(f"Block record is missing field {exc}") from exc
