"""
Shared builders for in-memory scheduling fixtures.
"""

from datetime import date
from typing import Optional

import pendulum

from salonscheduler.domain.clock import to_minutes
from salonscheduler.domain.models import (
    Appointment,
    AppointmentStatus,
    ServiceDefinition,
    WorkCalendar,
)

MONDAY = pendulum.date(2024, 11, 25)
TUESDAY = pendulum.date(2024, 11, 26)
SUNDAY = pendulum.date(2024, 11, 24)


def salon_calendar(**overrides) -> WorkCalendar:
    """Monday to Friday, 09:00-18:00 with lunch 12:00-13:00."""
    values = dict(
        active_weekdays={0, 1, 2, 3, 4},
        work_start=to_minutes("09:00"),
        work_end=to_minutes("18:00"),
        lunch_start=to_minutes("12:00"),
        lunch_end=to_minutes("13:00"),
    )
    values.update(overrides)
    return WorkCalendar(**values)


def make_appointment(
    appointment_id: str,
    start: str,
    duration: int,
    *,
    staff_id: str = "ana",
    client_id: str = "maria",
    day: date = MONDAY,
    status: AppointmentStatus = AppointmentStatus.CONFIRMED,
    service_name: Optional[str] = None,
    staff_name: str = "",
) -> Appointment:
    """Build an appointment starting at ``start`` (HH:MM) on ``day``."""
    return Appointment(
        id=appointment_id,
        staff_id=staff_id,
        client_id=client_id,
        service=ServiceDefinition(
            id=f"svc-{duration}",
            duration_minutes=duration,
            name=service_name or f"{duration} min service",
        ),
        day=day,
        start_minute=to_minutes(start),
        status=status,
        staff_name=staff_name,
    )


STAFF_RECORD = {
    "id": "ana",
    "name": "Ana",
    "workDays": "1,2,3,4,5",
    "workStart": "09:00",
    "workEnd": "18:00",
    "lunchStart": "12:00",
    "lunchEnd": "13:00",
}

SCHEDULE_DATA = {
    "staff": [
        STAFF_RECORD,
        {"id": "elias", "name": "Elias", "workDays": "2,3,4,5,6",
         "workStart": "10:00", "workEnd": "19:00", "slotInterval": 30},
    ],
    "services": [
        {"id": "cut", "name": "Haircut", "duration": 30},
        {"id": "beard", "name": "Beard trim", "duration": 45},
    ],
    "bookings": [
        {"id": "b1", "staffId": "ana", "clientId": "maria", "serviceId": "beard",
         "date": "2024-11-25T10:00:00Z", "status": "CONFIRMED"},
        {"id": "b2", "staffId": "elias", "clientId": "maria", "serviceId": "cut",
         "date": "2024-11-25T14:00:00Z", "status": "pending"},
        {"id": "b3", "staffId": "ana", "clientId": "joao", "serviceId": "cut",
         "date": "2024-11-26T09:00:00Z", "status": "CANCELLED"},
    ],
    "blocks": [
        {"staffId": "ana", "date": "2024-11-25", "startTime": "16:30",
         "endTime": "17:30", "reason": "training"},
    ],
}
