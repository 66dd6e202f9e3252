"""
Conversion between domain models and the camelCase JSON records used by the
Cal.in REST API and the local data file.
"""

from datetime import date
from typing import Any, Dict

import pendulum

from ..domain.exceptions import ValidationError
from ..domain.models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    DateOverride,
    EventType,
    TimeOfDay,
)


def parse_date(value: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValidationError: If the string is not a calendar date
    """
    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def parse_time(value: str) -> TimeOfDay:
    """
    Parse a ``HH:MM`` or ``HH:MM:SS`` string.

    Raises:
        ValidationError: If the string is not a 24-hour time
    """
    try:
        return TimeOfDay.parse(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def event_type_to_dict(event_type: EventType) -> Dict[str, Any]:
    return {
        "id": event_type.id,
        "title": event_type.title,
        "description": event_type.description,
        "duration": event_type.duration_minutes,
        "slug": event_type.slug,
        "createdAt": event_type.created_at,
        "updatedAt": event_type.updated_at,
    }


def event_type_from_dict(data: Dict[str, Any]) -> EventType:
    return EventType(
        id=str(data["id"]),
        title=data["title"],
        slug=data["slug"],
        duration_minutes=int(data["duration"]),
        description=data.get("description") or "",
        created_at=data.get("createdAt") or "",
        updated_at=data.get("updatedAt") or "",
    )


def window_to_dict(window: AvailabilityWindow) -> Dict[str, Any]:
    return {
        "id": window.id,
        "dayOfWeek": window.day_of_week,
        "startTime": str(window.start_time),
        "endTime": str(window.end_time),
        "isEnabled": window.enabled,
    }


def window_from_dict(data: Dict[str, Any]) -> AvailabilityWindow:
    return AvailabilityWindow(
        id=str(data["id"]),
        day_of_week=int(data["dayOfWeek"]),
        start_time=TimeOfDay.parse(data["startTime"]),
        end_time=TimeOfDay.parse(data["endTime"]),
        enabled=bool(data.get("isEnabled", True)),
    )


def override_to_dict(override: DateOverride) -> Dict[str, Any]:
    return {
        "id": override.id,
        "date": override.date.isoformat(),
        "startTime": str(override.start_time),
        "endTime": str(override.end_time),
        "isEnabled": override.enabled,
    }


def override_from_dict(data: Dict[str, Any]) -> DateOverride:
    return DateOverride(
        id=str(data["id"]),
        date=parse_date(data["date"]),
        start_time=TimeOfDay.parse(data["startTime"]),
        end_time=TimeOfDay.parse(data["endTime"]),
        enabled=bool(data.get("isEnabled", True)),
    )


def booking_to_dict(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "eventTypeId": booking.event_type_id,
        "bookerName": booking.booker_name,
        "bookerEmail": booking.booker_email,
        "date": booking.date.isoformat(),
        "startTime": str(booking.start_time),
        "endTime": str(booking.end_time),
        "status": booking.status.value,
        "createdAt": booking.created_at,
    }


def booking_from_dict(data: Dict[str, Any]) -> Booking:
    return Booking(
        id=str(data["id"]),
        event_type_id=str(data["eventTypeId"]),
        booker_name=data["bookerName"],
        booker_email=data["bookerEmail"],
        date=parse_date(data["date"]),
        start_time=TimeOfDay.parse(data["startTime"]),
        end_time=TimeOfDay.parse(data["endTime"]),
        status=BookingStatus(data.get("status", BookingStatus.CONFIRMED.value)),
        created_at=data.get("createdAt") or "",
    )
