"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import resolve_windows
from .conflicts import has_conflict
from .models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    DateOverride,
    EventType,
    TimeOfDay,
    day_of_week,
)
from .slot_generator import generate_slots, generate_slots_for_windows

__all__ = [
    "AvailabilityWindow",
    "Booking",
    "BookingStatus",
    "DateOverride",
    "EventType",
    "TimeOfDay",
    "day_of_week",
    "generate_slots",
    "generate_slots_for_windows",
    "has_conflict",
    "resolve_windows",
]
