"""
Storage protocol consumed by the service layer.

Services depend on this protocol only, so the in-memory store, the JSON file
store or a test stub can be plugged in without touching scheduling logic.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..domain.models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    DateOverride,
    EventType,
)


class SchedulingRepository(Protocol):
    """Protocol describing the persistence behaviour needed by the services."""

    def list_event_types(self) -> List[EventType]:
        """Return all event types in creation order."""

    def get_event_type(self, ref: str) -> Optional[EventType]:
        """Look up an event type by id or slug."""

    def add_event_type(self, event_type: EventType) -> EventType:
        ...

    def save_event_type(self, event_type: EventType) -> EventType:
        ...

    def delete_event_type(self, event_type_id: str) -> bool:
        """Delete an event type and its bookings. Returns False if unknown."""

    def list_windows(self) -> List[AvailabilityWindow]:
        """Return weekly windows ordered by day of week."""

    def get_window(self, window_id: str) -> Optional[AvailabilityWindow]:
        ...

    def save_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        ...

    def delete_window(self, window_id: str) -> bool:
        ...

    def list_overrides(self, on_date: Optional[date] = None) -> List[DateOverride]:
        ...

    def add_override(self, override: DateOverride) -> DateOverride:
        ...

    def delete_override(self, override_id: str) -> bool:
        ...

    def list_bookings(
        self,
        on_date: Optional[date] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[Booking]:
        ...

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        ...

    def add_booking(self, booking: Booking) -> Booking:
        ...

    def save_booking(self, booking: Booking) -> Booking:
        ...

    def get_setting(self, key: str) -> Optional[str]:
        ...

    def set_setting(self, key: str, value: str) -> None:
        ...
