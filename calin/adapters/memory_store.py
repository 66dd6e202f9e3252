"""
In-memory implementation of the scheduling repository.
"""

from copy import copy
from datetime import date
from typing import Dict, List, Optional

from ..domain.models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    DateOverride,
    EventType,
)


class InMemoryStore:
    """
    Keeps all records in dictionaries keyed by id.

    Records are copied on the way in and out so callers cannot change stored
    state without going through a save method.
    """

    def __init__(self):
        self.event_types: Dict[str, EventType] = {}
        self.windows: Dict[str, AvailabilityWindow] = {}
        self.overrides: Dict[str, DateOverride] = {}
        self.bookings: Dict[str, Booking] = {}
        self.settings: Dict[str, str] = {}

    def _changed(self) -> None:
        """Hook called after every mutation."""

    # Event types

    def list_event_types(self) -> List[EventType]:
        return [copy(et) for et in self.event_types.values()]

    def get_event_type(self, ref: str) -> Optional[EventType]:
        event_type = self.event_types.get(ref)
        if event_type is None:
            event_type = next(
                (et for et in self.event_types.values() if et.slug == ref),
                None,
            )
        return copy(event_type) if event_type else None

    def add_event_type(self, event_type: EventType) -> EventType:
        self.event_types[event_type.id] = copy(event_type)
        self._changed()
        return event_type

    def save_event_type(self, event_type: EventType) -> EventType:
        return self.add_event_type(event_type)

    def delete_event_type(self, event_type_id: str) -> bool:
        if self.event_types.pop(event_type_id, None) is None:
            return False
        self.bookings = {
            bid: b for bid, b in self.bookings.items()
            if b.event_type_id != event_type_id
        }
        self._changed()
        return True

    # Weekly windows

    def list_windows(self) -> List[AvailabilityWindow]:
        return [
            copy(w) for w in sorted(self.windows.values(), key=lambda w: w.day_of_week)
        ]

    def get_window(self, window_id: str) -> Optional[AvailabilityWindow]:
        window = self.windows.get(window_id)
        return copy(window) if window else None

    def save_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        self.windows[window.id] = copy(window)
        self._changed()
        return window

    def delete_window(self, window_id: str) -> bool:
        if self.windows.pop(window_id, None) is None:
            return False
        self._changed()
        return True

    # Date overrides

    def list_overrides(self, on_date: Optional[date] = None) -> List[DateOverride]:
        return [
            copy(o) for o in self.overrides.values()
            if on_date is None or o.date == on_date
        ]

    def add_override(self, override: DateOverride) -> DateOverride:
        self.overrides[override.id] = copy(override)
        self._changed()
        return override

    def delete_override(self, override_id: str) -> bool:
        if self.overrides.pop(override_id, None) is None:
            return False
        self._changed()
        return True

    # Bookings

    def list_bookings(
        self,
        on_date: Optional[date] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[Booking]:
        return [
            copy(b) for b in self.bookings.values()
            if (on_date is None or b.date == on_date)
            and (status is None or b.status is status)
        ]

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        booking = self.bookings.get(booking_id)
        return copy(booking) if booking else None

    def add_booking(self, booking: Booking) -> Booking:
        self.bookings[booking.id] = copy(booking)
        self._changed()
        return booking

    def save_booking(self, booking: Booking) -> Booking:
        return self.add_booking(booking)

    # Settings

    def get_setting(self, key: str) -> Optional[str]:
        return self.settings.get(key)

    def set_setting(self, key: str, value: str) -> None:
        self.settings[key] = value
        self._changed()
