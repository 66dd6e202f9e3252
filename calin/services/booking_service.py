"""
Application service for slot lookup and the booking lifecycle.

The service fetches windows, durations and bookings through the repository
protocol and delegates the actual computation to the pure domain functions
``generate_slots_for_windows`` and ``has_conflict``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

import pendulum

from ..domain.availability import resolve_windows
from ..domain.conflicts import has_conflict
from ..domain.exceptions import (
    BookingStateError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)
from ..domain.models import Booking, BookingStatus, EventType, TimeOfDay
from ..domain.slot_generator import generate_slots_for_windows
from .repository import SchedulingRepository

logger = logging.getLogger(__name__)


class BookingService:
    """
    Orchestrates slot computation, conflict checks and booking mutations.

    The conflict check and the following insert are two separate repository
    calls. Concurrent writers can both pass the check and double-book a slot.
    """

    def __init__(self, repository: SchedulingRepository, timezone: str = "UTC") -> None:
        self._repository = repository
        self._timezone = timezone

    def available_slots(self, on_date: date, event_type_ref: str) -> List[TimeOfDay]:
        """
        Compute the open start times for an event type on a date.

        Returns an empty list, not an error, when the date has no enabled
        window.

        Raises:
            NotFoundError: If the event type does not exist
        """
        event_type = self._require_event_type(event_type_ref)

        windows = resolve_windows(
            on_date,
            self._repository.list_windows(),
            self._repository.list_overrides(on_date=on_date),
        )
        if not windows:
            logger.debug("No availability on %s", on_date)
            return []

        booked = [
            booking.start_time
            for booking in self._confirmed_bookings_on(on_date)
        ]

        return generate_slots_for_windows(windows, event_type.duration_minutes, booked)

    def can_book(
        self,
        on_date: date,
        start_time: TimeOfDay,
        excluding_booking_id: Optional[str] = None,
    ) -> bool:
        """Return True if no confirmed booking starts at this date and time."""
        return not has_conflict(
            on_date,
            start_time,
            self._confirmed_bookings_on(on_date),
            excluding_booking_id=excluding_booking_id,
        )

    def create_booking(
        self,
        *,
        event_type_ref: str,
        booker_name: str,
        booker_email: str,
        on_date: date,
        start_time: TimeOfDay,
        end_time: Optional[TimeOfDay] = None,
    ) -> Booking:
        """
        Create a confirmed booking.

        ``end_time`` defaults to the start plus the event type's duration.

        Raises:
            ValidationError: If the booker name or email is missing
            NotFoundError: If the event type does not exist
            SlotConflictError: If a confirmed booking already starts there
        """
        if not booker_name.strip() or not booker_email.strip():
            raise ValidationError("Booker name and email are required")

        event_type = self._require_event_type(event_type_ref)
        if end_time is None:
            end_time = self._default_end_time(event_type, start_time)
        self._check_order(start_time, end_time)

        if not self.can_book(on_date, start_time):
            logger.info("Rejected booking on %s at %s: slot taken", on_date, start_time)
            raise SlotConflictError(on_date, start_time)

        booking = Booking(
            event_type_id=event_type.id,
            booker_name=booker_name.strip(),
            booker_email=booker_email.strip(),
            date=on_date,
            start_time=start_time,
            end_time=end_time,
            created_at=pendulum.now("UTC").to_iso8601_string(),
        )
        self._repository.add_booking(booking)

        logger.info(
            "Booked %s for %s on %s at %s",
            event_type.slug, booking.booker_email, on_date, start_time,
        )
        return booking

    def reschedule_booking(
        self,
        booking_id: str,
        on_date: date,
        start_time: TimeOfDay,
        end_time: Optional[TimeOfDay] = None,
    ) -> Booking:
        """
        Move a confirmed booking to a new date and time.

        The booking's own record never conflicts with itself.

        Raises:
            NotFoundError: If the booking does not exist
            BookingStateError: If the booking was cancelled
            SlotConflictError: If another confirmed booking starts there
        """
        booking = self.get_booking(booking_id)

        if not booking.is_confirmed:
            raise BookingStateError(f"Cannot reschedule a {booking.status.value} booking")

        if end_time is None:
            event_type = self._repository.get_event_type(booking.event_type_id)
            if event_type is not None:
                end_time = self._default_end_time(event_type, start_time)
            else:
                # Keep the booked length when the event type is gone.
                length = booking.end_time.total_minutes() - booking.start_time.total_minutes()
                end_time = self._shift(start_time, length)
        self._check_order(start_time, end_time)

        if not self.can_book(on_date, start_time, excluding_booking_id=booking.id):
            logger.info(
                "Rejected reschedule of %s to %s at %s: slot taken",
                booking.id, on_date, start_time,
            )
            raise SlotConflictError(on_date, start_time)

        moved = booking.moved_to(on_date, start_time, end_time)
        self._repository.save_booking(moved)

        logger.info("Rescheduled %s to %s at %s", booking.id, on_date, start_time)
        return moved

    def cancel_booking(self, booking_id: str) -> Booking:
        """
        Cancel a booking. Cancelling twice returns the cancelled booking.

        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = self.get_booking(booking_id)

        if booking.status is BookingStatus.CANCELLED:
            logger.debug("Booking %s is already cancelled", booking_id)
            return booking

        cancelled = booking.cancelled()
        self._repository.save_booking(cancelled)

        logger.info("Cancelled booking %s", booking_id)
        return cancelled

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._repository.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    def list_bookings(
        self,
        *,
        status: Optional[BookingStatus] = None,
        upcoming: Optional[bool] = None,
        today: Optional[date] = None,
    ) -> List[Booking]:
        """
        List bookings ordered by date and start time.

        Args:
            status: Keep only bookings with this status
            upcoming: True keeps bookings from today on, False keeps bookings
                up to and including today, None keeps everything
            today: Reference date, defaults to today in the configured timezone
        """
        bookings = self._repository.list_bookings(status=status)

        if upcoming is not None:
            today = today or pendulum.today(self._timezone).date()
            if upcoming:
                bookings = [b for b in bookings if b.date >= today]
            else:
                bookings = [b for b in bookings if b.date <= today]

        return sorted(bookings, key=lambda b: (b.date, b.start_time))

    def _confirmed_bookings_on(self, on_date: date) -> List[Booking]:
        return self._repository.list_bookings(
            on_date=on_date,
            status=BookingStatus.CONFIRMED,
        )

    def _require_event_type(self, ref: str) -> EventType:
        event_type = self._repository.get_event_type(ref)
        if event_type is None:
            raise NotFoundError("Event type", ref)
        return event_type

    def _default_end_time(self, event_type: EventType, start_time: TimeOfDay) -> TimeOfDay:
        return self._shift(start_time, event_type.duration_minutes)

    @staticmethod
    def _check_order(start_time: TimeOfDay, end_time: TimeOfDay) -> None:
        if end_time <= start_time:
            raise ValidationError(f"End time {end_time} must be after start time {start_time}")

    @staticmethod
    def _shift(start_time: TimeOfDay, minutes: int) -> TimeOfDay:
        try:
            return start_time.add_minutes(minutes)
        except ValueError as exc:
            raise ValidationError(f"Booking starting at {start_time} would end after midnight") from exc
