"""
Booking conflict detection.
"""

from datetime import date
from typing import Iterable, Optional

from .models import Booking, TimeOfDay


def has_conflict(
    on_date: date,
    start_time: TimeOfDay,
    bookings: Iterable[Booking],
    excluding_booking_id: Optional[str] = None,
) -> bool:
    """
    Check whether a confirmed booking already starts at the requested time.

    Only exact start-time matches on the same date count. A booking whose
    interval merely overlaps the request (10:00-11:00 against 10:15) is not
    a conflict.

    Args:
        on_date: Requested date
        start_time: Requested start time
        bookings: Existing bookings, any status
        excluding_booking_id: Booking being rescheduled, ignored in the check
    """
    return any(
        booking.is_confirmed
        and booking.date == on_date
        and booking.start_time == start_time
        and booking.id != excluding_booking_id
        for booking in bookings
    )
