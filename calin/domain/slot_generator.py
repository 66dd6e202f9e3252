"""
Core business logic for generating bookable slots.

Pure domain logic without any external dependencies (no storage, no I/O):
a window, a duration and the already-booked start times go in, the list of
open start times comes out.
"""

from typing import Iterable, List, Sequence

from .exceptions import InvalidDurationError
from .models import AvailabilityWindow, TimeOfDay


def generate_slots(
    window_start: TimeOfDay,
    window_end: TimeOfDay,
    duration_minutes: int,
    booked_start_times: Iterable[TimeOfDay] = (),
) -> List[TimeOfDay]:
    """
    Generate the open start times of a single availability window.

    Algorithm:
    1. Place a cursor at ``window_start``
    2. Stop when ``cursor + duration`` would end after ``window_end``
       (the overrunning candidate is dropped, never clipped)
    3. Keep the cursor unless a booking starts exactly there
    4. Advance the cursor by ``duration`` and repeat

    Slots are anchored to the window's own start, not to clock boundaries.
    Bookings only block the slot whose start time they match exactly.

    Args:
        window_start: Opening time of the window
        window_end: Closing time of the window
        duration_minutes: Length of one slot
        booked_start_times: Start times of confirmed bookings on the date

    Returns:
        Open start times in ascending order

    Raises:
        InvalidDurationError: If duration_minutes is not positive
    """
    if duration_minutes <= 0:
        raise InvalidDurationError(duration_minutes)

    booked = frozenset(booked_start_times)
    slots: List[TimeOfDay] = []

    # Compared as hour/minute pairs; seconds never take part.
    cursor = window_start.total_minutes()
    limit = window_end.total_minutes()

    while cursor + duration_minutes <= limit:
        candidate = TimeOfDay.from_minutes(cursor)
        if candidate not in booked:
            slots.append(candidate)
        cursor += duration_minutes

    return slots


def generate_slots_for_windows(
    windows: Sequence[AvailabilityWindow],
    duration_minutes: int,
    booked_start_times: Iterable[TimeOfDay] = (),
) -> List[TimeOfDay]:
    """
    Run the generator once per window and concatenate in window order.
    """
    booked = frozenset(booked_start_times)
    slots: List[TimeOfDay] = []

    for window in windows:
        slots.extend(
            generate_slots(
                window.start_time,
                window.end_time,
                duration_minutes,
                booked,
            )
        )

    return slots
