"""
Resolution of the availability windows that apply to a given date.
"""

from datetime import date
from typing import Iterable, List

from .models import AvailabilityWindow, DateOverride, day_of_week


def resolve_windows(
    on_date: date,
    weekly_windows: Iterable[AvailabilityWindow],
    overrides: Iterable[DateOverride] = (),
) -> List[AvailabilityWindow]:
    """
    Return the enabled windows for ``on_date``, ordered by start time.

    Overrides for the date replace the weekly schedule entirely; they are
    never merged with it. A date whose overrides are all disabled has no
    windows at all.
    """
    day_overrides = [o for o in overrides if o.date == on_date]

    if day_overrides:
        windows = [o.as_window() for o in day_overrides if o.enabled]
    else:
        weekday = day_of_week(on_date)
        windows = [
            w for w in weekly_windows
            if w.day_of_week == weekday and w.enabled
        ]

    return sorted(windows, key=lambda w: w.start_time)
