"""
Application service for the weekly schedule, date overrides and timezone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

import pendulum

from ..domain.availability import resolve_windows
from ..domain.exceptions import NotFoundError, ValidationError
from ..domain.models import AvailabilityWindow, DateOverride, TimeOfDay
from .repository import SchedulingRepository

logger = logging.getLogger(__name__)

TIMEZONE_KEY = "timezone"
DEFAULT_TIMEZONE = "UTC"


@dataclass
class WindowUpdate:
    """One entry of a bulk schedule update."""
    id: str
    start_time: TimeOfDay
    end_time: TimeOfDay
    enabled: bool


class AvailabilityService:
    """
    Manages when bookings may be placed.

    The weekly schedule holds one window per weekday; overrides replace it
    for single dates.
    """

    def __init__(self, repository: SchedulingRepository) -> None:
        self._repository = repository

    def list_windows(self) -> List[AvailabilityWindow]:
        return self._repository.list_windows()

    def windows_for_date(self, on_date: date) -> List[AvailabilityWindow]:
        """Enabled windows for a date, with overrides taking precedence."""
        return resolve_windows(
            on_date,
            self._repository.list_windows(),
            self._repository.list_overrides(on_date=on_date),
        )

    def update_window(
        self,
        window_id: str,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
        enabled: bool,
    ) -> AvailabilityWindow:
        """
        Raises:
            NotFoundError: If the window does not exist
            ValidationError: If an enabled window does not open before it closes
        """
        window = self._repository.get_window(window_id)
        if window is None:
            raise NotFoundError("Availability", window_id)

        self._check_range(start_time, end_time, enabled)
        window.start_time = start_time
        window.end_time = end_time
        window.enabled = enabled
        self._repository.save_window(window)

        logger.info(
            "Updated availability for day %d: %s-%s (%s)",
            window.day_of_week, start_time, end_time,
            "enabled" if enabled else "disabled",
        )
        return window

    def bulk_update(self, updates: Iterable[WindowUpdate]) -> List[AvailabilityWindow]:
        """
        Apply several window updates. Unknown ids are skipped.
        """
        results: List[AvailabilityWindow] = []
        for update in updates:
            if self._repository.get_window(update.id) is None:
                logger.warning("Skipping unknown availability window %s", update.id)
                continue
            results.append(
                self.update_window(update.id, update.start_time, update.end_time, update.enabled)
            )
        return results

    def set_day(
        self,
        day: int,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
        enabled: bool = True,
    ) -> AvailabilityWindow:
        """
        Set the window of a weekday (0=Sunday), creating it when missing.
        """
        existing = [w for w in self._repository.list_windows() if w.day_of_week == day]
        if existing:
            return self.update_window(existing[0].id, start_time, end_time, enabled)

        self._check_range(start_time, end_time, enabled)
        window = AvailabilityWindow(
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
            enabled=enabled,
        )
        self._repository.save_window(window)
        logger.info("Created availability for day %d", day)
        return window

    def list_overrides(self, on_date: Optional[date] = None) -> List[DateOverride]:
        return sorted(
            self._repository.list_overrides(on_date=on_date),
            key=lambda o: (o.date, o.start_time),
        )

    def add_override(
        self,
        on_date: date,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
        enabled: bool = True,
    ) -> DateOverride:
        """
        Replace the weekly schedule on one date.

        A disabled override blocks the whole date.
        """
        self._check_range(start_time, end_time, enabled)
        override = DateOverride(
            date=on_date,
            start_time=start_time,
            end_time=end_time,
            enabled=enabled,
        )
        self._repository.add_override(override)
        logger.info("Added override for %s", on_date)
        return override

    def delete_override(self, override_id: str) -> None:
        if not self._repository.delete_override(override_id):
            raise NotFoundError("Override", override_id)
        logger.info("Deleted override %s", override_id)

    def get_timezone(self, default: str = DEFAULT_TIMEZONE) -> str:
        """Return the stored timezone, or the given default when none is set."""
        return self._repository.get_setting(TIMEZONE_KEY) or default

    def set_timezone(self, timezone: str) -> str:
        """
        Store the display timezone.

        Raises:
            ValidationError: If the name is not a known IANA timezone
        """
        timezone = (timezone or "").strip()
        if not timezone:
            raise ValidationError("Timezone is required")
        try:
            pendulum.timezone(timezone)
        except Exception as exc:
            raise ValidationError(f"Unknown timezone: {timezone}") from exc

        self._repository.set_setting(TIMEZONE_KEY, timezone)
        logger.info("Timezone set to %s", timezone)
        return timezone

    @staticmethod
    def _check_range(start_time: TimeOfDay, end_time: TimeOfDay, enabled: bool) -> None:
        if enabled and start_time >= end_time:
            raise ValidationError(f"Start time {start_time} must be before end time {end_time}")
