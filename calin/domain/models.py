"""
Domain models for event types, availability and bookings.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from uuid import uuid4

from .exceptions import InvalidDurationError

MINUTES_PER_DAY = 24 * 60


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid4())


def day_of_week(on_date: date) -> int:
    """Return the weekday of a date with Sunday as 0 and Saturday as 6."""
    return on_date.isoweekday() % 7


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    A naive wall-clock time with second resolution.

    Invariant: 0 <= hour <= 23, 0 <= minute <= 59, 0 <= second <= 59.
    """
    hour: int
    minute: int
    second: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {self.minute}")
        if not 0 <= self.second <= 59:
            raise ValueError(f"Second must be between 0 and 59, got {self.second}")

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """
        Parse ``HH:MM`` or ``HH:MM:SS`` into a TimeOfDay.

        Raises:
            ValueError: If the string is not a valid 24-hour time
        """
        parts = value.strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid time '{value}', expected HH:MM or HH:MM:SS")
        return cls(*(int(p) for p in parts))

    @classmethod
    def from_minutes(cls, total_minutes: int) -> "TimeOfDay":
        """Build a time from minutes since midnight."""
        if not 0 <= total_minutes < MINUTES_PER_DAY:
            raise ValueError(f"{total_minutes} minutes is outside a single day")
        return cls(hour=total_minutes // 60, minute=total_minutes % 60)

    def total_minutes(self) -> int:
        """Minutes since midnight, ignoring seconds."""
        return self.hour * 60 + self.minute

    def add_minutes(self, minutes: int) -> "TimeOfDay":
        """
        Return the time ``minutes`` later, with seconds reset to zero.

        Raises:
            ValueError: If the result would fall past 23:59
        """
        return TimeOfDay.from_minutes(self.total_minutes() + minutes)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class AvailabilityWindow:
    """
    A recurring weekly window in which bookings may start.
    """
    day_of_week: int  # 0=Sunday, 6=Saturday
    start_time: TimeOfDay
    end_time: TimeOfDay
    enabled: bool = True
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if self.day_of_week not in range(7):
            raise ValueError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")


@dataclass
class DateOverride:
    """
    Replaces the weekly windows for one specific date.

    A disabled override marks the whole date unavailable.
    """
    date: date
    start_time: TimeOfDay
    end_time: TimeOfDay
    enabled: bool = True
    id: str = field(default_factory=new_id)

    def as_window(self) -> AvailabilityWindow:
        """Express this override as a window on its own weekday."""
        return AvailabilityWindow(
            day_of_week=day_of_week(self.date),
            start_time=self.start_time,
            end_time=self.end_time,
            enabled=self.enabled,
            id=self.id,
        )


@dataclass
class EventType:
    """A bookable kind of meeting with a fixed length."""
    title: str
    slug: str
    duration_minutes: int
    description: str = ""
    id: str = field(default_factory=new_id)
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise InvalidDurationError(self.duration_minutes)


@dataclass
class Booking:
    """A booked meeting for one event type on one date."""
    event_type_id: str
    booker_name: str
    booker_email: str
    date: date
    start_time: TimeOfDay
    end_time: TimeOfDay
    status: BookingStatus = BookingStatus.CONFIRMED
    id: str = field(default_factory=new_id)
    created_at: str = ""

    @property
    def is_confirmed(self) -> bool:
        return self.status is BookingStatus.CONFIRMED

    def moved_to(
        self,
        on_date: date,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
    ) -> "Booking":
        """Return a copy of this booking at a new date and time."""
        return replace(self, date=on_date, start_time=start_time, end_time=end_time)

    def cancelled(self) -> "Booking":
        """Return a cancelled copy of this booking."""
        return replace(self, status=BookingStatus.CANCELLED)
