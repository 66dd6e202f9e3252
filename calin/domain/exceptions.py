"""
Domain-specific exception hierarchy for the Cal.in scheduling core.
"""

from datetime import date


class CalinError(Exception):
    """Base class for all application-level errors."""


class ValidationError(CalinError, ValueError):
    """Raised when input is missing or malformed."""


class InvalidDurationError(ValidationError):
    """Raised when a slot or event duration is not a positive number of minutes."""

    def __init__(self, duration_minutes: int):
        super().__init__(f"Duration must be greater than zero, got {duration_minutes}")
        self.duration_minutes = duration_minutes


class SlotConflictError(CalinError):
    """Raised when a confirmed booking already starts at the requested time."""

    def __init__(self, on_date: date, start_time):
        super().__init__("This time slot is already booked")
        self.date = on_date
        self.start_time = start_time


class NotFoundError(CalinError):
    """Raised when a referenced record does not exist."""

    def __init__(self, kind: str, ref: str):
        super().__init__(f"{kind} not found: {ref}")
        self.kind = kind
        self.ref = ref


class BookingStateError(CalinError):
    """Raised for booking status transitions that do not exist."""


class StorageError(CalinError):
    """Raised when the local data file cannot be read or written."""


class BackendAPIError(CalinError):
    """Raised when a remote Cal.in backend cannot be reached or parsed."""
