"""
Service layer helpers that orchestrate storage and domain logic.
"""

from .availability_service import AvailabilityService, WindowUpdate
from .booking_service import BookingService
from .event_type_service import EventTypeService
from .repository import SchedulingRepository
from .seed import seed_defaults

__all__ = [
    "AvailabilityService",
    "BookingService",
    "EventTypeService",
    "SchedulingRepository",
    "WindowUpdate",
    "seed_defaults",
]
