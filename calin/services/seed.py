"""
Initial data for a fresh store.
"""

import logging

from ..config import AppConfig
from ..domain.exceptions import ValidationError
from ..domain.models import AvailabilityWindow
from .availability_service import AvailabilityService
from .event_type_service import EventTypeService
from .repository import SchedulingRepository

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPES = [
    {
        "title": "15 Minute Meeting",
        "description": "A quick 15-minute introductory call to discuss your needs.",
        "duration_minutes": 15,
        "slug": "15min",
    },
    {
        "title": "30 Minute Meeting",
        "description": "A standard 30-minute meeting for detailed discussions.",
        "duration_minutes": 30,
        "slug": "30min",
    },
    {
        "title": "60 Minute Consultation",
        "description": "An in-depth 60-minute consultation for comprehensive planning.",
        "duration_minutes": 60,
        "slug": "60min",
    },
]


def seed_defaults(repository: SchedulingRepository, config: AppConfig, force: bool = False) -> None:
    """
    Populate a store with the default event types, weekly schedule and timezone.

    Every weekday gets a window; only the configured working days are enabled.

    Raises:
        ValidationError: If the store already holds data and force is False
    """
    has_data = repository.list_event_types() or repository.list_windows()
    if has_data and not force:
        raise ValidationError("Store already contains data; use --force to seed anyway")

    event_types = EventTypeService(repository)
    existing_slugs = {et.slug for et in repository.list_event_types()}
    for defaults in DEFAULT_EVENT_TYPES:
        if defaults["slug"] in existing_slugs:
            continue
        event_types.create(**defaults)

    start_time = config.defaults.get_start_time()
    end_time = config.defaults.get_end_time()
    windows = {w.day_of_week: w for w in repository.list_windows()}
    for day in range(7):
        window = windows.get(day) or AvailabilityWindow(
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
        )
        window.start_time = start_time
        window.end_time = end_time
        window.enabled = day in config.defaults.working_days
        repository.save_window(window)

    AvailabilityService(repository).set_timezone(config.timezone)
    logger.info("Seeded store with %d event types", len(DEFAULT_EVENT_TYPES))
