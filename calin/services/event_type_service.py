"""
Application service for managing event types.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

import pendulum

from ..domain.exceptions import NotFoundError, ValidationError
from ..domain.models import EventType
from .repository import SchedulingRepository

logger = logging.getLogger(__name__)


class EventTypeService:
    """Create, update and delete event types while keeping slugs unique."""

    def __init__(self, repository: SchedulingRepository) -> None:
        self._repository = repository

    def list(self) -> List[EventType]:
        return self._repository.list_event_types()

    def get(self, ref: str) -> EventType:
        """
        Look up an event type by id or slug.

        Raises:
            NotFoundError: If no event type matches
        """
        event_type = self._repository.get_event_type(ref)
        if event_type is None:
            raise NotFoundError("Event type", ref)
        return event_type

    def create(
        self,
        *,
        title: str,
        slug: str,
        duration_minutes: int,
        description: str = "",
    ) -> EventType:
        """
        Create an event type.

        Raises:
            ValidationError: If title or slug is missing or the slug is taken
            InvalidDurationError: If duration_minutes is not positive
        """
        title, slug = self._require_fields(title, slug)
        self._ensure_slug_free(slug)

        now = pendulum.now("UTC").to_iso8601_string()
        event_type = EventType(
            title=title,
            slug=slug,
            duration_minutes=duration_minutes,
            description=description or "",
            created_at=now,
            updated_at=now,
        )
        self._repository.add_event_type(event_type)

        logger.info("Created event type %s (%d min)", slug, duration_minutes)
        return event_type

    def update(
        self,
        event_type_id: str,
        *,
        title: Optional[str] = None,
        slug: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        description: Optional[str] = None,
    ) -> EventType:
        """
        Update the given fields of an event type, leaving the others as they are.

        Raises:
            NotFoundError: If the event type does not exist
            ValidationError: If the new slug is taken
            InvalidDurationError: If duration_minutes is not positive
        """
        current = self.get(event_type_id)

        title, slug = self._require_fields(
            current.title if title is None else title,
            current.slug if slug is None else slug,
        )
        if slug != current.slug:
            self._ensure_slug_free(slug)

        updated = replace(
            current,
            title=title,
            slug=slug,
            duration_minutes=current.duration_minutes if duration_minutes is None else duration_minutes,
            description=current.description if description is None else description,
            updated_at=pendulum.now("UTC").to_iso8601_string(),
        )
        self._repository.save_event_type(updated)

        logger.info("Updated event type %s", updated.slug)
        return updated

    def delete(self, event_type_id: str) -> None:
        """
        Delete an event type together with its bookings.

        Raises:
            NotFoundError: If the event type does not exist
        """
        event_type = self.get(event_type_id)
        self._repository.delete_event_type(event_type.id)
        logger.info("Deleted event type %s", event_type.slug)

    @staticmethod
    def _require_fields(title: str, slug: str) -> tuple[str, str]:
        title = (title or "").strip()
        slug = (slug or "").strip()
        if not title or not slug:
            raise ValidationError("Title, duration, and slug are required")
        return title, slug

    def _ensure_slug_free(self, slug: str) -> None:
        if any(et.slug == slug for et in self._repository.list_event_types()):
            raise ValidationError(f"Slug already exists: {slug}")
