"""
Read-only client for a running Cal.in REST backend.
"""

import logging
from typing import Any, Dict, List

import requests

from ..domain.exceptions import BackendAPIError
from ..domain.models import AvailabilityWindow, Booking, EventType
from ..services.repository import SchedulingRepository
from .serialization import booking_from_dict, event_type_from_dict, window_from_dict

logger = logging.getLogger(__name__)


class CalinApiClient:
    """
    Client for the Cal.in REST API.

    Used to import event types, the weekly schedule, bookings and the
    timezone setting from an existing deployment into a local store.
    """

    def __init__(self, base_url: str, timeout: float = 10):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. ``http://localhost:3001/api``
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}

    def _get(self, path: str, params: Dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}{path}"

        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise BackendAPIError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise BackendAPIError(f"Invalid JSON from {url}: {e}") from e

    def health(self) -> Dict[str, Any]:
        """
        Check that the backend is up.

        Returns:
            Health payload, e.g. ``{"status": "ok", "timestamp": "..."}``
        """
        return self._get("/health")

    def get_event_types(self) -> List[EventType]:
        return [event_type_from_dict(item) for item in self._parse_list(self._get("/event-types"))]

    def get_availability(self) -> List[AvailabilityWindow]:
        return [window_from_dict(item) for item in self._parse_list(self._get("/availability"))]

    def get_bookings(self, status: str | None = None) -> List[Booking]:
        params = {"status": status} if status else None
        return [booking_from_dict(item) for item in self._parse_list(self._get("/bookings", params))]

    def get_timezone(self) -> str:
        data = self._get("/availability/timezone")
        if not isinstance(data, dict):
            raise BackendAPIError("Unexpected timezone response")
        return data.get("timezone") or "UTC"

    def import_into(self, repository: SchedulingRepository) -> Dict[str, int]:
        """
        Copy all remote records into a local repository.

        Remote records replace local ones with the same natural key: event
        types are matched by slug and weekly windows by day of week. Local
        bookings of a replaced event type are moved to the remote id.

        Returns:
            Number of imported records per kind
        """
        try:
            event_types = self.get_event_types()
            windows = self.get_availability()
            bookings = self.get_bookings()
        except (KeyError, TypeError, ValueError) as e:
            raise BackendAPIError(f"Could not parse backend response: {e}") from e
        timezone = self.get_timezone()

        for event_type in event_types:
            self._replace_event_type(repository, event_type)

        remote_days = {w.day_of_week for w in windows}
        remote_ids = {w.id for w in windows}
        for local in repository.list_windows():
            if local.day_of_week in remote_days and local.id not in remote_ids:
                repository.delete_window(local.id)
        for window in windows:
            repository.save_window(window)

        for booking in bookings:
            repository.save_booking(booking)
        repository.set_setting("timezone", timezone)

        logger.info(
            "Imported %d event types, %d windows and %d bookings from %s",
            len(event_types), len(windows), len(bookings), self.base_url,
        )
        return {
            "event_types": len(event_types),
            "availability": len(windows),
            "bookings": len(bookings),
        }

    @staticmethod
    def _replace_event_type(repository: SchedulingRepository, event_type: EventType) -> None:
        local = next(
            (et for et in repository.list_event_types()
             if et.slug == event_type.slug and et.id != event_type.id),
            None,
        )
        repository.save_event_type(event_type)
        if local is None:
            return

        for booking in repository.list_bookings():
            if booking.event_type_id == local.id:
                booking.event_type_id = event_type.id
                repository.save_booking(booking)
        repository.delete_event_type(local.id)
        logger.debug("Replaced local event type %s with remote %s", local.id, event_type.id)

    @staticmethod
    def _parse_list(data: Any) -> List[Dict[str, Any]]:
        if not isinstance(data, list):
            raise BackendAPIError(f"Expected a JSON list, got {type(data).__name__}")
        return data
