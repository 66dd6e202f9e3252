"""
Tests for the BookingService orchestration layer.
"""

from datetime import date

import pytest

from calin.adapters.memory_store import InMemoryStore
from calin.domain.exceptions import (
    BookingStateError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)
from calin.domain.models import (
    AvailabilityWindow,
    Booking,
    BookingStatus,
    DateOverride,
    EventType,
    TimeOfDay,
)
from calin.services.booking_service import BookingService

TUESDAY = date(2025, 6, 10)
WEDNESDAY = date(2025, 6, 11)
SUNDAY = date(2025, 6, 8)


def t(value: str) -> TimeOfDay:
    return TimeOfDay.parse(value)


def _build_store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_event_type(EventType(id="et15", title="15 Minute Meeting", slug="15min", duration_minutes=15))
    store.add_event_type(EventType(id="et30", title="30 Minute Meeting", slug="30min", duration_minutes=30))
    store.add_event_type(EventType(id="et60", title="60 Minute Consultation", slug="60min", duration_minutes=60))
    for day in range(7):
        store.save_window(
            AvailabilityWindow(
                id=f"w{day}",
                day_of_week=day,
                start_time=t("09:00:00"),
                end_time=t("17:00:00"),
                enabled=day in (1, 2, 3, 4, 5),
            )
        )
    return store


@pytest.fixture
def store():
    return _build_store()


@pytest.fixture
def service(store):
    return BookingService(store)


def _book(service: BookingService, start: str, on_date: date = TUESDAY, event: str = "60min") -> Booking:
    return service.create_booking(
        event_type_ref=event,
        booker_name="John Doe",
        booker_email="john@example.com",
        on_date=on_date,
        start_time=t(start),
    )


class TestAvailableSlots:
    """Tests for available_slots."""

    def test_open_weekday(self, service):
        slots = service.available_slots(TUESDAY, "30min")

        assert len(slots) == 16
        assert slots[0] == t("09:00:00")
        assert slots[-1] == t("16:30:00")

    def test_lookup_by_id_or_slug(self, service):
        assert service.available_slots(TUESDAY, "et30") == service.available_slots(TUESDAY, "30min")

    def test_disabled_day_returns_empty_list(self, service):
        """Sunday is disabled, whatever the duration."""
        for slug in ("15min", "30min", "60min"):
            assert service.available_slots(SUNDAY, slug) == []

    def test_confirmed_bookings_block_their_start(self, service):
        _book(service, "10:00:00")

        slots = service.available_slots(TUESDAY, "60min")

        assert t("10:00:00") not in slots
        assert t("11:00:00") in slots

    def test_cancelled_bookings_do_not_block(self, service):
        booking = _book(service, "10:00:00")
        service.cancel_booking(booking.id)

        assert t("10:00:00") in service.available_slots(TUESDAY, "60min")

    def test_bookings_on_other_dates_do_not_block(self, service):
        _book(service, "10:00:00", on_date=WEDNESDAY)

        assert t("10:00:00") in service.available_slots(TUESDAY, "60min")

    def test_date_override_replaces_weekly_hours(self, store, service):
        store.add_override(DateOverride(date=TUESDAY, start_time=t("13:00"), end_time=t("14:00")))

        assert service.available_slots(TUESDAY, "30min") == [t("13:00:00"), t("13:30:00")]

    def test_multiple_windows_concatenated(self, store, service):
        store.add_override(DateOverride(date=SUNDAY, start_time=t("15:00"), end_time=t("16:00")))
        store.add_override(DateOverride(date=SUNDAY, start_time=t("09:00"), end_time=t("10:00")))

        slots = service.available_slots(SUNDAY, "30min")

        assert [str(s) for s in slots] == ["09:00:00", "09:30:00", "15:00:00", "15:30:00"]

    def test_unknown_event_type(self, service):
        with pytest.raises(NotFoundError):
            service.available_slots(TUESDAY, "90min")


class TestCreateBooking:
    """Tests for create_booking and can_book."""

    def test_creates_confirmed_booking_with_default_end(self, service, store):
        booking = _book(service, "10:00:00", event="30min")

        assert booking.status is BookingStatus.CONFIRMED
        assert booking.end_time == t("10:30:00")
        assert booking.event_type_id == "et30"
        assert store.get_booking(booking.id) is not None

    def test_same_start_is_rejected(self, service, store):
        _book(service, "10:00:00")

        with pytest.raises(SlotConflictError, match="already booked"):
            _book(service, "10:00:00")

        assert len(store.list_bookings()) == 1

    def test_overlapping_different_start_is_accepted(self, service):
        """10:15 inside an existing 10:00-11:00 booking still goes through."""
        _book(service, "10:00:00")

        booking = _book(service, "10:15:00")

        assert booking.start_time == t("10:15:00")

    def test_can_book(self, service):
        _book(service, "10:00:00")

        assert not service.can_book(TUESDAY, t("10:00:00"))
        assert service.can_book(TUESDAY, t("10:15:00"))
        assert service.can_book(WEDNESDAY, t("10:00:00"))

    def test_slot_freed_by_cancellation_can_be_rebooked(self, service):
        first = _book(service, "10:00:00")
        service.cancel_booking(first.id)

        second = _book(service, "10:00:00")

        assert second.id != first.id

    def test_explicit_end_time(self, service):
        booking = service.create_booking(
            event_type_ref="15min",
            booker_name="Jane",
            booker_email="jane@example.com",
            on_date=TUESDAY,
            start_time=t("10:00"),
            end_time=t("10:45"),
        )

        assert booking.end_time == t("10:45:00")

    def test_end_before_start_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create_booking(
                event_type_ref="15min",
                booker_name="Jane",
                booker_email="jane@example.com",
                on_date=TUESDAY,
                start_time=t("10:00"),
                end_time=t("09:45"),
            )

    def test_booking_past_midnight_rejected(self, service):
        with pytest.raises(ValidationError):
            _book(service, "23:30:00")

    @pytest.mark.parametrize("name,email", [("", "john@example.com"), ("John", "  ")])
    def test_required_fields(self, service, name, email):
        with pytest.raises(ValidationError):
            service.create_booking(
                event_type_ref="15min",
                booker_name=name,
                booker_email=email,
                on_date=TUESDAY,
                start_time=t("10:00"),
            )

    def test_unknown_event_type(self, service):
        with pytest.raises(NotFoundError):
            _book(service, "10:00:00", event="missing")


class TestRescheduleAndCancel:
    """Tests for reschedule_booking and cancel_booking."""

    def test_reschedule_to_same_time_other_date(self, service):
        """A booking never conflicts with its own record."""
        booking = _book(service, "10:00:00")

        moved = service.reschedule_booking(booking.id, WEDNESDAY, t("10:00:00"))

        assert moved.id == booking.id
        assert moved.date == WEDNESDAY
        assert moved.end_time == t("11:00:00")

    def test_reschedule_in_place(self, service):
        booking = _book(service, "10:00:00")

        moved = service.reschedule_booking(booking.id, TUESDAY, t("10:00:00"))

        assert moved.date == TUESDAY

    def test_reschedule_onto_taken_slot_rejected(self, service, store):
        _book(service, "10:00:00")
        other = _book(service, "11:00:00")

        with pytest.raises(SlotConflictError):
            service.reschedule_booking(other.id, TUESDAY, t("10:00:00"))

        assert store.get_booking(other.id).start_time == t("11:00:00")

    def test_reschedule_cancelled_booking_rejected(self, service):
        booking = _book(service, "10:00:00")
        service.cancel_booking(booking.id)

        with pytest.raises(BookingStateError):
            service.reschedule_booking(booking.id, WEDNESDAY, t("10:00:00"))

    def test_reschedule_unknown_booking(self, service):
        with pytest.raises(NotFoundError):
            service.reschedule_booking("missing", WEDNESDAY, t("10:00:00"))

    def test_reschedule_keeps_length_when_event_type_is_gone(self, service, store):
        booking = _book(service, "10:00:00", event="30min")
        del store.event_types["et30"]

        moved = service.reschedule_booking(booking.id, WEDNESDAY, t("14:00:00"))

        assert moved.end_time == t("14:30:00")

    def test_cancel_is_one_way_and_idempotent(self, service, store):
        booking = _book(service, "10:00:00")

        first = service.cancel_booking(booking.id)
        second = service.cancel_booking(booking.id)

        assert first.status is BookingStatus.CANCELLED
        assert second.status is BookingStatus.CANCELLED
        assert store.get_booking(booking.id).status is BookingStatus.CANCELLED

    def test_cancel_unknown_booking(self, service):
        with pytest.raises(NotFoundError):
            service.cancel_booking("missing")


class TestListBookings:
    """Tests for list_bookings."""

    def test_ordered_by_date_then_time(self, service):
        _book(service, "14:00:00", on_date=WEDNESDAY)
        _book(service, "11:00:00")
        _book(service, "09:00:00")

        bookings = service.list_bookings()

        assert [(b.date, str(b.start_time)) for b in bookings] == [
            (TUESDAY, "09:00:00"),
            (TUESDAY, "11:00:00"),
            (WEDNESDAY, "14:00:00"),
        ]

    def test_filter_by_status(self, service):
        keep = _book(service, "09:00:00")
        gone = _book(service, "10:00:00")
        service.cancel_booking(gone.id)

        confirmed = service.list_bookings(status=BookingStatus.CONFIRMED)
        cancelled = service.list_bookings(status=BookingStatus.CANCELLED)

        assert [b.id for b in confirmed] == [keep.id]
        assert [b.id for b in cancelled] == [gone.id]

    def test_upcoming_and_past_both_include_today(self, service):
        _book(service, "09:00:00", on_date=date(2025, 6, 9))
        _book(service, "09:00:00", on_date=TUESDAY)
        _book(service, "09:00:00", on_date=WEDNESDAY)

        upcoming = service.list_bookings(upcoming=True, today=TUESDAY)
        past = service.list_bookings(upcoming=False, today=TUESDAY)

        assert [b.date for b in upcoming] == [TUESDAY, WEDNESDAY]
        assert [b.date for b in past] == [date(2025, 6, 9), TUESDAY]
