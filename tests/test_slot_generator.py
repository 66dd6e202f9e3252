"""
Tests for slot generation.
"""

import pytest

from calin.domain.exceptions import InvalidDurationError
from calin.domain.models import AvailabilityWindow, TimeOfDay
from calin.domain.slot_generator import generate_slots, generate_slots_for_windows


def t(value: str) -> TimeOfDay:
    return TimeOfDay.parse(value)


class TestGenerateSlots:
    """Tests for generate_slots."""

    def test_full_working_day_in_quarter_hours(self):
        """09:00-17:00 in 15 minute steps yields 32 slots ending at 16:45."""
        slots = generate_slots(t("09:00:00"), t("17:00:00"), 15, set())

        assert len(slots) == 32
        assert slots[0] == t("09:00:00")
        assert slots[-1] == t("16:45:00")
        assert t("17:00:00") not in slots

    def test_partial_final_period_is_dropped(self):
        """A candidate that would overrun the window is discarded, not clipped."""
        slots = generate_slots(t("09:00:00"), t("09:50:00"), 30, set())

        assert slots == [t("09:00:00")]

    def test_exact_fit_includes_last_slot(self):
        """A slot ending exactly at the window end is kept."""
        slots = generate_slots(t("09:00:00"), t("10:00:00"), 30, set())

        assert slots == [t("09:00:00"), t("09:30:00")]

    def test_booked_start_times_are_skipped(self):
        """Booked starts disappear but the cursor keeps its uniform step."""
        booked = {t("09:30:00"), t("10:30:00")}

        slots = generate_slots(t("09:00:00"), t("11:00:00"), 30, booked)

        assert slots == [t("09:00:00"), t("10:00:00")]

    def test_booking_off_the_grid_blocks_nothing(self):
        """Only exact start matches block; a 09:10 booking leaves 09:00 open."""
        slots = generate_slots(t("09:00:00"), t("10:00:00"), 30, {t("09:10:00")})

        assert slots == [t("09:00:00"), t("09:30:00")]

    def test_slots_are_anchored_to_window_start(self):
        """No alignment to clock boundaries."""
        slots = generate_slots(t("09:10:00"), t("10:30:00"), 25, set())

        assert [str(s) for s in slots] == ["09:10:00", "09:35:00", "10:00:00"]

    def test_carry_into_next_hour(self):
        """Durations longer than an hour carry minutes into hours."""
        slots = generate_slots(t("08:45:00"), t("12:00:00"), 90, set())

        assert [str(s) for s in slots] == ["08:45:00", "10:15:00"]

    def test_window_reaching_end_of_day(self):
        """A window closing at 23:59 never produces times past midnight."""
        slots = generate_slots(t("23:00:00"), t("23:59:00"), 30, set())

        assert slots == [t("23:00:00")]

    def test_seconds_in_window_bounds_are_ignored(self):
        """Bounds compare as hour/minute; slots always have zero seconds."""
        slots = generate_slots(t("09:00:30"), t("10:00:15"), 30, set())

        assert slots == [t("09:00:00"), t("09:30:00")]

    @pytest.mark.parametrize("start,end", [("17:00:00", "09:00:00"), ("09:00:00", "09:00:00")])
    def test_empty_or_inverted_window(self, start, end):
        """start >= end yields no slots."""
        assert generate_slots(t(start), t(end), 15, set()) == []

    def test_duration_longer_than_window(self):
        assert generate_slots(t("09:00:00"), t("09:30:00"), 60, set()) == []

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(InvalidDurationError):
            generate_slots(t("09:00:00"), t("17:00:00"), duration, set())

    def test_slots_stay_inside_window_and_ascend(self):
        """Every slot fits the window and spacing between candidates is uniform."""
        start, end, duration = t("08:05:00"), t("18:40:00"), 35

        slots = generate_slots(start, end, duration, set())

        for slot in slots:
            assert start.total_minutes() <= slot.total_minutes()
            assert slot.total_minutes() + duration <= end.total_minutes()
        gaps = {b.total_minutes() - a.total_minutes() for a, b in zip(slots, slots[1:])}
        assert gaps == {duration}

    def test_same_input_same_output(self):
        booked = {t("10:00:00")}
        first = generate_slots(t("09:00:00"), t("12:00:00"), 20, booked)
        second = generate_slots(t("09:00:00"), t("12:00:00"), 20, booked)

        assert first == second


class TestGenerateSlotsForWindows:
    """Tests for running the generator across several windows."""

    def test_split_day_concatenates_in_window_order(self):
        """A lunch break split produces morning slots followed by afternoon slots."""
        windows = [
            AvailabilityWindow(day_of_week=2, start_time=t("09:00"), end_time=t("10:00")),
            AvailabilityWindow(day_of_week=2, start_time=t("13:00"), end_time=t("14:00")),
        ]

        slots = generate_slots_for_windows(windows, 30, {t("13:30")})

        assert [str(s) for s in slots] == ["09:00:00", "09:30:00", "13:00:00"]

    def test_no_windows(self):
        assert generate_slots_for_windows([], 30) == []
