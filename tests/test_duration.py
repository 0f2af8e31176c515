"""Tests for reconciling start, end and duration."""
import pendulum
import pytest

from timeledger.errors import InvalidRangeError, MissingRequiredFieldError
from timeledger.service.duration import (
    duration_hours_between,
    end_display_from_duration,
    format_duration_hours,
    reconcile,
    reconcile_from_end,
    start_display_from_duration,
)
from timeledger.service.time_parse import parse_time_text

DAY = pendulum.date(2024, 1, 15)


def _time(text):
    return parse_time_text(text, final=True)


class TestReconcile:
    """Test suite for reconcile."""

    @pytest.mark.parametrize(
        "start, end",
        [("9:00 AM", "5:00 PM"), ("6:15 AM", "6:45 AM"), ("12:00 PM", "11:59 PM")],
    )
    def test_round_trip(self, start, end):
        """start + duration lands back on the end that was entered."""
        times = reconcile(DAY, _time(start), _time(end), tz="UTC")
        hours = times["duration_seconds"] / 3600
        assert end_display_from_duration(_time(start), hours) == end
        assert times["start_time"].add(seconds=times["duration_seconds"]) == times["end_time"]

    def test_end_mode(self):
        """Start and end on the date give the seconds between them."""
        times = reconcile(DAY, _time("9:00 AM"), _time("5:00 PM"), tz="UTC")
        assert times["start_time"] == pendulum.datetime(2024, 1, 15, 9, tz="UTC")
        assert times["duration_seconds"] == 28800

    def test_midnight_crossing(self):
        """An end before the start is on the next day."""
        times = reconcile(DAY, _time("11:00 PM"), _time("1:00 AM"), tz="UTC")
        assert times["duration_seconds"] == 7200
        assert times["end_time"] == pendulum.datetime(2024, 1, 16, 1, tz="UTC")

    def test_equal_start_and_end_is_a_full_day(self):
        """The same clock time twice means 24 hours."""
        times = reconcile(DAY, _time("9:00 AM"), _time("9:00 AM"), tz="UTC")
        assert times["duration_seconds"] == 86400

    def test_duration_mode(self):
        """A duration derives the end."""
        times = reconcile(DAY, _time("9:00 AM"), None, 2.5, tz="UTC")
        assert times["end_time"] == pendulum.datetime(2024, 1, 15, 11, 30, tz="UTC")
        assert times["duration_seconds"] == 9000

    def test_duration_wins_over_end(self):
        """When both are given the duration decides."""
        times = reconcile(DAY, _time("9:00 AM"), _time("5:00 PM"), 1, tz="UTC")
        assert times["end_time"].hour == 10

    def test_non_positive_duration(self):
        """Zero or negative hours are rejected."""
        with pytest.raises(InvalidRangeError) as excinfo:
            reconcile(DAY, _time("9:00 AM"), None, 0, tz="UTC")
        assert str(excinfo.value) == "End time must be after start time"

    @pytest.mark.parametrize("hours", [float("nan"), float("inf")])
    def test_non_finite_duration(self, hours):
        """A duration that is not a finite number is rejected."""
        with pytest.raises(InvalidRangeError):
            reconcile(DAY, _time("9:00 AM"), None, hours, tz="UTC")
        with pytest.raises(InvalidRangeError):
            reconcile_from_end(DAY, _time("5:00 PM"), hours, tz="UTC")

    def test_missing_start(self):
        """Start is always required."""
        with pytest.raises(MissingRequiredFieldError) as excinfo:
            reconcile(DAY, None, _time("5:00 PM"))
        assert excinfo.value.fields == ["start_time"]

    def test_missing_end_and_duration(self):
        """One of end and duration is required."""
        with pytest.raises(MissingRequiredFieldError):
            reconcile(DAY, _time("9:00 AM"), tz="UTC")


class TestReconcileFromEnd:
    """Test suite for reconcile_from_end."""

    def test_start_derived(self):
        """End minus duration gives the start."""
        times = reconcile_from_end(DAY, _time("5:00 PM"), 3, tz="UTC")
        assert times["start_time"] == pendulum.datetime(2024, 1, 15, 14, tz="UTC")

    def test_start_on_previous_day(self):
        """A long duration puts the start before the date."""
        times = reconcile_from_end(DAY, _time("1:00 AM"), 2, tz="UTC")
        assert times["start_time"] == pendulum.datetime(2024, 1, 14, 23, tz="UTC")


class TestClockHelpers:
    """Test suite for the display helpers used while typing."""

    def test_end_display_wraps(self):
        """Clock arithmetic wraps past midnight."""
        assert end_display_from_duration(_time("11:00 PM"), 2) == "1:00 AM"

    def test_start_display(self):
        """Going back from the end fills the start."""
        assert start_display_from_duration(_time("5:00 PM"), 8) == "9:00 AM"

    def test_hours_between(self):
        """Hours between clock times cross midnight."""
        assert duration_hours_between(_time("11:00 PM"), _time("1:00 AM")) == 2
        assert duration_hours_between(_time("9:00 AM"), _time("10:15 AM")) == 1.25

    def test_format_duration_hours(self):
        """Trailing zeros are dropped."""
        assert format_duration_hours(8) == "8"
        assert format_duration_hours(2.5) == "2.5"
        assert format_duration_hours(1.25) == "1.25"
