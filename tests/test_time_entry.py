"""Tests for entry creation, updates and timers."""
import pendulum
import pytest

from timeledger.errors import InvalidRangeError, TimeEntryError
from timeledger.service.time_entry import (
    create_time_entry,
    default_start_time,
    find_running_time_entry,
    format_elapsed,
    start_timer,
    stop_timer,
    update_time_entry,
)

START = pendulum.datetime(2024, 1, 15, 9, tz="UTC")


class TestCreateAndUpdate:
    """Test suite for create_time_entry and update_time_entry."""

    def test_create_defaults_user_to_actor(self):
        """A new entry belongs to whoever created it."""
        time_entry = create_time_entry({"note": "x"}, "u-1", START)
        assert time_entry["user_id"] == "u-1"
        assert time_entry["history"] == []
        assert time_entry["created"] == START

    def test_update_sets_updated(self, make_time_entry, resolver):
        """Updating stamps the time of the change."""
        time_entry = make_time_entry()
        now = START.add(days=1)
        updated = update_time_entry(time_entry, {"note": "n"}, "u-1", now, resolver, "UTC")
        assert updated["updated"] == now
        assert updated["note"] == "n"
        assert time_entry["note"] is None


class TestTimer:
    """Test suite for starting and stopping timers."""

    def test_start_and_stop(self, resolver):
        """Stopping sets the end and duration and records them."""
        running = start_timer("u-1", START, project_id="p-1")
        assert running["end_time"] is None
        assert running["duration_seconds"] is None

        stopped = stop_timer(running, "u-1", START.add(minutes=90), resolver, "UTC")
        assert stopped["duration_seconds"] == 5400
        assert [record["field"] for record in stopped["history"]] == [
            "end_time",
            "duration_seconds",
        ]
        assert stopped["history"][0]["old_value_display"] == "None"

    def test_stop_finished_entry(self, make_time_entry, resolver):
        """Only a running timer can be stopped."""
        with pytest.raises(TimeEntryError):
            stop_timer(make_time_entry(), "u-1", START, resolver)

    def test_stop_immediately(self, resolver):
        """A timer stopped at its own start has no duration."""
        with pytest.raises(InvalidRangeError):
            stop_timer(start_timer("u-1", START), "u-1", START, resolver)

    def test_find_running(self, make_time_entry):
        """The running entry is found per user."""
        running = make_time_entry("r", end=None, user_id="u-1")
        time_entries = [make_time_entry("f", user_id="u-1"), running]
        assert find_running_time_entry(time_entries, "u-1")["id"] == "r"
        assert find_running_time_entry(time_entries, "u-2") is None


class TestFormatting:
    """Test suite for timer display helpers."""

    def test_format_elapsed(self):
        """Elapsed time shows hours only once there are some."""
        assert format_elapsed(None) == "00:00"
        assert format_elapsed(75) == "01:15"
        assert format_elapsed(3725) == "01:02:05"

    def test_default_start_time(self):
        """The suggested start is rounded down to the quarter hour."""
        now = pendulum.datetime(2024, 1, 15, 14, 38, tz="UTC")
        assert default_start_time(now) == "2:30 PM"
