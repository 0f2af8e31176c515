"""Tests for free-form time parsing and AM/PM inference."""
import pytest

from timeledger.errors import InvalidTimeFormatError
from timeledger.model.parsed_time import Incomplete
from timeledger.service.time_parse import (
    format_12_hour,
    infer_meridiem,
    mask_time_input,
    parse_time_text,
    to_24_hour,
)


class TestParseTimeText:
    """Test suite for parse_time_text."""

    def test_explicit_pm(self):
        """A suffix decides the meridiem without looking at the anchor."""
        parsed = parse_time_text("2:30 PM")
        assert parsed == {"display": "2:30 PM", "hour": 14, "minute": 30}

    def test_short_suffix(self):
        """'2p' is 2:00 PM."""
        assert parse_time_text("2p")["display"] == "2:00 PM"

    def test_noon_and_midnight(self):
        """12 PM is hour 12 and 12 AM is hour 0."""
        assert parse_time_text("12:00 PM")["hour"] == 12
        assert parse_time_text("12:00 AM")["hour"] == 0

    def test_no_anchor_defaults_to_am(self):
        """Without a paired time the guess is AM."""
        assert parse_time_text("9:00")["display"] == "9:00 AM"

    def test_three_and_four_digits(self):
        """Bare digit runs are split into hours and minutes."""
        assert parse_time_text("930")["display"] == "9:30 AM"
        assert parse_time_text("1130")["display"] == "11:30 AM"

    def test_end_within_window_stays_am(self):
        """An end two hours or less after a morning start is AM."""
        anchor = parse_time_text("8:00 AM")
        assert parse_time_text("900", anchor)["display"] == "9:00 AM"

    def test_end_outside_window_is_pm(self):
        """An end earlier than a morning start is taken as the afternoon."""
        anchor = parse_time_text("8:00 AM")
        assert parse_time_text("200", anchor)["display"] == "2:00 PM"

    def test_afternoon_anchor_makes_pm(self):
        """Anything paired with an afternoon time is PM."""
        anchor = parse_time_text("1:00 PM")
        assert parse_time_text("3:00", anchor)["display"] == "3:00 PM"

    @pytest.mark.parametrize("raw", ["", "9", "12", "9:", "9:3", "093"])
    def test_partial_text_is_incomplete(self, raw):
        """Text still being typed comes back untouched."""
        parsed = parse_time_text(raw)
        assert isinstance(parsed, Incomplete)
        assert parsed.raw == raw

    def test_final_bare_hour(self):
        """On commit a bare hour means on the hour."""
        assert parse_time_text("9", final=True)["display"] == "9:00 AM"

    def test_final_partial_minutes_raise(self):
        """On commit unfinished minutes are an error."""
        with pytest.raises(InvalidTimeFormatError):
            parse_time_text("9:3", final=True)

    @pytest.mark.parametrize("raw", ["13:00", "0:30 PM", "9:75", "1375", "noon", "9:00 XM"])
    def test_invalid_text_raises(self, raw):
        """Out-of-range or unparseable text is rejected."""
        with pytest.raises(InvalidTimeFormatError):
            parse_time_text(raw)


class TestInferMeridiem:
    """Test suite for infer_meridiem."""

    def test_window_edges(self):
        """The window covers the anchor hour and the two after it."""
        anchor = {"display": "8:00 AM", "hour": 8, "minute": 0}
        assert infer_meridiem(8, anchor) == "AM"
        assert infer_meridiem(10, anchor) == "AM"
        assert infer_meridiem(11, anchor) == "PM"
        assert infer_meridiem(7, anchor) == "PM"

    def test_no_anchor(self):
        """No anchor means AM."""
        assert infer_meridiem(5, None) == "AM"


class TestFormatting:
    """Test suite for 12/24-hour helpers and the input mask."""

    def test_format_12_hour(self):
        """24-hour values render as 'H:MM AM'."""
        assert format_12_hour(0, 5) == "12:05 AM"
        assert format_12_hour(13, 0) == "1:00 PM"

    def test_to_24_hour(self):
        """Committed display strings convert back to 24-hour values."""
        assert to_24_hour("9:00 AM") == (9, 0)
        assert to_24_hour("2:30 pm") == (14, 30)
        assert to_24_hour("9AM") == (9, 0)

    def test_to_24_hour_rejects_missing_meridiem(self):
        """The strict form needs AM or PM."""
        with pytest.raises(InvalidTimeFormatError):
            to_24_hour("9:00")

    def test_mask_strips_noise(self):
        """Only time characters survive, upper-cased."""
        assert mask_time_input("9x3y0") == "930"
        assert mask_time_input("9:30 pm") == "9:30 PM"

    def test_mask_expands_suffixed_digits(self):
        """Digits followed by a or p become H:MM AM/PM."""
        assert mask_time_input("930p") == "9:30 PM"
        assert mask_time_input("1130a") == "11:30 AM"

    def test_mask_caps_digit_runs(self):
        """At most four bare digits are kept."""
        assert mask_time_input("123456") == "1234"
