"""Tests for keystroke-level time validation."""
import pytest

from timeledger.service.input_validation import ValidationErrors, validate_time_input


class TestValidateTimeInput:
    """Test suite for validate_time_input."""

    @pytest.mark.parametrize(
        "raw", ["9", "9:", "9:3", "9:30", "9:30 P", "9:30 PM"]
    )
    def test_prefixes_of_valid_time_pass(self, raw):
        """Every prefix of '9:30 PM' is valid so far."""
        assert validate_time_input(raw) == ""

    @pytest.mark.parametrize(
        "raw", ["", "12", "930", "0930", "1230", "12:45", "2p", "930 PM", "11:59 AM"]
    )
    def test_accepts(self, raw):
        """Complete and partial well-formed input is accepted."""
        assert validate_time_input(raw) == ""

    @pytest.mark.parametrize(
        "raw", ["13", "1300", "13:00", "9:60", "9:7", "9:3 PM", "1300 PM", "abc", "9:30 XM"]
    )
    def test_rejects(self, raw):
        """Input that can never become a valid time is flagged."""
        assert validate_time_input(raw) == "Enter a time like 9:00 AM"

    def test_message_is_field_agnostic(self):
        """The bare message does not name a field."""
        assert validate_time_input("25") == "Enter a time like 9:00 AM"

    def test_none_is_valid(self):
        """A field that was never touched has nothing to report."""
        assert validate_time_input(None) == ""


class TestValidationErrors:
    """Test suite for per-field validation state."""

    def test_fields_are_independent(self):
        """An error on the add row does not show on the edit row."""
        errors = ValidationErrors()
        errors.validate("new_start_time", "13")
        assert errors.get("new_start_time") == "Start time: Enter a time like 9:00 AM"
        assert errors.get("edit_start_time") == ""
        assert errors.has_errors(["new_start_time"])
        assert not errors.has_errors(["edit_start_time", "edit_end_time"])

    def test_message_is_labelled(self):
        """Stored messages are prefixed with the field label."""
        errors = ValidationErrors()
        assert errors.validate("edit_end_time", "25") == "End time: Enter a time like 9:00 AM"
        assert errors.get("edit_end_time") == "End time: Enter a time like 9:00 AM"

    def test_valid_input_clears_error(self):
        """Fixing the text removes the message."""
        errors = ValidationErrors()
        errors.validate("new_end_time", "13")
        errors.validate("new_end_time", "1")
        assert not errors.has_errors()
        assert errors.as_dict() == {}

    def test_clear_selected_fields(self):
        """Clearing some fields keeps the rest."""
        errors = ValidationErrors()
        errors.validate("new_start_time", "99")
        errors.validate("edit_start_time", "99")
        errors.clear(["new_start_time"])
        assert errors.as_dict() == {"edit_start_time": "Start time: Enter a time like 9:00 AM"}
