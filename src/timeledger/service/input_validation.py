# SPDX-License-Identifier: MIT

import re
from typing import Optional

_SUFFIX = r"(?:A|AM|P|PM)"
_COLON_PATTERN = re.compile(r"^(\d{1,2}):(\d{0,2})(?:\s*(" + _SUFFIX + r"))?$")
_SUFFIXED_DIGITS_PATTERN = re.compile(r"^(\d{1,4})\s*" + _SUFFIX + r"$")

INVALID_TIME_MESSAGE = "Enter a time like 9:00 AM"

# Validation state is tracked per field so the add row and the edit row
# never overwrite each other's messages.
FIELD_LABELS = {
    "new_start_time": "Start time",
    "new_end_time": "End time",
    "edit_start_time": "Start time",
    "edit_end_time": "End time",
}


def validate_time_input(raw: str) -> str:
    """
    Check time text as it is being typed. Returns '' when the text is valid
    so far, otherwise INVALID_TIME_MESSAGE. Never raises.

    Partial input is let through (a lone digit, '9:', '9:3', '930', '9 P')
    so typing is never blocked; the structure is checked again on commit.
    """
    if raw is None:
        return ""
    text = raw.strip().upper()
    if text == "":
        return ""

    if re.fullmatch(r"\d", text):
        return ""
    if re.fullmatch(r"\d{2}", text):
        return "" if _is_hour(text) else INVALID_TIME_MESSAGE
    if re.fullmatch(r"\d{3}", text):
        return ""
    if re.fullmatch(r"\d{4}", text):
        return "" if _is_hour(text[:2]) else INVALID_TIME_MESSAGE

    colon_match = _COLON_PATTERN.match(text)
    if colon_match:
        hour_text, minute_text, suffix = colon_match.groups()
        if not _is_hour(hour_text):
            return INVALID_TIME_MESSAGE
        if len(minute_text) == 2:
            return "" if int(minute_text) <= 59 else INVALID_TIME_MESSAGE
        if suffix is not None:
            return INVALID_TIME_MESSAGE
        if len(minute_text) == 1 and int(minute_text) > 5:
            return INVALID_TIME_MESSAGE
        return ""

    suffixed_match = _SUFFIXED_DIGITS_PATTERN.match(text)
    if suffixed_match:
        return "" if _is_valid_digit_run(suffixed_match.group(1)) else INVALID_TIME_MESSAGE

    return INVALID_TIME_MESSAGE


class ValidationErrors:
    """Per-field error messages for one editing view."""

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    def validate(self, field: str, raw: str) -> str:
        message = validate_time_input(raw)
        if message:
            message = f"{FIELD_LABELS.get(field, 'Time')}: {message}"
            self._errors[field] = message
        else:
            self._errors.pop(field, None)
        return message

    def get(self, field: str) -> str:
        return self._errors.get(field, "")

    def has_errors(self, fields: Optional[list[str]] = None) -> bool:
        if fields is None:
            return len(self._errors) > 0
        return any(field in self._errors for field in fields)

    def clear(self, fields: Optional[list[str]] = None) -> None:
        if fields is None:
            self._errors.clear()
            return
        for field in fields:
            self._errors.pop(field, None)

    def as_dict(self) -> dict[str, str]:
        return dict(self._errors)


def _is_hour(text: str) -> bool:
    return 1 <= int(text) <= 12


def _is_valid_digit_run(digits: str) -> bool:
    if len(digits) <= 2:
        return _is_hour(digits)
    if len(digits) == 3:
        return _is_hour(digits[0]) and int(digits[1:]) <= 59
    return _is_hour(digits[:2]) and int(digits[2:]) <= 59
