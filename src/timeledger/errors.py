# SPDX-License-Identifier: MIT


class TimeEntryError(Exception):
    """Base class for errors raised while assembling a time entry."""

    pass


class IncompleteInputError(TimeEntryError):
    """Raised when typed text is not yet enough to commit."""

    def __init__(self, field: str, raw: str) -> None:
        super().__init__(f"{field} is not complete yet: '{raw}'")
        self.field = field
        self.raw = raw


class InvalidTimeFormatError(TimeEntryError):
    """Raised when time text can never become a valid 12-hour time."""

    pass


class InvalidRangeError(TimeEntryError):
    """Raised when reconciliation yields a non-positive duration."""

    def __init__(self, message: str = "End time must be after start time") -> None:
        super().__init__(message)


class MissingRequiredFieldError(TimeEntryError):
    """Raised when a commit lacks the minimum required fields."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(fields)}")
        self.fields = fields
