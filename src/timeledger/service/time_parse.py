# SPDX-License-Identifier: MIT

import logging
import re
from typing import Optional

from timeledger.errors import InvalidTimeFormatError
from timeledger.model.parsed_time import Incomplete, ParsedTime

logger = logging.getLogger(__name__)

# (H)H:MM with an optional meridiem. Minutes may still be partial while typing.
_COLON_PATTERN = re.compile(r"^(\d{1,2}):(\d{0,2})(?: ?(AM|PM|A|P))?$")
# Bare digits: 9, 930, 0930, with an optional meridiem.
_DIGITS_PATTERN = re.compile(r"^(\d{1,4})(?: ?(AM|PM|A|P))?$")
# Strict display form used when converting a committed value.
_DISPLAY_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?\s*(AM|PM)$")


def parse_time_text(
    raw: str, anchor: Optional[ParsedTime] = None, final: bool = False
) -> ParsedTime | Incomplete:
    """
    Parse free-form 12-hour time text into a ParsedTime.

    Text the user is still typing comes back as Incomplete with the raw text
    untouched: one or two bare digits, a colon form with unfinished minutes,
    or a three digit run starting with zero (the front of '0930'). With
    final=True the text is taken as complete, so a bare '9' means 9:00.

    When no AM/PM is given the meridiem is inferred from the anchor, the
    already known paired time (see infer_meridiem).

    Raises:
        InvalidTimeFormatError: hour outside 1-12, minutes outside 0-59, or
            text that cannot be a time at all
    """
    text = raw.strip().upper()
    if text == "":
        return Incomplete(raw)

    colon_match = _COLON_PATTERN.match(text)
    if colon_match:
        hour_text, minute_text, suffix = colon_match.groups()
        if len(minute_text) < 2:
            if not final:
                return Incomplete(raw)
            raise InvalidTimeFormatError(
                f"Minutes must have two digits, got '{raw.strip()}'"
            )
        return _build_parsed_time(int(hour_text), int(minute_text), suffix, anchor)

    digits_match = _DIGITS_PATTERN.match(text)
    if digits_match:
        digits, suffix = digits_match.groups()
        still_typing = suffix is None and not final
        if len(digits) <= 2:
            if still_typing:
                return Incomplete(raw)
            hour, minute = int(digits), 0
        elif len(digits) == 3:
            if digits[0] == "0" and still_typing:
                return Incomplete(raw)
            hour, minute = int(digits[0]), int(digits[1:])
        else:
            hour, minute = int(digits[:2]), int(digits[2:])
        return _build_parsed_time(hour, minute, suffix, anchor)

    raise InvalidTimeFormatError(
        f'Invalid time format "{raw.strip()}". Please use a format like "9:00 AM" or "2:30 PM"'
    )


def infer_meridiem(hour: int, anchor: Optional[ParsedTime]) -> str:
    """
    Guess AM or PM for a 12-hour hour with no suffix.

    Without an anchor the guess is AM. An afternoon anchor makes it PM. A
    morning anchor keeps it AM when the hour falls within the anchor's hour
    and the two hours after it, otherwise the session has moved into the
    afternoon and it is PM.
    """
    if anchor is None:
        return "AM"
    if anchor["hour"] >= 12:
        return "PM"
    anchor_hour = anchor["hour"] % 12 or 12
    if anchor_hour <= hour <= anchor_hour + 2:
        return "AM"
    return "PM"


def format_12_hour(hour: int, minute: int) -> str:
    """Format a 24-hour hour/minute pair as 'H:MM AM'."""
    meridiem = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {meridiem}"


def to_24_hour(display: str) -> tuple[int, int]:
    """
    Convert a committed 12-hour string ('9:00 AM', '9AM', '2:30 pm') to
    a 24-hour (hour, minute) tuple.
    """
    match = _DISPLAY_PATTERN.match(display.strip().upper())
    if not match:
        raise InvalidTimeFormatError(
            'Invalid time format. Please use format like "9:00 AM", "9 AM", or "2:30 PM"'
        )
    hour_text, minute_text, meridiem = match.groups()
    hour = int(hour_text)
    minute = int(minute_text) if minute_text else 0
    if hour < 1 or hour > 12:
        raise InvalidTimeFormatError("Hours must be between 1 and 12")
    if minute > 59:
        raise InvalidTimeFormatError("Minutes must be between 0 and 59")
    return (_hour_to_24(hour, meridiem), minute)


def mask_time_input(raw: str) -> str:
    """
    Clean up text as it is typed into a time field.

    Only digits, colon, space and the letters A, M, P survive, upper-cased.
    Colon text is already structured and only has its spacing normalised.
    Once an A or P shows up, three or four digits get a colon and a full
    'AM'/'PM'. Without one at most four digits are kept.
    """
    if not raw:
        return ""

    cleaned = re.sub(r"[^0-9:AMP\s]", "", raw, flags=re.IGNORECASE).upper()

    if ":" in cleaned:
        cleaned = re.sub(r"\s+", " ", cleaned).lstrip()
    elif "A" in cleaned or "P" in cleaned:
        numbers = re.sub(r"[AMP\s]", "", cleaned)
        meridiem = "PM" if "P" in cleaned else "AM"
        if len(numbers) == 4:
            cleaned = f"{numbers[:2]}:{numbers[2:]} {meridiem}"
        elif len(numbers) == 3:
            cleaned = f"{numbers[:1]}:{numbers[1:]} {meridiem}"
        elif len(numbers) >= 1:
            cleaned = f"{numbers} {meridiem}"
        else:
            cleaned = numbers
    else:
        cleaned = re.sub(r"\D", "", cleaned)[:4]

    return cleaned[:8]


def _build_parsed_time(
    hour: int, minute: int, suffix: Optional[str], anchor: Optional[ParsedTime]
) -> ParsedTime:
    if hour < 1 or hour > 12:
        raise InvalidTimeFormatError(f"Hours must be between 1 and 12, got {hour}")
    if minute > 59:
        raise InvalidTimeFormatError(f"Minutes must be between 0 and 59, got {minute}")

    if suffix is None:
        meridiem = infer_meridiem(hour, anchor)
        logger.debug(
            "inferred %s for %d:%02d (anchor %s)",
            meridiem,
            hour,
            minute,
            anchor["display"] if anchor is not None else None,
        )
    else:
        meridiem = "PM" if suffix.startswith("P") else "AM"

    return {
        "display": f"{hour}:{minute:02d} {meridiem}",
        "hour": _hour_to_24(hour, meridiem),
        "minute": minute,
    }


def _hour_to_24(hour: int, meridiem: str) -> int:
    if meridiem == "PM" and hour != 12:
        return hour + 12
    if meridiem == "AM" and hour == 12:
        return 0
    return hour
