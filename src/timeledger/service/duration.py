# SPDX-License-Identifier: MIT

import logging
import math
from typing import Optional

import pendulum

from timeledger.errors import InvalidRangeError, MissingRequiredFieldError
from timeledger.model.parsed_time import ParsedTime
from timeledger.model.time_entry import ReconciledTimes
from timeledger.service.time_parse import format_12_hour

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600

# Reference day for clock-only arithmetic while the user is typing.
_CLOCK_DATE = pendulum.date(2000, 1, 1)


def reconcile(
    date: pendulum.Date,
    start: Optional[ParsedTime],
    end: Optional[ParsedTime] = None,
    duration_hours: Optional[float] = None,
    tz: str = "local",
) -> ReconciledTimes:
    """
    Fill in whichever of end time and duration is missing.

    With a duration the duration is authoritative and the end is derived.
    Otherwise the end is authoritative; an end at or before the start is
    taken to be on the next day. That is the only rollover assumed, spans
    of more than a day are never inferred.

    Raises:
        MissingRequiredFieldError: no start, or neither end nor duration
        InvalidRangeError: the resulting duration is not positive
    """
    if start is None:
        raise MissingRequiredFieldError(["start_time"])

    start_time = at_clock_time(date, start, tz)

    if duration_hours is not None:
        duration_seconds = _duration_seconds(duration_hours)
        return {
            "start_time": start_time,
            "end_time": start_time.add(seconds=duration_seconds),
            "duration_seconds": duration_seconds,
        }

    if end is None:
        raise MissingRequiredFieldError(["end_time", "duration"])

    end_time = at_clock_time(date, end, tz)
    if end_time <= start_time:
        logger.debug(
            "end %s is not after start %s, rolling over midnight",
            end["display"],
            start["display"],
        )
        end_time = end_time.add(days=1)

    duration_seconds = int((end_time - start_time).total_seconds())
    if duration_seconds <= 0:
        raise InvalidRangeError()

    return {
        "start_time": start_time,
        "end_time": end_time,
        "duration_seconds": duration_seconds,
    }


def reconcile_from_end(
    date: pendulum.Date,
    end: Optional[ParsedTime],
    duration_hours: Optional[float],
    tz: str = "local",
) -> ReconciledTimes:
    """
    Derive the start from an end time and a duration ('End + Duration').

    The end sits on the given date; a start that lands on the day before is
    kept there rather than wrapped forward.
    """
    if end is None:
        raise MissingRequiredFieldError(["end_time"])
    if duration_hours is None:
        raise MissingRequiredFieldError(["duration"])

    duration_seconds = _duration_seconds(duration_hours)
    end_time = at_clock_time(date, end, tz)
    return {
        "start_time": end_time.subtract(seconds=duration_seconds),
        "end_time": end_time,
        "duration_seconds": duration_seconds,
    }


def at_clock_time(
    date: pendulum.Date, time: ParsedTime, tz: str = "local"
) -> pendulum.DateTime:
    return pendulum.datetime(
        date.year, date.month, date.day, time["hour"], time["minute"], tz=tz
    )


def end_display_from_duration(start: ParsedTime, duration_hours: float) -> str:
    """Clock time of start + duration, for filling the end field."""
    end_time = at_clock_time(_CLOCK_DATE, start, "UTC").add(
        seconds=round(duration_hours * SECONDS_PER_HOUR)
    )
    return format_12_hour(end_time.hour, end_time.minute)


def start_display_from_duration(end: ParsedTime, duration_hours: float) -> str:
    """Clock time of end - duration, for filling the start field."""
    start_time = at_clock_time(_CLOCK_DATE, end, "UTC").subtract(
        seconds=round(duration_hours * SECONDS_PER_HOUR)
    )
    return format_12_hour(start_time.hour, start_time.minute)


def duration_hours_between(start: ParsedTime, end: ParsedTime) -> float:
    """Hours from start to end on the clock, crossing midnight when needed."""
    start_minutes = start["hour"] * 60 + start["minute"]
    end_minutes = end["hour"] * 60 + end["minute"]
    if end_minutes <= start_minutes:
        end_minutes += 24 * 60
    return (end_minutes - start_minutes) / 60


def format_duration_hours(duration_hours: float) -> str:
    """Render hours for the duration field: '8', '2.5', '1.25'."""
    return f"{duration_hours:.2f}".rstrip("0").rstrip(".")


def _duration_seconds(duration_hours: float) -> int:
    if not math.isfinite(duration_hours):
        raise InvalidRangeError(f"Duration must be a number of hours, got {duration_hours}")
    duration_seconds = round(duration_hours * SECONDS_PER_HOUR)
    if duration_seconds <= 0:
        raise InvalidRangeError()
    return duration_seconds
