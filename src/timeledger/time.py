# SPDX-License-Identifier: MIT

from typing import Optional, cast

import pendulum


def now_local() -> pendulum.DateTime:
    return pendulum.now("local")


def today_local() -> pendulum.Date:
    return pendulum.today("local").date()


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_iso_str(datetime)


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    return cast(pendulum.DateTime, pendulum.parse(datetime))


def datetime_from_str_optional(datetime: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime is None:
        return None
    return datetime_from_str(datetime)


def date_to_str(date: pendulum.Date) -> str:
    return date.to_date_string()


def date_from_str(date: str) -> pendulum.Date:
    """Parse a 'YYYY-MM-DD' string to a civil date."""
    return cast(pendulum.DateTime, pendulum.parse(date)).date()


def datetime_to_display_time_str(
    datetime: pendulum.DateTime, tz: str = "local"
) -> str:
    """Format the time of day in 12-hour form, e.g. '9:05 PM'."""
    return datetime.in_tz(tz).format("h:mm A")


def datetime_to_display_time_str_optional(
    datetime: Optional[pendulum.DateTime], tz: str = "local"
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_display_time_str(datetime, tz)


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM-DD ddd h:mm A")


def duration_seconds_to_hours_str(duration_seconds: int) -> str:
    return f"{duration_seconds / 3600:.2f}h"
