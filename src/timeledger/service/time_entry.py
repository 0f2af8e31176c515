# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

import pendulum

from timeledger.errors import InvalidRangeError, TimeEntryError
from timeledger.model.time_entry import TimeEntry, TimeEntryDelta
from timeledger.service.change_audit import append_history, diff_time_entry
from timeledger.service.reference import DisplayNameResolver
from timeledger.service.time_parse import format_12_hour
from timeledger.template.time_entry import get_time_entry_template


def create_time_entry(
    delta: TimeEntryDelta, actor: str, now: Optional[pendulum.DateTime] = None
) -> TimeEntry:
    """Build a new entry from a committed delta. It starts with no history."""
    time_entry = get_time_entry_template(now)
    time_entry.update(delta)
    if time_entry["user_id"] is None:
        time_entry["user_id"] = actor
    return time_entry


def update_time_entry(
    previous: TimeEntry,
    delta: TimeEntryDelta,
    actor: str,
    now: pendulum.DateTime,
    resolver: DisplayNameResolver,
    tz: str = "local",
) -> TimeEntry:
    """
    Apply a committed delta to a stored entry and append the audit records
    for every field whose displayed value changed. previous is left as is;
    the returned entry is what the store should write.
    """
    records = diff_time_entry(previous, delta, actor, now, resolver, tz)
    time_entry = deepcopy(previous)
    time_entry.update(delta)
    time_entry["history"] = append_history(previous, records)
    time_entry["updated"] = now
    return time_entry


def start_timer(
    actor: str,
    now: pendulum.DateTime,
    project_id: Optional[str] = None,
    area_of_focus_id: Optional[str] = None,
    cost_code: Optional[str] = None,
    note: Optional[str] = None,
) -> TimeEntry:
    """A running entry: started now, with no end or duration yet."""
    time_entry = get_time_entry_template(now)
    time_entry["user_id"] = actor
    time_entry["project_id"] = project_id
    time_entry["area_of_focus_id"] = area_of_focus_id
    time_entry["cost_code"] = cost_code
    time_entry["note"] = note
    return time_entry


def stop_timer(
    time_entry: TimeEntry,
    actor: str,
    now: pendulum.DateTime,
    resolver: DisplayNameResolver,
    tz: str = "local",
) -> TimeEntry:
    if time_entry["end_time"] is not None:
        raise TimeEntryError("Timer is not running for this entry")
    duration_seconds = int((now - time_entry["start_time"]).total_seconds())
    if duration_seconds <= 0:
        raise InvalidRangeError()
    return update_time_entry(
        time_entry,
        {"end_time": now, "duration_seconds": duration_seconds},
        actor,
        now,
        resolver,
        tz,
    )


def find_running_time_entry(
    time_entries: list[TimeEntry], user_id: str
) -> Optional[TimeEntry]:
    for time_entry in time_entries:
        if time_entry["end_time"] is None and time_entry["user_id"] == user_id:
            return time_entry
    return None


def default_start_time(now: pendulum.DateTime) -> str:
    """Now, rounded down to the quarter hour, as 12-hour text."""
    return format_12_hour(now.hour, (now.minute // 15) * 15)


def format_elapsed(seconds: Optional[int]) -> str:
    """MM:SS, or HH:MM:SS once an hour has passed."""
    if not seconds:
        return "00:00"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
