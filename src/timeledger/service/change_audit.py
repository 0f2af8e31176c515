# SPDX-License-Identifier: MIT

from typing import Any, Mapping

import pendulum

from timeledger.model.change_record import ChangeRecord
from timeledger.model.entity_type import ReferenceKind
from timeledger.model.time_entry import TimeEntry
from timeledger.service.reference import NONE_DISPLAY, DisplayNameResolver
from timeledger.time import (
    date_to_str,
    datetime_to_display_time_str,
    duration_seconds_to_hours_str,
)

# Order in which change records are emitted.
TRACKED_FIELDS = [
    "start_time",
    "end_time",
    "duration_seconds",
    "note",
    "date",
    "project_id",
    "area_of_focus_id",
    "cost_code",
    "user_id",
]

REFERENCE_FIELDS = {
    "project_id": ReferenceKind.PROJECT,
    "area_of_focus_id": ReferenceKind.AREA_OF_FOCUS,
    "cost_code": ReferenceKind.COST_CODE,
    "user_id": ReferenceKind.USER,
}

FIELD_LABELS = {
    "start_time": "Start time",
    "end_time": "End time",
    "duration_seconds": "Duration",
    "note": "Note",
    "date": "Date",
    "project_id": "Project",
    "area_of_focus_id": "Area of focus",
    "cost_code": "Cost code",
    "user_id": "User",
}


def diff_time_entry(
    previous: TimeEntry,
    proposed: Mapping[str, Any],
    actor: str,
    now: pendulum.DateTime,
    resolver: DisplayNameResolver,
    tz: str = "local",
) -> list[ChangeRecord]:
    """
    List the field changes between a stored entry and a proposed update.

    Fields are compared by what a person would see, not by the stored value:
    times as 12-hour clock text, durations as hours to two decimals, foreign
    keys as the names they currently resolve to. Fields missing from the
    proposal are unchanged. previous is only read.
    """
    records: list[ChangeRecord] = []
    for field in TRACKED_FIELDS:
        if field not in proposed:
            continue
        old_display = display_value(field, previous.get(field), resolver, tz)
        new_display = display_value(field, proposed[field], resolver, tz)
        if old_display == new_display:
            continue
        records.append(
            {
                "field": field,
                "old_value_display": old_display,
                "new_value_display": new_display,
                "changed_by": actor,
                "changed_at": now,
            }
        )
    return records


def append_history(
    previous: TimeEntry, records: list[ChangeRecord]
) -> list[ChangeRecord]:
    """Return a new history list: the existing records followed by records."""
    return list(previous["history"]) + list(records)


def display_value(
    field: str, value: Any, resolver: DisplayNameResolver, tz: str = "local"
) -> str:
    if field in REFERENCE_FIELDS:
        return resolver.resolve_display_name(REFERENCE_FIELDS[field], value)
    if value is None or value == "":
        return NONE_DISPLAY
    if field in ("start_time", "end_time"):
        return datetime_to_display_time_str(value, tz)
    if field == "duration_seconds":
        return duration_seconds_to_hours_str(value)
    if field == "date":
        return date_to_str(value)
    return str(value)


def describe_change(record: ChangeRecord) -> str:
    """One line of audit text, e.g. 'End time: 5:00 PM -> 1:00 PM'."""
    label = FIELD_LABELS.get(record["field"], record["field"])
    return f"{label}: {record['old_value_display']} -> {record['new_value_display']}"
