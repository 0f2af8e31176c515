# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from timeledger.model.entity_type import ReferenceKind
from timeledger.model.time_entry import TimeEntry
from timeledger.service.reference import NONE_DISPLAY, DisplayNameResolver


def filter_time_entries(
    time_entries: list[TimeEntry],
    resolver: DisplayNameResolver,
    search: Optional[str] = None,
    project_id: Optional[str] = None,
    area_of_focus_id: Optional[str] = None,
    cost_code: Optional[str] = None,
    date_from: Optional[pendulum.Date] = None,
    date_to: Optional[pendulum.Date] = None,
) -> list[TimeEntry]:
    """
    Keep the entries matching every given criterion.

    search is matched case-insensitively against the project, area of focus
    and cost code names and the note. The date range is inclusive and uses
    the date of the start time.
    """
    results: list[TimeEntry] = []
    for time_entry in time_entries:
        if search and not __matches_search(time_entry, resolver, search):
            continue
        if project_id and time_entry["project_id"] != project_id:
            continue
        if area_of_focus_id and time_entry["area_of_focus_id"] != area_of_focus_id:
            continue
        if cost_code and time_entry["cost_code"] != cost_code:
            continue
        start_date = time_entry["start_time"].date()
        if date_from is not None and start_date < date_from:
            continue
        if date_to is not None and start_date > date_to:
            continue
        results.append(time_entry)
    return results


def __matches_search(
    time_entry: TimeEntry, resolver: DisplayNameResolver, search: str
) -> bool:
    search_lower = search.lower()
    names = [
        resolver.resolve_display_name(ReferenceKind.PROJECT, time_entry["project_id"]),
        resolver.resolve_display_name(
            ReferenceKind.AREA_OF_FOCUS, time_entry["area_of_focus_id"]
        ),
        resolver.resolve_display_name(ReferenceKind.COST_CODE, time_entry["cost_code"]),
    ]
    haystack = [name for name in names if name != NONE_DISPLAY]
    if time_entry["note"]:
        haystack.append(time_entry["note"])
    return any(search_lower in value.lower() for value in haystack)
