# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from timeledger.model.change_record import ChangeRecord
from timeledger.model.entity_type import ReferenceKind
from timeledger.model.time_entry import TimeEntry
from timeledger.service.change_audit import FIELD_LABELS
from timeledger.service.reference import NONE_DISPLAY, DisplayNameResolver
from timeledger.time import (
    date_to_str,
    datetime_to_display_local_datetime_str,
    datetime_to_display_time_str,
    datetime_to_display_time_str_optional,
    duration_seconds_to_hours_str,
)
from timeledger.view.views.header import header

SHORT_ID_LENGTH = 8

DEFAULT_COLUMNS = [
    "id",
    "date",
    "start",
    "end",
    "duration",
    "project",
    "area_of_focus",
    "cost_code",
    "note",
]


def time_entries_report(
    actor: Optional[str],
    report_name: str,
    time_entries: list[TimeEntry],
    resolver: DisplayNameResolver,
    columns: list[str] = DEFAULT_COLUMNS,
) -> None:
    header(actor, report_name)

    time_entries_table = Table(box=box.SIMPLE)
    for column in columns:
        time_entries_table.add_column(column)

    total_seconds = 0
    for time_entry in time_entries:
        row = []
        # Running timers have no end yet
        is_open = time_entry["end_time"] is None
        for column in columns:
            column_value = __column_value(time_entry, column, resolver)
            if is_open and column_value != "":
                column_value = f"[underline]{column_value}[/underline]"
            row.append(column_value)
        time_entries_table.add_row(*row)
        total_seconds += time_entry["duration_seconds"] or 0

    if "duration" in columns:
        footer_row = [
            duration_seconds_to_hours_str(total_seconds) if column == "duration" else ""
            for column in columns
        ]
        time_entries_table.add_row(*footer_row, style="bold")

    console = Console()
    console.print(time_entries_table)


def single_time_entry_report(
    actor: Optional[str],
    time_entry: TimeEntry,
    resolver: DisplayNameResolver,
    title: str = "single time entry",
) -> None:
    header(actor, title)

    time_entry_table = Table(box=box.SIMPLE)
    time_entry_table.add_column("property")
    time_entry_table.add_column("value")

    time_entry_table.add_row("id", time_entry["id"])
    time_entry_table.add_row("date", date_to_str(time_entry["date"]))
    time_entry_table.add_row(
        "start", datetime_to_display_time_str(time_entry["start_time"])
    )
    time_entry_table.add_row(
        "end", datetime_to_display_time_str_optional(time_entry["end_time"])
    )
    time_entry_table.add_row("duration", __column_value(time_entry, "duration", resolver))
    for column in ("project", "area_of_focus", "cost_code", "user"):
        time_entry_table.add_row(column, __column_value(time_entry, column, resolver))
    time_entry_table.add_row("note", time_entry["note"])
    time_entry_table.add_row("changes", str(len(time_entry["history"])))
    time_entry_table.add_row(
        "created", datetime_to_display_local_datetime_str(time_entry["created"])
    )
    time_entry_table.add_row(
        "updated", datetime_to_display_local_datetime_str(time_entry["updated"])
    )

    console = Console()
    console.print(time_entry_table)


def history_report(
    actor: Optional[str],
    time_entry: TimeEntry,
    resolver: DisplayNameResolver,
) -> None:
    header(actor, f"history of {__short_id(time_entry)}")

    history_table = Table(box=box.SIMPLE)
    for column in ("when", "who", "field", "from", "to"):
        history_table.add_column(column)

    for record in time_entry["history"]:
        history_table.add_row(*__history_row(record, resolver))

    console = Console()
    if len(time_entry["history"]) == 0:
        console.print("no changes recorded")
        return
    console.print(history_table)


def __history_row(record: ChangeRecord, resolver: DisplayNameResolver) -> list[str]:
    who = resolver.resolve_display_name(ReferenceKind.USER, record["changed_by"])
    if who == NONE_DISPLAY:
        who = record["changed_by"]
    return [
        datetime_to_display_local_datetime_str(record["changed_at"]),
        who,
        FIELD_LABELS.get(record["field"], record["field"]),
        record["old_value_display"],
        record["new_value_display"],
    ]


def __column_value(
    time_entry: TimeEntry, column: str, resolver: DisplayNameResolver
) -> str:
    if column == "id":
        return __short_id(time_entry)
    if column == "date":
        return date_to_str(time_entry["date"])
    if column == "start":
        return datetime_to_display_time_str(time_entry["start_time"])
    if column == "end":
        return datetime_to_display_time_str_optional(time_entry["end_time"]) or ""
    if column == "duration":
        if time_entry["duration_seconds"] is None:
            return ""
        return duration_seconds_to_hours_str(time_entry["duration_seconds"])
    if column == "project":
        return __name(resolver, ReferenceKind.PROJECT, time_entry["project_id"])
    if column == "area_of_focus":
        return __name(
            resolver, ReferenceKind.AREA_OF_FOCUS, time_entry["area_of_focus_id"]
        )
    if column == "cost_code":
        return __name(resolver, ReferenceKind.COST_CODE, time_entry["cost_code"])
    if column == "user":
        return __name(resolver, ReferenceKind.USER, time_entry["user_id"])
    if column == "note":
        return time_entry["note"] or ""
    return ""


def __name(resolver: DisplayNameResolver, kind: str, id: Optional[str]) -> str:
    name = resolver.resolve_display_name(kind, id)
    if name == NONE_DISPLAY:
        return id or ""
    return name


def __short_id(time_entry: TimeEntry) -> str:
    return (time_entry["id"] or "")[:SHORT_ID_LENGTH]
