# SPDX-License-Identifier: MIT

from typing import Annotated, NoReturn, Optional

import pendulum
import typer
from rich.console import Console

from timeledger.errors import (
    MissingRequiredFieldError,
    TimeEntryError,
)
from timeledger.model.entity_type import ReferenceKind
from timeledger.model.parsed_time import Incomplete
from timeledger.model.pending_edit import DurationMode
from timeledger.query.filter import filter_time_entries
from timeledger.repository.configuration import CONFIGURATION_REPO
from timeledger.repository.reference import REFERENCE_REPO
from timeledger.repository.time_entry import TIME_ENTRY_REPO, TimeEntryNotFoundError
from timeledger.service.change_audit import describe_change
from timeledger.service.edit_session import DEFAULT_REQUIRED_FIELDS, EditSession
from timeledger.service.entry_list import EntryList
from timeledger.service.input_validation import validate_time_input
from timeledger.service.time_entry import (
    create_time_entry,
    find_running_time_entry,
    format_elapsed,
    start_timer,
    stop_timer,
    update_time_entry,
)
from timeledger.service.time_parse import mask_time_input, parse_time_text
from timeledger.terminal.custom_typer import AliasedTyperGroup
from timeledger.terminal.parse import parse_date, parse_hours
from timeledger.time import now_local, today_local
from timeledger.view.views import time_entry as time_entry_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

DATE_HELP = "valid inputs: YYYY-MM-DD, today, yesterday, tomorrow, or day offset like 1, -1"
TIME_HELP = "12-hour time: 9, 930, 9:30, 9:30 PM, 2p"


@app.command("add, a", no_args_is_help=True)
def add(
    start: Annotated[str, typer.Option("--start", "-s", help=TIME_HELP)],
    end: Annotated[
        Optional[str], typer.Option("--end", "-e", help=TIME_HELP)
    ] = None,
    duration: Annotated[
        Optional[float],
        typer.Option("--duration", "-d", parser=parse_hours, help="hours, e.g. 2.5"),
    ] = None,
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-dt", parser=parse_date, help=DATE_HELP),
    ] = None,
    project: Annotated[Optional[str], typer.Option("--project", "-p")] = None,
    area: Annotated[Optional[str], typer.Option("--area", "-a")] = None,
    cost_code: Annotated[Optional[str], typer.Option("--cost-code", "-cc")] = None,
    note: Annotated[Optional[str], typer.Option("--note", "-n")] = None,
    actor: Annotated[Optional[str], typer.Option("--actor")] = None,
) -> None:
    """
    add a time entry from a start time and an end time or duration
    """
    acting_user = __actor(actor)

    session = EditSession(date if date is not None else today_local(), kind="new")
    session.set_start_text(start)
    if end is not None:
        session.set_end_text(end)
    if duration is not None:
        session.set_duration_text(str(duration))
    session.note = note
    __set_references(session, project, area, cost_code)

    try:
        delta = session.commit(__required_fields())
    except TimeEntryError as e:
        __fail(e)

    time_entry = create_time_entry(delta, acting_user, now_local())
    id = TIME_ENTRY_REPO.save_new_time_entry(time_entry)

    time_entry_report.single_time_entry_report(
        acting_user, TIME_ENTRY_REPO.get_time_entry(id), REFERENCE_REPO
    )


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: str,
    start: Annotated[
        Optional[str], typer.Option("--start", "-s", help=TIME_HELP)
    ] = None,
    end: Annotated[
        Optional[str], typer.Option("--end", "-e", help=TIME_HELP)
    ] = None,
    duration: Annotated[
        Optional[float],
        typer.Option("--duration", "-d", parser=parse_hours, help="hours, e.g. 2.5"),
    ] = None,
    mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="start: end = start + duration, end: start = end - duration",
        ),
    ] = "start",
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-dt", parser=parse_date, help=DATE_HELP),
    ] = None,
    project: Annotated[Optional[str], typer.Option("--project", "-p")] = None,
    area: Annotated[Optional[str], typer.Option("--area", "-a")] = None,
    cost_code: Annotated[Optional[str], typer.Option("--cost-code", "-cc")] = None,
    note: Annotated[Optional[str], typer.Option("--note", "-n")] = None,
    remove_note: Annotated[bool, typer.Option("--remove-note", "-rn")] = False,
    actor: Annotated[Optional[str], typer.Option("--actor")] = None,
) -> None:
    """
    modify a time entry, recording every visible change in its history
    """
    acting_user = __actor(actor)
    if mode not in ("start", "end"):
        typer.echo(f"Invalid mode: {mode}. Valid options: start, end")
        raise typer.Exit(1)
    duration_mode: DurationMode = "start" if mode == "start" else "end"

    previous = TIME_ENTRY_REPO.get_time_entry(__resolve_id(id))

    session = EditSession.for_entry(previous)
    session.set_duration_mode(duration_mode)
    if date is not None:
        session.date = date
    if start is not None:
        session.set_start_text(start)
    if end is not None:
        session.set_end_text(end)
    if duration is not None:
        session.set_duration_text(str(duration))
    if note is not None:
        session.note = note
    if remove_note:
        session.note = None
    __set_references(session, project, area, cost_code)

    try:
        delta = session.commit(__required_fields())
        updated = update_time_entry(
            previous, delta, acting_user, now_local(), REFERENCE_REPO
        )
    except TimeEntryError as e:
        __fail(e)

    TIME_ENTRY_REPO.replace_time_entry(updated)

    time_entry_report.single_time_entry_report(acting_user, updated, REFERENCE_REPO)
    new_records = updated["history"][len(previous["history"]) :]
    if len(new_records) == 0:
        typer.echo("no visible changes")
    for record in new_records:
        typer.echo(describe_change(record))


@app.command("delete, d", no_args_is_help=True)
def delete(id: str) -> None:
    """
    delete a time entry
    """
    config = CONFIGURATION_REPO.get_config()
    real_id = __resolve_id(id)

    entry_list = EntryList(
        REFERENCE_REPO, config["default_sort_field"], config["default_sort_direction"]
    )
    entry_list.apply_snapshot(TIME_ENTRY_REPO.snapshot())
    entry_list.delete_local(real_id)
    TIME_ENTRY_REPO.delete_time_entry(real_id)
    entry_list.apply_snapshot(TIME_ENTRY_REPO.snapshot())

    typer.echo(f"deleted time entry {real_id}")
    time_entry_report.time_entries_report(
        config["actor"], "time entries", entry_list.entries, REFERENCE_REPO
    )


@app.command("list, ls")
def list_entries(
    sort: Annotated[
        Optional[str],
        typer.Option(
            "--sort",
            help="start_time, duration, project, area_of_focus, cost_code or any field",
        ),
    ] = None,
    ascending: Annotated[
        Optional[bool], typer.Option("--asc/--desc", help="sort direction")
    ] = None,
    search: Annotated[Optional[str], typer.Option("--search", "-q")] = None,
    project: Annotated[Optional[str], typer.Option("--project", "-p")] = None,
    area: Annotated[Optional[str], typer.Option("--area", "-a")] = None,
    cost_code: Annotated[Optional[str], typer.Option("--cost-code", "-cc")] = None,
    date_from: Annotated[
        Optional[pendulum.Date],
        typer.Option("--from", parser=parse_date, help=DATE_HELP),
    ] = None,
    date_to: Annotated[
        Optional[pendulum.Date],
        typer.Option("--to", parser=parse_date, help=DATE_HELP),
    ] = None,
) -> None:
    """
    list time entries
    """
    config = CONFIGURATION_REPO.get_config()
    sort_direction = config["default_sort_direction"]
    if ascending is not None:
        sort_direction = "asc" if ascending else "desc"

    entry_list = EntryList(
        REFERENCE_REPO, sort or config["default_sort_field"], sort_direction
    )
    entry_list.apply_snapshot(TIME_ENTRY_REPO.snapshot())

    time_entries = filter_time_entries(
        entry_list.entries,
        REFERENCE_REPO,
        search=search,
        project_id=__reference_id(ReferenceKind.PROJECT, project),
        area_of_focus_id=__reference_id(ReferenceKind.AREA_OF_FOCUS, area),
        cost_code=__reference_id(ReferenceKind.COST_CODE, cost_code),
        date_from=date_from,
        date_to=date_to,
    )
    time_entry_report.time_entries_report(
        config["actor"], "time entries", time_entries, REFERENCE_REPO
    )


@app.command("history, h", no_args_is_help=True)
def history(id: str) -> None:
    """
    show the change history of a time entry
    """
    config = CONFIGURATION_REPO.get_config()
    time_entry = TIME_ENTRY_REPO.get_time_entry(__resolve_id(id))
    time_entry_report.history_report(config["actor"], time_entry, REFERENCE_REPO)


@app.command("start")
def start_command(
    project: Annotated[Optional[str], typer.Option("--project", "-p")] = None,
    area: Annotated[Optional[str], typer.Option("--area", "-a")] = None,
    cost_code: Annotated[Optional[str], typer.Option("--cost-code", "-cc")] = None,
    note: Annotated[Optional[str], typer.Option("--note", "-n")] = None,
    actor: Annotated[Optional[str], typer.Option("--actor")] = None,
) -> None:
    """
    start a timer
    """
    acting_user = __actor(actor)
    if find_running_time_entry(TIME_ENTRY_REPO.get_all_time_entries(), acting_user):
        typer.echo("Error: a timer is already running, stop it first")
        raise typer.Exit(1)

    project_id = __reference_id(ReferenceKind.PROJECT, project)
    area_of_focus_id = __reference_id(ReferenceKind.AREA_OF_FOCUS, area)
    cost_code_id = __reference_id(ReferenceKind.COST_CODE, cost_code)
    if CONFIGURATION_REPO.get_config()["require_reference_fields"] and not (
        project_id and area_of_focus_id and cost_code_id
    ):
        typer.echo(
            "Error: select a project, area of focus, and cost code before starting the timer"
        )
        raise typer.Exit(1)

    time_entry = start_timer(
        acting_user, now_local(), project_id, area_of_focus_id, cost_code_id, note
    )
    id = TIME_ENTRY_REPO.save_new_time_entry(time_entry)
    time_entry_report.single_time_entry_report(
        acting_user, TIME_ENTRY_REPO.get_time_entry(id), REFERENCE_REPO, "timer started"
    )


@app.command("stop")
def stop_command(
    actor: Annotated[Optional[str], typer.Option("--actor")] = None,
) -> None:
    """
    stop the running timer
    """
    acting_user = __actor(actor)
    running = find_running_time_entry(
        TIME_ENTRY_REPO.get_all_time_entries(), acting_user
    )
    if running is None:
        typer.echo("no running timer")
        raise typer.Exit(0)

    try:
        stopped = stop_timer(running, acting_user, now_local(), REFERENCE_REPO)
    except TimeEntryError as e:
        __fail(e)
    TIME_ENTRY_REPO.replace_time_entry(stopped)

    time_entry_report.single_time_entry_report(
        acting_user, stopped, REFERENCE_REPO, "timer stopped"
    )
    typer.echo(f"elapsed {format_elapsed(stopped['duration_seconds'])}")


@app.command("check, c", no_args_is_help=True)
def check(
    text: str,
    anchor: Annotated[
        Optional[str],
        typer.Option("--anchor", help="the paired time, e.g. the start time"),
    ] = None,
) -> None:
    """
    show how a typed time is masked, validated and parsed
    """
    console = Console()
    masked = mask_time_input(text)
    message = validate_time_input(masked)
    console.print(f"masked:     {masked}")
    console.print(f"validation: {'[green]ok[/green]' if message == '' else f'[red]{message}[/red]'}")

    try:
        parsed_anchor = None
        if anchor is not None:
            anchor_result = parse_time_text(anchor, final=True)
            if not isinstance(anchor_result, Incomplete):
                parsed_anchor = anchor_result
        parsed = parse_time_text(masked, parsed_anchor)
    except TimeEntryError as e:
        console.print(f"parsed:     [red]{e}[/red]")
        raise typer.Exit(1)

    if isinstance(parsed, Incomplete):
        console.print(f"parsed:     incomplete ('{parsed.raw}')")
    else:
        console.print(
            f"parsed:     {parsed['display']} ({parsed['hour']:02d}:{parsed['minute']:02d})"
        )


def __actor(actor: Optional[str]) -> str:
    acting_user = actor or CONFIGURATION_REPO.get_config()["actor"]
    if acting_user is None:
        typer.echo("Error: no actor set, pass --actor or run 'config set --actor'")
        raise typer.Exit(1)
    return acting_user


def __required_fields() -> tuple[str, ...]:
    if CONFIGURATION_REPO.get_config()["require_reference_fields"]:
        return DEFAULT_REQUIRED_FIELDS
    return ()


def __set_references(
    session: EditSession,
    project: Optional[str],
    area: Optional[str],
    cost_code: Optional[str],
) -> None:
    if project is not None:
        session.references["project_id"] = __reference_id(ReferenceKind.PROJECT, project)
    if area is not None:
        session.references["area_of_focus_id"] = __reference_id(
            ReferenceKind.AREA_OF_FOCUS, area
        )
    if cost_code is not None:
        session.references["cost_code"] = __reference_id(
            ReferenceKind.COST_CODE, cost_code
        )


def __reference_id(kind: str, id_or_name: Optional[str]) -> Optional[str]:
    if id_or_name is None:
        return None
    reference_id = REFERENCE_REPO.find_id(kind, id_or_name)
    if reference_id is None:
        typer.echo(f"Error: no {kind.replace('_', ' ')} named '{id_or_name}'")
        raise typer.Exit(1)
    return reference_id


def __resolve_id(id: str) -> str:
    try:
        return TIME_ENTRY_REPO.resolve_id(id)
    except TimeEntryNotFoundError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)


def __fail(error: TimeEntryError) -> NoReturn:
    if isinstance(error, MissingRequiredFieldError):
        for field in error.fields:
            typer.echo(f"Error: {field.replace('_', ' ')} is required")
    else:
        typer.echo(f"Error: {error}")
    raise typer.Exit(1)
