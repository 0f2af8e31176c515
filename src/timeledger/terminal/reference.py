# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from timeledger.model.entity_type import ReferenceKind
from timeledger.repository.reference import REFERENCE_REPO
from timeledger.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

KIND_HELP = "project, area_of_focus, cost_code, or user"


@app.command("add, a", no_args_is_help=True)
def add(
    kind: Annotated[str, typer.Argument(help=KIND_HELP)],
    name: str,
    id: Annotated[
        Optional[str],
        typer.Option("--id", help="use this id, e.g. the cost code itself"),
    ] = None,
) -> None:
    """
    add a project, area of focus, cost code, or user
    """
    __validate_kind(kind)
    try:
        item_id = REFERENCE_REPO.add_item(kind, name, id)
    except ValueError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)
    typer.echo(f"added {kind.replace('_', ' ')} {name} ({item_id})")


@app.command("list, ls")
def list_items(
    kind: Annotated[Optional[str], typer.Argument(help=KIND_HELP)] = None,
) -> None:
    """
    list reference data
    """
    if kind is not None:
        __validate_kind(kind)

    table = Table(box=box.SIMPLE)
    table.add_column("kind", style="cyan")
    table.add_column("id")
    table.add_column("name", style="magenta")
    for item in REFERENCE_REPO.get_items(kind):
        table.add_row(item["kind"], item["id"], item["name"])

    console = Console()
    console.print(table)


def __validate_kind(kind: str) -> None:
    if kind not in ReferenceKind.ALL:
        typer.echo(f"Invalid kind: {kind}. Valid options: {', '.join(ReferenceKind.ALL)}")
        raise typer.Exit(1)
