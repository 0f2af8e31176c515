# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from timeledger import configuration
from timeledger.repository.configuration import (
    CONFIGURATION_REPO,
)
from timeledger.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("actor", config["actor"] or "None")
    table.add_row(
        "show_header",
        "✓ Enabled" if config["show_header"] else "✗ Disabled",
    )
    table.add_row(
        "require_reference_fields",
        "✓ Enabled" if config["require_reference_fields"] else "✗ Disabled",
    )
    table.add_row("default_sort_field", config["default_sort_field"])
    table.add_row("default_sort_direction", config["default_sort_direction"])
    table.add_row("log_level", config.get("log_level", "WARNING"))
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("config_path", str(configuration.APP_CONFIG_PATH))

    console.print(table)


@app.command("set, s", no_args_is_help=True)
def set_config(
    actor: Annotated[
        Optional[str],
        typer.Option("--actor", help="user id recorded against changes"),
    ] = None,
    remove_actor: Annotated[bool, typer.Option("--remove-actor")] = False,
    show_header: Annotated[
        Optional[bool], typer.Option("--show-header/--hide-header")
    ] = None,
    require_reference_fields: Annotated[
        Optional[bool],
        typer.Option(
            "--require-references/--optional-references",
            help="require project, area of focus and cost code on entries",
        ),
    ] = None,
    default_sort_field: Annotated[Optional[str], typer.Option("--sort")] = None,
    default_sort_direction: Annotated[
        Optional[str], typer.Option("--direction", help="asc or desc")
    ] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level")] = None,
    data_path: Annotated[Optional[str], typer.Option("--data-path")] = None,
    remove_data_path: Annotated[bool, typer.Option("--remove-data-path")] = False,
) -> None:
    """Change configuration settings."""
    if default_sort_direction is not None and default_sort_direction not in (
        "asc",
        "desc",
    ):
        typer.echo(
            f"Invalid direction: {default_sort_direction}. Valid options: asc, desc"
        )
        raise typer.Exit(1)
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        typer.echo(f"Invalid log level: {log_level}. Valid options: {', '.join(LOG_LEVELS)}")
        raise typer.Exit(1)

    CONFIGURATION_REPO.update_config(
        show_header=show_header,
        actor=actor,
        remove_actor=remove_actor,
        default_sort_field=default_sort_field,
        default_sort_direction=default_sort_direction,
        require_reference_fields=require_reference_fields,
        log_level=log_level.upper() if log_level is not None else None,
        data_path=data_path,
        remove_data_path=remove_data_path,
    )
    view()
