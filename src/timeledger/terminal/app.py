# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from timeledger.terminal import configuration, reference, time_entry
from timeledger.terminal.custom_typer import OrderedAliasedTyperGroup
from timeledger.view import state as view_state

app = typer.Typer(
    cls=OrderedAliasedTyperGroup,
    help="timeledger - time entries with an audit trail",
    no_args_is_help=True,
)
app.add_typer(time_entry.app, name="entry, e")
app.add_typer(reference.app, name="ref, r")
app.add_typer(configuration.app, name="config, c")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
) -> None:
    """
    timeledger - time entries with an audit trail

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)


def run() -> None:
    app()
