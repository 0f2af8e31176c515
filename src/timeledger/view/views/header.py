# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding

from timeledger.view.state import get_show_header


def header(actor: Optional[str], sub_header: Optional[str] = None) -> None:
    """Print the application header with the acting user.

    Args:
        actor: The user changes are recorded against
        sub_header: Optional sub-header text to display
    """
    if not get_show_header():
        return

    additional = ""
    if sub_header is not None:
        additional = f"[sandy_brown]{sub_header}[/sandy_brown]"
    actor_line = f"[plum1]{actor or 'no actor set'}[/plum1]"

    print(Padding("[dark_orange]timeledger[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(additional, (0, 1)))
    print(Padding(actor_line, (0, 1)))
