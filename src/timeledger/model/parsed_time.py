# SPDX-License-Identifier: MIT

from typing import TypedDict


class ParsedTime(TypedDict):
    display: str  # "H:MM AM"
    hour: int  # 0-23
    minute: int  # 0-59


class Incomplete:
    """Marker for text that is not yet enough to parse. Keeps the raw text."""

    def __init__(self, raw: str) -> None:
        self.raw = raw

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Incomplete) and other.raw == self.raw

    def __repr__(self) -> str:
        return f"Incomplete({self.raw!r})"
