# SPDX-License-Identifier: MIT

from abc import ABC, abstractmethod
from typing import Optional

from timeledger.model.reference import ReferenceItem

NONE_DISPLAY = "None"


class DisplayNameResolver(ABC):
    """Resolves a foreign key to the name shown to people."""

    @abstractmethod
    def resolve_display_name(self, kind: str, id: Optional[str]) -> str:
        """Return the display name for id, or 'None' when there is no match."""
        ...


class MappingResolver(DisplayNameResolver):
    def __init__(self, items: Optional[list[ReferenceItem]] = None) -> None:
        self._names: dict[tuple[str, str], str] = {}
        for item in items or []:
            self.add(item)

    def add(self, item: ReferenceItem) -> None:
        self._names[(item["kind"], item["id"])] = item["name"]

    def resolve_display_name(self, kind: str, id: Optional[str]) -> str:
        if id is None or id == "":
            return NONE_DISPLAY
        return self._names.get((kind, id), NONE_DISPLAY)
