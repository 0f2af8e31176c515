# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Any, Mapping, Optional

from timeledger.model.entity_id import EntityId, generate_provisional_id
from timeledger.model.entity_type import ReferenceKind
from timeledger.model.time_entry import TimeEntry
from timeledger.query.sort import SortKey, sort_items
from timeledger.service.reference import NONE_DISPLAY, DisplayNameResolver

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "start_time"
DEFAULT_SORT_DIRECTION = "desc"

# Sort columns that go through the reference resolver, and the entry field
# holding the id for each.
_NAMED_SORT_COLUMNS = {
    "project": ("project_id", ReferenceKind.PROJECT),
    "area_of_focus": ("area_of_focus_id", ReferenceKind.AREA_OF_FOCUS),
    "cost_code": ("cost_code", ReferenceKind.COST_CODE),
    "user": ("user_id", ReferenceKind.USER),
}


class EntryList:
    """
    The in-memory list of time entries shown to the user.

    Two kinds of events change it: full snapshots pushed by the store, which
    are authoritative but can lag behind, and local optimistic edits applied
    straight away. A local delete stays hidden while snapshots still carry
    the entry, and a local add or update wins over snapshots until one
    arrives that has caught up with it, so rows never flicker back.
    """

    def __init__(
        self,
        resolver: Optional[DisplayNameResolver] = None,
        sort_field: str = DEFAULT_SORT_FIELD,
        sort_direction: str = DEFAULT_SORT_DIRECTION,
    ) -> None:
        self._resolver = resolver
        self._snapshot: dict[EntityId, TimeEntry] = {}
        self._pending_upserts: dict[EntityId, TimeEntry] = {}
        self._pending_deletes: set[EntityId] = set()
        self.sort_field = sort_field
        self.sort_direction = sort_direction

    @property
    def entries(self) -> list[TimeEntry]:
        merged = dict(self._snapshot)
        merged.update(self._pending_upserts)
        visible = [
            entry for id, entry in merged.items() if id not in self._pending_deletes
        ]
        return sort_items(
            visible,
            [f"{self.sort_direction} {self.sort_field}"],
            self.__sort_keys(),
        )

    @property
    def pending_ids(self) -> set[EntityId]:
        return set(self._pending_upserts) | self._pending_deletes

    def get(self, id: EntityId) -> Optional[TimeEntry]:
        if id in self._pending_deletes:
            return None
        if id in self._pending_upserts:
            return deepcopy(self._pending_upserts[id])
        if id in self._snapshot:
            return deepcopy(self._snapshot[id])
        return None

    def apply_snapshot(self, entries: list[TimeEntry]) -> None:
        """Take in a full snapshot from the store, in the order received."""
        snapshot = {
            entry["id"]: deepcopy(entry) for entry in entries if entry["id"] is not None
        }

        for id in list(self._pending_deletes):
            if id in snapshot:
                logger.debug("snapshot still holds deleted entry %s, keeping it hidden", id)
            else:
                self._pending_deletes.discard(id)

        for id, local in list(self._pending_upserts.items()):
            server = snapshot.get(id)
            if server is None:
                if id in self._snapshot:
                    # Known to the store before and now gone: removed elsewhere.
                    del self._pending_upserts[id]
                continue
            if server["updated"] >= local["updated"]:
                del self._pending_upserts[id]
            else:
                logger.debug("snapshot is behind local edit of %s, keeping local", id)

        self._snapshot = snapshot

    def upsert_local(self, entry: TimeEntry) -> None:
        """Apply an add or update before the store has confirmed it."""
        if entry["id"] is None:
            raise ValueError("Local upsert needs an id, use add_provisional")
        self._pending_upserts[entry["id"]] = deepcopy(entry)
        self._pending_deletes.discard(entry["id"])

    def add_provisional(self, entry: TimeEntry) -> EntityId:
        """Show a new entry the store has not assigned an id to yet."""
        provisional = deepcopy(entry)
        provisional["id"] = generate_provisional_id()
        self._pending_upserts[provisional["id"]] = provisional
        return provisional["id"]

    def confirm_add(self, provisional_id: EntityId, id: EntityId) -> None:
        """Swap a provisional id for the one the store assigned."""
        local = self._pending_upserts.pop(provisional_id, None)
        if local is None:
            return
        local["id"] = id
        self._pending_upserts[id] = local

    def delete_local(self, id: EntityId) -> None:
        self._pending_upserts.pop(id, None)
        self._pending_deletes.add(id)

    def set_sort(self, field: str) -> None:
        """Clicking the current column flips direction, a new column starts ascending."""
        if field == self.sort_field:
            self.sort_direction = "asc" if self.sort_direction == "desc" else "desc"
        else:
            self.sort_field = field
            self.sort_direction = "asc"

    def __sort_keys(self) -> dict[str, SortKey]:
        keys: dict[str, SortKey] = {
            "duration": lambda entry: entry.get("duration_seconds") or 0,
        }
        for column, (field, kind) in _NAMED_SORT_COLUMNS.items():
            keys[column] = self.__name_key(field, kind)
        return keys

    def __name_key(self, field: str, kind: str) -> SortKey:
        def key(entry: Mapping[str, Any]) -> Any:
            id = entry.get(field)
            if id is None or id == "":
                return None
            name = (
                self._resolver.resolve_display_name(kind, id)
                if self._resolver is not None
                else id
            )
            if name == NONE_DISPLAY:
                return None
            return name.lower()

        return key
