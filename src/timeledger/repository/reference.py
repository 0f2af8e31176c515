# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from timeledger import configuration
from timeledger.model.entity_id import EntityId, generate_entity_id
from timeledger.model.entity_type import ReferenceKind
from timeledger.model.reference import ReferenceItem
from timeledger.service.reference import NONE_DISPLAY, DisplayNameResolver

# Key in reference.yaml for each kind.
_SECTIONS = {
    ReferenceKind.PROJECT: "projects",
    ReferenceKind.AREA_OF_FOCUS: "areas_of_focus",
    ReferenceKind.COST_CODE: "cost_codes",
    ReferenceKind.USER: "users",
}


class ReferenceRepository(DisplayNameResolver):
    """Projects, areas of focus, cost codes and users, kept in one YAML file."""

    def __init__(self) -> None:
        self._items: Optional[list[ReferenceItem]] = None
        self.is_dirty = False

    @property
    def items(self) -> list[ReferenceItem]:
        if self._items is None:
            self.__load_data()
        if self._items is None:
            raise ValueError()
        return self._items

    def __load_data(self) -> None:
        self._items = []
        if not configuration.DATA_REFERENCE_PATH.is_file():
            return
        raw_reference = load(configuration.DATA_REFERENCE_PATH.read_text(), Loader=Loader)
        if raw_reference is None:
            return
        for kind, section in _SECTIONS.items():
            for raw_item in raw_reference.get(section) or []:
                self._items.append(
                    {"id": raw_item["id"], "kind": kind, "name": raw_item["name"]}
                )

    def __save_data(self) -> None:
        reference: dict[str, list[dict[str, str]]] = {
            section: [] for section in _SECTIONS.values()
        }
        for item in self.items:
            reference[_SECTIONS[item["kind"]]].append(
                {"id": item["id"], "name": item["name"]}
            )
        configuration.DATA_REFERENCE_PATH.write_text(dump(reference, Dumper=Dumper))

    def flush(self) -> bool:
        if self._items is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def add_item(self, kind: str, name: str, id: Optional[str] = None) -> EntityId:
        if kind not in _SECTIONS:
            raise ValueError(f"Unknown reference kind '{kind}'")
        item_id = id if id is not None else generate_entity_id()
        if any(item["kind"] == kind and item["id"] == item_id for item in self.items):
            raise ValueError(f"A {kind} with id '{item_id}' already exists")

        self.is_dirty = True
        self.items.append({"id": item_id, "kind": kind, "name": name})
        return item_id

    def get_items(self, kind: Optional[str] = None) -> list[ReferenceItem]:
        return deepcopy(
            [item for item in self.items if kind is None or item["kind"] == kind]
        )

    def find_id(self, kind: str, id_or_name: str) -> Optional[EntityId]:
        """Accept either an id or a (case-insensitive) name from the command line."""
        for item in self.items:
            if item["kind"] == kind and item["id"] == id_or_name:
                return item["id"]
        for item in self.items:
            if item["kind"] == kind and item["name"].lower() == id_or_name.lower():
                return item["id"]
        return None

    def resolve_display_name(self, kind: str, id: Optional[str]) -> str:
        if id is None or id == "":
            return NONE_DISPLAY
        for item in self.items:
            if item["kind"] == kind and item["id"] == id:
                return item["name"]
        return NONE_DISPLAY


REFERENCE_REPO = ReferenceRepository()
