# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from timeledger import configuration, time
from timeledger.model.change_record import ChangeRecord
from timeledger.model.entity_id import EntityId, generate_entity_id
from timeledger.model.time_entry import TimeEntry

logger = logging.getLogger(__name__)


class TimeEntryNotFoundError(LookupError):
    pass


class TimeEntryRepository:
    def __init__(self) -> None:
        self._time_entries: Optional[list[TimeEntry]] = None
        self.is_dirty = False
        self._dirty_ids: set[str] = set()
        self._deleted_ids: set[str] = set()

    @property
    def time_entries(self) -> list[TimeEntry]:
        if self._time_entries is None:
            self.__load_data()
        if self._time_entries is None:
            raise ValueError()
        return self._time_entries

    def __load_data(self) -> None:
        self._time_entries = []
        if not configuration.DATA_TIME_ENTRIES_DIR.is_dir():
            return
        for file_path in sorted(configuration.DATA_TIME_ENTRIES_DIR.iterdir()):
            if file_path.suffix != ".yaml":
                continue
            raw_time_entry = load(file_path.read_text(), Loader=Loader)
            if raw_time_entry is not None:
                self._time_entries.append(
                    self.__convert_time_entry_for_deserialization(raw_time_entry)
                )
        logger.debug("loaded %d time entries", len(self._time_entries))

    def __save_data(self) -> None:
        configuration.DATA_TIME_ENTRIES_DIR.mkdir(parents=True, exist_ok=True)

        # Write dirty entities
        for time_entry in self.time_entries:
            if time_entry["id"] in self._dirty_ids:
                serializable_time_entry = self.__convert_time_entry_for_serialization(
                    deepcopy(time_entry)
                )
                file_path = (
                    configuration.DATA_TIME_ENTRIES_DIR / f"{time_entry['id']}.yaml"
                )
                file_path.write_text(dump(serializable_time_entry, Dumper=Dumper))

        # Remove deleted entity files
        for entity_id in self._deleted_ids:
            file_path = configuration.DATA_TIME_ENTRIES_DIR / f"{entity_id}.yaml"
            if file_path.exists():
                file_path.unlink()

        self._dirty_ids.clear()
        self._deleted_ids.clear()

    def flush(self) -> bool:
        if self._time_entries is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def __convert_time_entry_for_serialization(
        self, time_entry: TimeEntry
    ) -> dict[str, Any]:
        serializable_time_entry = cast(dict[str, Any], time_entry)
        serializable_time_entry["date"] = time.date_to_str(time_entry["date"])
        serializable_time_entry["start_time"] = time.datetime_to_iso_str(
            time_entry["start_time"]
        )
        serializable_time_entry["end_time"] = time.datetime_to_iso_str_optional(
            time_entry["end_time"]
        )
        serializable_time_entry["created"] = time.datetime_to_iso_str(
            time_entry["created"]
        )
        serializable_time_entry["updated"] = time.datetime_to_iso_str(
            time_entry["updated"]
        )
        serializable_time_entry["history"] = [
            {**record, "changed_at": time.datetime_to_iso_str(record["changed_at"])}
            for record in time_entry["history"]
        ]
        return serializable_time_entry

    def __convert_time_entry_for_deserialization(
        self, time_entry: dict[str, Any]
    ) -> TimeEntry:
        deserializable_time_entry = time_entry
        deserializable_time_entry["date"] = time.date_from_str(
            deserializable_time_entry["date"]
        )
        deserializable_time_entry["start_time"] = time.datetime_from_str(
            deserializable_time_entry["start_time"]
        )
        deserializable_time_entry["end_time"] = time.datetime_from_str_optional(
            deserializable_time_entry["end_time"]
        )
        deserializable_time_entry["created"] = time.datetime_from_str(
            deserializable_time_entry["created"]
        )
        deserializable_time_entry["updated"] = time.datetime_from_str(
            deserializable_time_entry["updated"]
        )
        deserializable_time_entry["history"] = [
            cast(
                ChangeRecord,
                {**record, "changed_at": time.datetime_from_str(record["changed_at"])},
            )
            for record in deserializable_time_entry.get("history") or []
        ]
        return cast(TimeEntry, deserializable_time_entry)

    def save_new_time_entry(self, time_entry: TimeEntry) -> EntityId:
        self.is_dirty = True

        time_entry = deepcopy(time_entry)
        time_entry["id"] = generate_entity_id()
        self.time_entries.append(time_entry)
        self._dirty_ids.add(time_entry["id"])

        return time_entry["id"]

    def replace_time_entry(self, time_entry: TimeEntry) -> None:
        """
        Write a reconciled entry over the stored one (last write wins).

        Raises:
            ValueError: the new history does not extend the stored history
        """
        if time_entry["id"] is None:
            raise ValueError("Cannot replace a time entry without an id")
        index = self.__index_of(time_entry["id"])
        stored_history = self.time_entries[index]["history"]
        if time_entry["history"][: len(stored_history)] != stored_history:
            raise ValueError("Time entry history is append-only")

        self.is_dirty = True
        self._dirty_ids.add(time_entry["id"])
        self.time_entries[index] = deepcopy(time_entry)

    def delete_time_entry(self, id: EntityId) -> None:
        index = self.__index_of(id)
        self.is_dirty = True
        del self.time_entries[index]
        self._dirty_ids.discard(id)
        self._deleted_ids.add(id)

    def get_all_time_entries(self) -> list[TimeEntry]:
        return deepcopy(self.time_entries)

    def snapshot(self) -> list[TimeEntry]:
        """Every stored entry, as a full-collection push."""
        return self.get_all_time_entries()

    def get_time_entry(self, id: EntityId) -> TimeEntry:
        return deepcopy(self.time_entries[self.__index_of(id)])

    def resolve_id(self, id_or_prefix: str) -> EntityId:
        """Expand a unique id prefix, as typed on the command line, to the full id."""
        matches = [
            time_entry["id"]
            for time_entry in self.time_entries
            if time_entry["id"] is not None and time_entry["id"].startswith(id_or_prefix)
        ]
        if len(matches) == 0:
            raise TimeEntryNotFoundError(f"No time entry with id '{id_or_prefix}'")
        if len(matches) > 1 and id_or_prefix not in matches:
            raise TimeEntryNotFoundError(
                f"Id prefix '{id_or_prefix}' matches {len(matches)} time entries"
            )
        return id_or_prefix if id_or_prefix in matches else cast(EntityId, matches[0])

    def __index_of(self, id: EntityId) -> int:
        for index, time_entry in enumerate(self.time_entries):
            if time_entry["id"] == id:
                return index
        raise TimeEntryNotFoundError(f"No time entry with id '{id}'")


TIME_ENTRY_REPO = TimeEntryRepository()
