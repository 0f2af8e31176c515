"""Tests for the YAML-backed repositories."""
import pendulum
import pytest

from timeledger import configuration
from timeledger.model.entity_type import ReferenceKind
from timeledger.repository.reference import ReferenceRepository
from timeledger.repository.time_entry import TimeEntryNotFoundError, TimeEntryRepository
from timeledger.service.time_entry import update_time_entry


@pytest.fixture
def data_path(tmp_path, monkeypatch):
    """Point the data files at a temporary directory."""
    monkeypatch.setattr(configuration, "DATA_TIME_ENTRIES_DIR", tmp_path / "time_entries")
    monkeypatch.setattr(configuration, "DATA_REFERENCE_PATH", tmp_path / "reference.yaml")
    return tmp_path


class TestTimeEntryRepository:
    """Test suite for TimeEntryRepository."""

    def test_save_flush_and_reload(self, data_path, make_time_entry):
        """Entries survive a flush and a fresh load."""
        repo = TimeEntryRepository()
        id = repo.save_new_time_entry(make_time_entry(None, note="pour"))
        assert repo.flush()
        assert (data_path / "time_entries" / f"{id}.yaml").is_file()

        reloaded = TimeEntryRepository().get_time_entry(id)
        assert reloaded["note"] == "pour"
        assert reloaded["start_time"] == pendulum.datetime(2024, 1, 15, 9, tz="UTC")
        assert reloaded["date"] == pendulum.date(2024, 1, 15)

    def test_history_round_trips(self, data_path, make_time_entry, resolver):
        """Audit records keep their timestamps."""
        repo = TimeEntryRepository()
        id = repo.save_new_time_entry(make_time_entry(None))
        stored = repo.get_time_entry(id)
        now = pendulum.datetime(2024, 1, 16, tz="UTC")
        repo.replace_time_entry(
            update_time_entry(stored, {"note": "n"}, "u-1", now, resolver, "UTC")
        )
        repo.flush()

        history = TimeEntryRepository().get_time_entry(id)["history"]
        assert len(history) == 1
        assert history[0]["changed_at"] == now

    def test_replace_rejects_rewritten_history(self, data_path, make_time_entry, resolver):
        """History can only grow."""
        repo = TimeEntryRepository()
        id = repo.save_new_time_entry(make_time_entry(None))
        now = pendulum.datetime(2024, 1, 16, tz="UTC")
        repo.replace_time_entry(
            update_time_entry(repo.get_time_entry(id), {"note": "n"}, "u-1", now, resolver)
        )
        rewritten = repo.get_time_entry(id)
        rewritten["history"] = []
        with pytest.raises(ValueError):
            repo.replace_time_entry(rewritten)

    def test_delete(self, data_path, make_time_entry):
        """Deleting removes the file on flush."""
        repo = TimeEntryRepository()
        id = repo.save_new_time_entry(make_time_entry(None))
        repo.flush()
        repo.delete_time_entry(id)
        repo.flush()
        assert not (data_path / "time_entries" / f"{id}.yaml").exists()
        with pytest.raises(TimeEntryNotFoundError):
            repo.get_time_entry(id)

    def test_resolve_id_prefix(self, data_path, make_time_entry):
        """A unique prefix expands to the full id."""
        repo = TimeEntryRepository()
        id = repo.save_new_time_entry(make_time_entry(None))
        assert repo.resolve_id(id[:8]) == id
        with pytest.raises(TimeEntryNotFoundError):
            repo.resolve_id("zzz")


class TestReferenceRepository:
    """Test suite for ReferenceRepository."""

    def test_add_and_resolve(self, data_path):
        """Names resolve by kind and id."""
        repo = ReferenceRepository()
        id = repo.add_item(ReferenceKind.PROJECT, "Bridge Retrofit")
        repo.add_item(ReferenceKind.COST_CODE, "Labour", id="100")
        assert repo.resolve_display_name(ReferenceKind.PROJECT, id) == "Bridge Retrofit"
        assert repo.resolve_display_name(ReferenceKind.AREA_OF_FOCUS, id) == "None"
        assert repo.resolve_display_name(ReferenceKind.COST_CODE, None) == "None"

    def test_find_id_by_name(self, data_path):
        """Command line values may be an id or a name."""
        repo = ReferenceRepository()
        repo.add_item(ReferenceKind.COST_CODE, "Labour", id="100")
        assert repo.find_id(ReferenceKind.COST_CODE, "100") == "100"
        assert repo.find_id(ReferenceKind.COST_CODE, "labour") == "100"
        assert repo.find_id(ReferenceKind.COST_CODE, "other") is None

    def test_duplicate_id(self, data_path):
        """Ids are unique per kind."""
        repo = ReferenceRepository()
        repo.add_item(ReferenceKind.USER, "Sam", id="u-1")
        with pytest.raises(ValueError):
            repo.add_item(ReferenceKind.USER, "Sam again", id="u-1")

    def test_flush_and_reload(self, data_path):
        """Items are written to reference.yaml."""
        repo = ReferenceRepository()
        repo.add_item(ReferenceKind.AREA_OF_FOCUS, "Design", id="a-1")
        repo.flush()
        items = ReferenceRepository().get_items(ReferenceKind.AREA_OF_FOCUS)
        assert items == [{"id": "a-1", "kind": ReferenceKind.AREA_OF_FOCUS, "name": "Design"}]
