import json
import logging

import pytest

from storage import ENTRIES_KEY, GOAL_KEY, InMemoryRepository, JsonFileRepository
from tracker import WeightTracker


def test_missing_file_is_empty(data_path):
    repo = JsonFileRepository(str(data_path))
    assert repo.load_entries() == []
    assert repo.load_goal() is None


def test_save_writes_both_keys(data_path):
    repo = JsonFileRepository(str(data_path))
    records = [{"id": 1, "date": "2024-01-01", "weight": 80.0, "notes": "start"}]
    repo.save_entries(records)
    repo.save_goal("70.0")

    obj = json.loads(data_path.read_text(encoding="utf-8"))
    assert obj[ENTRIES_KEY] == records
    assert obj[GOAL_KEY] == "70.0"
    assert "saved_at" in obj

    reopened = JsonFileRepository(str(data_path))
    assert reopened.load_entries() == records
    assert reopened.load_goal() == "70.0"


def test_save_goal_none_removes_key(data_path):
    repo = JsonFileRepository(str(data_path))
    repo.save_entries([{"id": 1, "date": "2024-01-01", "weight": 80.0, "notes": ""}])
    repo.save_goal("70.0")
    repo.save_goal(None)
    obj = json.loads(data_path.read_text(encoding="utf-8"))
    assert GOAL_KEY not in obj
    assert len(obj[ENTRIES_KEY]) == 1


def test_numeric_goal_is_read_as_string(write_store, data_path):
    write_store({GOAL_KEY: 68.5})
    assert JsonFileRepository(str(data_path)).load_goal() == "68.5"


def test_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "weights.json"
    JsonFileRepository(str(path)).save_goal("70")
    assert path.exists()


def test_malformed_json_starts_empty(data_path, caplog):
    data_path.write_text("{not json", encoding="utf-8")
    repo = JsonFileRepository(str(data_path))
    with caplog.at_level(logging.WARNING):
        assert repo.load_entries() == []
        assert repo.load_goal() is None
    assert "starting empty" in caplog.text
    # untouched until the next save, which copies it aside first
    assert data_path.read_text(encoding="utf-8") == "{not json"


def test_wrong_shapes_start_empty(write_store, data_path):
    write_store([1, 2, 3])
    assert JsonFileRepository(str(data_path)).load_entries() == []
    write_store({ENTRIES_KEY: "oops"})
    assert JsonFileRepository(str(data_path)).load_entries() == []


def _backups(data_path):
    return sorted(data_path.parent.glob(data_path.name + ".corrupt-*"))


def test_save_over_malformed_file_keeps_a_copy(data_path, ms_clock, caplog):
    original = (
        '{"weightEntries": ['
        '{"id": 1, "date": "2024-01-01", "weight": 80.0, "notes": ""},'
        '{"id": 2, "date": "2024-01-08", "weight": 78.0, "notes": ""},'
        '], "goalWeight": "70"}'
    )
    data_path.write_text(original, encoding="utf-8")
    t = WeightTracker.load(JsonFileRepository(str(data_path)), clock=ms_clock)
    assert len(t) == 0

    with caplog.at_level(logging.WARNING):
        t.add_entry("2024-02-01", 77)

    backups = _backups(data_path)
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == original
    assert "Kept unreadable" in caplog.text
    obj = json.loads(data_path.read_text(encoding="utf-8"))
    assert [r["weight"] for r in obj[ENTRIES_KEY]] == [77.0]

    # the copy is made once, not on every later save
    ms_clock.advance(1)
    t.add_entry("2024-02-02", 76.5)
    assert len(_backups(data_path)) == 1


def test_save_over_non_list_entries_keeps_a_copy(write_store, data_path):
    write_store({ENTRIES_KEY: "oops", GOAL_KEY: "70"})
    repo = JsonFileRepository(str(data_path))
    assert repo.load_entries() == []
    repo.save_entries([{"id": 1, "date": "2024-01-01", "weight": 80.0, "notes": ""}])
    backups = _backups(data_path)
    assert len(backups) == 1
    assert json.loads(backups[0].read_text(encoding="utf-8"))[ENTRIES_KEY] == "oops"


def test_valid_file_is_not_copied(data_path):
    repo = JsonFileRepository(str(data_path))
    repo.save_goal("70")
    repo.save_goal("69")
    assert _backups(data_path) == []


def test_failed_write_leaves_previous_file(data_path, monkeypatch):
    repo = JsonFileRepository(str(data_path))
    repo.save_goal("70")
    before = data_path.read_text(encoding="utf-8")

    def broken_dump(obj, f, **kwargs):
        f.write('{"partial": ')
        raise OSError("disk full")

    monkeypatch.setattr("storage.json.dump", broken_dump)
    with pytest.raises(OSError):
        repo.save_goal("60")

    assert data_path.read_text(encoding="utf-8") == before
    assert [p.name for p in data_path.parent.iterdir()] == [data_path.name]


def test_tracker_round_trip_through_file(data_path, ms_clock):
    repo = JsonFileRepository(str(data_path))
    t = WeightTracker.load(repo, clock=ms_clock)
    t.add_entry("2024-01-01", 80, "start")
    ms_clock.advance(1)
    t.add_entry("2024-01-08", 78)
    t.set_goal("70")

    reloaded = WeightTracker.load(JsonFileRepository(str(data_path)))
    assert reloaded.entries == t.entries
    assert reloaded.goal == 70.0
    assert reloaded.weight_change() == -2.0


def test_in_memory_repository_copies_records():
    repo = InMemoryRepository()
    records = [{"id": 1, "date": "2024-01-01", "weight": 80.0, "notes": ""}]
    repo.save_entries(records)
    records[0]["weight"] = 1.0
    assert repo.load_entries()[0]["weight"] == 80.0
