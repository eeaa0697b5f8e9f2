"""
Tests for JSON persistence: save/load round trips, failure handling and
restoring from backups.
"""

import json

import pytest

from remindme.core.repository import Repository
from remindme.errors import CorruptBackupError, NotFoundError
from remindme.models.folder import INBOX_ID, SYSTEM_FOLDER_IDS
from remindme.store import Store


@pytest.fixture
def paths(tmp_path):
    return tmp_path / "data" / "reminders.json", tmp_path / "backups"


@pytest.fixture
def store(paths, clock):
    data_file, backup_dir = paths
    s = Store(str(data_file), str(backup_dir), repository=Repository(clock=clock))
    s.load()
    return s


def _snapshot(repo):
    return (
        {k: v.model_dump() for k, v in repo.folders.items()},
        {k: v.model_dump() for k, v in repo.reminders.items()},
        dict(repo.tags),
    )


class TestSaveLoad:
    def test_fresh_load_has_system_folders(self, store):
        assert SYSTEM_FOLDER_IDS <= set(store.repository.folders)
        assert store.dirty is True

    def test_mutations_are_written(self, store, paths):
        store.repository.create_reminder("Persist me #now")
        document = json.loads(paths[0].read_text())

        assert set(document) == {"folders", "reminders", "tags", "lastSaved"}
        titles = [value["title"] for _, value in document["reminders"]]
        assert titles == ["Persist me #now"]
        assert document["tags"] == [["#now", 1]]
        assert store.dirty is False

    def test_document_uses_camel_case(self, store, paths):
        store.repository.create_reminder("Task", folder_id="work", due_date=42)
        _, value = json.loads(paths[0].read_text())["reminders"][0]
        assert value["folderId"] == "work"
        assert value["dueDate"] == 42
        assert "completedAt" in value and "createdAt" in value

    def test_round_trip(self, store, paths, clock):
        repo = store.repository
        folder = repo.create_folder("Work")
        reminder = repo.create_reminder(
            "Ship it #release",
            notes="before friday",
            folder_id=folder.id,
            due_date=clock.now + 1000,
            priority="high",
            recurring="weekly",
            subtasks=["write notes", {"title": "tag", "completed": True}],
        )
        repo.update_reminder(reminder.id, completed=True)
        before = _snapshot(repo)

        reloaded = Store(str(paths[0]), str(paths[1]), repository=Repository(clock=clock))
        reloaded.load()

        assert _snapshot(reloaded.repository) == before

    def test_corrupt_file_is_set_aside(self, paths, clock):
        data_file, backup_dir = paths
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{not json")

        s = Store(str(data_file), str(backup_dir), repository=Repository(clock=clock))
        s.load()

        assert s.repository.reminders == {}
        assert INBOX_ID in s.repository.folders
        assert not data_file.exists()
        assert len(list(data_file.parent.glob("reminders.json.corrupt-*"))) == 1

    def test_wrong_shape_treated_as_corrupt(self, paths, clock):
        data_file, backup_dir = paths
        data_file.parent.mkdir(parents=True)
        data_file.write_text(json.dumps({"reminders": [["a", {"title": "no id"}]]}))

        s = Store(str(data_file), str(backup_dir), repository=Repository(clock=clock))
        s.load()

        assert s.repository.reminders == {}

    def test_save_failure_keeps_memory_and_stays_dirty(self, tmp_path, clock):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where a directory should be")
        s = Store(str(blocker / "reminders.json"), str(tmp_path / "b"), repository=Repository(clock=clock))
        s.load()

        reminder = s.repository.create_reminder("Still here")

        assert s.dirty is True
        assert s.save() is False
        assert s.repository.get_reminder(reminder.id) is reminder

    def test_save_if_dirty(self, store):
        assert store.save_if_dirty() is True
        assert store.save_if_dirty() is False

    def test_on_saved_hook(self, paths, clock):
        saved = []
        s = Store(str(paths[0]), str(paths[1]), repository=Repository(clock=clock), on_saved=lambda: saved.append(1))
        s.load()
        s.repository.create_reminder("x")
        assert saved == [1]


class TestRestore:
    def _write_backup(self, backup_dir, name, document):
        backup_dir.mkdir(parents=True, exist_ok=True)
        path = backup_dir / name
        path.write_text(json.dumps(document) if not isinstance(document, str) else document)
        return path

    def test_missing_backup_leaves_memory_unchanged(self, store):
        store.repository.create_reminder("keep me")
        before = json.dumps(_snapshot(store.repository), sort_keys=True)

        with pytest.raises(NotFoundError):
            store.restore("reminders_19990101_000000.json")

        assert json.dumps(_snapshot(store.repository), sort_keys=True) == before

    def test_path_traversal_rejected(self, store, paths):
        with pytest.raises(NotFoundError):
            store.restore("../data/reminders.json")

    def test_corrupt_backup_leaves_memory_unchanged(self, store, paths):
        store.repository.create_reminder("keep me")
        before = json.dumps(_snapshot(store.repository), sort_keys=True)
        self._write_backup(paths[1], "reminders_20240101_000000.json", "{broken")

        with pytest.raises(CorruptBackupError):
            store.restore("reminders_20240101_000000.json")

        assert json.dumps(_snapshot(store.repository), sort_keys=True) == before

    def test_restore_replaces_and_persists(self, store, paths):
        store.repository.create_reminder("current")
        document = {
            "folders": [["work", {"id": "work", "name": "Work", "color": "#000", "icon": "W", "createdAt": 1}]],
            "reminders": [["r1", {"id": "r1", "title": "From backup", "folderId": "work", "createdAt": 2}]],
            "tags": [],
            "lastSaved": 3,
        }
        self._write_backup(paths[1], "reminders_20240101_000000.json", document)

        store.restore("reminders_20240101_000000.json")

        repo = store.repository
        assert list(repo.reminders) == ["r1"]
        assert repo.reminders["r1"].title == "From backup"
        assert INBOX_ID in repo.folders and "work" in repo.folders
        on_disk = json.loads(paths[0].read_text())
        assert [key for key, _ in on_disk["reminders"]] == ["r1"]

    def test_restore_recounts_tags(self, store, paths):
        document = {
            "folders": [],
            "reminders": [["r1", {"id": "r1", "title": "Pay #rent", "createdAt": 2}]],
            "tags": [["#stale", 4]],
            "lastSaved": 3,
        }
        self._write_backup(paths[1], "reminders_20240101_000000.json", document)

        store.restore("reminders_20240101_000000.json")

        assert store.repository.tags == {"#rent": 1}
