"""
Tests for database.store and utils.process_lock: JSON-backed table store and write lock.
"""

import threading

import pytest

from database.exceptions import DatabaseError, DatabaseLockError, SheetNotFoundError
from database.store import JsonTableStore
from utils.process_lock import StoreLock


@pytest.fixture
def json_store(tmp_path):
    return JsonTableStore(tmp_path / "store" / "book.json")


class TestJsonTableStore:

    def test_create_append_read(self, json_store):
        json_store.create_sheet("Logs", ["Name", "Date"])
        json_store.append_row("Logs", ["Anita Sharma", "2026-01-24"])
        assert json_store.read_rows("Logs") == [["Name", "Date"], ["Anita Sharma", "2026-01-24"]]

    def test_cells_stored_as_strings(self, json_store):
        json_store.create_sheet("Users", [])
        json_store.append_row("Users", ["Priya", 7, True, None])
        assert json_store.read_rows("Users") == [["Priya", "7", "TRUE", ""]]

    def test_missing_sheet(self, json_store):
        assert json_store.sheet_names() == []
        assert json_store.read_rows_or_empty("Logs") == []
        with pytest.raises(SheetNotFoundError):
            json_store.read_rows("Logs")
        with pytest.raises(SheetNotFoundError):
            json_store.append_row("Logs", ["x"])
        with pytest.raises(SheetNotFoundError):
            json_store.update_cell("Logs", 1, 1, "x")

    def test_update_cell_pads_rows_and_columns(self, json_store):
        json_store.create_sheet("Users", ["Name"])
        json_store.update_cell("Users", 3, 2, "anita@example.com")
        assert json_store.read_rows("Users") == [["Name"], [], ["", "anita@example.com"]]

    def test_persisted_between_instances(self, json_store):
        json_store.create_sheet("Logs", ["Name"])
        json_store.append_row("Logs", ["Shiva"])
        reopened = JsonTableStore(json_store.path)
        assert reopened.read_rows("Logs") == [["Name"], ["Shiva"]]

    def test_refresh_sees_other_writers(self, json_store):
        json_store.create_sheet("Logs", ["Name"])
        other = JsonTableStore(json_store.path)
        other.append_row("Logs", ["Kanishka Rao"])

        assert len(json_store.read_rows("Logs")) == 1
        json_store.refresh()
        assert len(json_store.read_rows("Logs")) == 2

    def test_ensure_sheet_keeps_existing_rows(self, json_store):
        json_store.load_sheet("Logs", [["Name"], ["Shiva"]])
        json_store.ensure_sheet("Logs", ["Other"])
        assert json_store.read_rows("Logs") == [["Name"], ["Shiva"]]
        json_store.ensure_sheet("Profiles", ["Name", "Bio"])
        assert json_store.read_rows("Profiles") == [["Name", "Bio"]]

    def test_read_rows_returns_copies(self, json_store):
        json_store.load_sheet("Logs", [["Name"]])
        json_store.read_rows("Logs")[0].append("mutated")
        assert json_store.read_rows("Logs") == [["Name"]]

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "book.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DatabaseError):
            JsonTableStore(path).sheet_names()


class TestStoreLock:

    def test_context_manager_releases(self, tmp_path):
        lockfile = tmp_path / "locks" / "store.lock"
        with StoreLock(lockfile, timeout=0.2) as lock:
            assert lock.fp is not None
        assert lock.fp is None
        with StoreLock(lockfile, timeout=0.2):
            pass

    def test_busy_lock_times_out(self, tmp_path):
        lockfile = tmp_path / "store.lock"
        holder = StoreLock(lockfile, timeout=0.2)
        holder.acquire()
        try:
            with pytest.raises(DatabaseLockError):
                StoreLock(lockfile, timeout=0.2).acquire()
        finally:
            holder.release()

    def test_waiting_thread_gets_lock_after_release(self, tmp_path):
        lockfile = tmp_path / "store.lock"
        holder = StoreLock(lockfile, timeout=1)
        holder.acquire()
        acquired = threading.Event()

        def worker():
            with StoreLock(lockfile, timeout=5):
                acquired.set()

        thread = threading.Thread(target=worker)
        thread.start()
        assert not acquired.wait(0.2)
        holder.release()
        thread.join(timeout=5)
        assert acquired.is_set()

    def test_file_lock_held_elsewhere(self, tmp_path):
        fcntl = pytest.importorskip("fcntl")
        lockfile = tmp_path / "store.lock"
        with open(lockfile, "a+") as other:
            fcntl.flock(other, fcntl.LOCK_EX | fcntl.LOCK_NB)
            with pytest.raises(DatabaseLockError):
                StoreLock(lockfile, timeout=0.3).acquire()
            fcntl.flock(other, fcntl.LOCK_UN)

        # после неудачи локальный мьютекс не остаётся занятым
        with StoreLock(lockfile, timeout=0.3):
            pass

    def test_release_without_acquire_is_noop(self, tmp_path):
        StoreLock(tmp_path / "store.lock").release()
