"""Tests for the SQLite record store."""

import sqlite3
from unittest.mock import patch

import pytest

from services.record_store import RecordNotFoundError, RecordStore, StoreError


class TestInsert:
    """Tests for creating records."""

    def test_assigns_id_and_timestamp(self, store, sample_entry):
        record = store.insert(sample_entry)

        assert len(record.id) == 32
        assert record.created_at.endswith("Z")
        assert record.car_details == "Toyota Prius"
        assert record.plate_no == "ABC-1234"
        assert record.sheet_row is None

    def test_persisted(self, store, sample_entry):
        record = store.insert(sample_entry)
        loaded = store.get(record.id)
        assert loaded == record

    def test_form_defaults_applied(self, store):
        record = store.insert({"plateNo": "P-1"})
        assert record.satisfaction_rate == "100%"
        assert record.acceptance_rate == "100%"
        assert record.cancellation_rate == "100%"
        assert record.email == ""

    def test_none_stored_as_empty(self, store):
        record = store.insert({"carDetails": None})
        assert store.get(record.id).car_details == ""

    def test_sheet_row_in_input_ignored(self, store):
        """The pointer is only ever set through set_sheet_row."""
        record = store.insert({"plateNo": "P-1", "sheetRow": 9, "sheet_row": 9})
        assert store.get(record.id).sheet_row is None


class TestUpdate:
    """Tests for editing records."""

    def test_partial_update(self, store, sample_entry):
        record = store.insert(sample_entry)
        updated = store.update_fields(record.id, {"plateNo": "XYZ-9999"})

        assert updated.plate_no == "XYZ-9999"
        assert updated.car_details == "Toyota Prius"
        assert updated.created_at == record.created_at

    def test_update_missing_record(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update_fields("missing", {"plateNo": "X"})

    def test_empty_update_missing_record(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update_fields("missing", {})

    def test_set_sheet_row(self, store, sample_entry):
        record = store.insert(sample_entry)
        store.set_sheet_row(record.id, 7)
        assert store.get(record.id).sheet_row == 7

    def test_set_sheet_row_missing_record(self, store):
        with pytest.raises(RecordNotFoundError):
            store.set_sheet_row("missing", 2)

    def test_update_keeps_sheet_row(self, store, sample_entry):
        record = store.insert(sample_entry)
        store.set_sheet_row(record.id, 4)
        assert store.update_fields(record.id, {"rating": "5"}).sheet_row == 4


class TestDelete:
    """Tests for deleting records."""

    def test_delete(self, store, sample_entry):
        record = store.insert(sample_entry)
        store.delete(record.id)

        with pytest.raises(RecordNotFoundError):
            store.get(record.id)
        assert store.count() == 0

    def test_delete_missing(self, store):
        with pytest.raises(RecordNotFoundError):
            store.delete("missing")

    def test_not_found_is_store_error(self):
        assert issubclass(RecordNotFoundError, StoreError)


class TestListing:
    """Tests for snapshots."""

    def test_newest_first(self, store):
        first = store.insert({"plateNo": "FIRST"})
        second = store.insert({"plateNo": "SECOND"})
        third = store.insert({"plateNo": "THIRD"})

        ids = [r.id for r in store.list_records()]
        assert ids == [third.id, second.id, first.id]


class TestSubscribe:
    """Tests for full-snapshot notifications."""

    def test_every_write_delivers_snapshot(self, store):
        snapshots = []
        store.subscribe(snapshots.append)

        record = store.insert({"plateNo": "P-1"})
        store.update_fields(record.id, {"plateNo": "P-2"})
        store.set_sheet_row(record.id, 2)
        store.delete(record.id)

        assert len(snapshots) == 4
        assert [r.plate_no for r in snapshots[0]] == ["P-1"]
        assert snapshots[1][0].plate_no == "P-2"
        assert snapshots[2][0].sheet_row == 2
        assert snapshots[3] == []

    def test_unsubscribe(self, store):
        snapshots = []
        unsubscribe = store.subscribe(snapshots.append)
        store.insert({"plateNo": "P-1"})

        unsubscribe()
        unsubscribe()
        store.insert({"plateNo": "P-2"})

        assert len(snapshots) == 1

    def test_failing_subscriber_does_not_fail_write(self, store):
        received = []

        def broken(snapshot):
            raise RuntimeError("listener crashed")

        store.subscribe(broken)
        store.subscribe(received.append)

        record = store.insert({"plateNo": "P-1"})

        assert store.get(record.id).plate_no == "P-1"
        assert len(received) == 1

    def test_failed_snapshot_read_does_not_fail_write(self, store):
        received = []
        store.subscribe(received.append)

        with patch.object(store, "list_records", side_effect=StoreError("database is locked")):
            record = store.insert({"plateNo": "P-1"})
            store.set_sheet_row(record.id, 2)

        assert received == []
        assert store.get(record.id).sheet_row == 2


class TestErrors:
    """Tests for database failures."""

    def test_sqlite_errors_wrapped(self, store):
        with patch("services.record_store.sqlite3.connect", side_effect=sqlite3.OperationalError("disk I/O error")):
            with pytest.raises(StoreError, match="disk I/O error"):
                store.insert({"plateNo": "P-1"})

    def test_creates_parent_directory(self, tmp_path):
        store = RecordStore(str(tmp_path / "nested" / "dir" / "records.db"))
        assert store.db_path.exists()
