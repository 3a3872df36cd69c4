"""SQLite record store for car entries.

The store is the system of record. Every write notifies subscribers with the
full current record set, newest first.
"""
import sqlite3
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional
from datetime import datetime
from contextlib import contextmanager

from models.record import Record
from schemas.sheet_columns import FIELD_NAMES, default_fields, normalize_fields

logger = logging.getLogger(__name__)

Snapshot = List[Record]
Subscriber = Callable[[Snapshot], None]


class StoreError(Exception):
    """The record store rejected a read or write."""
    pass


class RecordNotFoundError(StoreError):
    """No record exists with the requested id."""

    def __init__(self, record_id: str):
        super().__init__(f"Record not found: {record_id}")
        self.record_id = record_id


_COLUMNS_SQL = ",\n".join(f"                    {name} TEXT NOT NULL DEFAULT ''" for name in FIELD_NAMES)


class RecordStore:
    def __init__(self, db_path: str = "data/car_entries.db"):
        self.db_path = Path(db_path)
        self._subscribers: List[Subscriber] = []
        self._init_db()

    def _init_db(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._get_connection() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS car_entries (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
{_COLUMNS_SQL},
                    sheet_row INTEGER
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_car_entries_created ON car_entries(created_at)"
            )
            conn.commit()

    @contextmanager
    def _get_connection(self):
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open record store: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> Record:
        data = dict(row)
        return Record(**data)

    # =========================================================================
    # Subscription
    # =========================================================================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot listener. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._subscribers:
            return
        try:
            snapshot = self.list_records()
        except StoreError:
            logger.exception("Snapshot read for subscribers failed")
            return
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Record subscriber failed")

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, record_id: str) -> Record:
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT * FROM car_entries WHERE id = ?", (record_id,))
            row = cursor.fetchone()
        if row is None:
            raise RecordNotFoundError(record_id)
        return self._row_to_record(row)

    def list_records(self) -> Snapshot:
        """All records, newest first."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM car_entries ORDER BY created_at DESC, rowid DESC"
            )
            return [self._row_to_record(row) for row in cursor.fetchall()]

    # =========================================================================
    # Writes
    # =========================================================================

    def insert(self, fields: Mapping[str, Any]) -> Record:
        """Create a record without a mirror pointer."""
        values = default_fields()
        for name, value in normalize_fields(fields).items():
            values[name] = "" if value is None else str(value)

        record_id = uuid.uuid4().hex
        created_at = datetime.utcnow().isoformat() + "Z"
        columns = ", ".join(("id", "created_at") + FIELD_NAMES)
        placeholders = ", ".join("?" * (len(FIELD_NAMES) + 2))

        with self._get_connection() as conn:
            conn.execute(
                f"INSERT INTO car_entries ({columns}) VALUES ({placeholders})",
                (record_id, created_at, *(values[name] for name in FIELD_NAMES)),
            )
            conn.commit()

        logger.debug(f"Inserted record {record_id}")
        self._notify()
        return Record(id=record_id, created_at=created_at, **values)

    def update_fields(self, record_id: str, fields: Mapping[str, Any]) -> Record:
        """Overwrite the given entry attributes. Returns the updated record."""
        changes: Dict[str, str] = {
            name: "" if value is None else str(value)
            for name, value in normalize_fields(fields).items()
        }

        if changes:
            assignments = ", ".join(f"{name} = ?" for name in changes)
            with self._get_connection() as conn:
                cursor = conn.execute(
                    f"UPDATE car_entries SET {assignments} WHERE id = ?",
                    (*changes.values(), record_id),
                )
                conn.commit()
                if cursor.rowcount == 0:
                    raise RecordNotFoundError(record_id)
            self._notify()

        return self.get(record_id)

    def set_sheet_row(self, record_id: str, sheet_row: Optional[int]) -> None:
        """Attach (or detach, with None) the mirror pointer."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE car_entries SET sheet_row = ? WHERE id = ?",
                (sheet_row, record_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise RecordNotFoundError(record_id)
        self._notify()

    def delete(self, record_id: str) -> None:
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM car_entries WHERE id = ?", (record_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise RecordNotFoundError(record_id)
        logger.debug(f"Deleted record {record_id}")
        self._notify()

    def count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM car_entries").fetchone()[0]
