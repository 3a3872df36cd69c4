"""Keeps the Google Sheets mirror in step with the record store.

Each operation writes to the store first. A store failure aborts the
operation before the sheet is touched. The sheet write that follows is
best-effort: a failure is logged and reported in the result, and the store
change stays in place.

Known gap: a record whose append or pointer attach failed keeps no
sheet_row and is never mirrored again. Rows whose clear failed keep stale
data. Nothing scans for either case. Appends land after the last non-empty
row, so clearing the bottom row lets the next create reuse its number.
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.logging_config import LogContext
from models.record import Record
from services.record_store import RecordStore, StoreError
from services.sheets import SheetsGateway, SheetsGatewayError

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one create/edit/delete."""
    record: Record
    mirror_ok: bool = True
    warning: Optional[str] = None

    @property
    def partial(self) -> bool:
        """True when the store write succeeded but the mirror did not."""
        return not self.mirror_ok

    @property
    def sheet_row(self) -> Optional[int]:
        return self.record.sheet_row


class SyncCoordinator:
    """Runs record mutations against the store, then mirrors them to the sheet."""

    def __init__(self, store: RecordStore, gateway: SheetsGateway):
        self.store = store
        self.gateway = gateway

    def create(self, fields: Mapping[str, Any]) -> SyncResult:
        record = self.store.insert(fields)

        with LogContext(record_id=record.id):
            try:
                self.gateway.ensure_headers()
                row = self.gateway.append_row(record.to_row())
            except SheetsGatewayError as e:
                logger.warning(f"Record created but sheet append failed: {e}")
                return SyncResult(
                    record=record,
                    mirror_ok=False,
                    warning=f"Added, but failed to append to sheet: {e}",
                )

            try:
                self.store.set_sheet_row(record.id, row)
            except StoreError as e:
                logger.warning(f"Sheet row {row} written but pointer not saved: {e}")
                return SyncResult(
                    record=record,
                    mirror_ok=False,
                    warning=f"Added to sheet row {row}, but failed to save the row reference: {e}",
                )

            record.sheet_row = row
            logger.info(f"Record mirrored to sheet row {row}")
            return SyncResult(record=record)

    def edit(self, record_id: str, fields: Mapping[str, Any]) -> SyncResult:
        record = self.store.update_fields(record_id, fields)

        if not record.sheet_row:
            return SyncResult(record=record)

        with LogContext(record_id=record.id, sheet_row=record.sheet_row):
            try:
                self.gateway.update_row(record.sheet_row, record.to_row())
            except SheetsGatewayError as e:
                logger.warning(f"Record saved but sheet update failed: {e}")
                return SyncResult(
                    record=record,
                    mirror_ok=False,
                    warning=f"Saved, but failed to update sheet: {e}",
                )

        return SyncResult(record=record)

    def delete(self, record_id: str) -> SyncResult:
        record = self.store.get(record_id)
        pointer = record.sheet_row

        self.store.delete(record_id)

        if not pointer:
            return SyncResult(record=record)

        with LogContext(record_id=record.id, sheet_row=pointer):
            try:
                self.gateway.clear_row(pointer)
            except SheetsGatewayError as e:
                logger.warning(f"Record deleted but sheet row clear failed: {e}")
                return SyncResult(
                    record=record,
                    mirror_ok=False,
                    warning=f"Deleted, but failed to delete in sheet: {e}",
                )

        return SyncResult(record=record)
