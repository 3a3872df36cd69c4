"""Google Sheets mirror for car entries.

This module provides:
1. Lazy header row creation on an empty tab
2. Appending an entry row and reporting the row number it landed on
3. Overwriting or blanking one entry row by row number

Rows are addressed by number only. The record store keeps the number of the
row each entry was appended to and passes it back for updates and clears.
"""
import logging
from typing import Any, Callable, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import ConfigurationError, SheetsConfig
from schemas.sheet_columns import (
    COLUMN_COUNT,
    LAST_COLUMN,
    columns_range,
    get_header_row,
    quote_sheet_name,
    row_range,
)

logger = logging.getLogger(__name__)


class SheetsGatewayError(Exception):
    """Base error for spreadsheet mirror operations."""
    pass


class SheetsConfigurationError(SheetsGatewayError, ConfigurationError):
    """Spreadsheet id or service account credentials are missing."""
    pass


class SheetAddressError(SheetsGatewayError):
    """Row number, row width or tab name does not address a valid range."""
    pass


class SheetsRemoteError(SheetsGatewayError):
    """The Sheets API rejected or failed a request."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    @classmethod
    def from_http_error(cls, exc: HttpError) -> "SheetsRemoteError":
        reason = getattr(exc, "reason", None) or str(exc)
        status = getattr(getattr(exc, "resp", None), "status", None)
        return cls(reason, status=int(status) if status is not None else None)


def validate_row_number(row: Any) -> int:
    """Return row as a positive int, or raise SheetAddressError."""
    if isinstance(row, bool):
        raise SheetAddressError(f"Row must be a positive integer: {row!r}")
    if isinstance(row, int):
        value = row
    elif isinstance(row, str) and row.strip().isdigit():
        value = int(row.strip())
    else:
        raise SheetAddressError(f"Row must be a positive integer: {row!r}")
    if value < 1:
        raise SheetAddressError(f"Row must be a positive integer: {row!r}")
    return value


class SheetsGateway:
    """Google Sheets API client for the car entry mirror."""

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

    def __init__(self, config: SheetsConfig, service=None):
        self.config = config
        self._service = service
        self._sheet_ids: dict = {}  # tab title -> numeric sheetId

    # =========================================================================
    # API Service
    # =========================================================================

    def _require_config(self) -> None:
        errors = self.config.validate()
        if errors:
            raise SheetsConfigurationError("; ".join(errors))

    def _get_service(self):
        """Get or create the Sheets API service."""
        self._require_config()
        if self._service is not None:
            return self._service

        from google.oauth2 import service_account
        from googleapiclient.discovery import build

        try:
            creds = service_account.Credentials.from_service_account_info(
                self.config.service_account_info(),
                scopes=self.SCOPES,
            )
        except ValueError as e:
            raise SheetsConfigurationError(f"Invalid service account credentials: {e}") from e

        self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._service

    def _tab(self, tab: Optional[str]) -> str:
        return tab or self.config.sheet_name

    def _execute(self, request):
        try:
            return request.execute()
        except HttpError as e:
            raise SheetsRemoteError.from_http_error(e) from e
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            raise SheetsRemoteError(str(e)) from e

    def _read(self, build_request: Callable[[], Any]):
        """Execute a read-only request under the configured retry policy."""
        retrying = Retrying(
            stop=stop_after_attempt(self.config.read_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(SheetsRemoteError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._execute(build_request())

    def _get_sheet_id(self, tab: str) -> int:
        """Get the numeric sheetId for a tab title."""
        if tab in self._sheet_ids:
            return self._sheet_ids[tab]

        service = self._get_service()
        spreadsheet = self._read(lambda: service.spreadsheets().get(
            spreadsheetId=self.config.spreadsheet_id,
            fields="sheets.properties(sheetId,title)",
        ))

        for sheet in spreadsheet.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == tab:
                self._sheet_ids[tab] = props.get("sheetId", 0)
                return self._sheet_ids[tab]

        raise SheetAddressError(f"Sheet tab not found: {tab}")

    # =========================================================================
    # Header Management
    # =========================================================================

    def ensure_headers(self, tab: Optional[str] = None) -> bool:
        """Write header labels into row 1 if it is empty. Returns True if written."""
        tab = self._tab(tab)
        service = self._get_service()
        self._get_sheet_id(tab)

        header_range = f"{quote_sheet_name(tab)}!A1:{LAST_COLUMN}1"
        result = self._read(lambda: service.spreadsheets().values().get(
            spreadsheetId=self.config.spreadsheet_id,
            range=header_range,
        ))

        values = result.get("values", [])
        if values and any(cell != "" for cell in values[0]):
            return False

        self._execute(service.spreadsheets().values().update(
            spreadsheetId=self.config.spreadsheet_id,
            range=header_range,
            valueInputOption="RAW",
            body={"values": [get_header_row()]},
        ))
        logger.info(f"Created headers in sheet {tab}")
        return True

    # =========================================================================
    # Row Operations
    # =========================================================================

    def _count_rows(self, tab: str) -> int:
        """Number of rows up to and including the last non-empty one."""
        service = self._get_service()
        result = self._read(lambda: service.spreadsheets().values().get(
            spreadsheetId=self.config.spreadsheet_id,
            range=columns_range(tab),
            majorDimension="ROWS",
        ))
        return len(result.get("values", []))

    def append_row(self, values: List[str], tab: Optional[str] = None) -> int:
        """Append one entry row after the last populated row. Returns its row number."""
        tab = self._tab(tab)
        if len(values) != COLUMN_COUNT:
            raise SheetAddressError(
                f"Row must have {COLUMN_COUNT} values, got {len(values)}"
            )

        service = self._get_service()
        sheet_id = self._get_sheet_id(tab)

        request = {
            "appendCells": {
                "sheetId": sheet_id,
                "rows": [{
                    "values": [
                        {"userEnteredValue": {"stringValue": value}} for value in values
                    ],
                }],
                "fields": "userEnteredValue",
            }
        }
        self._execute(service.spreadsheets().batchUpdate(
            spreadsheetId=self.config.spreadsheet_id,
            body={"requests": [request]},
        ))

        row_number = self._count_rows(tab)
        if row_number < 1:
            raise SheetsRemoteError(f"Appended row not found in sheet {tab}")

        logger.info(f"Appended record to row {row_number}")
        return row_number

    def update_row(self, row: Any, values: List[str], tab: Optional[str] = None) -> str:
        """Overwrite the entry row at the given row number. Returns the range written."""
        tab = self._tab(tab)
        row_number = validate_row_number(row)
        if len(values) != COLUMN_COUNT:
            raise SheetAddressError(
                f"Row must have {COLUMN_COUNT} values, got {len(values)}"
            )

        service = self._get_service()
        self._get_sheet_id(tab)

        target = row_range(tab, row_number)
        self._execute(service.spreadsheets().values().update(
            spreadsheetId=self.config.spreadsheet_id,
            range=target,
            valueInputOption="USER_ENTERED",
            body={"values": [list(values)]},
        ))

        logger.info(f"Updated record at row {row_number}")
        return target

    def clear_row(self, row: Any, tab: Optional[str] = None) -> str:
        """Blank the entry row at the given row number. Returns the cleared range."""
        tab = self._tab(tab)
        row_number = validate_row_number(row)

        service = self._get_service()
        self._get_sheet_id(tab)

        target = row_range(tab, row_number)
        self._execute(service.spreadsheets().values().clear(
            spreadsheetId=self.config.spreadsheet_id,
            range=target,
            body={},
        ))

        logger.info(f"Cleared record at row {row_number}")
        return target
