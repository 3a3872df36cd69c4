"""Services for the car entry tracker."""

from services.record_store import RecordNotFoundError, RecordStore, StoreError
from services.sheets import (
    SheetAddressError,
    SheetsConfigurationError,
    SheetsGateway,
    SheetsGatewayError,
    SheetsRemoteError,
)
from services.sync import SyncCoordinator, SyncResult

__all__ = [
    # Record store
    "RecordStore",
    "StoreError",
    "RecordNotFoundError",
    # Google Sheets
    "SheetsGateway",
    "SheetsGatewayError",
    "SheetsConfigurationError",
    "SheetAddressError",
    "SheetsRemoteError",
    # Sync
    "SyncCoordinator",
    "SyncResult",
]
