"""Shared service instances for request handlers.

Built once from the process configuration. Tests replace them through
``app.dependency_overrides``.
"""
from typing import Optional

from fastapi import Depends

from core.config import get_config
from services.record_store import RecordStore
from services.sheets import SheetsGateway
from services.sync import SyncCoordinator

_store: Optional[RecordStore] = None
_gateway: Optional[SheetsGateway] = None


def get_store() -> RecordStore:
    global _store
    if _store is None:
        _store = RecordStore(get_config().store.db_path)
    return _store


def get_gateway() -> SheetsGateway:
    global _gateway
    if _gateway is None:
        _gateway = SheetsGateway(get_config().sheets)
    return _gateway


def get_coordinator(
    store: RecordStore = Depends(get_store),
    gateway: SheetsGateway = Depends(get_gateway),
) -> SyncCoordinator:
    return SyncCoordinator(store, gateway)


def reset_dependencies() -> None:
    """Drop cached instances (for testing)."""
    global _store, _gateway
    _store = None
    _gateway = None
