"""
Car Entry Routes

CRUD operations for car entries. Writes go to the record store first and are
then mirrored to the sheet. A mirror failure does not fail the request; the
response carries ``mirrored: false`` and a warning instead.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from api.dependencies import get_coordinator, get_store
from services.record_store import RecordNotFoundError, RecordStore, StoreError
from services.sync import SyncCoordinator, SyncResult

router = APIRouter(prefix="/api/records", tags=["Records"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class RecordMutationResponse(BaseModel):
    """Response model for create/update."""

    ok: bool = True
    record: Dict[str, Any]
    mirrored: bool
    warning: Optional[str] = None


class RecordDeleteResponse(BaseModel):
    """Response model for delete."""

    ok: bool = True
    id: str
    mirrored: bool
    warning: Optional[str] = None


def _mutation_response(result: SyncResult) -> RecordMutationResponse:
    return RecordMutationResponse(
        record=result.record.to_json(),
        mirrored=result.mirror_ok,
        warning=result.warning,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.get("/", response_model=List[Dict[str, Any]])
def list_records(store: RecordStore = Depends(get_store)):
    """List all entries, newest first."""
    try:
        return [record.to_json() for record in store.list_records()]
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{record_id}", response_model=Dict[str, Any])
def get_record(record_id: str, store: RecordStore = Depends(get_store)):
    """Get one entry."""
    try:
        return store.get(record_id).to_json()
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/", response_model=RecordMutationResponse, status_code=201)
def create_record(
    entry: Dict[str, Any] = Body(...),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Create an entry and append it to the sheet."""
    try:
        result = coordinator.create(entry)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=f"Failed to add entry: {e}")
    return _mutation_response(result)


@router.put("/{record_id}", response_model=RecordMutationResponse)
def update_record(
    record_id: str,
    entry: Dict[str, Any] = Body(...),
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Save changes to an entry and its sheet row, if it has one."""
    try:
        result = coordinator.edit(record_id, entry)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")
    except StoreError as e:
        raise HTTPException(status_code=400, detail=f"Failed to save changes: {e}")
    return _mutation_response(result)


@router.delete("/{record_id}", response_model=RecordDeleteResponse)
def delete_record(
    record_id: str,
    coordinator: SyncCoordinator = Depends(get_coordinator),
):
    """Delete an entry and blank its sheet row, if it has one."""
    try:
        result = coordinator.delete(record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")
    except StoreError as e:
        raise HTTPException(status_code=400, detail=f"Failed to delete entry: {e}")
    return RecordDeleteResponse(
        id=result.record.id,
        mirrored=result.mirror_ok,
        warning=result.warning,
    )
