"""Health check endpoints."""
from typing import Dict, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_store
from core.config import get_config
from services.record_store import RecordStore, StoreError

router = APIRouter()

APP_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
def health_check(store: RecordStore = Depends(get_store)):
    """
    Health check endpoint.

    Returns system health status including:
    - Record store connectivity
    - Google Sheets configuration status
    """
    checks = {}
    overall_status = "ok"

    try:
        checks["store"] = {
            "status": "ok",
            "path": str(store.db_path),
            "records": store.count(),
        }
    except StoreError as e:
        checks["store"] = {"status": "error", "error": str(e)}
        overall_status = "unhealthy"

    sheets_errors = get_config().sheets.validate()
    checks["sheets"] = {
        "status": "ok" if not sheets_errors else "not_configured",
        "sheet_name": get_config().sheets.sheet_name,
        "errors": sheets_errors,
    }
    if sheets_errors and overall_status == "ok":
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=APP_VERSION,
        checks=checks,
    )
