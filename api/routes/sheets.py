"""
Google Sheets Mirror Routes

Row-level access to the mirrored sheet. Every failure answers 400 with
``{"ok": false, "error": message}``.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import get_gateway
from core.config import ConfigurationError
from schemas.sheet_columns import encode_row, row_range
from services.sheets import SheetsGateway, SheetsGatewayError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sheets", tags=["Google Sheets"])


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================


class SheetUpdateRequest(BaseModel):
    """Request model for overwriting a sheet row."""

    row: Optional[Any] = None
    data: Optional[Dict[str, Any]] = None


class SheetDeleteRequest(BaseModel):
    """Request model for clearing a sheet row."""

    row: Optional[Any] = None


class AppendResponse(BaseModel):
    ok: bool = True
    row: int
    updatedRange: str


class UpdateResponse(BaseModel):
    ok: bool = True
    range: str


class DeleteResponse(BaseModel):
    ok: bool = True
    clearedRange: str


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": message})


def validation_error_response(exc: RequestValidationError) -> JSONResponse:
    """Answer a body that failed parsing or validation in the sheets error shape."""
    errors = exc.errors()
    if not errors:
        return _error("Invalid request body")

    first = errors[0]
    if first.get("type") == "json_invalid":
        return _error("Invalid JSON body")

    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg") or "Invalid request body"
    return _error(f"{location}: {message}" if location else message)


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.post("/append", response_model=AppendResponse)
def append_row(
    entry: Dict[str, Any] = Body(...),
    gateway: SheetsGateway = Depends(get_gateway),
):
    """Append an entry to the sheet, writing the header row first if the tab is empty."""
    try:
        gateway.ensure_headers()
        row = gateway.append_row(encode_row(entry))
    except (SheetsGatewayError, ConfigurationError) as e:
        logger.warning(f"Sheet append failed: {e}")
        return _error(str(e) or "Append failed")

    return AppendResponse(row=row, updatedRange=row_range(gateway.config.sheet_name, row))


@router.post("/update", response_model=UpdateResponse)
def update_row(
    request: SheetUpdateRequest,
    gateway: SheetsGateway = Depends(get_gateway),
):
    """Overwrite the sheet row at ``row`` with ``data``."""
    if not request.row or request.data is None:
        return _error("row and data are required")

    try:
        target = gateway.update_row(request.row, encode_row(request.data))
    except (SheetsGatewayError, ConfigurationError) as e:
        logger.warning(f"Sheet update failed: {e}")
        return _error(str(e) or "Update failed")

    return UpdateResponse(range=target)


@router.post("/delete", response_model=DeleteResponse)
def delete_row(
    request: SheetDeleteRequest,
    gateway: SheetsGateway = Depends(get_gateway),
):
    """Blank the sheet row at ``row``. Other rows keep their numbers."""
    if not request.row:
        return _error("row is required")

    try:
        target = gateway.clear_row(request.row)
    except (SheetsGatewayError, ConfigurationError) as e:
        logger.warning(f"Sheet clear failed: {e}")
        return _error(str(e) or "Delete failed")

    return DeleteResponse(clearedRange=target)
