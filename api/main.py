"""FastAPI backend for the car entry tracker.

Run with: uvicorn api.main:app --reload --port 8000

Endpoints:
- /api/records - Car entry CRUD, mirrored to Google Sheets
- /api/sheets - Direct sheet row append/update/delete
- /api/health - Health check
"""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api.routes import health, records, sheets
from core.config import get_config
from core.logging_config import current_request_id, generate_request_id, setup_logging


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.

    - Uses the client's X-Request-ID header or generates a short UUID
    - Sets it in the logging context variable
    - Adds X-Request-ID header to responses
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or generate_request_id()

        token = current_request_id.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            current_request_id.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Sheet routes answer bad bodies with 400 and their own error shape."""
    if request.url.path.startswith(sheets.router.prefix):
        return sheets.validation_error_response(exc)
    return await request_validation_exception_handler(request, exc)


def create_app() -> FastAPI:
    config = get_config()
    setup_logging(config.log_level, config.log_format)

    app = FastAPI(
        title="Car Entry Tracker",
        description="Car, driver and customer entries mirrored to Google Sheets",
        version=health.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(records.router)
    app.include_router(sheets.router)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    return app


app = create_app()
