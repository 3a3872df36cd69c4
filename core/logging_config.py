"""Structured logging configuration with correlation fields."""
import logging
import json
import sys
import uuid
from datetime import datetime
from typing import Optional, Dict, Any
from contextvars import ContextVar

# Context variables for log correlation
current_request_id: ContextVar[str] = ContextVar("request_id", default="")
current_record_id: ContextVar[str] = ContextVar("record_id", default="")
current_sheet_row: ContextVar[str] = ContextVar("sheet_row", default="")


def generate_request_id() -> str:
    """Generate a short request ID for log correlation."""
    return uuid.uuid4().hex[:8]


def set_context(
    request_id: Optional[str] = None,
    record_id: Optional[str] = None,
    sheet_row: Optional[int] = None,
) -> None:
    """Set logging context variables."""
    if request_id is not None:
        current_request_id.set(request_id)
    if record_id is not None:
        current_record_id.set(record_id)
    if sheet_row is not None:
        current_sheet_row.set(str(sheet_row))


def clear_context() -> None:
    """Clear all logging context variables."""
    current_request_id.set("")
    current_record_id.set("")
    current_sheet_row.set("")


class JSONFormatter(logging.Formatter):
    """JSON log formatter with correlation fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id := current_request_id.get():
            log_data["request_id"] = request_id
        if record_id := current_record_id.get():
            log_data["record_id"] = record_id
        if sheet_row := current_sheet_row.get():
            log_data["sheet_row"] = sheet_row

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter with correlation fields."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S")

        ctx_parts = []
        if request_id := current_request_id.get():
            ctx_parts.append(f"req={request_id}")
        if record_id := current_record_id.get():
            ctx_parts.append(f"record={record_id[:12]}")
        if sheet_row := current_sheet_row.get():
            ctx_parts.append(f"row={sheet_row}")

        ctx_str = f" [{', '.join(ctx_parts)}]" if ctx_parts else ""

        msg = f"{timestamp} {record.levelname:8s} {record.name}{ctx_str}: {record.getMessage()}"

        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


def setup_logging(
    level: str = "INFO",
    format_type: str = "text",
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" for structured logs, "text" for human-readable
        logger_name: Specific logger name, or None for root logger

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper(), logging.INFO))

    if format_type.lower() == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    if logger_name is not None:
        logger.propagate = False

    return logger


_CONTEXT_VARS = {
    "request_id": current_request_id,
    "record_id": current_record_id,
    "sheet_row": current_sheet_row,
}


class LogContext:
    """Context manager for setting and clearing log context."""

    def __init__(
        self,
        request_id: Optional[str] = None,
        record_id: Optional[str] = None,
        sheet_row: Optional[int] = None,
    ):
        self.values = {
            "request_id": request_id,
            "record_id": record_id,
            "sheet_row": str(sheet_row) if sheet_row else None,
        }
        self._tokens = {}

    def __enter__(self):
        for name, value in self.values.items():
            if value:
                self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        return False
