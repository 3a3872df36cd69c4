"""Core modules for configuration and logging."""

from core.config import (
    AppConfig,
    ConfigurationError,
    SheetsConfig,
    StoreConfig,
    get_config,
    load_config_from_env,
    reset_config,
)
from core.logging_config import (
    LogContext,
    clear_context,
    generate_request_id,
    set_context,
    setup_logging,
)

__all__ = [
    "AppConfig",
    "SheetsConfig",
    "StoreConfig",
    "ConfigurationError",
    "load_config_from_env",
    "get_config",
    "reset_config",
    "setup_logging",
    "LogContext",
    "generate_request_id",
    "set_context",
    "clear_context",
]
