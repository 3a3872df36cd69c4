"""Centralized configuration management with validation."""
import os
from dataclasses import dataclass, field
from typing import Optional, List
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_SHEET_TAB = "Sheet1"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


def _mask_secret(value: str, visible_chars: int = 4) -> str:
    """Mask a secret value for logging, showing only first few chars."""
    if not value:
        return "<empty>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def _parse_attempts(value: str) -> int:
    """Parse a retry attempt count. Non-numeric values become 0 and fail validation."""
    try:
        return int(value)
    except ValueError:
        return 0


def _normalize_private_key(value: str) -> str:
    """Turn literal backslash-n sequences from env files into newlines."""
    if "\\n" in value:
        return value.replace("\\n", "\n")
    return value


@dataclass
class SheetsConfig:
    """Google Sheets mirror configuration."""
    spreadsheet_id: str = ""
    sheet_name: str = DEFAULT_SHEET_TAB
    service_account_email: str = ""
    private_key: str = ""
    token_uri: str = "https://oauth2.googleapis.com/token"
    read_attempts: int = 1

    def validate(self) -> List[str]:
        """Validate sheets configuration, return list of errors."""
        errors = []
        if not self.service_account_email or not self.private_key:
            errors.append("Missing Google service account env "
                          "(GOOGLE_SERVICE_ACCOUNT_EMAIL, GOOGLE_PRIVATE_KEY)")
        if not self.spreadsheet_id:
            errors.append("Missing SHEET_ID env")
        if self.read_attempts < 1:
            errors.append("SHEETS_READ_ATTEMPTS must be a whole number of at least 1")
        return errors

    def service_account_info(self) -> dict:
        """Build the service account mapping expected by google-auth."""
        return {
            "type": "service_account",
            "client_email": self.service_account_email,
            "private_key": self.private_key,
            "token_uri": self.token_uri,
        }

    def __repr__(self) -> str:
        return (f"SheetsConfig(spreadsheet_id={self.spreadsheet_id}, sheet_name={self.sheet_name}, "
                f"service_account_email={self.service_account_email}, "
                f"private_key={_mask_secret(self.private_key)})")


@dataclass
class StoreConfig:
    """Record store configuration."""
    db_path: str = "data/car_entries.db"

    def validate(self) -> List[str]:
        """Validate storage configuration, return list of errors."""
        errors = []
        db_parent = Path(self.db_path).parent
        if str(db_parent) != "." and not db_parent.exists():
            try:
                db_parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Cannot create records DB directory: {e}")
        return errors


@dataclass
class AppConfig:
    """Main application configuration."""
    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    log_level: str = "INFO"
    log_format: str = "text"  # "json" or "text"

    def validate(self, require_sheets: bool = True) -> None:
        """Validate all configuration, raise ConfigurationError if invalid."""
        errors = []

        if require_sheets:
            errors.extend(self.sheets.validate())
        errors.extend(self.store.validate())

        if errors:
            raise ConfigurationError("Configuration errors:\n  - " + "\n  - ".join(errors))

    def __repr__(self) -> str:
        return (f"AppConfig(\n  sheets={self.sheets},\n  store={self.store},\n  "
                f"log_level={self.log_level}, log_format={self.log_format}\n)")


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables."""
    load_dotenv()

    config = AppConfig(
        sheets=SheetsConfig(
            spreadsheet_id=os.getenv("SHEET_ID", ""),
            sheet_name=os.getenv("SHEET_TAB") or DEFAULT_SHEET_TAB,
            service_account_email=os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
            private_key=_normalize_private_key(os.getenv("GOOGLE_PRIVATE_KEY", "")),
            read_attempts=_parse_attempts(os.getenv("SHEETS_READ_ATTEMPTS", "1")),
        ),
        store=StoreConfig(
            db_path=os.getenv("RECORDS_DB_PATH", "data/car_entries.db"),
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format=os.getenv("LOG_FORMAT", "text"),
    )

    return config


# Singleton config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config_from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
