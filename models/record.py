"""Car entry record model."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from schemas.sheet_columns import COLUMNS, encode_row


@dataclass
class Record:
    """A car entry as held by the record store."""
    id: str
    created_at: str = ""

    # Vehicle
    car_details: str = ""
    plate_no: str = ""

    # Contact
    email: str = ""
    contact_number: str = ""
    customer_name: str = ""

    # Driver activity
    trips: str = ""
    applied_at: str = ""
    source: str = ""
    owner_or_available_days: str = ""
    driver_rating: str = ""
    satisfaction_rate: str = ""
    acceptance_rate: str = ""
    cancellation_rate: str = ""
    tenure: str = ""
    rating: str = ""
    uber_pro: str = ""

    # Mirror pointer: row number in the sheet, None until the append succeeds
    sheet_row: Optional[int] = None

    def to_row(self) -> list:
        """Convert to sheet row (list of strings)."""
        return encode_row(self)

    def to_json(self) -> Dict[str, Any]:
        """Serialize with the entry form's camelCase keys."""
        data: Dict[str, Any] = {"id": self.id, "createdAt": self.created_at}
        for col in COLUMNS:
            data[col.json_key] = getattr(self, col.name)
        data["sheetRow"] = self.sheet_row
        return data
