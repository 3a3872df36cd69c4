"""
Google Sheets column layout for car entries.

Each car entry maps positionally onto sixteen text cells. Row 1 of the tab
holds the header labels; data rows start at row 2.

Column order here is the wire order. Appending a column changes the width of
every row range, so existing sheets need a header migration before it ships.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence


@dataclass(frozen=True)
class ColumnDef:
    """Column definition."""
    name: str          # attribute name on Record
    header: str        # label written to row 1
    json_key: str      # camelCase key used by the entry form
    default: str = ""  # value for a freshly created entry


COLUMNS: List[ColumnDef] = [
    ColumnDef("car_details", "Car Details", "carDetails"),
    ColumnDef("plate_no", "Plate No", "plateNo"),
    ColumnDef("email", "Email ID", "email"),
    ColumnDef("contact_number", "Contact Number", "contactNumber"),
    ColumnDef("customer_name", "Customer Name", "customerName"),
    ColumnDef("trips", "Trips", "trips"),
    ColumnDef("applied_at", "Applied at", "appliedAt"),
    ColumnDef("source", "Source", "source"),
    ColumnDef("owner_or_available_days", "Owner/ Available days", "ownerOrAvailableDays"),
    ColumnDef("driver_rating", "Driver Rating", "driverRating"),
    ColumnDef("satisfaction_rate", "Satisfaction Rate", "satisfactionRate", "100%"),
    ColumnDef("acceptance_rate", "Acceptance Rate", "acceptanceRate", "100%"),
    ColumnDef("cancellation_rate", "Cancellation Rate", "cancellationRate", "100%"),
    ColumnDef("tenure", "Tenure", "tenure"),
    ColumnDef("rating", "Rating", "rating"),
    ColumnDef("uber_pro", "Uber Pro", "uberPro"),
]

COLUMN_COUNT = len(COLUMNS)
FIELD_NAMES = tuple(col.name for col in COLUMNS)
SHEET_HEADERS = tuple(col.header for col in COLUMNS)

_JSON_TO_FIELD = {col.json_key: col.name for col in COLUMNS}


# =============================================================================
# ROW CODEC
# =============================================================================

def _cell(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_fields(entry: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase form keys onto attribute names, dropping unknown keys."""
    fields = {}
    for key, value in entry.items():
        name = _JSON_TO_FIELD.get(key, key)
        if name in FIELD_NAMES:
            fields[name] = value
    return fields


def encode_row(entry: Any) -> List[str]:
    """
    Convert an entry into the sixteen sheet cells, in column order.

    Accepts a mapping with snake_case or camelCase keys, or any object with
    the column attributes (such as a Record). Missing or None values become
    empty strings.
    """
    if entry is None:
        return [""] * COLUMN_COUNT

    if isinstance(entry, Mapping):
        fields = normalize_fields(entry)
        return [_cell(fields.get(name)) for name in FIELD_NAMES]

    return [_cell(getattr(entry, name, None)) for name in FIELD_NAMES]


def decode_row(values: Sequence[Any]) -> Dict[str, str]:
    """Create an attribute mapping from a sheet row, padding short rows."""
    row = list(values or [])
    while len(row) < COLUMN_COUNT:
        row.append("")
    return {name: _cell(row[i]) for i, name in enumerate(FIELD_NAMES)}


def default_fields() -> Dict[str, str]:
    """Field values for a blank entry form."""
    return {col.name: col.default for col in COLUMNS}


# =============================================================================
# COLUMN ADDRESSING
# =============================================================================

def column_index_to_letter(index: int) -> str:
    """Convert 0-based column index to A1 letters (A, B, ..., Z, AA, AB, ...)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")

    n = index + 1
    letters = []
    while n > 0:
        rem = (n - 1) % 26
        letters.append(chr(ord("A") + rem))
        n = (n - 1) // 26
    return "".join(reversed(letters))


def column_letter_to_index(letters: str) -> int:
    """Convert A1 column letters back to a 0-based index."""
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")

    n = 0
    for ch in letters.upper():
        if not "A" <= ch <= "Z":
            raise ValueError(f"Invalid column letters: {letters!r}")
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


LAST_COLUMN = column_index_to_letter(COLUMN_COUNT - 1)


def quote_sheet_name(sheet_name: str) -> str:
    """Quote a tab title for A1 notation."""
    return "'" + sheet_name.replace("'", "''") + "'"


def row_range(sheet_name: str, row: int) -> str:
    """A1 range covering every column of one row, e.g. 'Sheet1'!A2:P2."""
    return f"{quote_sheet_name(sheet_name)}!A{row}:{LAST_COLUMN}{row}"


def columns_range(sheet_name: str) -> str:
    """A1 range covering every column of the tab, e.g. 'Sheet1'!A:P."""
    return f"{quote_sheet_name(sheet_name)}!A:{LAST_COLUMN}"


def get_header_row() -> List[str]:
    """Get header row for sheet."""
    return list(SHEET_HEADERS)
