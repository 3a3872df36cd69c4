"""In-memory stand-in for the Google Sheets v4 client used by the tests."""

import json
import re

import httplib2
from googleapiclient.errors import HttpError

RANGE_RE = re.compile(r"^'((?:[^']|'')*)'!([A-Z]+)(\d*)(?::([A-Z]+)(\d*))?$")


def _col_index(letters: str) -> int:
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def make_http_error(status: int = 500, message: str = "Backend error") -> HttpError:
    """Build an HttpError as googleapiclient raises it."""
    resp = httplib2.Response({"status": str(status)})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content, uri="https://sheets.googleapis.com/v4/spreadsheets/test")


class FakeRequest:
    def __init__(self, service, op, fn):
        self._service = service
        self._op = op
        self._fn = fn

    def execute(self):
        self._service.calls.append(self._op)
        if self._op in self._service.fail_on:
            raise self._service.fail_on[self._op]
        return self._fn()


class FakeValues:
    def __init__(self, service):
        self._service = service

    def get(self, spreadsheetId, range, majorDimension="ROWS"):
        return FakeRequest(self._service, "values.get", lambda: self._service._get(range))

    def update(self, spreadsheetId, range, valueInputOption, body):
        return FakeRequest(
            self._service, "values.update", lambda: self._service._update(range, body["values"])
        )

    def clear(self, spreadsheetId, range, body=None):
        return FakeRequest(self._service, "values.clear", lambda: self._service._clear(range))


class FakeSpreadsheets:
    def __init__(self, service):
        self._service = service

    def values(self):
        return FakeValues(self._service)

    def get(self, spreadsheetId, fields=None):
        return FakeRequest(self._service, "spreadsheets.get", self._service._metadata)

    def batchUpdate(self, spreadsheetId, body):
        return FakeRequest(
            self._service, "batchUpdate", lambda: self._service._batch_update(body["requests"])
        )


class FakeSheetsService:
    """
    In-memory stand-in for the Sheets v4 discovery client.

    Each tab is a list of rows; trailing empty cells and rows are trimmed on
    read the way the real API does.
    """

    def __init__(self, tabs=None):
        self.tabs = {name: [] for name in (tabs or ["Sheet1"])}
        self.sheet_ids = {name: 1000 + i for i, name in enumerate(self.tabs)}
        self.calls = []
        self.fail_on = {}

    def spreadsheets(self):
        return FakeSpreadsheets(self)

    # -- helpers ---------------------------------------------------------

    def _parse(self, a1):
        match = RANGE_RE.match(a1)
        assert match, f"Unexpected range: {a1}"
        tab = match.group(1).replace("''", "'")
        if tab not in self.tabs:
            raise make_http_error(400, f"Unable to parse range: {a1}")
        c1 = _col_index(match.group(2))
        r1 = int(match.group(3)) if match.group(3) else 1
        c2 = _col_index(match.group(4)) if match.group(4) else c1
        r2 = int(match.group(5)) if match.group(5) else None
        return tab, r1, c1, r2, c2

    def _ensure(self, tab, row, col):
        grid = self.tabs[tab]
        while len(grid) < row:
            grid.append([])
        line = grid[row - 1]
        while len(line) <= col:
            line.append("")
        return line

    def row(self, row, tab="Sheet1"):
        """Row contents with trailing blanks trimmed."""
        grid = self.tabs[tab]
        if row > len(grid):
            return []
        line = list(grid[row - 1])
        while line and line[-1] == "":
            line.pop()
        return line

    def _last_row(self, tab):
        for i in range(len(self.tabs[tab]), 0, -1):
            if self.row(i, tab):
                return i
        return 0

    # -- operations ------------------------------------------------------

    def _get(self, a1):
        tab, r1, c1, r2, c2 = self._parse(a1)
        last = self._last_row(tab) if r2 is None else min(r2, self._last_row(tab))
        values = []
        for i in range(r1, last + 1):
            line = self.row(i, tab)[c1:c2 + 1]
            values.append(line)
        while values and not values[-1]:
            values.pop()
        result = {"range": a1, "majorDimension": "ROWS"}
        if values:
            result["values"] = values
        return result

    def _update(self, a1, values):
        tab, r1, c1, _, _ = self._parse(a1)
        for offset, row_values in enumerate(values):
            for j, value in enumerate(row_values):
                line = self._ensure(tab, r1 + offset, c1 + j)
                line[c1 + j] = value
        return {"updatedRange": a1, "updatedRows": len(values)}

    def _clear(self, a1):
        tab, r1, c1, r2, c2 = self._parse(a1)
        for i in range(r1, (r2 or r1) + 1):
            if i <= len(self.tabs[tab]):
                line = self.tabs[tab][i - 1]
                for j in range(c1, min(c2 + 1, len(line))):
                    line[j] = ""
        return {"clearedRange": a1}

    def _metadata(self):
        return {
            "sheets": [
                {"properties": {"sheetId": self.sheet_ids[name], "title": name}}
                for name in self.tabs
            ]
        }

    def _batch_update(self, requests):
        by_id = {sheet_id: name for name, sheet_id in self.sheet_ids.items()}
        for request in requests:
            append = request["appendCells"]
            tab = by_id[append["sheetId"]]
            for row in append["rows"]:
                target = self._last_row(tab) + 1
                cells = [cell["userEnteredValue"]["stringValue"] for cell in row["values"]]
                for j, value in enumerate(cells):
                    line = self._ensure(tab, target, j)
                    line[j] = value
        return {"replies": [{} for _ in requests]}


