"""
XLS/XLSX decoding — first sheet, first row is the header.

Supports both .xls (via xlrd) and .xlsx (via openpyxl) formats behind a
uniform sheet adapter.  Empty cells are left out of the row dict, and rows
with no values at all are skipped.
"""

from __future__ import annotations

import datetime as dt
import os
from typing import Any, Iterator

from tabflow.core.logging import get_logger
from tabflow.data.store import CellValue, Row
from tabflow.ingestion.csv_reader import unique_headers
from tabflow.ingestion.errors import EmptyFileError, ParseError, UnsupportedFormatError

logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════
#  Sheet Adapters — uniform interface over xlrd / openpyxl
# ═══════════════════════════════════════════════════════════

class XlrdSheetAdapter:
    """Adapter for xlrd sheets (0-based indexing)."""

    def __init__(self, sheet, datemode: int) -> None:
        self._s = sheet
        self._datemode = datemode
        self.nrows = sheet.nrows
        self.ncols = sheet.ncols

    def iter_rows(self) -> Iterator[list[Any]]:
        import xlrd

        for r in range(self.nrows):
            values = []
            for c in range(self.ncols):
                cell = self._s.cell(r, c)
                if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                    values.append(None)
                elif cell.ctype == xlrd.XL_CELL_DATE:
                    values.append(xlrd.xldate.xldate_as_datetime(cell.value, self._datemode))
                elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
                    values.append(bool(cell.value))
                elif cell.ctype == xlrd.XL_CELL_ERROR:
                    values.append(None)
                else:
                    values.append(cell.value)
            yield values


class OpenpyxlSheetAdapter:
    """Adapter for openpyxl worksheets."""

    def __init__(self, ws) -> None:
        self._ws = ws

    def iter_rows(self) -> Iterator[list[Any]]:
        for values in self._ws.iter_rows(values_only=True):
            yield list(values)


def _load_sheet(path: str):
    """Load the first sheet from an XLS or XLSX file."""
    extension = os.path.splitext(path)[1].lower()

    if extension == ".xls":
        try:
            import xlrd
        except ImportError as exc:
            raise ImportError(
                "xlrd is required for .xls files. Install with: pip install xlrd"
            ) from exc
        workbook = xlrd.open_workbook(path)
        return XlrdSheetAdapter(workbook.sheet_by_index(0), workbook.datemode)

    if extension == ".xlsx":
        try:
            from openpyxl import load_workbook
        except ImportError as exc:
            raise ImportError(
                "openpyxl is required for .xlsx files. Install with: pip install openpyxl"
            ) from exc
        workbook = load_workbook(path, read_only=True, data_only=True)
        return OpenpyxlSheetAdapter(workbook.worksheets[0])

    raise UnsupportedFormatError(f"Unsupported extension: {extension}", path=path)


# ═══════════════════════════════════════════════════════════
#  Cell normalisation
# ═══════════════════════════════════════════════════════════

def _cell(value: Any) -> CellValue:
    """Map a spreadsheet value onto the row scalar types."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def read_excel(path: str) -> list[Row]:
    """Rows of the first sheet keyed by its header row."""
    try:
        sheet = _load_sheet(path)
        raw_rows = list(sheet.iter_rows())
    except (UnsupportedFormatError, ImportError):
        raise
    except Exception as exc:
        raise ParseError(f"Error parsing Excel file: {exc}", path=path) from exc

    if not raw_rows:
        raise EmptyFileError("No data found in the Excel file", path=path)

    headers = unique_headers(raw_rows[0])
    rows: list[Row] = []
    for values in raw_rows[1:]:
        row: Row = {}
        for header, value in zip(headers, values):
            cell = _cell(value)
            if cell is not None:
                row[header] = cell
        if row:
            rows.append(row)

    if not rows:
        raise EmptyFileError("No data found in the Excel file", path=path)

    logger.debug("Excel sheet decoded", path=path, rows=len(rows), columns=len(headers))
    return rows
