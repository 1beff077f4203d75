"""CSV decoding: header row + one dict per non-empty line."""

from __future__ import annotations

import csv
import io
import re

from tabflow.core.logging import get_logger
from tabflow.data.store import CellValue, Row
from tabflow.ingestion.errors import EmptyFileError, ParseError

logger = get_logger(__name__)

_INT = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(r"[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?")

# Delimiters tried when sniffing the dialect.
DELIMITERS = ",;\t|"


def infer_value(text: str) -> CellValue:
    """Turn numeric / boolean text into int, float or bool.

    Only text that reads back identically is converted, so "00501", "1.50",
    "1e3", "2.0" and "True" stay strings and search on the file text works.
    """
    if _INT.fullmatch(text):
        value = int(text)
        return value if str(value) == text else text
    if _FLOAT.fullmatch(text):
        number = float(text)
        if number.is_integer() or repr(number) != text:
            return text
        return number
    if text in ("true", "false"):
        return text == "true"
    return text


def unique_headers(raw: list) -> list[str]:
    """Blank headers become ``__EMPTY``; duplicates get ``_1``, ``_2`` …"""
    seen: dict[str, int] = {}
    headers = []
    for value in raw:
        name = str(value).strip() if value is not None else ""
        name = name or "__EMPTY"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        headers.append(name)
    return headers


def _dialect(sample: str) -> type[csv.Dialect]:
    try:
        return csv.Sniffer().sniff(sample, delimiters=DELIMITERS)
    except csv.Error:
        return csv.excel


def parse_csv_text(text: str, infer_types: bool = True, path: str | None = None) -> list[Row]:
    """Decode CSV text into rows keyed by the header row."""
    try:
        reader = csv.reader(io.StringIO(text), _dialect(text[:4096]))
        lines = [line for line in reader if any(cell.strip() for cell in line)]
    except csv.Error as exc:
        raise ParseError(f"Error parsing CSV: {exc}", path=path) from exc

    if len(lines) < 2:
        raise EmptyFileError("No data found in the CSV file", path=path)

    headers = unique_headers(lines[0])
    rows: list[Row] = []
    ragged = 0
    for line in lines[1:]:
        if len(line) != len(headers):
            ragged += 1
        rows.append({
            header: infer_value(cell) if infer_types else cell
            for header, cell in zip(headers, line)
        })

    if ragged:
        logger.warning("CSV rows with mismatched field count", path=path, rows=ragged)

    return rows


def read_csv(
    path: str,
    encoding: str = "utf-8-sig",
    infer_types: bool = True,
) -> list[Row]:
    try:
        with open(path, encoding=encoding, newline="") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        raise ParseError(f"Error parsing CSV: {exc}", path=path) from exc
    except OSError as exc:
        raise ParseError(f"Error reading file: {exc}", path=path) from exc

    return parse_csv_text(text, infer_types=infer_types, path=path)
