"""
Dataset loading — picks a reader from the file extension.

    dataset = load_dataset("orders.xlsx")
    dataset.rows, dataset.columns

Raises ParseError, EmptyFileError or UnsupportedFormatError; callers treat
every one of them as "no dataset available".
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from typing import Any

from tabflow.core.constants import FileFormat
from tabflow.core.logging import get_logger
from tabflow.data.store import Row, columns_from_rows
from tabflow.ingestion.csv_reader import read_csv
from tabflow.ingestion.errors import ParseError, UnsupportedFormatError
from tabflow.ingestion.excel_reader import read_excel

logger = get_logger(__name__)

# Extension → format mapping
EXTENSION_MAP: dict[str, FileFormat] = {
    ".csv": FileFormat.CSV,
    ".xlsx": FileFormat.XLSX,
    ".xls": FileFormat.XLS,
}


@dataclass
class Dataset:
    """Rows and columns produced from one file."""

    rows: list[Row]
    columns: list[str]
    source: str
    format: FileFormat
    fingerprint: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_summary_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "format": self.format,
            "rows": len(self.rows),
            "columns": list(self.columns),
            "fingerprint": self.fingerprint,
        }


def detect_format(path: str) -> FileFormat:
    ext = os.path.splitext(path)[1].lower()
    if ext not in EXTENSION_MAP:
        raise UnsupportedFormatError(
            "Unsupported file format. Please upload CSV or Excel files.",
            path=path,
            details={"extension": ext},
        )
    return EXTENSION_MAP[ext]


def compute_file_hash(filepath: str, algorithm: str = "sha256") -> str:
    """Hash of a local file, logged so repeated uploads can be recognised."""
    h = hashlib.new(algorithm)
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def load_dataset(
    path: str,
    *,
    infer_types: bool = True,
    encoding: str = "utf-8-sig",
) -> Dataset:
    fmt = detect_format(path)
    if not os.path.isfile(path):
        raise ParseError("Error reading file", path=path, details={"reason": "not found"})

    if fmt == FileFormat.CSV:
        rows = read_csv(path, encoding=encoding, infer_types=infer_types)
    else:
        rows = read_excel(path)

    dataset = Dataset(
        rows=rows,
        columns=columns_from_rows(rows),
        source=os.path.basename(path),
        format=fmt,
        fingerprint=compute_file_hash(path),
    )
    logger.info("Dataset loaded", **dataset.to_summary_dict())
    return dataset
