"""
Dataset ingestion — CSV and spreadsheet decoding for the row store.
"""

from tabflow.ingestion.errors import (
    EmptyFileError,
    IngestionError,
    ParseError,
    UnsupportedFormatError,
)
from tabflow.ingestion.loader import Dataset, detect_format, load_dataset

__all__ = [
    "Dataset",
    "EmptyFileError",
    "IngestionError",
    "ParseError",
    "UnsupportedFormatError",
    "detect_format",
    "load_dataset",
]
