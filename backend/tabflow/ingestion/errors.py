"""
Ingestion exceptions.

The workflow core only ever sees these as "no dataset available"; the
distinction between them exists for the message shown to the user.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for dataset loading failures."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.path = path
        self.details = details or {}
        super().__init__(message)


class ParseError(IngestionError):
    """The file could not be read or decoded."""
    pass


class EmptyFileError(IngestionError):
    """The file decoded fine but holds no data rows."""
    pass


class UnsupportedFormatError(IngestionError):
    """The file extension is not CSV, XLSX or XLS."""
    pass
