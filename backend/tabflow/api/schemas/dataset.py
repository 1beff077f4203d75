"""Dataset request/response schemas."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field

CellValue = Union[str, int, float, bool, None]


class DatasetRequest(BaseModel):
    """Rows supplied directly by the client (already parsed)."""

    rows: list[dict[str, CellValue]]
    columns: list[str] | None = None
    source: str | None = Field(default=None, max_length=255)


class DatasetLoadRequest(BaseModel):
    """A CSV / XLSX / XLS file readable by the server."""

    path: str = Field(..., min_length=1)


class DatasetResponse(BaseModel):
    loaded: bool
    source: str | None = None
    total_rows: int = Field(default=0, ge=0)
    columns: list[str] = Field(default_factory=list)
