"""Table view request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tabflow.api.schemas.dataset import CellValue
from tabflow.core.constants import FilterMode, SortDirection


class SearchRequest(BaseModel):
    term: str = Field(default="", max_length=512)


class FilterRequest(BaseModel):
    """Substring filter, or a quick filter when ``mode`` is not CONTAINS."""

    column: str
    value: str = ""
    mode: FilterMode = FilterMode.CONTAINS


class FilterResponse(BaseModel):
    column: str
    value: str
    mode: FilterMode


class SortResponse(BaseModel):
    column: str | None = None
    direction: SortDirection = SortDirection.NONE


class ViewResponse(BaseModel):
    """Filtered, searched and sorted projection of the loaded rows."""

    columns: list[str]
    rows: list[dict[str, CellValue]]
    total_rows: int = Field(..., ge=0)
    visible_rows: int = Field(..., ge=0)
    search_term: str
    filters: list[FilterResponse]
    sort: SortResponse
