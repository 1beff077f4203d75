"""
RowStore — the currently loaded dataset.

Plain data holder: the rows exactly as the ingestion collaborator produced
them, plus the active column list.  The WorkflowController is the only
writer; everything else reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

CellValue = Union[str, int, float, bool, None]
Row = dict[str, CellValue]


def columns_from_rows(rows: Sequence[Row]) -> list[str]:
    """Active column list: the keys of the first row, in order."""
    return list(rows[0].keys()) if rows else []


@dataclass
class RowStore:
    """Rows + column names of the loaded dataset."""

    rows: list[Row] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    source: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def load(
        self,
        rows: Iterable[Row],
        columns: Sequence[str] | None = None,
        source: str | None = None,
    ) -> None:
        """Replace the dataset.  Columns default to the first row's keys."""
        self.rows = [dict(row) for row in rows]
        self.columns = list(columns) if columns else columns_from_rows(self.rows)
        self.source = source

    def clear(self) -> None:
        self.rows = []
        self.columns = []
        self.source = None
