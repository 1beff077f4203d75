"""
View engine — deterministic filter / search / sort over loaded rows.

Everything here is a pure function of its inputs: rows are never mutated
and a new list is returned on every call, so the projection can be
recomputed on every render or progress tick.

Comparison policy for sorting:
    - null / missing values go first ascending and last descending
    - two numbers (int / float, never bool) compare numerically
    - anything else compares as text: case and accents folded first, then
      accented forms after their plain ones ("eclair" < "Éclair" < "fig")
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Iterable, Sequence

from tabflow.core.constants import DISPLAY_PLACEHOLDER, FilterMode, SortDirection
from tabflow.data.store import CellValue, Row

_LEADING_DIGIT = re.compile(r"[0-9]")


# ═══════════════════════════════════════════════════════════
#  Cell helpers
# ═══════════════════════════════════════════════════════════

def stringify(value: CellValue) -> str:
    """Text form of a cell used for matching and string comparison."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def display_value(row: Row, column: str) -> str:
    """Cell text for display; null or absent cells show a dash."""
    value = row.get(column)
    if value is None:
        return DISPLAY_PLACEHOLDER
    return stringify(value)


def _is_number(value: CellValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _collation_key(value: CellValue) -> tuple[str, str]:
    """Locale-independent sort key; case differences alone compare equal."""
    folded = stringify(value).casefold()
    return _fold_accents(folded), folded


def compare_values(a: CellValue, b: CellValue, direction: SortDirection) -> int:
    """Three-way comparison of two cells for the given direction."""
    ascending = direction != SortDirection.DESC

    if a is None and b is None:
        return 0
    if a is None:
        return -1 if ascending else 1
    if b is None:
        return 1 if ascending else -1

    if _is_number(a) and _is_number(b):
        result = (a > b) - (a < b)
    else:
        left, right = _collation_key(a), _collation_key(b)
        result = (left > right) - (left < right)

    return result if ascending else -result


# ═══════════════════════════════════════════════════════════
#  Filter / sort specs
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ColumnFilter:
    """Case-insensitive match on one column.  Empty value means no-op."""

    column: str
    value: str = ""
    mode: FilterMode = FilterMode.CONTAINS

    @classmethod
    def preset(cls, column: str, mode: FilterMode) -> "ColumnFilter":
        """Quick filter (non-empty / empty / numeric) on a column."""
        return cls(column=column, value="", mode=mode)

    def matches(self, row: Row) -> bool:
        text = stringify(row.get(self.column))

        if self.mode == FilterMode.NON_EMPTY:
            return text != ""
        if self.mode == FilterMode.EMPTY:
            return text == ""
        if self.mode == FilterMode.NUMERIC:
            return bool(_LEADING_DIGIT.match(text))

        if not self.value:
            return True
        return self.value.lower() in text.lower()


@dataclass(frozen=True)
class SortSpec:
    """Active sort column and direction."""

    column: str | None = None
    direction: SortDirection = SortDirection.NONE

    @property
    def is_active(self) -> bool:
        return self.column is not None and self.direction != SortDirection.NONE

    def toggle(self, column: str) -> "SortSpec":
        """Header click: none → asc → desc → none; another column restarts at asc."""
        if column != self.column:
            return SortSpec(column, SortDirection.ASC)
        if self.direction == SortDirection.ASC:
            return SortSpec(column, SortDirection.DESC)
        if self.direction == SortDirection.DESC:
            return SortSpec()
        return SortSpec(column, SortDirection.ASC)


# ═══════════════════════════════════════════════════════════
#  Projection
# ═══════════════════════════════════════════════════════════

def matches_search(row: Row, columns: Iterable[str], term: str) -> bool:
    """True when any non-null cell contains ``term`` (case-insensitive)."""
    if not term:
        return True
    needle = term.lower()
    for column in columns:
        value = row.get(column)
        if value is not None and needle in stringify(value).lower():
            return True
    return False


def sort_rows(rows: Sequence[Row], sort_spec: SortSpec) -> list[Row]:
    """Stable sort by ``sort_spec``; an inactive one keeps the given order."""
    if not sort_spec.is_active:
        return list(rows)

    column, direction = sort_spec.column, sort_spec.direction

    def _cmp(left: Row, right: Row) -> int:
        return compare_values(left.get(column), right.get(column), direction)

    return sorted(rows, key=cmp_to_key(_cmp))


def project(
    rows: Sequence[Row],
    columns: Sequence[str],
    filters: Sequence[ColumnFilter] = (),
    search_term: str = "",
    sort_spec: SortSpec | None = None,
) -> list[Row]:
    """Filtered, searched and sorted view of ``rows``."""
    search_columns = list(columns)
    visible = [
        row
        for row in rows
        if all(f.matches(row) for f in filters)
        and matches_search(row, search_columns or row.keys(), search_term)
    ]
    return sort_rows(visible, sort_spec or SortSpec())


@dataclass(frozen=True)
class ViewResult:
    """A projection plus what the table header needs to render it."""

    rows: list[Row] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    total_rows: int = 0
    sort: SortSpec = SortSpec()

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def display_rows(self) -> list[list[str]]:
        return [[display_value(row, column) for column in self.columns] for row in self.rows]
