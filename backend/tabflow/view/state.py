"""ViewState — the user's current filters, search term and sort."""

from __future__ import annotations

from dataclasses import dataclass, field

from tabflow.core.constants import FilterMode
from tabflow.data.store import RowStore
from tabflow.view.engine import ColumnFilter, SortSpec, ViewResult, project


@dataclass
class ViewState:
    filters: list[ColumnFilter] = field(default_factory=list)
    search_term: str = ""
    sort: SortSpec = field(default_factory=SortSpec)

    def add_filter(self, column: str, value: str) -> bool:
        """Append a substring filter; ignored unless column and value are set."""
        if not column or not value:
            return False
        self.filters.append(ColumnFilter(column=column, value=value))
        return True

    def add_preset(self, column: str, mode: FilterMode) -> bool:
        if not column:
            return False
        self.filters.append(ColumnFilter.preset(column, mode))
        return True

    def remove_filter(self, index: int) -> bool:
        if not 0 <= index < len(self.filters):
            return False
        del self.filters[index]
        return True

    def clear_filters(self) -> None:
        self.filters = []

    def set_search(self, term: str) -> None:
        self.search_term = term or ""

    def toggle_sort(self, column: str) -> SortSpec:
        self.sort = self.sort.toggle(column)
        return self.sort

    def reset(self) -> None:
        self.filters = []
        self.search_term = ""
        self.sort = SortSpec()

    def apply(self, store: RowStore) -> ViewResult:
        rows = project(
            store.rows,
            store.columns,
            filters=tuple(self.filters),
            search_term=self.search_term,
            sort_spec=self.sort,
        )
        return ViewResult(
            rows=rows,
            columns=list(store.columns),
            total_rows=len(store),
            sort=self.sort,
        )
