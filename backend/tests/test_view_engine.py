"""Tests for the pure filter / search / sort projection."""

from __future__ import annotations

import pytest

from tabflow.core.constants import DISPLAY_PLACEHOLDER, FilterMode, SortDirection
from tabflow.view.engine import (
    ColumnFilter,
    SortSpec,
    compare_values,
    display_value,
    matches_search,
    project,
    sort_rows,
    stringify,
)

COLUMNS = ["id", "name", "city", "score"]


def _ids(rows):
    return [row["id"] for row in rows]


# ─── Cell helpers ─────────────────────────────────────

@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (3.0, "3"),
        (2.5, "2.5"),
        ("Berlin", "Berlin"),
    ],
)
def test_stringify(value, expected):
    assert stringify(value) == expected


def test_display_value_uses_placeholder_for_null_and_missing():
    row = {"name": "Dana", "city": None}
    assert display_value(row, "name") == "Dana"
    assert display_value(row, "city") == DISPLAY_PLACEHOLDER
    assert display_value(row, "unknown") == DISPLAY_PLACEHOLDER


def test_compare_values_nulls_follow_direction():
    assert compare_values(None, 1, SortDirection.ASC) < 0
    assert compare_values(None, 1, SortDirection.DESC) > 0
    assert compare_values(None, None, SortDirection.ASC) == 0


def test_compare_values_numbers_compare_numerically():
    assert compare_values(9, 10, SortDirection.ASC) < 0
    assert compare_values(2.5, 2, SortDirection.ASC) > 0


def test_compare_values_mixed_types_compare_as_text():
    # "10" < "9" as text
    assert compare_values("10", 9, SortDirection.ASC) < 0
    assert compare_values(True, "apple", SortDirection.ASC) > 0


def test_compare_values_ignores_case():
    assert compare_values("apple", "Banana", SortDirection.ASC) < 0
    assert compare_values("Berlin", "berlin", SortDirection.ASC) == 0


# ─── Sorting ──────────────────────────────────────────

def test_sort_with_nulls_ascending_and_descending():
    rows = [{"v": 3}, {"v": 1}, {"v": None}, {"v": 2}]

    ascending = sort_rows(rows, SortSpec("v", SortDirection.ASC))
    descending = sort_rows(rows, SortSpec("v", SortDirection.DESC))

    assert [row["v"] for row in ascending] == [None, 1, 2, 3]
    assert [row["v"] for row in descending] == [3, 2, 1, None]


def test_sort_toggle_cycle():
    spec = SortSpec()
    spec = spec.toggle("name")
    assert (spec.column, spec.direction) == ("name", SortDirection.ASC)
    spec = spec.toggle("name")
    assert spec.direction == SortDirection.DESC
    spec = spec.toggle("name")
    assert spec == SortSpec()
    assert not spec.is_active


def test_sort_toggle_other_column_restarts_ascending():
    spec = SortSpec("name", SortDirection.DESC).toggle("city")
    assert spec == SortSpec("city", SortDirection.ASC)


def test_three_clicks_restore_original_order(sample_rows):
    spec = SortSpec()
    for _ in range(3):
        spec = spec.toggle("score")
        result = project(sample_rows, COLUMNS, sort_spec=spec)

    assert _ids(result) == _ids(sample_rows)


def test_sort_folds_accents_and_case():
    rows = [{"n": "zebra"}, {"n": "Éclair"}, {"n": "apple"}, {"n": "Ölfeld"}, {"n": "orange"}]

    ascending = sort_rows(rows, SortSpec("n", SortDirection.ASC))
    descending = sort_rows(rows, SortSpec("n", SortDirection.DESC))

    assert [row["n"] for row in ascending] == ["apple", "Éclair", "Ölfeld", "orange", "zebra"]
    assert [row["n"] for row in descending] == ["zebra", "orange", "Ölfeld", "Éclair", "apple"]


def test_accented_form_sorts_after_plain_form():
    assert compare_values("eclair", "Éclair", SortDirection.ASC) < 0
    assert compare_values("Éclair", "fig", SortDirection.ASC) < 0


def test_sort_is_stable_for_ties():
    rows = [
        {"id": 1, "city": "Berlin"},
        {"id": 2, "city": "austin"},
        {"id": 3, "city": "berlin"},
        {"id": 4, "city": "Austin"},
    ]
    result = sort_rows(rows, SortSpec("city", SortDirection.ASC))
    assert _ids(result) == [2, 4, 1, 3]


def test_sort_inactive_keeps_order(sample_rows):
    assert sort_rows(sample_rows, SortSpec("score", SortDirection.NONE)) == sample_rows


# ─── Filtering & search ───────────────────────────────

def test_column_filter_is_case_insensitive_substring(sample_rows):
    result = project(sample_rows, COLUMNS, filters=[ColumnFilter("city", "BERL")])
    assert _ids(result) == [3, 2]


def test_empty_filter_value_is_noop(sample_rows):
    result = project(sample_rows, COLUMNS, filters=[ColumnFilter("city", "")])
    assert result == sample_rows


def test_filters_are_anded(sample_rows):
    filters = [ColumnFilter("city", "berlin"), ColumnFilter("name", "bob")]
    assert _ids(project(sample_rows, COLUMNS, filters=filters)) == [2]


def test_filter_result_is_subset_and_removing_never_shrinks(sample_rows):
    filters = [ColumnFilter("city", "berlin"), ColumnFilter("score", "6")]

    with_both = project(sample_rows, COLUMNS, filters=filters)
    with_one = project(sample_rows, COLUMNS, filters=filters[:1])
    with_none = project(sample_rows, COLUMNS)

    assert all(row in sample_rows for row in with_both)
    assert len(with_both) <= len(with_one) <= len(with_none)
    assert all(row in with_one for row in with_both)


def test_null_cells_match_empty_preset_only(sample_rows):
    empty = project(sample_rows, COLUMNS, filters=[ColumnFilter.preset("city", FilterMode.EMPTY)])
    non_empty = project(sample_rows, COLUMNS, filters=[ColumnFilter.preset("city", FilterMode.NON_EMPTY)])

    assert _ids(empty) == [1]
    assert _ids(non_empty) == [3, 4, 2]


def test_zero_is_not_treated_as_empty():
    rows = [{"qty": 0}, {"qty": None}]
    result = project(rows, ["qty"], filters=[ColumnFilter.preset("qty", FilterMode.NON_EMPTY)])
    assert result == [{"qty": 0}]


def test_numeric_preset_matches_leading_digit():
    rows = [{"ref": "12-A"}, {"ref": "A-12"}, {"ref": 7}, {"ref": None}]
    result = project(rows, ["ref"], filters=[ColumnFilter.preset("ref", FilterMode.NUMERIC)])
    assert [row["ref"] for row in result] == ["12-A", 7]


def test_search_matches_any_column(sample_rows):
    assert _ids(project(sample_rows, COLUMNS, search_term="ALI")) == [1]
    assert _ids(project(sample_rows, COLUMNS, search_term="91")) == [1]


def test_search_never_matches_null_cells():
    row = {"name": "x", "city": None}
    assert not matches_search(row, ["city"], "none")
    assert not matches_search(row, ["city"], "—")


def test_search_only_covers_active_columns():
    rows = [{"name": "Ann", "hidden": "secret"}]
    assert project(rows, ["name"], search_term="secret") == []


def test_projection_does_not_mutate_input(sample_rows):
    snapshot = [dict(row) for row in sample_rows]
    project(
        sample_rows,
        COLUMNS,
        filters=[ColumnFilter("city", "b")],
        search_term="b",
        sort_spec=SortSpec("score", SortDirection.DESC),
    )
    assert sample_rows == snapshot


def test_filter_then_sort(sample_rows):
    result = project(
        sample_rows,
        COLUMNS,
        filters=[ColumnFilter.preset("score", FilterMode.NON_EMPTY)],
        sort_spec=SortSpec("score", SortDirection.DESC),
    )
    assert _ids(result) == [1, 3, 2]
