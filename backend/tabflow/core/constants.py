"""Shared constants and enums used across the application."""

from enum import StrEnum


# Shown in place of a missing / null cell value.
DISPLAY_PLACEHOLDER = "—"


class StepStatus(StrEnum):
    """Status of an individual workflow step."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepOutcome(StrEnum):
    """Result reported by a step executor."""

    SUCCESS = "success"
    FAILURE = "failure"


class RunOutcome(StrEnum):
    """How a workflow run ended (carried by the workflow-complete event)."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    HALTED = "halted"
    CANCELLED = "cancelled"
    EMPTY_DATASET = "empty_dataset"


class SortDirection(StrEnum):
    """Sort direction for a table column."""

    ASC = "asc"
    DESC = "desc"
    NONE = "none"


class FilterMode(StrEnum):
    """How a column filter matches a cell."""

    CONTAINS = "contains"
    NON_EMPTY = "non_empty"
    EMPTY = "empty"
    NUMERIC = "numeric"


class NoticeKind(StrEnum):
    """User-visible notices emitted by the workflow controller."""

    DATASET_LOADED = "dataset_loaded"
    DATASET_UNAVAILABLE = "dataset_unavailable"
    EMPTY_DATASET = "empty_dataset"
    STEP_COMPLETED = "step_completed"
    STEP_FAILED = "step_failed"
    CANCELLED = "cancelled"


class NoticeLevel(StrEnum):
    """Severity of a notice."""

    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class FileFormat(StrEnum):
    """Detected tabular file format."""

    CSV = "CSV"
    XLSX = "XLSX"
    XLS = "XLS"
