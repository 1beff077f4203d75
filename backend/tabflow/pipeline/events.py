"""
Observer surface for the workflow.

Events are frozen dataclasses carrying immutable step values / snapshots.
Within one step start the order is always:
    StepStatusChanged → StepProgressChanged → CurrentStepChanged
and a run ends with exactly one WorkflowComplete.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Union

from tabflow.core.constants import NoticeKind, NoticeLevel, RunOutcome, StepStatus
from tabflow.core.logging import get_logger
from tabflow.pipeline.models import WorkflowSnapshot, WorkflowStep

logger = get_logger(__name__)


@dataclass(frozen=True)
class StepStatusChanged:
    type: ClassVar[str] = "step_status_changed"

    step: WorkflowStep
    previous: StepStatus
    run_id: str | None = None


@dataclass(frozen=True)
class StepProgressChanged:
    type: ClassVar[str] = "step_progress_changed"

    step: WorkflowStep
    run_id: str | None = None


@dataclass(frozen=True)
class CurrentStepChanged:
    type: ClassVar[str] = "current_step_changed"

    step_id: int | None
    previous: int | None
    run_id: str | None = None


@dataclass(frozen=True)
class OverallProgressChanged:
    type: ClassVar[str] = "overall_progress_changed"

    progress: int
    previous: int


@dataclass(frozen=True)
class WorkflowComplete:
    type: ClassVar[str] = "workflow_complete"

    outcome: RunOutcome
    snapshot: WorkflowSnapshot
    run_id: str | None = None


@dataclass(frozen=True)
class Notice:
    """User-visible message (success / error toast)."""

    type: ClassVar[str] = "notice"

    kind: NoticeKind
    level: NoticeLevel
    message: str
    step_id: int | None = None


WorkflowEvent = Union[
    StepStatusChanged,
    StepProgressChanged,
    CurrentStepChanged,
    OverallProgressChanged,
    WorkflowComplete,
    Notice,
]
Subscriber = Callable[[WorkflowEvent], None]


class EventBus:
    """Synchronous fan-out to subscribers, in subscription order."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, event: WorkflowEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as exc:
                # A broken observer must not break the workflow
                logger.warning(
                    "Event subscriber failed",
                    event_type=event.type,
                    error=str(exc),
                    exc_info=True,
                )
