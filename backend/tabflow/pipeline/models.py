"""
Workflow data model — steps and run snapshots.

Steps are frozen dataclasses: the sequencer replaces a step value on every
transition instead of mutating it, so any snapshot handed to an observer
stays valid forever.

Overall progress is never stored; it is derived from the step list each
time it is read.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from tabflow.core.constants import StepStatus

# Progress values a running step walks through (11 ticks).
PROGRESS_SCHEDULE: tuple[int, ...] = tuple(range(0, 101, 10))


# ═══════════════════════════════════════════════════════════
#  WorkflowStep
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkflowStep:
    """One unit of the fixed workflow sequence."""

    id: int
    name: str
    description: str = ""
    status: StepStatus = StepStatus.IDLE
    progress: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in (StepStatus.COMPLETED, StepStatus.FAILED)

    def with_status(self, status: StepStatus, progress: int | None = None) -> "WorkflowStep":
        return replace(self, status=status, progress=self.progress if progress is None else progress)

    def with_progress(self, progress: int) -> "WorkflowStep":
        return replace(self, progress=progress)

    def cleared(self) -> "WorkflowStep":
        return replace(self, status=StepStatus.IDLE, progress=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "progress": self.progress,
        }


DEFAULT_STEPS: tuple[WorkflowStep, ...] = (
    WorkflowStep(1, "Data Validation", "Validating data format and integrity"),
    WorkflowStep(2, "Data Transformation", "Converting data to required format"),
    WorkflowStep(3, "System Integration", "Sending data to external systems"),
    WorkflowStep(4, "Report Generation", "Creating summary reports"),
)


def validate_steps(steps: Sequence[WorkflowStep]) -> None:
    """Step ids must be exactly 1..N in order."""
    if not steps:
        raise ValueError("A workflow needs at least one step")
    ids = [step.id for step in steps]
    if ids != list(range(1, len(steps) + 1)):
        raise ValueError(f"Step ids must be sequential from 1, got {ids}")


def overall_progress(steps: Sequence[WorkflowStep]) -> int:
    """Mean progress across all steps, truncated to an int."""
    if not steps:
        return 0
    return sum(step.progress for step in steps) // len(steps)


# ═══════════════════════════════════════════════════════════
#  WorkflowSnapshot
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkflowSnapshot:
    """Read-only view of the sequencer state at one instant."""

    steps: tuple[WorkflowStep, ...] = field(default_factory=tuple)
    current_step_id: int | None = None
    started: bool = False
    running: bool = False
    has_data: bool = False

    @property
    def overall_progress(self) -> int:
        return overall_progress(self.steps)

    @property
    def can_start(self) -> bool:
        return self.has_data and not self.running

    def step(self, step_id: int) -> WorkflowStep | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def can_rerun(self, step_id: int) -> bool:
        step = self.step(step_id)
        return (
            step is not None
            and step.is_terminal
            and self.has_data
            and not self.running
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_step_id": self.current_step_id,
            "started": self.started,
            "running": self.running,
            "overall_progress": self.overall_progress,
            "has_data": self.has_data,
            "can_start": self.can_start,
            "steps": [
                {**step.to_dict(), "can_rerun": self.can_rerun(step.id)}
                for step in self.steps
            ],
        }
