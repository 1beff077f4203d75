"""Workflow state schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tabflow.core.constants import StepStatus


class WorkflowStepResponse(BaseModel):
    id: int
    name: str
    description: str
    status: StepStatus
    progress: int = Field(..., ge=0, le=100)
    can_rerun: bool


class WorkflowResponse(BaseModel):
    """Snapshot of the step sequencer."""

    current_step_id: int | None
    started: bool
    running: bool
    has_data: bool
    overall_progress: int = Field(..., ge=0, le=100)
    can_start: bool
    steps: list[WorkflowStepResponse]
