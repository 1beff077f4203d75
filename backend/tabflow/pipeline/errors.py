"""
Domain-specific exception hierarchy for the step sequencer.

All workflow exceptions inherit from WorkflowError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (run ID, step ID, etc.) for logging/debugging.

None of these escape the sequencer's public operations: the run driver
turns them into step transitions, notices and the workflow-complete event.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base exception for all workflow errors."""

    def __init__(
        self,
        message: str,
        *,
        run_id: str | None = None,
        step_id: int | None = None,
        details: dict | None = None,
    ) -> None:
        self.run_id = run_id
        self.step_id = step_id
        self.details = details or {}
        super().__init__(message)


class EmptyDatasetError(WorkflowError):
    """No rows are loaded, so there is nothing to process."""
    pass


class StepFailureError(WorkflowError):
    """A step's executor reported failure (or crashed)."""
    pass


class InvariantViolationError(WorkflowError):
    """Predecessor steps were not all completed when auto-advancing."""
    pass


class RunCancelledError(WorkflowError):
    """The run's cancellation token was tripped at a suspension point."""
    pass


class ExecutorError(WorkflowError):
    """A step executor could not reach or understand its backend."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
        **kwargs,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, **kwargs)
