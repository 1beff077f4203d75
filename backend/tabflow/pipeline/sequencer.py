"""
StepSequencer — runs the fixed step list one step at a time.

Responsibilities:
    - Own the step list, the current step and the "started" flag
    - Walk a running step through its progress schedule (11 ticks)
    - Ask the StepExecutor for the outcome once the schedule completes
    - Auto-advance to the next step after a success
    - Honour cancellation at every suspension point
    - Emit events and notices; never raise out of public operations

Scheduling model:
    start() and rerun() are synchronous entry points.  Each accepted call
    creates one asyncio task (a "run") that drains a continuation queue of
    step ids.  A step's completion enqueues the next step instead of
    recursing.  Only one run is active at a time, so at most one step is
    ever RUNNING.

Usage::

    sequencer = StepSequencer(store, RandomStepExecutor())
    sequencer.start()
    await sequencer.join()
"""

from __future__ import annotations

import asyncio
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

import structlog

from tabflow.core.constants import (
    NoticeKind,
    NoticeLevel,
    RunOutcome,
    StepOutcome,
    StepStatus,
)
from tabflow.core.logging import get_logger
from tabflow.data.store import RowStore
from tabflow.pipeline.cancellation import CancellationToken
from tabflow.pipeline.errors import (
    EmptyDatasetError,
    ExecutorError,
    InvariantViolationError,
    RunCancelledError,
    StepFailureError,
)
from tabflow.pipeline.events import (
    CurrentStepChanged,
    EventBus,
    Notice,
    OverallProgressChanged,
    StepProgressChanged,
    StepStatusChanged,
    WorkflowComplete,
)
from tabflow.pipeline.executor import StepExecutor
from tabflow.pipeline.models import (
    DEFAULT_STEPS,
    PROGRESS_SCHEDULE,
    WorkflowSnapshot,
    WorkflowStep,
    overall_progress,
    validate_steps,
)

logger = get_logger(__name__)

EMPTY_DATASET_MESSAGE = "No data available. Please upload a file first."


@dataclass
class _Run:
    """Book-keeping for one execution stream."""

    run_id: str
    token: CancellationToken
    trigger: str
    pending: deque[int] = field(default_factory=deque)
    task: asyncio.Task | None = None
    finished: bool = False


class StepSequencer:
    """Owns the workflow steps and the rules for running them."""

    def __init__(
        self,
        store: RowStore,
        executor: StepExecutor,
        steps: Sequence[WorkflowStep] = DEFAULT_STEPS,
        tick_interval: float = 0.2,
        events: EventBus | None = None,
    ) -> None:
        validate_steps(steps)
        self._store = store
        self._executor = executor
        self._steps: list[WorkflowStep] = [step.cleared() for step in steps]
        self.tick_interval = tick_interval
        self.events = events or EventBus()

        self._current_step_id: int | None = None
        self._started = False
        self._run: _Run | None = None
        self._tasks: set[asyncio.Task] = set()

    # ─── Read side ─────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._run is not None

    @property
    def current_step_id(self) -> int | None:
        return self._current_step_id

    @property
    def steps(self) -> tuple[WorkflowStep, ...]:
        return tuple(self._steps)

    @property
    def overall_progress(self) -> int:
        return overall_progress(self._steps)

    def has_step(self, step_id: int) -> bool:
        return 1 <= step_id <= len(self._steps)

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            steps=tuple(self._steps),
            current_step_id=self._current_step_id,
            started=self._started,
            running=self.is_running,
            has_data=not self._store.is_empty,
        )

    # ─── Public operations ─────────────────────────────

    def start(self) -> bool:
        """Reset every step and run the workflow from step 1."""
        if self._run is not None:
            logger.info("Start rejected, a run is active", run_id=self._run.run_id)
            return False

        if self._store.is_empty:
            logger.info("Start rejected, dataset is empty")
            self._notice(NoticeKind.EMPTY_DATASET, NoticeLevel.ERROR, EMPTY_DATASET_MESSAGE)
            self.events.publish(
                WorkflowComplete(outcome=RunOutcome.EMPTY_DATASET, snapshot=self.snapshot())
            )
            return False

        self._clear_steps()
        self._started = True
        self._launch(first_step_id=1, trigger="start")
        return True

    def rerun(self, step_id: int) -> bool:
        """Re-execute a completed or failed step, then auto-advance."""
        if self._run is not None:
            logger.info("Rerun rejected, a run is active", step_id=step_id, run_id=self._run.run_id)
            return False
        if not self.has_step(step_id):
            logger.warning("Rerun rejected, unknown step", step_id=step_id)
            return False
        if self._store.is_empty:
            logger.info("Rerun rejected, dataset is empty", step_id=step_id)
            return False

        step = self._get(step_id)
        if not step.is_terminal:
            logger.info("Rerun rejected, step has not finished", step_id=step_id, status=step.status)
            return False

        self._started = True
        self._launch(first_step_id=step_id, trigger="rerun")
        return True

    def cancel(self) -> bool:
        """Stop the active run; the running step is marked failed."""
        run = self._run
        if run is None:
            return False

        run.token.cancel()
        step_id = self._current_step_id
        if step_id is not None:
            step = self._get(step_id)
            if step.status == StepStatus.RUNNING:
                self._set_step(step.with_status(StepStatus.FAILED), run_id=run.run_id)
            self._notice(
                NoticeKind.CANCELLED,
                NoticeLevel.INFO,
                f"{step.name} was cancelled.",
                step_id=step_id,
            )
        self._finish(run, RunOutcome.CANCELLED)
        return True

    def reset(self) -> None:
        """Cancel any active run and return every step to idle."""
        run = self._run
        if run is not None:
            run.token.cancel()

        self._clear_steps()
        self._started = False
        if run is not None:
            self._finish(run, RunOutcome.CANCELLED)
        self._set_current(None)

    async def join(self) -> None:
        """Wait until every run task (including cancelled ones) has exited."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ─── Run driver ────────────────────────────────────

    def _launch(self, first_step_id: int, trigger: str) -> None:
        loop = asyncio.get_running_loop()

        run_id = str(uuid.uuid4())
        run = _Run(run_id=run_id, token=CancellationToken(run_id), trigger=trigger)
        run.pending.append(first_step_id)
        self._run = run

        logger.info(
            "Workflow run started",
            run_id=run_id,
            trigger=trigger,
            first_step_id=first_step_id,
            total_steps=len(self._steps),
        )

        task = loop.create_task(self._drive(run), name=f"workflow-run-{run_id[:8]}")
        run.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _drive(self, run: _Run) -> None:
        log = logger.bind(run_id=run.run_id, trigger=run.trigger)
        outcome = RunOutcome.SUCCEEDED

        try:
            while run.pending:
                step_id = run.pending.popleft()
                await self._run_step(run, step_id, log)

                next_step_id = self._next_step_after(step_id, run)
                if next_step_id is not None:
                    run.pending.append(next_step_id)

        except RunCancelledError:
            log.info("Run stopped at cancellation point")
            outcome = RunOutcome.CANCELLED

        except EmptyDatasetError:
            log.info("Nothing to process, dataset is empty")
            self._notice(NoticeKind.EMPTY_DATASET, NoticeLevel.ERROR, EMPTY_DATASET_MESSAGE)
            outcome = RunOutcome.EMPTY_DATASET

        except StepFailureError as exc:
            log.warning("Workflow halted on step failure", step_id=exc.step_id, error=str(exc))
            outcome = RunOutcome.FAILED

        except InvariantViolationError as exc:
            log.warning("Workflow halted, predecessor steps incomplete", **exc.details)
            outcome = RunOutcome.HALTED

        except Exception as exc:
            log.exception("Unexpected error in workflow run", error=str(exc))
            step_id = self._current_step_id
            if not run.finished and step_id is not None:
                step = self._get(step_id)
                if step.status == StepStatus.RUNNING:
                    self._set_step(step.with_status(StepStatus.FAILED), run_id=run.run_id)
            outcome = RunOutcome.FAILED

        self._finish(run, outcome)

    async def _run_step(self, run: _Run, step_id: int, log: structlog.stdlib.BoundLogger) -> None:
        if self._store.is_empty:
            raise EmptyDatasetError("No rows loaded", run_id=run.run_id, step_id=step_id)

        step = self._get(step_id)
        step_log = log.bind(step_id=step_id, step_name=step.name)

        # ── Enter RUNNING ─────────────────────────────
        self._set_step(
            step.with_status(StepStatus.RUNNING, progress=0),
            run_id=run.run_id,
            always_progress=True,
        )
        self._set_current(step_id, run_id=run.run_id)
        step_log.info(f"Step {step_id}/{len(self._steps)}: {step.description}")

        # ── Progress schedule ─────────────────────────
        for value in PROGRESS_SCHEDULE:
            await asyncio.sleep(self.tick_interval)
            run.token.raise_if_cancelled(step_id)
            self._set_step(
                self._get(step_id).with_progress(value),
                run_id=run.run_id,
                always_progress=True,
            )

        # ── Outcome ───────────────────────────────────
        outcome = await self._execute(step_id, step_log)
        run.token.raise_if_cancelled(step_id)

        if outcome == StepOutcome.SUCCESS:
            self._set_step(
                self._get(step_id).with_status(StepStatus.COMPLETED, progress=100),
                run_id=run.run_id,
            )
            step_log.info("Step completed")
            self._notice(
                NoticeKind.STEP_COMPLETED,
                NoticeLevel.SUCCESS,
                f"{step.name} completed successfully.",
                step_id=step_id,
            )
            return

        failed = self._get(step_id).with_status(StepStatus.FAILED)
        self._set_step(failed, run_id=run.run_id)
        step_log.warning("Step failed", progress=failed.progress)
        self._notice(
            NoticeKind.STEP_FAILED,
            NoticeLevel.ERROR,
            f"{step.name} failed. Please try again.",
            step_id=step_id,
        )
        raise StepFailureError(
            f"Step '{step.name}' failed",
            run_id=run.run_id,
            step_id=step_id,
        )

    async def _execute(self, step_id: int, log: structlog.stdlib.BoundLogger) -> StepOutcome:
        """Invoke the executor once; anything but SUCCESS counts as failure."""
        try:
            result = await self._executor.execute(step_id)
        except ExecutorError as exc:
            log.warning("Step executor error", error=str(exc), status_code=exc.status_code)
            return StepOutcome.FAILURE
        except Exception as exc:
            log.exception("Unexpected error in step executor", error=str(exc))
            return StepOutcome.FAILURE

        try:
            return StepOutcome(result)
        except ValueError:
            log.warning("Step executor returned an unknown outcome", outcome=repr(result))
            return StepOutcome.FAILURE

    def _next_step_after(self, step_id: int, run: _Run) -> int | None:
        """Next step to enqueue, or None after the last step."""
        if step_id >= len(self._steps):
            return None

        next_step_id = step_id + 1
        incomplete = [
            step.id
            for step in self._steps
            if step.id < next_step_id and step.status != StepStatus.COMPLETED
        ]
        if incomplete:
            raise InvariantViolationError(
                f"Cannot advance to step {next_step_id}",
                run_id=run.run_id,
                step_id=next_step_id,
                details={"next_step_id": next_step_id, "incomplete_steps": incomplete},
            )
        return next_step_id

    def _finish(self, run: _Run, outcome: RunOutcome) -> None:
        """End a run exactly once: clear the current step, emit completion."""
        if run.finished:
            return
        run.finished = True
        run.pending.clear()

        if self._run is run:
            self._run = None
            self._set_current(None, run_id=run.run_id)

        logger.info(
            "Workflow run finished",
            run_id=run.run_id,
            outcome=outcome,
            overall_progress=self.overall_progress,
        )
        self.events.publish(
            WorkflowComplete(outcome=outcome, snapshot=self.snapshot(), run_id=run.run_id)
        )

    # ─── State mutation ────────────────────────────────

    def _get(self, step_id: int) -> WorkflowStep:
        return self._steps[step_id - 1]

    def _set_step(
        self,
        step: WorkflowStep,
        run_id: str | None = None,
        always_progress: bool = False,
    ) -> None:
        previous = self._get(step.id)
        before = overall_progress(self._steps)
        self._steps[step.id - 1] = step

        if step.status != previous.status:
            self.events.publish(StepStatusChanged(step=step, previous=previous.status, run_id=run_id))
        if always_progress or step.progress != previous.progress:
            self.events.publish(StepProgressChanged(step=step, run_id=run_id))

        after = overall_progress(self._steps)
        if after != before:
            self.events.publish(OverallProgressChanged(progress=after, previous=before))

    def _set_current(self, step_id: int | None, run_id: str | None = None) -> None:
        previous = self._current_step_id
        if previous == step_id:
            return
        self._current_step_id = step_id
        self.events.publish(CurrentStepChanged(step_id=step_id, previous=previous, run_id=run_id))

    def _clear_steps(self) -> None:
        for step in list(self._steps):
            if step.status != StepStatus.IDLE or step.progress != 0:
                self._set_step(step.cleared())

    def _notice(
        self,
        kind: NoticeKind,
        level: NoticeLevel,
        message: str,
        step_id: int | None = None,
    ) -> None:
        self.events.publish(Notice(kind=kind, level=level, message=message, step_id=step_id))
