"""
WorkflowController — the façade the presentation layer talks to.

Owns the row store, the view state and the step sequencer, and is the
only component that mutates them.  Loading, replacing or clearing the
dataset always resets the sequencer (cancelling any active run), so a
workflow never processes rows it was not started on.

Usage::

    controller = WorkflowController(executor=ScriptedStepExecutor())
    controller.subscribe(print)
    controller.load_file("orders.csv")
    controller.start()
    await controller.join()
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from tabflow.core.config import Settings, settings as default_settings
from tabflow.core.constants import FilterMode, NoticeKind, NoticeLevel
from tabflow.core.logging import get_logger
from tabflow.data.store import Row, RowStore
from tabflow.ingestion import IngestionError, load_dataset
from tabflow.integrations.connections import ConnectionReport, ConnectionVerifier
from tabflow.pipeline.events import EventBus, Notice, Subscriber
from tabflow.pipeline.executor import StepExecutor, build_executor
from tabflow.pipeline.models import DEFAULT_STEPS, WorkflowSnapshot, WorkflowStep
from tabflow.pipeline.sequencer import StepSequencer
from tabflow.view.engine import SortSpec, ViewResult
from tabflow.view.state import ViewState

logger = get_logger(__name__)

NO_ROWS_MESSAGE = "No data found in the file"


class WorkflowController:
    """Ties dataset availability to the step sequencer."""

    def __init__(
        self,
        executor: StepExecutor | None = None,
        settings: Settings | None = None,
        steps: Sequence[WorkflowStep] = DEFAULT_STEPS,
        tick_interval: float | None = None,
        verifier: ConnectionVerifier | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.store = RowStore()
        self.view_state = ViewState()
        self.events = EventBus()
        self.executor = executor or build_executor(self.settings)
        self.sequencer = StepSequencer(
            self.store,
            self.executor,
            steps=steps,
            tick_interval=self.settings.tick_interval if tick_interval is None else tick_interval,
            events=self.events,
        )
        self.verifier = verifier or ConnectionVerifier(
            self.settings.CONNECTION_CHECK_URLS,
            timeout=self.settings.CONNECTION_TIMEOUT_SECONDS,
        )
        # Why the last load left no dataset; None after a successful load.
        self.dataset_error: str | None = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.events.subscribe(callback)

    # ─── Dataset ───────────────────────────────────────

    @property
    def has_data(self) -> bool:
        return not self.store.is_empty

    def load_dataset(
        self,
        rows: Iterable[Row],
        columns: Sequence[str] | None = None,
        source: str | None = None,
    ) -> bool:
        """Replace the dataset; an empty one counts as unavailable."""
        rows = list(rows)
        self.sequencer.reset()
        self.view_state.clear_filters()

        if not rows:
            self.store.clear()
            self.dataset_error = NO_ROWS_MESSAGE
            logger.info("Dataset rejected, no rows", source=source)
            self._notice(NoticeKind.DATASET_UNAVAILABLE, NoticeLevel.ERROR, NO_ROWS_MESSAGE)
            return False

        self.store.load(rows, columns, source=source)
        self.dataset_error = None
        logger.info(
            "Dataset replaced",
            source=source,
            rows=len(self.store),
            columns=len(self.store.columns),
        )
        self._notice(NoticeKind.DATASET_LOADED, NoticeLevel.SUCCESS, "File uploaded successfully!")
        return True

    def load_file(self, path: str) -> bool:
        """Load a CSV / spreadsheet through the ingestion collaborator."""
        try:
            dataset = load_dataset(
                path,
                infer_types=self.settings.INGEST_INFER_TYPES,
                encoding=self.settings.INGEST_CSV_ENCODING,
            )
        except IngestionError as exc:
            logger.warning(
                "Dataset unavailable",
                path=path,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            self.sequencer.reset()
            self.store.clear()
            self.view_state.clear_filters()
            self.dataset_error = str(exc)
            self._notice(NoticeKind.DATASET_UNAVAILABLE, NoticeLevel.ERROR, str(exc))
            return False

        return self.load_dataset(dataset.rows, dataset.columns, source=dataset.source)

    def clear_dataset(self) -> None:
        """Drop the data, filters, search, sort and workflow state."""
        self.sequencer.reset()
        self.store.clear()
        self.view_state.reset()
        self.dataset_error = None
        logger.info("Dataset cleared")

    # ─── View ──────────────────────────────────────────

    def view(self) -> ViewResult:
        return self.view_state.apply(self.store)

    def set_search(self, term: str) -> None:
        self.view_state.set_search(term)

    def add_filter(self, column: str, value: str) -> bool:
        return self.view_state.add_filter(column, value)

    def add_preset_filter(self, column: str, mode: FilterMode) -> bool:
        return self.view_state.add_preset(column, mode)

    def remove_filter(self, index: int) -> bool:
        return self.view_state.remove_filter(index)

    def clear_filters(self) -> None:
        self.view_state.clear_filters()

    def toggle_sort(self, column: str) -> SortSpec:
        return self.view_state.toggle_sort(column)

    # ─── Workflow ──────────────────────────────────────

    def start(self) -> bool:
        return self.sequencer.start()

    def reset(self) -> None:
        self.sequencer.reset()

    def rerun(self, step_id: int) -> bool:
        return self.sequencer.rerun(step_id)

    def cancel(self) -> bool:
        return self.sequencer.cancel()

    def has_step(self, step_id: int) -> bool:
        return self.sequencer.has_step(step_id)

    def snapshot(self) -> WorkflowSnapshot:
        return self.sequencer.snapshot()

    async def join(self) -> None:
        await self.sequencer.join()

    # ─── Connections ───────────────────────────────────

    async def verify_connections(self) -> ConnectionReport:
        return await self.verifier.verify()

    async def aclose(self) -> None:
        """Stop any run and release executor resources."""
        self.sequencer.cancel()
        await self.sequencer.join()
        await self.executor.aclose()

    def _notice(self, kind: NoticeKind, level: NoticeLevel, message: str) -> None:
        self.events.publish(Notice(kind=kind, level=level, message=message))
