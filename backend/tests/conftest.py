"""Shared fixtures for the backend test-suite."""

from __future__ import annotations

import asyncio

import pytest

from tabflow.core.config import Settings
from tabflow.core.constants import StepOutcome
from tabflow.data.store import RowStore
from tabflow.pipeline.controller import WorkflowController
from tabflow.pipeline.events import EventBus
from tabflow.pipeline.executor import ScriptedStepExecutor, StepExecutor


class GatedStepExecutor(StepExecutor):
    """Blocks inside execute() until the test releases it."""

    def __init__(self, outcome: StepOutcome = StepOutcome.SUCCESS) -> None:
        self.outcome = outcome
        self.entered = asyncio.Event()
        self.release = asyncio.Event()
        self.calls: list[int] = []

    async def execute(self, step_id: int) -> StepOutcome:
        self.calls.append(step_id)
        self.entered.set()
        await self.release.wait()
        return self.outcome


class EventRecorder:
    """Subscriber that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list = []

    def __call__(self, event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list:
        return [event for event in self.events if event.type == event_type]


async def let_run(cycles: int = 5) -> None:
    """Give a background run a few event-loop iterations."""
    for _ in range(cycles):
        await asyncio.sleep(0)


@pytest.fixture
def sample_rows() -> list[dict]:
    return [
        {"id": 3, "name": "Charlie", "city": "Berlin", "score": 72.5},
        {"id": 1, "name": "alice", "city": None, "score": 91},
        {"id": 4, "name": "Dana", "city": "Austin", "score": None},
        {"id": 2, "name": "Bob", "city": "berlin", "score": 64},
    ]


@pytest.fixture
def store(sample_rows) -> RowStore:
    loaded = RowStore()
    loaded.load(sample_rows)
    return loaded


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def bus(recorder) -> EventBus:
    events = EventBus()
    events.subscribe(recorder)
    return events


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        STEP_TICK_INTERVAL_MS=0,
        STEP_EXECUTOR_URL="",
        CONNECTION_CHECK_URLS=[],
        INGEST_INFER_TYPES=True,
    )


@pytest.fixture
def controller(test_settings, recorder) -> WorkflowController:
    workflow = WorkflowController(executor=ScriptedStepExecutor(), settings=test_settings)
    workflow.subscribe(recorder)
    return workflow
