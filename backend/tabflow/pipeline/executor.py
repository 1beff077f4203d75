"""
StepExecutor — pluggable source of a step's success / failure outcome.

The sequencer walks a step through its progress schedule and then calls
``execute(step_id)`` exactly once.  Implementations:

    RandomStepExecutor    — weighted random outcome (90/10 by default)
    ScriptedStepExecutor  — predetermined outcomes, for tests and demos
    HttpStepExecutor      — asks an external system over HTTP

An executor may also raise; the sequencer records that as a failure.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Callable, Mapping, Sequence

import httpx

from tabflow.core.config import Settings
from tabflow.core.constants import StepOutcome
from tabflow.core.logging import get_logger
from tabflow.pipeline.errors import ExecutorError

logger = get_logger(__name__)

# Default timeout for executor HTTP calls (seconds)
DEFAULT_TIMEOUT = 30.0


class StepExecutor(ABC):
    """
    Base class for every step executor.

    Subclasses MUST implement:
        - execute(step_id)  — decide the outcome of one step run
    """

    @abstractmethod
    async def execute(self, step_id: int) -> StepOutcome:
        """Return SUCCESS or FAILURE for one run of ``step_id``."""
        ...

    async def aclose(self) -> None:
        """Release any held resources.  Default: nothing to do."""
        pass


class RandomStepExecutor(StepExecutor):
    """Succeeds with probability ``success_rate`` (one draw per call)."""

    def __init__(self, success_rate: float = 0.9, rng: random.Random | None = None) -> None:
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be within [0, 1], got {success_rate}")
        self.success_rate = success_rate
        self._rng = rng or random.Random()

    async def execute(self, step_id: int) -> StepOutcome:
        draw = self._rng.random()
        return StepOutcome.SUCCESS if draw < self.success_rate else StepOutcome.FAILURE


class ScriptedStepExecutor(StepExecutor):
    """
    Deterministic outcomes per step id.

    Each entry is either one outcome (used for every call) or a sequence
    consumed call by call; the last item repeats once the sequence is
    exhausted.  Unlisted steps get ``default``.

        ScriptedStepExecutor({2: [StepOutcome.FAILURE, StepOutcome.SUCCESS]})
    """

    def __init__(
        self,
        outcomes: Mapping[int, StepOutcome | Sequence[StepOutcome]] | None = None,
        default: StepOutcome = StepOutcome.SUCCESS,
    ) -> None:
        self.default = default
        self.calls: list[int] = []
        self._scripts: dict[int, deque[StepOutcome]] = {}
        for step_id, planned in (outcomes or {}).items():
            if isinstance(planned, StepOutcome):
                planned = [planned]
            self._scripts[step_id] = deque(planned)

    async def execute(self, step_id: int) -> StepOutcome:
        self.calls.append(step_id)
        script = self._scripts.get(step_id)
        if not script:
            return self.default
        if len(script) > 1:
            return script.popleft()
        return script[0]


class HttpStepExecutor(StepExecutor):
    """
    Executes a step by POSTing to an external system.

    The URL template may contain ``{step_id}``.  A 2xx answer is a success
    unless its JSON body says ``{"status": "failure"}``; any other status
    code or transport error raises ExecutorError.
    """

    def __init__(
        self,
        url_template: str,
        payload_builder: Callable[[int], dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        expected_status_codes: list[int] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url_template = url_template
        self._payload_builder = payload_builder
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._expected_status = expected_status_codes or [200, 201, 202]
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def execute(self, step_id: int) -> StepOutcome:
        url = self._url_template.format(step_id=step_id)
        body = self._payload_builder(step_id) if self._payload_builder else {"step_id": step_id}

        logger.info("Calling step executor endpoint", step_id=step_id, url=url)

        try:
            response = await self._client.post(url, headers=self._headers, json=body)
        except httpx.HTTPError as exc:
            raise ExecutorError(
                f"Executor request failed: {exc}",
                step_id=step_id,
            ) from exc

        if response.status_code not in self._expected_status:
            raise ExecutorError(
                f"Executor returned {response.status_code}",
                step_id=step_id,
                status_code=response.status_code,
                response_body=response.text,
            )

        status = _status_from_body(response)
        if status == StepOutcome.FAILURE:
            return StepOutcome.FAILURE
        return StepOutcome.SUCCESS

    async def aclose(self) -> None:
        await self._client.aclose()


def _status_from_body(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        status = data.get("status")
        return str(status).lower() if status is not None else None
    return None


def build_executor(
    settings: Settings,
    payload_builder: Callable[[int], dict[str, Any]] | None = None,
) -> StepExecutor:
    """Executor selected by configuration."""
    if settings.STEP_EXECUTOR_URL:
        logger.info("Using HTTP step executor", url=settings.STEP_EXECUTOR_URL)
        return HttpStepExecutor(
            settings.STEP_EXECUTOR_URL,
            payload_builder=payload_builder,
            timeout=settings.STEP_EXECUTOR_TIMEOUT_SECONDS,
        )

    rng = random.Random(settings.STEP_RANDOM_SEED)
    return RandomStepExecutor(success_rate=settings.STEP_SUCCESS_RATE, rng=rng)
