"""
Cancellation token for a single workflow run.

The run driver checks the token after every suspension point:

    await asyncio.sleep(interval)
    token.raise_if_cancelled()

reset(), cancel() and dataset replacement trip the token of the active run.
"""

from __future__ import annotations

from datetime import datetime, timezone

from tabflow.pipeline.errors import RunCancelledError


class CancellationToken:
    """Cooperative cancellation flag for one run."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        self._cancelled = False
        self.created_at = datetime.now(timezone.utc)
        self.cancelled_at: datetime | None = None

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self.cancelled_at = datetime.now(timezone.utc)

    def is_cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self, step_id: int | None = None) -> None:
        if self._cancelled:
            raise RunCancelledError(
                f"Run {self.run_id} was cancelled",
                run_id=self.run_id,
                step_id=step_id,
            )
