"""
Connection verification — probes each configured endpoint once.

    verifier = ConnectionVerifier(["https://erp.example.com/health"])
    report = await verifier.verify()
    report.ok

All probes run concurrently; a probe never raises, its error is recorded
in the report instead.  No configured URLs means there is nothing to
verify and the report is ok.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

import httpx

from tabflow.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ConnectionCheck:
    """Result of probing one endpoint."""

    url: str
    ok: bool
    status_code: int | None = None
    error: str | None = None
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "ok": self.ok,
            "status_code": self.status_code,
            "error": self.error,
            "duration_ms": self.duration_ms,
        }


@dataclass
class ConnectionReport:
    checks: list[ConnectionCheck] = field(default_factory=list)
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return all(check.ok for check in self.checks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "checked_at": self.checked_at.isoformat(),
            "checks": [check.to_dict() for check in self.checks],
        }


class ConnectionVerifier:
    """GETs each URL; any status below 400 counts as reachable."""

    def __init__(
        self,
        urls: Sequence[str],
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.urls = list(urls)
        self._timeout = timeout
        self._transport = transport

    async def verify(self) -> ConnectionReport:
        if not self.urls:
            logger.info("No connections configured to verify")
            return ConnectionReport()

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            checks = await asyncio.gather(*(self._probe(client, url) for url in self.urls))

        report = ConnectionReport(checks=list(checks))
        if report.ok:
            logger.info("All connections verified", total=len(checks))
        else:
            logger.warning(
                "Connection verification failed",
                failed=[check.url for check in checks if not check.ok],
            )
        return report

    async def _probe(self, client: httpx.AsyncClient, url: str) -> ConnectionCheck:
        started = time.perf_counter()
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            return ConnectionCheck(
                url=url,
                ok=False,
                error=f"{type(exc).__name__}: {exc}",
                duration_ms=_elapsed_ms(started),
            )

        ok = response.status_code < 400
        return ConnectionCheck(
            url=url,
            ok=ok,
            status_code=response.status_code,
            error=None if ok else f"HTTP {response.status_code}",
            duration_ms=_elapsed_ms(started),
        )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
