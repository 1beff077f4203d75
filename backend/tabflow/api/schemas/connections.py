"""Connection verification schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ConnectionCheckResponse(BaseModel):
    url: str
    ok: bool
    status_code: int | None
    error: str | None
    duration_ms: int


class ConnectionReportResponse(BaseModel):
    ok: bool
    checked_at: datetime
    checks: list[ConnectionCheckResponse]
