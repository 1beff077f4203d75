"""Tests for connection verification."""

from __future__ import annotations

import httpx
import pytest

from tabflow.integrations.connections import ConnectionVerifier


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "down.example.com":
        raise httpx.ConnectError("connection refused", request=request)
    if request.url.host == "broken.example.com":
        return httpx.Response(503)
    return httpx.Response(200, json={"status": "ok"})


@pytest.mark.asyncio
async def test_no_urls_is_ok():
    report = await ConnectionVerifier([]).verify()
    assert report.ok
    assert report.to_dict()["checks"] == []


@pytest.mark.asyncio
async def test_all_reachable():
    verifier = ConnectionVerifier(
        ["https://erp.example.com/health", "https://crm.example.com/ping"],
        transport=httpx.MockTransport(_handler),
    )
    report = await verifier.verify()

    assert report.ok
    assert [check.status_code for check in report.checks] == [200, 200]


@pytest.mark.asyncio
async def test_failures_are_reported_not_raised():
    verifier = ConnectionVerifier(
        [
            "https://erp.example.com/health",
            "https://broken.example.com/health",
            "https://down.example.com/health",
        ],
        transport=httpx.MockTransport(_handler),
    )
    report = await verifier.verify()

    assert not report.ok
    ok, broken, down = report.checks
    assert ok.ok
    assert (broken.ok, broken.status_code, broken.error) == (False, 503, "HTTP 503")
    assert not down.ok
    assert down.status_code is None
    assert down.error.startswith("ConnectError")
