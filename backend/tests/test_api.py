"""Tests for the HTTP API."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import GatedStepExecutor
from tabflow.core.constants import StepOutcome
from tabflow.main import API_PREFIX, create_app
from tabflow.pipeline.controller import WorkflowController
from tabflow.pipeline.executor import ScriptedStepExecutor
from tabflow.pipeline.sequencer import EMPTY_DATASET_MESSAGE


@pytest.fixture
def client(controller) -> TestClient:
    return TestClient(create_app(controller))


@pytest.fixture
def loaded_client(client, sample_rows) -> TestClient:
    response = client.post(f"{API_PREFIX}/dataset", json={"rows": sample_rows, "source": "inline"})
    assert response.status_code == 200
    return client


def _async_client(controller: WorkflowController) -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=create_app(controller))
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ─── Dataset ──────────────────────────────────────────

def test_replace_dataset(loaded_client):
    body = loaded_client.get(f"{API_PREFIX}/dataset").json()
    assert body == {
        "loaded": True,
        "source": "inline",
        "total_rows": 4,
        "columns": ["id", "name", "city", "score"],
    }


def test_replace_dataset_with_no_rows(client):
    response = client.post(f"{API_PREFIX}/dataset", json={"rows": []})
    assert response.status_code == 422
    assert response.json()["detail"] == "No data found in the file"


def test_load_dataset_from_path(client, tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text("order,amount\nA-1,10\n", encoding="utf-8")

    response = client.post(f"{API_PREFIX}/dataset/load", json={"path": str(path)})

    assert response.status_code == 200
    assert response.json()["columns"] == ["order", "amount"]


def test_load_dataset_unsupported_format(client, tmp_path):
    response = client.post(f"{API_PREFIX}/dataset/load", json={"path": str(tmp_path / "x.pdf")})
    assert response.status_code == 422
    assert "Unsupported file format" in response.json()["detail"]


def test_clear_dataset(loaded_client):
    response = loaded_client.delete(f"{API_PREFIX}/dataset")
    assert response.status_code == 200
    assert response.json()["loaded"] is False
    assert loaded_client.get(f"{API_PREFIX}/view").json()["rows"] == []


# ─── View ─────────────────────────────────────────────

def test_view_search_filter_sort(loaded_client):
    view = loaded_client.get(f"{API_PREFIX}/view").json()
    assert view["total_rows"] == view["visible_rows"] == 4

    view = loaded_client.post(
        f"{API_PREFIX}/view/filters",
        json={"column": "city", "value": "berlin"},
    ).json()
    assert [row["id"] for row in view["rows"]] == [3, 2]
    assert view["filters"] == [{"column": "city", "value": "berlin", "mode": "contains"}]

    view = loaded_client.post(f"{API_PREFIX}/view/sort/id").json()
    assert view["sort"] == {"column": "id", "direction": "asc"}
    assert [row["id"] for row in view["rows"]] == [2, 3]

    view = loaded_client.put(f"{API_PREFIX}/view/search", json={"term": "bob"}).json()
    assert [row["id"] for row in view["rows"]] == [2]

    view = loaded_client.delete(f"{API_PREFIX}/view/filters/0").json()
    assert view["filters"] == []


def test_view_preset_filter(loaded_client):
    view = loaded_client.post(
        f"{API_PREFIX}/view/filters",
        json={"column": "city", "mode": "empty"},
    ).json()
    assert [row["id"] for row in view["rows"]] == [1]
    assert view["rows"][0]["city"] is None


def test_view_rejects_filter_without_value(loaded_client):
    response = loaded_client.post(f"{API_PREFIX}/view/filters", json={"column": "city", "value": ""})
    assert response.status_code == 422


def test_view_remove_unknown_filter(loaded_client):
    assert loaded_client.delete(f"{API_PREFIX}/view/filters/3").status_code == 404


def test_view_clear_filters(loaded_client):
    loaded_client.post(f"{API_PREFIX}/view/filters", json={"column": "city", "value": "x"})
    view = loaded_client.delete(f"{API_PREFIX}/view/filters").json()
    assert view["filters"] == []
    assert view["visible_rows"] == 4


def test_view_sort_unknown_column(loaded_client):
    assert loaded_client.post(f"{API_PREFIX}/view/sort/nope").status_code == 404


# ─── Workflow ─────────────────────────────────────────

def test_workflow_initial_state(client):
    body = client.get(f"{API_PREFIX}/workflow").json()
    assert body["started"] is False
    assert body["can_start"] is False
    assert [step["name"] for step in body["steps"]] == [
        "Data Validation",
        "Data Transformation",
        "System Integration",
        "Report Generation",
    ]


def test_start_without_data_is_rejected(client):
    response = client.post(f"{API_PREFIX}/workflow/start")
    assert response.status_code == 409
    assert response.json()["detail"] == EMPTY_DATASET_MESSAGE


def test_rerun_unknown_step(client):
    assert client.post(f"{API_PREFIX}/workflow/steps/9/rerun").status_code == 404


def test_rerun_idle_step_is_rejected(loaded_client):
    assert loaded_client.post(f"{API_PREFIX}/workflow/steps/1/rerun").status_code == 409


def test_cancel_without_run(client):
    assert client.post(f"{API_PREFIX}/workflow/cancel").status_code == 409


@pytest.mark.asyncio
async def test_start_and_rerun_over_http(test_settings, sample_rows):
    controller = WorkflowController(
        executor=ScriptedStepExecutor({3: [StepOutcome.FAILURE, StepOutcome.SUCCESS]}),
        settings=test_settings,
    )
    controller.load_dataset(sample_rows)

    async with _async_client(controller) as http:
        response = await http.post(f"{API_PREFIX}/workflow/start")
        assert response.status_code == 202
        assert response.json()["running"] is True

        await controller.join()
        body = (await http.get(f"{API_PREFIX}/workflow")).json()
        assert [step["status"] for step in body["steps"]] == ["completed", "completed", "failed", "idle"]
        assert body["current_step_id"] is None
        assert body["steps"][2]["can_rerun"] is True

        response = await http.post(f"{API_PREFIX}/workflow/steps/3/rerun")
        assert response.status_code == 202
        await controller.join()

        body = (await http.get(f"{API_PREFIX}/workflow")).json()
        assert body["overall_progress"] == 100


@pytest.mark.asyncio
async def test_cancel_and_reset_over_http(test_settings, sample_rows):
    executor = GatedStepExecutor()
    controller = WorkflowController(executor=executor, settings=test_settings)
    controller.load_dataset(sample_rows)

    async with _async_client(controller) as http:
        await http.post(f"{API_PREFIX}/workflow/start")
        await executor.entered.wait()
        assert (await http.post(f"{API_PREFIX}/workflow/start")).status_code == 409

        response = await http.post(f"{API_PREFIX}/workflow/cancel")
        assert response.status_code == 200
        assert response.json()["running"] is False
        executor.release.set()
        await controller.join()

        body = (await http.post(f"{API_PREFIX}/workflow/reset")).json()
        assert body["started"] is False
        assert {step["status"] for step in body["steps"]} == {"idle"}


def test_verify_connections(client):
    response = client.post(f"{API_PREFIX}/connections/verify")
    assert response.status_code == 200
    assert response.json()["ok"] is True
