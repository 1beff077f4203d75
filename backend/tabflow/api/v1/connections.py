"""Connection verification endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tabflow.api.deps import get_controller
from tabflow.api.schemas import ConnectionReportResponse
from tabflow.pipeline.controller import WorkflowController

router = APIRouter(prefix="/connections", tags=["Connections"])


@router.post("/verify", response_model=ConnectionReportResponse)
async def verify_connections(
    controller: WorkflowController = Depends(get_controller),
) -> ConnectionReportResponse:
    """Probe every configured external endpoint once."""
    report = await controller.verify_connections()
    return ConnectionReportResponse(**report.to_dict())
