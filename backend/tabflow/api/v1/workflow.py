"""
Workflow endpoints — start, reset, cancel and re-run steps.

Runs execute in the background on the server's event loop; the accepting
endpoints return 202 with the snapshot taken right after the run started.
Poll GET /workflow to follow progress.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from tabflow.api.deps import get_controller
from tabflow.api.schemas import WorkflowResponse
from tabflow.pipeline.controller import WorkflowController
from tabflow.pipeline.sequencer import EMPTY_DATASET_MESSAGE

router = APIRouter(prefix="/workflow", tags=["Workflow"])


def _workflow_response(controller: WorkflowController) -> WorkflowResponse:
    return WorkflowResponse(**controller.snapshot().to_dict())


@router.get("", response_model=WorkflowResponse)
async def get_workflow(controller: WorkflowController = Depends(get_controller)) -> WorkflowResponse:
    return _workflow_response(controller)


@router.post("/start", response_model=WorkflowResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_workflow(controller: WorkflowController = Depends(get_controller)) -> WorkflowResponse:
    """Reset every step and run the workflow from the first step."""
    snapshot = controller.snapshot()
    if snapshot.running:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A workflow run is already active")

    if not controller.start():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMPTY_DATASET_MESSAGE)
    return _workflow_response(controller)


@router.post("/reset", response_model=WorkflowResponse)
async def reset_workflow(controller: WorkflowController = Depends(get_controller)) -> WorkflowResponse:
    controller.reset()
    return _workflow_response(controller)


@router.post("/cancel", response_model=WorkflowResponse)
async def cancel_workflow(controller: WorkflowController = Depends(get_controller)) -> WorkflowResponse:
    if not controller.cancel():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No workflow run is active")
    return _workflow_response(controller)


@router.post(
    "/steps/{step_id}/rerun",
    response_model=WorkflowResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def rerun_step(
    step_id: int,
    controller: WorkflowController = Depends(get_controller),
) -> WorkflowResponse:
    """Re-execute a completed or failed step, then continue with the next ones."""
    if not controller.has_step(step_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Step not found")

    if not controller.rerun(step_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Step cannot be re-run right now",
        )
    return _workflow_response(controller)
