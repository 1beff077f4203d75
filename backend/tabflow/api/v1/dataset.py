"""Dataset endpoints — replace, load from disk, clear."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from tabflow.api.deps import get_controller
from tabflow.api.schemas import DatasetLoadRequest, DatasetRequest, DatasetResponse
from tabflow.pipeline.controller import WorkflowController

router = APIRouter(prefix="/dataset", tags=["Dataset"])


def _dataset_response(controller: WorkflowController) -> DatasetResponse:
    store = controller.store
    return DatasetResponse(
        loaded=not store.is_empty,
        source=store.source,
        total_rows=len(store),
        columns=list(store.columns),
    )


@router.get("", response_model=DatasetResponse)
async def get_dataset(controller: WorkflowController = Depends(get_controller)) -> DatasetResponse:
    return _dataset_response(controller)


@router.post("", response_model=DatasetResponse)
async def replace_dataset(
    payload: DatasetRequest,
    controller: WorkflowController = Depends(get_controller),
) -> DatasetResponse:
    """Replace the loaded rows.  Resets the workflow and the filters."""
    if not controller.load_dataset(payload.rows, payload.columns, source=payload.source):
        raise HTTPException(
            status_code=422,
            detail=controller.dataset_error,
        )
    return _dataset_response(controller)


@router.post("/load", response_model=DatasetResponse)
async def load_dataset_file(
    payload: DatasetLoadRequest,
    controller: WorkflowController = Depends(get_controller),
) -> DatasetResponse:
    """Parse a CSV / XLSX / XLS file the server can read."""
    if not controller.load_file(payload.path):
        raise HTTPException(
            status_code=422,
            detail=controller.dataset_error,
        )
    return _dataset_response(controller)


@router.delete("", response_model=DatasetResponse)
async def clear_dataset(controller: WorkflowController = Depends(get_controller)) -> DatasetResponse:
    """Drop the data together with filters, search, sort and workflow state."""
    controller.clear_dataset()
    return _dataset_response(controller)
