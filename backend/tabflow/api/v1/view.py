"""Table view endpoints — search, filters and sort over the loaded rows."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from tabflow.api.deps import get_controller
from tabflow.api.schemas import (
    FilterRequest,
    FilterResponse,
    SearchRequest,
    SortResponse,
    ViewResponse,
)
from tabflow.core.constants import FilterMode
from tabflow.pipeline.controller import WorkflowController

router = APIRouter(prefix="/view", tags=["View"])


def _view_response(controller: WorkflowController) -> ViewResponse:
    result = controller.view()
    state = controller.view_state
    return ViewResponse(
        columns=result.columns,
        rows=result.rows,
        total_rows=result.total_rows,
        visible_rows=len(result.rows),
        search_term=state.search_term,
        filters=[
            FilterResponse(column=f.column, value=f.value, mode=f.mode)
            for f in state.filters
        ],
        sort=SortResponse(column=result.sort.column, direction=result.sort.direction),
    )


@router.get("", response_model=ViewResponse)
async def get_view(controller: WorkflowController = Depends(get_controller)) -> ViewResponse:
    return _view_response(controller)


@router.put("/search", response_model=ViewResponse)
async def set_search(
    payload: SearchRequest,
    controller: WorkflowController = Depends(get_controller),
) -> ViewResponse:
    controller.set_search(payload.term)
    return _view_response(controller)


@router.post("/filters", response_model=ViewResponse)
async def add_filter(
    payload: FilterRequest,
    controller: WorkflowController = Depends(get_controller),
) -> ViewResponse:
    if payload.mode == FilterMode.CONTAINS:
        accepted = controller.add_filter(payload.column, payload.value)
    else:
        accepted = controller.add_preset_filter(payload.column, payload.mode)

    if not accepted:
        raise HTTPException(
            status_code=422,
            detail="A filter needs a column and a value",
        )
    return _view_response(controller)


@router.delete("/filters/{index}", response_model=ViewResponse)
async def remove_filter(
    index: int,
    controller: WorkflowController = Depends(get_controller),
) -> ViewResponse:
    if not controller.remove_filter(index):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Filter not found")
    return _view_response(controller)


@router.delete("/filters", response_model=ViewResponse)
async def clear_filters(controller: WorkflowController = Depends(get_controller)) -> ViewResponse:
    controller.clear_filters()
    return _view_response(controller)


@router.post("/sort/{column}", response_model=ViewResponse)
async def toggle_sort(
    column: str,
    controller: WorkflowController = Depends(get_controller),
) -> ViewResponse:
    """Header click: none → asc → desc → none."""
    if column not in controller.store.columns:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Column not found")
    controller.toggle_sort(column)
    return _view_response(controller)
