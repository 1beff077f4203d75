"""Shared dependencies for API routes."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from tabflow.pipeline.controller import WorkflowController


def get_controller(request: Request) -> WorkflowController:
    """The controller the application was created with."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Workflow controller is not initialised",
        )
    return controller
