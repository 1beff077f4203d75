"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tabflow.api.v1 import connections, dataset, view, workflow
from tabflow.core.config import settings
from tabflow.core.logging import get_logger, setup_logging
from tabflow.pipeline.controller import WorkflowController

API_PREFIX = "/api/v1"


def create_app(controller: WorkflowController | None = None) -> FastAPI:
    """Build the API around ``controller`` (a configured one by default)."""
    controller = controller or WorkflowController(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle hooks."""
        setup_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
        logger = get_logger("startup")
        logger.info("Application starting", env=settings.APP_ENV)
        yield
        await controller.aclose()
        logger.info("Application shutting down")

    app = FastAPI(
        title="Tabflow Workflow API",
        description="Tabular data review and step-by-step workflow processing",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(dataset.router, prefix=API_PREFIX)
    app.include_router(view.router, prefix=API_PREFIX)
    app.include_router(workflow.router, prefix=API_PREFIX)
    app.include_router(connections.router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Public health-check endpoint."""
        return {"status": "ok", "env": settings.APP_ENV}

    return app


app = create_app()
