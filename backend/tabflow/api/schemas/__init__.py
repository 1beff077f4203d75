"""API schema package."""

from tabflow.api.schemas.connections import ConnectionCheckResponse, ConnectionReportResponse
from tabflow.api.schemas.dataset import DatasetLoadRequest, DatasetRequest, DatasetResponse
from tabflow.api.schemas.view import FilterRequest, FilterResponse, SearchRequest, SortResponse, ViewResponse
from tabflow.api.schemas.workflow import WorkflowResponse, WorkflowStepResponse

__all__ = [
    "ConnectionCheckResponse",
    "ConnectionReportResponse",
    "DatasetLoadRequest",
    "DatasetRequest",
    "DatasetResponse",
    "FilterRequest",
    "FilterResponse",
    "SearchRequest",
    "SortResponse",
    "ViewResponse",
    "WorkflowResponse",
    "WorkflowStepResponse",
]
