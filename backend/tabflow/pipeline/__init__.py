"""
Workflow engine — fixed step sequence with progress, retries and notices.

This package provides the step sequencer that drives a loaded dataset
through an ordered list of steps, the pluggable executors that decide
each step's outcome, and the controller façade used by the API.
"""

from tabflow.pipeline.controller import WorkflowController
from tabflow.pipeline.executor import (
    HttpStepExecutor,
    RandomStepExecutor,
    ScriptedStepExecutor,
    StepExecutor,
)
from tabflow.pipeline.models import DEFAULT_STEPS, WorkflowSnapshot, WorkflowStep
from tabflow.pipeline.sequencer import StepSequencer

__all__ = [
    "DEFAULT_STEPS",
    "HttpStepExecutor",
    "RandomStepExecutor",
    "ScriptedStepExecutor",
    "StepExecutor",
    "StepSequencer",
    "WorkflowController",
    "WorkflowSnapshot",
    "WorkflowStep",
]
