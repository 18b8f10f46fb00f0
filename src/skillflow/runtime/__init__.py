"""
Runtime - executing composed workflows.

This package provides:
- WorkflowScheduler: dependency-ordered execution with progress reporting
- ExecutionState: transient run state handed to observers
- AIBackend / HttpAIBackend: how node work is produced
- get_required_inputs: inputs a user has to supply before a run
"""

from .backend import (
    AIBackend,
    BackendRequest,
    BackendResponse,
    HttpAIBackend,
    map_result_to_outputs,
    simulate_node_outputs,
)
from .inputs import (
    InitialInputs,
    PendingInput,
    get_required_inputs,
    resolve_node_inputs,
    unresolved_inputs,
)
from .scheduler import ProgressCallback, WorkflowScheduler, execute_workflow
from .state import (
    TERMINAL_STATUSES,
    ErrorKind,
    ExecutionErrorInfo,
    ExecutionMode,
    ExecutionState,
    RunStatus,
)

__all__ = [
    # Scheduler
    "ProgressCallback",
    "WorkflowScheduler",
    "execute_workflow",
    # State
    "ErrorKind",
    "ExecutionErrorInfo",
    "ExecutionMode",
    "ExecutionState",
    "RunStatus",
    "TERMINAL_STATUSES",
    # Inputs
    "InitialInputs",
    "PendingInput",
    "get_required_inputs",
    "resolve_node_inputs",
    "unresolved_inputs",
    # Backends
    "AIBackend",
    "BackendRequest",
    "BackendResponse",
    "HttpAIBackend",
    "map_result_to_outputs",
    "simulate_node_outputs",
]
