"""
Execution state - transient progress of one workflow run.

Observers always receive deep copies, so a snapshot kept by a UI is never
mutated by later steps of the run.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExecutionMode(str, Enum):
    """How node work is produced."""
    AI = "ai"
    SIMULATE = "simulate"


class RunStatus(str, Enum):
    """Run state machine: idle -> running -> completed | failed | quota_exceeded."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    QUOTA_EXCEEDED = "quota_exceeded"


TERMINAL_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.QUOTA_EXCEEDED})


class ErrorKind(str, Enum):
    """Kinds of run failures a caller can branch on."""
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_CREDENTIAL = "invalid_credential"
    BACKEND_ERROR = "backend_error"


class ExecutionErrorInfo(BaseModel):
    """Why a run stopped."""
    model_config = ConfigDict(populate_by_name=True)

    kind: ErrorKind
    message: str
    node_id: Optional[str] = Field(None, alias="nodeId")


class ExecutionState(BaseModel):
    """Progress of a run as seen by observers."""
    model_config = ConfigDict(populate_by_name=True)

    run_id: str = Field(..., alias="runId")
    workflow_id: str = Field(..., alias="workflowId")
    mode: ExecutionMode = ExecutionMode.AI
    status: RunStatus = RunStatus.IDLE
    completed_node_ids: List[str] = Field(default_factory=list, alias="completedNodeIds")
    current_node_id: Optional[str] = Field(None, alias="currentNodeId")
    node_outputs: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="nodeOutputs")
    error: Optional[ExecutionErrorInfo] = None

    @property
    def is_running(self) -> bool:
        return self.status == RunStatus.RUNNING

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def snapshot(self) -> "ExecutionState":
        """Deep copy safe to hand to observers."""
        return self.model_copy(deep=True)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict including the derived ``isRunning`` flag."""
        data = self.model_dump(mode="json", by_alias=True)
        data["isRunning"] = self.is_running
        return data


__all__ = [
    "ErrorKind",
    "ExecutionErrorInfo",
    "ExecutionMode",
    "ExecutionState",
    "RunStatus",
    "TERMINAL_STATUSES",
]
