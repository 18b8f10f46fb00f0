"""Exception hierarchy shared by the workflow engine."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from skillflow.runtime.state import ExecutionState


class SkillFlowError(Exception):
    """Base exception for all engine errors."""

    pass


class UnknownSkillError(SkillFlowError):
    """Raised when a skill id is not present in the catalog."""

    def __init__(self, skill_id: str):
        super().__init__(f"Unknown skill: {skill_id}")
        self.skill_id = skill_id


class WorkflowValidationError(SkillFlowError):
    """Raised when a workflow fails structural validation."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors) or "Workflow is invalid")
        self.errors = list(errors)


class ConnectionRejectedError(SkillFlowError):
    """Raised when the editor refuses to create a connection."""

    pass


class WorkflowImportError(SkillFlowError):
    """Raised when a serialized workflow cannot be imported."""

    pass


class CatalogLoadError(SkillFlowError):
    """Raised when a catalog file cannot be read or parsed."""

    pass


class MissingInputsError(SkillFlowError):
    """Raised when required inputs have neither a connection nor a value."""

    def __init__(self, pending: list[Any]):
        names = ", ".join(f"{p.node_id}.{p.input_id}" for p in pending)
        super().__init__(f"Missing required inputs: {names}")
        self.pending = list(pending)


class BackendError(SkillFlowError):
    """
    Structured failure reported by an AI backend.

    ``kind`` is one of ``quota_exceeded``, ``invalid_credential`` or
    ``backend_error``.
    """

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_CREDENTIAL = "invalid_credential"
    BACKEND_ERROR = "backend_error"

    def __init__(
        self,
        kind: str,
        message: str,
        status_code: int | None = None,
        limit: int | None = None,
        used: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.limit = limit
        self.used = used


class ExecutionError(SkillFlowError):
    """Base class for errors that end a workflow run."""

    def __init__(
        self,
        message: str,
        state: ExecutionState | None = None,
        node_id: str | None = None,
    ):
        super().__init__(message)
        self.state = state
        self.node_id = node_id


class QuotaExceededError(ExecutionError):
    """Free runs are used up and no credential is stored."""

    def __init__(
        self,
        message: str = "Free run limit reached",
        limit: int | None = None,
        used: int | None = None,
        state: ExecutionState | None = None,
        node_id: str | None = None,
    ):
        super().__init__(message, state=state, node_id=node_id)
        self.limit = limit
        self.used = used


class InvalidCredentialError(ExecutionError):
    """The backend rejected the user-supplied credential."""

    pass


class NodeExecutionError(ExecutionError):
    """A node's backend call failed; the run is terminal."""

    pass
