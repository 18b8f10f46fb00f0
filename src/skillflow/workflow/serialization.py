"""JSON export/import of workflows."""

from __future__ import annotations

import json
from typing import Any, Dict

from pydantic import ValidationError

from skillflow.errors import WorkflowImportError

from .models import Workflow

REQUIRED_FIELDS = ("id", "name", "nodes", "connections")


def export_workflow(workflow: Workflow) -> str:
    """Serialize a workflow to its JSON document (camelCase fields)."""
    return workflow.model_dump_json(by_alias=True, indent=2)


def workflow_to_dict(workflow: Workflow) -> Dict[str, Any]:
    return workflow.model_dump(mode="json", by_alias=True)


def parse_workflow(data: Dict[str, Any]) -> Workflow:
    """
    Build a workflow from a decoded JSON document.

    Raises:
        WorkflowImportError: If required fields are missing or malformed
    """
    if not isinstance(data, dict):
        raise WorkflowImportError("Workflow document must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise WorkflowImportError(f"Workflow is missing required fields: {', '.join(missing)}")
    if not isinstance(data["nodes"], list) or not isinstance(data["connections"], list):
        raise WorkflowImportError("Workflow nodes and connections must be lists")

    try:
        return Workflow.model_validate(data)
    except ValidationError as e:
        raise WorkflowImportError(f"Invalid workflow file: {e}") from e


def import_workflow(text: str | bytes) -> Workflow:
    """
    Deserialize a workflow; rejected wholesale if anything is wrong.

    Raises:
        WorkflowImportError: If the text is not JSON or not a workflow
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WorkflowImportError(f"Invalid workflow file: {e}") from e
    return parse_workflow(data)


__all__ = ["export_workflow", "import_workflow", "parse_workflow", "workflow_to_dict"]
