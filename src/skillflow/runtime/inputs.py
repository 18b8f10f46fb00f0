"""Input resolution for workflow nodes."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from skillflow.catalog import PortKind, SkillCatalog
from skillflow.workflow.models import Workflow, WorkflowNode

InitialInputs = Mapping[str, Mapping[str, Any]]


class PendingInput(BaseModel):
    """A required input with no incoming connection."""
    model_config = ConfigDict(populate_by_name=True)

    node_id: str = Field(..., alias="nodeId")
    skill_id: str = Field(..., alias="skillId")
    skill_name: str = Field(..., alias="skillName")
    input_id: str = Field(..., alias="inputId")
    input_name: str = Field(..., alias="inputName")
    kind: PortKind
    description: str = ""


def get_required_inputs(workflow: Workflow, catalog: SkillCatalog) -> List[PendingInput]:
    """
    Required inputs the user has to supply before a run.

    An input is pending when it is marked required in the skill schema and
    no connection feeds it.
    """
    pending: List[PendingInput] = []
    for node in workflow.nodes:
        schema = catalog.get_schema(node.skill_id)
        if schema is None:
            continue
        skill = catalog.get_skill(node.skill_id)
        for port in schema.required_inputs:
            if workflow.connection_into(node.id, port.id) is not None:
                continue
            pending.append(
                PendingInput(
                    node_id=node.id,
                    skill_id=node.skill_id,
                    skill_name=skill.name,
                    input_id=port.id,
                    input_name=port.name,
                    kind=port.kind,
                    description=port.description,
                )
            )
    return pending


def unresolved_inputs(
    workflow: Workflow,
    catalog: SkillCatalog,
    initial_inputs: Optional[InitialInputs] = None,
) -> List[PendingInput]:
    """Pending inputs not covered by user-supplied values."""
    initial_inputs = initial_inputs or {}
    return [
        p for p in get_required_inputs(workflow, catalog)
        if not _has_value(initial_inputs.get(p.node_id, {}), p.input_id)
    ]


def resolve_node_inputs(
    workflow: Workflow,
    node: WorkflowNode,
    catalog: SkillCatalog,
    node_outputs: Mapping[str, Mapping[str, Any]],
    initial_inputs: Optional[InitialInputs] = None,
) -> Dict[str, Any]:
    """
    Values for a node's inputs.

    User-supplied values win over connections; inputs with neither a value
    nor a produced upstream output are left out.
    """
    supplied = (initial_inputs or {}).get(node.id, {})
    schema = catalog.get_schema(node.skill_id)
    input_ids = [port.id for port in schema.inputs] if schema else [
        c.target_input_id for c in workflow.incoming(node.id)
    ]

    resolved: Dict[str, Any] = {}
    for input_id in input_ids:
        if _has_value(supplied, input_id):
            resolved[input_id] = supplied[input_id]
            continue
        conn = workflow.connection_into(node.id, input_id)
        if conn is None:
            continue
        upstream = node_outputs.get(conn.source_node_id, {})
        if conn.source_output_id in upstream:
            resolved[input_id] = upstream[conn.source_output_id]
    return resolved


def _has_value(values: Mapping[str, Any], key: str) -> bool:
    value = values.get(key)
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


__all__ = [
    "InitialInputs",
    "PendingInput",
    "get_required_inputs",
    "resolve_node_inputs",
    "unresolved_inputs",
]
