"""Structural and type-level validation of workflows."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from skillflow.catalog import SkillCatalog
from skillflow.errors import WorkflowValidationError

from .compatibility import is_compatible
from .layout import compute_layers
from .models import Workflow


class ValidationResult(BaseModel):
    """Outcome of validating a workflow."""

    valid: bool = Field(..., description="True iff no errors were found")
    errors: List[str] = Field(default_factory=list)


def validate_workflow(
    workflow: Workflow,
    catalog: SkillCatalog,
    *,
    reject_cycles: bool = False,
) -> ValidationResult:
    """
    Check a workflow, accumulating every failure.

    Args:
        workflow: Workflow to check
        catalog: Catalog used to resolve node skills and ports
        reject_cycles: Also report nodes that are part of (or behind) a cycle

    Returns:
        ValidationResult with all errors found
    """
    errors: List[str] = []

    if not workflow.name.strip():
        errors.append("Workflow name is required")

    if not workflow.nodes:
        errors.append("Workflow must have at least one skill")

    nodes = workflow.node_map()
    for conn in workflow.connections:
        source_node = nodes.get(conn.source_node_id)
        target_node = nodes.get(conn.target_node_id)

        if source_node is None:
            errors.append(
                f"Connection references non-existent source node: {conn.source_node_id}"
            )
        if target_node is None:
            errors.append(
                f"Connection references non-existent target node: {conn.target_node_id}"
            )
        if source_node is None or target_node is None:
            continue

        source_schema = catalog.get_schema(source_node.skill_id)
        target_schema = catalog.get_schema(target_node.skill_id)
        if source_schema is None or target_schema is None:
            continue

        source_output = source_schema.get_output(conn.source_output_id)
        target_input = target_schema.get_input(conn.target_input_id)

        if source_output is None:
            errors.append(
                f'Invalid output "{conn.source_output_id}" for skill "{source_node.skill_id}"'
            )
        if target_input is None:
            errors.append(
                f'Invalid input "{conn.target_input_id}" for skill "{target_node.skill_id}"'
            )

        if (
            source_output is not None
            and target_input is not None
            and not is_compatible(source_output.kind, target_input.kind)
        ):
            errors.append(
                f"Incompatible types: {source_output.kind.value} cannot connect to "
                f"{target_input.kind.value}"
            )

    if reject_cycles and workflow.nodes:
        layering = compute_layers(workflow)
        if layering.has_cycle:
            errors.append(
                f"Workflow contains a cycle involving: {', '.join(layering.remainder)}"
            )

    return ValidationResult(valid=not errors, errors=errors)


def ensure_valid(
    workflow: Workflow,
    catalog: SkillCatalog,
    *,
    reject_cycles: bool = False,
) -> None:
    """Raise WorkflowValidationError if the workflow is invalid."""
    result = validate_workflow(workflow, catalog, reject_cycles=reject_cycles)
    if not result.valid:
        raise WorkflowValidationError(result.errors)


__all__ = ["ValidationResult", "ensure_valid", "validate_workflow"]
