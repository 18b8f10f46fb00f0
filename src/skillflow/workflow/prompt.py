"""Prompt compilation for whole workflows and single nodes."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from skillflow.catalog import SkillCatalog, SkillInfo, SkillIOSchema

from .layout import compute_layers
from .models import Workflow


def compile_workflow_prompt(workflow: Workflow, catalog: SkillCatalog) -> str:
    """
    Render a workflow as one prompt a user can paste into an assistant.

    Steps follow the execution order; each input says where its value
    comes from.
    """
    order = compute_layers(workflow).execution_order
    step_of = {node_id: index + 1 for index, node_id in enumerate(order)}

    lines: List[str] = [f"# Workflow: {workflow.name or 'Untitled workflow'}"]
    if workflow.description:
        lines += ["", workflow.description]
    lines += [
        "",
        "Run the following skills in order. Feed each step's outputs into the "
        "inputs of later steps as indicated.",
    ]

    for node_id in order:
        node = workflow.get_node(node_id)
        if node is None:
            continue
        skill = catalog.get_skill(node.skill_id)
        schema = catalog.get_schema(node.skill_id)

        lines += ["", f"## Step {step_of[node_id]}: {skill.name}"]
        if skill.description:
            lines.append(skill.description)
        if schema is None:
            continue

        if schema.inputs:
            lines.append("Inputs:")
        for port in schema.inputs:
            conn = workflow.connection_into(node_id, port.id)
            source = workflow.get_node(conn.source_node_id) if conn else None
            if conn is not None and source is not None:
                source_schema = catalog.get_schema(source.skill_id)
                output = source_schema.get_output(conn.source_output_id) if source_schema else None
                output_name = output.name if output else conn.source_output_id
                origin = f'from Step {step_of.get(source.id, "?")} "{output_name}"'
            elif port.required:
                origin = "provided by the user (required)"
            else:
                origin = "optional"
            lines.append(f"- {port.name} ({port.kind.value}): {origin}")

        if schema.outputs:
            lines.append("Outputs:")
        for port in schema.outputs:
            lines.append(f"- {port.name} ({port.kind.value}): {port.description}")

    return "\n".join(lines) + "\n"


def build_node_prompt(
    skill: SkillInfo,
    schema: Optional[SkillIOSchema],
    inputs: Mapping[str, Any],
) -> str:
    """Prompt sent to the AI backend for one node."""
    lines: List[str] = [f"Skill: {skill.name}"]
    if skill.description:
        lines.append(skill.description)

    names: Dict[str, str] = {}
    if schema is not None:
        names = {port.id: port.name for port in schema.inputs}

    lines += ["", "Inputs:"]
    if not inputs:
        lines.append("(none)")
    for input_id, value in inputs.items():
        lines += [f"### {names.get(input_id, input_id)}", str(value)]

    if schema is not None and schema.outputs:
        lines += ["", "Produce the following outputs:"]
        for port in schema.outputs:
            lines.append(f"- {port.id}: {port.name} ({port.kind.value}) - {port.description}")

    return "\n".join(lines)


__all__ = ["build_node_prompt", "compile_workflow_prompt"]
