"""
Workflow - composition of catalog skills into a typed DAG.

This package provides:
- Workflow / WorkflowNode / WorkflowConnection: the graph model
- WorkflowEditor: canvas gestures over the model
- is_compatible: port kind compatibility
- validate_workflow: structural and type validation
- compute_layers / auto_arrange: topological layering and layout
- export_workflow / import_workflow: JSON serialization
"""

from .compatibility import compatible_inputs, is_compatible
from .editor import ConnectionPoint, DropTarget, WorkflowEditor
from .layout import Layering, auto_arrange, compute_layers
from .models import Position, Workflow, WorkflowConnection, WorkflowNode, generate_id
from .prompt import build_node_prompt, compile_workflow_prompt
from .serialization import export_workflow, import_workflow, parse_workflow
from .templates import get_template, list_templates
from .validation import ValidationResult, ensure_valid, validate_workflow

__all__ = [
    # Models
    "Position",
    "Workflow",
    "WorkflowConnection",
    "WorkflowNode",
    "generate_id",
    # Editing
    "ConnectionPoint",
    "DropTarget",
    "WorkflowEditor",
    # Compatibility / validation
    "compatible_inputs",
    "is_compatible",
    "ValidationResult",
    "ensure_valid",
    "validate_workflow",
    # Layout
    "Layering",
    "auto_arrange",
    "compute_layers",
    # Serialization / prompts / templates
    "export_workflow",
    "import_workflow",
    "parse_workflow",
    "build_node_prompt",
    "compile_workflow_prompt",
    "get_template",
    "list_templates",
]
