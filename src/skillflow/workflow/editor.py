"""
Workflow Editor - mutations of the graph model.

Wraps a Workflow with the gestures a canvas offers: add/remove/move nodes,
the two-step start/complete connection gesture, clearing, auto-arrange and
save. Every structural change stamps ``updated_at`` and marks the editor
unsaved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from skillflow.catalog import SkillCatalog
from skillflow.errors import ConnectionRejectedError, UnknownSkillError

from .compatibility import is_compatible
from .layout import auto_arrange
from .models import Position, Workflow, WorkflowConnection, WorkflowNode, generate_id
from .validation import ensure_valid


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionPoint:
    """Source end of a connection being drawn."""
    node_id: str
    output_id: str


@dataclass(frozen=True)
class DropTarget:
    """An input a pending connection may legally end on."""
    node_id: str
    input_id: str


class WorkflowEditor:
    """
    Mutable editing session over one workflow.

    Usage:
        editor = WorkflowEditor(catalog)
        research = editor.add_node("research-assistant")
        writer = editor.add_node("doc-coauthoring")
        editor.start_connection(research.id, "findings")
        editor.complete_connection(writer.id, "draft")
    """

    def __init__(
        self,
        catalog: SkillCatalog,
        workflow: Optional[Workflow] = None,
        on_save: Optional[Callable[[Workflow], None]] = None,
        reject_cycles: bool = False,
    ):
        self.catalog = catalog
        self.workflow = workflow if workflow is not None else Workflow()
        self.connecting_from: Optional[ConnectionPoint] = None
        self.selected_node_id: Optional[str] = None
        self.is_saved = False
        self._on_save = on_save
        self._reject_cycles = reject_cycles

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, skill_id: str, position: Optional[Position] = None) -> WorkflowNode:
        """Place a new instance of a catalog skill on the canvas."""
        if skill_id not in self.catalog:
            raise UnknownSkillError(skill_id)

        count = len(self.workflow.nodes)
        node = WorkflowNode(
            id=generate_id(),
            skill_id=skill_id,
            position=position or Position(
                x=100 + (count * 50) % 400,
                y=150 + (count * 30) % 200,
            ),
        )
        self.workflow.nodes.append(node)
        self._changed()
        return node

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every connection touching it."""
        self.workflow.nodes = [n for n in self.workflow.nodes if n.id != node_id]
        self.workflow.connections = [
            c for c in self.workflow.connections
            if c.source_node_id != node_id and c.target_node_id != node_id
        ]
        if self.connecting_from and self.connecting_from.node_id == node_id:
            self.connecting_from = None
        self.selected_node_id = None
        self._changed()

    def update_node_position(self, node_id: str, position: Position) -> None:
        """Move a node; positions never affect execution."""
        node = self.workflow.get_node(node_id)
        if node is not None:
            node.position = position

    def select_node(self, node_id: Optional[str]) -> None:
        self.selected_node_id = node_id

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def start_connection(self, node_id: str, output_id: str) -> None:
        """Begin drawing a connection from a node output."""
        self.connecting_from = ConnectionPoint(node_id=node_id, output_id=output_id)

    def cancel_connection(self) -> None:
        self.connecting_from = None

    def legal_drop_targets(self) -> List[DropTarget]:
        """Inputs on other nodes the pending connection could end on."""
        pending = self.connecting_from
        if pending is None:
            return []
        source = self.workflow.get_node(pending.node_id)
        if source is None:
            return []
        source_schema = self.catalog.get_schema(source.skill_id)
        output = source_schema.get_output(pending.output_id) if source_schema else None
        if output is None:
            return []

        targets: List[DropTarget] = []
        for node in self.workflow.nodes:
            if node.id == source.id:
                continue
            schema = self.catalog.get_schema(node.skill_id)
            if schema is None:
                continue
            for port in schema.inputs:
                if is_compatible(output.kind, port.kind):
                    targets.append(DropTarget(node_id=node.id, input_id=port.id))
        return targets

    def complete_connection(self, target_node_id: str, target_input_id: str) -> WorkflowConnection:
        """
        Finish the pending connection on a target input.

        The pending gesture is always cleared. A connection already ending
        on the same input is replaced.

        Raises:
            ConnectionRejectedError: If nothing is pending, the connection
                loops onto its own node, or ports are missing/incompatible
        """
        pending = self.connecting_from
        self.connecting_from = None

        if pending is None:
            raise ConnectionRejectedError("No connection in progress")
        if pending.node_id == target_node_id:
            raise ConnectionRejectedError("Cannot connect a node to itself")

        source_node = self.workflow.get_node(pending.node_id)
        target_node = self.workflow.get_node(target_node_id)
        if source_node is None or target_node is None:
            raise ConnectionRejectedError("Connection endpoints must exist in the workflow")

        source_schema = self.catalog.get_schema(source_node.skill_id)
        target_schema = self.catalog.get_schema(target_node.skill_id)
        if source_schema is None or target_schema is None:
            raise ConnectionRejectedError("Connection endpoints must reference known skills")

        source_output = source_schema.get_output(pending.output_id)
        target_input = target_schema.get_input(target_input_id)
        if source_output is None or target_input is None:
            raise ConnectionRejectedError(
                f"Unknown port: {pending.output_id} -> {target_input_id}"
            )

        if not is_compatible(source_output.kind, target_input.kind):
            raise ConnectionRejectedError(
                f"Cannot connect {source_output.kind.value} to {target_input.kind.value}"
            )

        existing = self.workflow.connection_into(target_node_id, target_input_id)
        if existing is not None:
            logger.debug(f"Replacing connection {existing.id} into {target_node_id}.{target_input_id}")
            self.workflow.connections = [
                c for c in self.workflow.connections if c.id != existing.id
            ]

        connection = WorkflowConnection(
            id=generate_id(),
            source_node_id=pending.node_id,
            source_output_id=pending.output_id,
            target_node_id=target_node_id,
            target_input_id=target_input_id,
        )
        self.workflow.connections.append(connection)
        self._changed()
        return connection

    def connect(
        self,
        source_node_id: str,
        source_output_id: str,
        target_node_id: str,
        target_input_id: str,
    ) -> WorkflowConnection:
        """Start and complete a connection in one call."""
        self.start_connection(source_node_id, source_output_id)
        return self.complete_connection(target_node_id, target_input_id)

    def remove_connection(self, connection_id: str) -> None:
        self.workflow.connections = [
            c for c in self.workflow.connections if c.id != connection_id
        ]
        self._changed()

    # ------------------------------------------------------------------
    # Canvas
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove every node and connection, keeping metadata."""
        self.workflow.nodes = []
        self.workflow.connections = []
        self.selected_node_id = None
        self.connecting_from = None
        self._changed()

    def auto_arrange(self) -> None:
        auto_arrange(self.workflow)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
        tags: Optional[List[str]] = None,
    ) -> Workflow:
        """
        Validate and hand the workflow to the save callback.

        Metadata arguments are applied only if validation of the updated
        workflow succeeds.

        Raises:
            WorkflowValidationError: If the (updated) workflow is invalid
        """
        updates = {
            "name": name,
            "description": description,
            "is_public": is_public,
            "tags": tags,
        }
        updates = {key: value for key, value in updates.items() if value is not None}
        candidate = self.workflow.model_copy(update=updates, deep=True)
        if updates:
            candidate.touch()

        ensure_valid(candidate, self.catalog, reject_cycles=self._reject_cycles)

        self.workflow = candidate
        if self._on_save is not None:
            self._on_save(candidate)
        self.is_saved = True
        logger.info(f"Workflow saved: {candidate.id}")
        return candidate

    def _changed(self) -> None:
        self.workflow.touch()
        self.is_saved = False


__all__ = ["ConnectionPoint", "DropTarget", "WorkflowEditor"]
