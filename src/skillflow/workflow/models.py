"""
Workflow Models - the graph of skill nodes and typed connections.

Nodes and connections are stored as flat lists indexed by stable ids, so
the JSON form mirrors the record verbatim and removal never has to chase
references.
"""

from __future__ import annotations

import time
import uuid
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def generate_id() -> str:
    """Generate a unique id for workflow elements."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def today() -> str:
    """Timestamp format used by workflows (ISO date)."""
    return date.today().isoformat()


class Position(BaseModel):
    """Node position in the canvas."""
    x: float = 0
    y: float = 0


class WorkflowNode(BaseModel):
    """One instance of a catalog skill placed on the canvas."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Node id (unique within workflow)")
    skill_id: str = Field(..., alias="skillId", description="Catalog skill id")
    position: Position = Field(default_factory=Position)


class WorkflowConnection(BaseModel):
    """
    Directed edge from one node's output to another node's input.

    Example: {"sourceNodeId": "node-1", "sourceOutputId": "findings",
              "targetNodeId": "node-2", "targetInputId": "draft"}
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source_node_id: str = Field(..., alias="sourceNodeId")
    source_output_id: str = Field(..., alias="sourceOutputId")
    target_node_id: str = Field(..., alias="targetNodeId")
    target_input_id: str = Field(..., alias="targetInputId")


class Workflow(BaseModel):
    """
    Complete workflow definition; owns its nodes and connections.

    Cycles are not rejected here. Layout and execution ordering push
    nodes caught in a cycle into a trailing remainder layer.
    """
    model_config = ConfigDict(populate_by_name=True)

    # Metadata
    id: str = Field(default_factory=generate_id)
    name: str = ""
    description: str = ""

    # Structure
    nodes: List[WorkflowNode] = Field(default_factory=list)
    connections: List[WorkflowConnection] = Field(default_factory=list)

    # Bookkeeping
    created_at: str = Field(default_factory=today, alias="createdAt")
    updated_at: str = Field(default_factory=today, alias="updatedAt")
    author: Optional[str] = None
    is_public: bool = Field(False, alias="isPublic")
    tags: List[str] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        """Get node by id."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_connection(self, connection_id: str) -> Optional[WorkflowConnection]:
        """Get connection by id."""
        for conn in self.connections:
            if conn.id == connection_id:
                return conn
        return None

    def node_map(self) -> Dict[str, WorkflowNode]:
        return {node.id: node for node in self.nodes}

    def incoming(self, node_id: str) -> List[WorkflowConnection]:
        """Connections that terminate at this node."""
        return [c for c in self.connections if c.target_node_id == node_id]

    def outgoing(self, node_id: str) -> List[WorkflowConnection]:
        """Connections that start at this node."""
        return [c for c in self.connections if c.source_node_id == node_id]

    def connection_into(self, node_id: str, input_id: str) -> Optional[WorkflowConnection]:
        """The connection feeding a given input, if any."""
        for conn in self.connections:
            if conn.target_node_id == node_id and conn.target_input_id == input_id:
                return conn
        return None

    def touch(self) -> None:
        """Stamp the workflow as modified."""
        self.updated_at = today()


__all__ = [
    "Position",
    "Workflow",
    "WorkflowConnection",
    "WorkflowNode",
    "generate_id",
    "today",
]
