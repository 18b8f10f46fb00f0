"""
Topological layout - layered ordering of workflow nodes.

Uses Kahn's algorithm in breadth-first layers. The same layering drives
the canvas auto-arrange and the execution order of a run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .models import Position, Workflow


logger = logging.getLogger(__name__)

# Grid geometry (canvas units)
NODE_WIDTH = 300
NODE_HEIGHT = 200
PADDING_X = 60
PADDING_Y = 40
START_X = 80
START_Y = 80
CANVAS_HEIGHT = 400


@dataclass
class Layering:
    """
    Result of layering a workflow.

    ``layers`` holds the nodes that reached in-degree zero, layer by layer.
    ``remainder`` holds every node that never did (members of a cycle and
    anything downstream of one).
    """
    layers: List[List[str]] = field(default_factory=list)
    remainder: List[str] = field(default_factory=list)

    @property
    def has_cycle(self) -> bool:
        return bool(self.remainder)

    @property
    def all_layers(self) -> List[List[str]]:
        """Computed layers with the remainder appended as a final layer."""
        if self.remainder:
            return [*self.layers, list(self.remainder)]
        return [list(layer) for layer in self.layers]

    @property
    def execution_order(self) -> List[str]:
        """Node ids flattened layer by layer."""
        return [node_id for layer in self.all_layers for node_id in layer]

    def layer_of(self, node_id: str) -> int:
        """Index of the layer holding a node (remainder counts as last)."""
        for index, layer in enumerate(self.all_layers):
            if node_id in layer:
                return index
        raise KeyError(node_id)


def compute_layers(workflow: Workflow) -> Layering:
    """
    Compute the dependency layering of a workflow.

    Connections with an endpoint missing from the node set are ignored.
    """
    in_degree: Dict[str, int] = {node.id: 0 for node in workflow.nodes}
    adjacency: Dict[str, List[str]] = {node.id: [] for node in workflow.nodes}

    for conn in workflow.connections:
        if conn.source_node_id not in in_degree or conn.target_node_id not in in_degree:
            continue
        in_degree[conn.target_node_id] += 1
        adjacency[conn.source_node_id].append(conn.target_node_id)

    layers: List[List[str]] = []
    visited: set[str] = set()
    queue = [node_id for node_id, degree in in_degree.items() if degree == 0]

    while queue:
        layers.append(list(queue))
        visited.update(queue)

        next_queue: List[str] = []
        for node_id in queue:
            for target_id in adjacency[node_id]:
                if target_id in visited:
                    continue
                in_degree[target_id] -= 1
                if in_degree[target_id] == 0:
                    next_queue.append(target_id)
        queue = next_queue

    remainder = [node.id for node in workflow.nodes if node.id not in visited]
    if remainder:
        logger.warning(f"Workflow {workflow.id} has nodes outside the DAG: {remainder}")

    return Layering(layers=layers, remainder=remainder)


def layout_positions(layering: Layering) -> Dict[str, Position]:
    """Grid coordinates for each node: one column per layer, centred rows."""
    positions: Dict[str, Position] = {}
    for col, layer in enumerate(layering.all_layers):
        total_height = len(layer) * NODE_HEIGHT + (len(layer) - 1) * PADDING_Y
        start_y = START_Y + max(0, (CANVAS_HEIGHT - total_height) / 2)

        for row, node_id in enumerate(layer):
            positions[node_id] = Position(
                x=START_X + col * (NODE_WIDTH + PADDING_X),
                y=start_y + row * (NODE_HEIGHT + PADDING_Y),
            )
    return positions


def auto_arrange(workflow: Workflow) -> Dict[str, Position]:
    """
    Arrange nodes left-to-right by dependency depth.

    Only node positions (and the modification stamp) change; nodes and
    connections keep their identity and storage order.

    Returns:
        Map of node id -> new position
    """
    if not workflow.nodes:
        return {}

    positions = layout_positions(compute_layers(workflow))
    for node in workflow.nodes:
        if node.id in positions:
            node.position = positions[node.id]
    workflow.touch()
    return positions


__all__ = [
    "Layering",
    "auto_arrange",
    "compute_layers",
    "layout_positions",
]
