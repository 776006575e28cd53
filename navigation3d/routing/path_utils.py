"""Helpers for measuring and serializing paths."""

from __future__ import annotations
from typing import List, Sequence, TYPE_CHECKING

from ..grid.node import Coordinate, Vector3

if TYPE_CHECKING:
    from ..grid.node_graph import NodeGraph


def compute_path_length(path: Sequence[Vector3]) -> float:
    """Total world-space length of a waypoint sequence."""
    total = 0.0
    for i in range(len(path) - 1):
        total += (path[i + 1] - path[i]).magnitude()
    return total


def coordinate_path_cost(coordinates: Sequence[Coordinate]) -> float:
    """Total cost of a coordinate sequence in cell units."""
    total = 0.0
    for i in range(len(coordinates) - 1):
        total += coordinates[i].distance_to(coordinates[i + 1])
    return total


def follows_adjacency(graph: NodeGraph, coordinates: Sequence[Coordinate]) -> bool:
    """Whether every consecutive pair of coordinates is an edge of the graph."""
    for a, b in zip(coordinates, coordinates[1:]):
        node = graph.get_node(a)
        if graph.space.index_of(b) not in node.neighbors:
            return False
    return True


def path_to_list(path: Sequence[Vector3]) -> List[List[float]]:
    """Convert path to list of [x, y, z] for JSON serialization."""
    return [p.to_list() for p in path]
