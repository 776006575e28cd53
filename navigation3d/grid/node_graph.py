"""Static node graph over a 3D grid volume."""

from __future__ import annotations
import logging
import time
from typing import Iterator, List, Optional, Tuple

from ..config import GridConfig
from .grid_space import GridSpace
from .node import Coordinate, NavNode

logger = logging.getLogger(__name__)


# Full 3x3x3 neighborhood minus the cell itself
NEIGHBOR_OFFSETS = [
    (dx, dy, dz)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    for dz in (-1, 0, 1)
    if not (dx == 0 and dy == 0 and dz == 0)
]


class NodeGraph:
    """
    Dense array of NavNodes with precomputed adjacency.

    Node i sits at the coordinate with linear index
    z * divisions_x * divisions_y + y * divisions_x + x. Each node lists the
    indices of the candidates it accepted as neighbors; the lists are
    computed per node and never mutated afterwards, so the graph can be
    shared by any number of concurrent searches.
    """

    def __init__(self, config: GridConfig):
        config.validate()
        self.config = config
        self.space = GridSpace(config)
        self.nodes: List[NavNode] = []
        self._build()

    def _build(self) -> None:
        start_time = time.time()
        space = self.space
        min_shared = self.config.min_shared_neighbor_axes

        self.nodes = [
            NavNode(index, space.coordinates_of(index))
            for index in range(space.total_divisions())
        ]

        edge_count = 0
        for node in self.nodes:
            neighbors = []
            for dx, dy, dz in NEIGHBOR_OFFSETS:
                candidate = node.coordinates.offset(dx, dy, dz)
                if not space.are_coordinates_valid(candidate):
                    continue
                # Each node judges its own candidates
                if node.coordinates.shared_axes(candidate) >= min_shared:
                    neighbors.append(space.index_of(candidate))
            node.neighbors = tuple(neighbors)
            edge_count += len(neighbors)

        elapsed = time.time() - start_time
        nx, ny, nz = space.divisions
        logger.info(f"Built node graph {nx}x{ny}x{nz}: {len(self.nodes)} nodes, "
                    f"{edge_count} directed edges in {elapsed:.2f}s")
        self.edge_count = edge_count

    def get_node(self, coordinates: Tuple[int, int, int]) -> NavNode:
        """Node at the given coordinates (clamped into the grid)."""
        return self.nodes[self.space.index_of(coordinates)]

    def get_node_by_index(self, index: int) -> Optional[NavNode]:
        if 0 <= index < len(self.nodes):
            return self.nodes[index]
        return None

    def get_neighbors(self, node: NavNode) -> List[NavNode]:
        """Neighbor nodes of a node, in adjacency order."""
        return [self.nodes[i] for i in node.neighbors]

    def neighbor_coordinates(self, coordinates: Tuple[int, int, int]) -> List[Coordinate]:
        return [n.coordinates for n in self.get_neighbors(self.get_node(coordinates))]

    def __iter__(self) -> Iterator[NavNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def total_nodes(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        nx, ny, nz = self.space.divisions
        return (f"NodeGraph({nx}x{ny}x{nz}, "
                f"min_shared_axes={self.config.min_shared_neighbor_axes}, "
                f"edges={self.edge_count})")


def build_graph(config: GridConfig) -> NodeGraph:
    """
    Build the node graph for a grid.

    Raises:
        InvalidConfiguration: if a division count or the division size is not positive
    """
    return NodeGraph(config)
