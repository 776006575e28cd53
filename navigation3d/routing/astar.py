"""
A* router over the navigation grid.

Edges are validated lazily: a neighbor's cell is tested against the
traversability oracle only when the search finds a strictly cheaper way
to reach it, never up front for the whole grid.
"""

from __future__ import annotations
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..errors import OracleErrorPolicy, PathError
from ..grid.collision import QueryFilters, TraversabilityOracle, ANY_OBJECT
from ..grid.node import Coordinate, NavNode, Vector3
from ..grid.node_graph import NodeGraph
from .path_utils import compute_path_length, path_to_list

logger = logging.getLogger(__name__)


@dataclass
class PathResult:
    """Result of pathfinding."""
    success: bool
    path: List[Vector3] = field(default_factory=list)
    path_coordinates: List[Coordinate] = field(default_factory=list)
    total_cost: float = float('inf')  # in cell units
    path_length: float = 0.0          # in world units
    nodes_explored: int = 0
    oracle_queries: int = 0
    error: Optional[PathError] = None

    @classmethod
    def failure(cls, error: PathError, nodes_explored: int = 0,
                oracle_queries: int = 0) -> PathResult:
        return cls(success=False, error=error,
                   nodes_explored=nodes_explored, oracle_queries=oracle_queries)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'success': self.success,
            'path': path_to_list(self.path),
            'path_coordinates': [list(c) for c in self.path_coordinates],
            'total_cost': self.total_cost if self.success else None,
            'path_length': self.path_length,
            'nodes_explored': self.nodes_explored,
            'oracle_queries': self.oracle_queries,
            'error': self.error.value if self.error else None,
        }


def heuristic(coordinates: Coordinate, goal: Coordinate) -> float:
    """
    Euclidean distance to the goal in cell units.

    Edge costs are Euclidean too, so this never overestimates and is consistent.
    """
    return coordinates.distance_to(goal)


def edge_cost(a: NavNode, b: NavNode) -> float:
    """1 for face neighbors, sqrt(2) for edge diagonals, sqrt(3) for corners."""
    return a.coordinates.distance_to(b.coordinates)


class AStarRouter:
    """
    A* pathfinding with query-time traversability checks.

    The graph is never written to; g-scores, predecessors and the open set
    live in each call, so one router (or several) can search the same
    graph from multiple threads.

    Open set ordering: lowest f-score first, then lowest heuristic (the
    node closer to the goal), then insertion order.
    """

    def __init__(
        self,
        graph: NodeGraph,
        oracle: TraversabilityOracle,
        filters: QueryFilters = ANY_OBJECT,
        error_policy: OracleErrorPolicy = OracleErrorPolicy.OBSTRUCTED
    ):
        """
        Initialize router.

        Args:
            graph: Node graph to search
            oracle: Decides whether a cell is currently obstructed
            filters: Default object-type / actor-class filters
            error_policy: What to do when the oracle raises
        """
        self.graph = graph
        self.space = graph.space
        self.oracle = oracle
        self.filters = filters
        self.error_policy = error_policy

    def find_path(
        self,
        start: Vector3,
        end: Vector3,
        filters: Optional[QueryFilters] = None
    ) -> PathResult:
        """
        Find a path between two world locations.

        Args:
            start: Starting location (snaps to its grid cell, clamped into the grid)
            end: Destination location (snaps to its grid cell, clamped into the grid)
            filters: Overrides the router's default filters for this query

        Returns:
            PathResult whose waypoints are cell centers from start cell to end cell
        """
        start_coords = self.space.world_to_coordinates(start)
        goal_coords = self.space.world_to_coordinates(end)
        return self.find_path_between(start_coords, goal_coords, filters)

    def find_path_between(
        self,
        start: Tuple[int, int, int],
        goal: Tuple[int, int, int],
        filters: Optional[QueryFilters] = None
    ) -> PathResult:
        """Find a path between two (clamped) grid coordinates."""
        start_node = self.graph.get_node(start)
        goal_node = self.graph.get_node(goal)
        result = self._astar(start_node, goal_node, filters or self.filters)

        logger.debug(
            f"A* {tuple(start_node.coordinates)} -> {tuple(goal_node.coordinates)}: "
            f"success={result.success}, explored={result.nodes_explored}, "
            f"oracle_queries={result.oracle_queries}"
        )
        return result

    def _is_obstructed(self, node: NavNode, filters: QueryFilters) -> Optional[bool]:
        """Oracle verdict for a cell; None when the oracle failed under the FAIL policy."""
        center = self.space.coordinates_to_world(node.coordinates)
        half_extent = self.space.division_size / 2.0
        try:
            return self.oracle.is_obstructed(
                center, half_extent, filters.object_types, filters.actor_class
            )
        except Exception as e:
            logger.warning(f"Traversability query failed at {tuple(node.coordinates)}: {e}")
            if self.error_policy == OracleErrorPolicy.FAIL:
                return None
            return True

    def _astar(
        self,
        start_node: NavNode,
        goal_node: NavNode,
        filters: QueryFilters
    ) -> PathResult:
        """
        Core A* implementation.
        """
        nodes = self.graph.nodes
        goal = goal_node.coordinates
        counter = itertools.count()

        # Open set entries: (f_score, h_score, insertion order, g_score, node index)
        start_h = heuristic(start_node.coordinates, goal)
        open_heap: List[Tuple[float, float, int, float, int]] = [
            (start_h, start_h, next(counter), 0.0, start_node.index)
        ]

        # Cost to reach each node (g_score)
        g_scores: Dict[int, float] = {start_node.index: 0.0}

        # Previous node in best known path
        previous: Dict[int, int] = {}

        # Nodes already popped and expanded
        closed: Set[int] = set()

        oracle_queries = 0

        while open_heap:
            _, _, _, g_score, current_id = heapq.heappop(open_heap)

            # Stale entry: a cheaper route was found after this one was pushed
            if current_id in closed or g_score > g_scores[current_id]:
                continue

            closed.add(current_id)

            if current_id == goal_node.index:
                return self._build_result(previous, current_id, g_score,
                                          len(closed), oracle_queries)

            current = nodes[current_id]
            for neighbor_id in current.neighbors:
                if neighbor_id in closed:
                    continue

                neighbor = nodes[neighbor_id]
                tentative_g = g_score + edge_cost(current, neighbor)

                if tentative_g < g_scores.get(neighbor_id, float('inf')):
                    oracle_queries += 1
                    obstructed = self._is_obstructed(neighbor, filters)
                    if obstructed is None:
                        return PathResult.failure(PathError.ORACLE_FAILURE,
                                                  len(closed), oracle_queries)
                    if obstructed:
                        # Leave its scores alone; a cheaper route may test it again
                        continue

                    g_scores[neighbor_id] = tentative_g
                    previous[neighbor_id] = current_id
                    h = heuristic(neighbor.coordinates, goal)
                    heapq.heappush(open_heap, (tentative_g + h, h, next(counter),
                                               tentative_g, neighbor_id))

        # No path found
        return PathResult.failure(PathError.NO_PATH_FOUND, len(closed), oracle_queries)

    def _build_result(
        self,
        previous: Dict[int, int],
        goal_id: int,
        total_cost: float,
        nodes_explored: int,
        oracle_queries: int
    ) -> PathResult:
        """Reconstruct path from previous pointers."""
        path_ids = []
        current: Optional[int] = goal_id

        while current is not None:
            path_ids.append(current)
            current = previous.get(current)

        path_ids.reverse()

        coordinates = [self.graph.nodes[i].coordinates for i in path_ids]
        path = [self.space.coordinates_to_world(c) for c in coordinates]

        return PathResult(
            success=True,
            path=path,
            path_coordinates=coordinates,
            total_cost=total_cost,
            path_length=compute_path_length(path),
            nodes_explored=nodes_explored,
            oracle_queries=oracle_queries
        )
