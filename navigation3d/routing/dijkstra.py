"""
Dijkstra's algorithm over the navigation grid.

Exhaustive uniform-cost search used as a reference: it settles every
reachable cell, so its costs are the true shortest distances that A*
results and heuristic values can be checked against.
"""

from __future__ import annotations
import heapq
from typing import Dict, List, Optional, Set, Tuple

from ..grid.collision import QueryFilters, TraversabilityOracle, ANY_OBJECT
from ..grid.node import Coordinate
from ..grid.node_graph import NodeGraph
from .astar import PathResult, edge_cost
from ..errors import PathError
from .path_utils import compute_path_length


class DijkstraRouter:
    """
    Reference shortest-path search.

    Obstruction follows the same rule as the A* router: a cell other than
    the source is usable only if the oracle reports it clear. Verdicts are
    cached per router, so the world must not change between calls.
    """

    def __init__(
        self,
        graph: NodeGraph,
        oracle: TraversabilityOracle,
        filters: QueryFilters = ANY_OBJECT
    ):
        self.graph = graph
        self.space = graph.space
        self.oracle = oracle
        self.filters = filters
        self._obstructed: Dict[int, bool] = {}

    def _is_obstructed(self, node_id: int) -> bool:
        cached = self._obstructed.get(node_id)
        if cached is None:
            node = self.graph.nodes[node_id]
            cached = self.oracle.query(
                self.space.coordinates_to_world(node.coordinates),
                self.space.division_size / 2.0,
                self.filters
            )
            self._obstructed[node_id] = cached
        return cached

    def _search(self, source_id: int) -> Tuple[Dict[int, float], Dict[int, int]]:
        # Priority queue: (cost, node_id)
        # Using node_id as tiebreaker for deterministic behavior
        pq: List[Tuple[float, int]] = [(0.0, source_id)]
        costs: Dict[int, float] = {source_id: 0.0}
        previous: Dict[int, int] = {}
        visited: Set[int] = set()

        while pq:
            current_cost, current_id = heapq.heappop(pq)
            if current_id in visited:
                continue
            visited.add(current_id)

            current = self.graph.nodes[current_id]
            for neighbor_id in current.neighbors:
                if neighbor_id in visited or self._is_obstructed(neighbor_id):
                    continue
                new_cost = current_cost + edge_cost(current, self.graph.nodes[neighbor_id])
                if new_cost < costs.get(neighbor_id, float('inf')):
                    costs[neighbor_id] = new_cost
                    previous[neighbor_id] = current_id
                    heapq.heappush(pq, (new_cost, neighbor_id))

        return costs, previous

    def distances_from(self, source: Tuple[int, int, int]) -> Dict[Coordinate, float]:
        """Shortest cost (cell units) from source to every reachable cell."""
        costs, _ = self._search(self.space.index_of(source))
        return {self.graph.nodes[i].coordinates: c for i, c in costs.items()}

    def shortest_path_cost(
        self,
        start: Tuple[int, int, int],
        goal: Tuple[int, int, int]
    ) -> Optional[float]:
        """Shortest cost between two cells, or None if the goal is unreachable."""
        costs, _ = self._search(self.space.index_of(start))
        return costs.get(self.space.index_of(goal))

    def find_path_between(
        self,
        start: Tuple[int, int, int],
        goal: Tuple[int, int, int]
    ) -> PathResult:
        """Shortest path between two cells as a PathResult."""
        start_id = self.space.index_of(start)
        goal_id = self.space.index_of(goal)
        costs, previous = self._search(start_id)

        if goal_id not in costs:
            return PathResult.failure(PathError.NO_PATH_FOUND, nodes_explored=len(costs))

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
            total_cost=costs[goal_id],
            path_length=compute_path_length(path),
            nodes_explored=len(costs)
        )
