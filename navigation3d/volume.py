"""
Navigation volume: owns one grid's node graph for its active lifetime.

The graph is built once on activate() and released on deactivate(). Path
queries made while the volume is inactive report GRAPH_NOT_READY.
"""

from __future__ import annotations
import logging
import threading
from typing import Iterable, List, Optional

from .config import GridConfig
from .errors import GraphNotReady, OracleErrorPolicy, PathError
from .grid.collision import QueryFilters, TraversabilityOracle, ANY_OBJECT
from .grid.grid_space import GridSpace
from .grid.node import Coordinate, Vector3
from .grid.node_graph import NodeGraph, build_graph
from .routing.astar import AStarRouter, PathResult

logger = logging.getLogger(__name__)


class NavigationVolume:
    """
    A configured grid volume that answers path queries.

    Usage:
        with NavigationVolume(config, oracle) as volume:
            result = volume.find_path(start, end)
    """

    def __init__(
        self,
        config: GridConfig,
        oracle: TraversabilityOracle,
        filters: QueryFilters = ANY_OBJECT,
        error_policy: OracleErrorPolicy = OracleErrorPolicy.OBSTRUCTED
    ):
        config.validate()
        self.config = config
        self.oracle = oracle
        self.filters = filters
        self.error_policy = error_policy
        self.space = GridSpace(config)
        self._graph: Optional[NodeGraph] = None
        self._router: Optional[AStarRouter] = None
        self._lock = threading.Lock()

    # ------------------------
    # Lifecycle
    # ------------------------
    def activate(self) -> None:
        """Build the node graph. Does nothing if the volume is already active."""
        with self._lock:
            if self._graph is not None:
                logger.info("Navigation volume already active, keeping existing graph")
                return
            graph = build_graph(self.config)
            self._router = AStarRouter(graph, self.oracle, self.filters, self.error_policy)
            self._graph = graph
        logger.info(f"Navigation volume activated: {graph}")

    def deactivate(self) -> None:
        """Release the node graph."""
        with self._lock:
            if self._graph is None:
                return
            self._graph = None
            self._router = None
        logger.info("Navigation volume deactivated")

    @property
    def is_active(self) -> bool:
        return self._graph is not None

    @property
    def graph(self) -> NodeGraph:
        """The active node graph; raises GraphNotReady when inactive."""
        graph = self._graph
        if graph is None:
            raise GraphNotReady("Navigation volume is not active")
        return graph

    def __enter__(self) -> NavigationVolume:
        self.activate()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.deactivate()

    # ------------------------
    # Queries
    # ------------------------
    def find_path(
        self,
        start: Vector3,
        destination: Vector3,
        object_types: Optional[Iterable[str]] = None,
        actor_class: Optional[str] = None
    ) -> PathResult:
        """
        Find a path between two world locations.

        Filters given here replace the volume's default filters for this
        query only. Never raises for an inactive volume; the result carries
        PathError.GRAPH_NOT_READY instead.
        """
        router = self._router
        if router is None:
            logger.warning("find_path called on an inactive navigation volume")
            return PathResult.failure(PathError.GRAPH_NOT_READY)

        filters = self.filters
        if object_types is not None or actor_class is not None:
            filters = QueryFilters.create(
                object_types if object_types is not None else self.filters.object_types,
                actor_class if actor_class is not None else self.filters.actor_class
            )
        return router.find_path(start, destination, filters)

    def convert_location_to_coordinates(self, location: Vector3) -> Coordinate:
        return self.space.world_to_coordinates(location)

    def convert_coordinates_to_location(self, coordinates: Coordinate) -> Vector3:
        return self.space.coordinates_to_world(coordinates)

    def world_bounds(self) -> List[Vector3]:
        """World-space corners of the volume, for external visualizers."""
        return self.space.world_bounds()

    # ------------------------
    # Accessors
    # ------------------------
    @property
    def grid_space(self) -> GridSpace:
        return self.space

    @property
    def total_divisions(self) -> int:
        return self.space.total_divisions()

    @property
    def divisions_x(self) -> int:
        return self.config.divisions_x

    @property
    def divisions_y(self) -> int:
        return self.config.divisions_y

    @property
    def divisions_z(self) -> int:
        return self.config.divisions_z

    @property
    def division_size(self) -> float:
        return self.config.division_size

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"NavigationVolume({self.space}, {state})"
