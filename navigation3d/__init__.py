"""3D grid navigation: node graph construction and A* pathfinding with query-time obstruction checks."""

from .config import GridConfig, NavigationConfig, ScenarioConfig, PRESETS
from .errors import (
    NavigationError,
    InvalidConfiguration,
    GraphNotReady,
    PathError,
    OracleErrorPolicy,
)
from .grid.node import Vector3, Coordinate, NavNode
from .grid.grid_space import GridSpace, world_to_coordinates, coordinates_to_world
from .grid.node_graph import NodeGraph, build_graph
from .grid.collision import (
    TraversabilityOracle,
    QueryFilters,
    OpenSpaceOracle,
    ObstacleOracle,
    CountingOracle,
)
from .routing.astar import AStarRouter, PathResult
from .volume import NavigationVolume

__version__ = "0.1.0"


def find_path(graph, start, destination, oracle, filters=None):
    """One-shot A* query on an existing graph; see AStarRouter.find_path."""
    return AStarRouter(graph, oracle).find_path(start, destination, filters)
