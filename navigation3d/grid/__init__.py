from .node import Vector3, Coordinate, NavNode
from .transform import GridTransform
from .grid_space import GridSpace
from .node_graph import NodeGraph, build_graph, NEIGHBOR_OFFSETS
from .collision import QueryFilters, TraversabilityOracle, OpenSpaceOracle, ObstacleOracle, CountingOracle
