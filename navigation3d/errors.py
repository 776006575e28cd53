"""Exceptions and outcome codes for grid navigation."""

from enum import Enum


class NavigationError(Exception):
    """Base class for navigation errors."""


class InvalidConfiguration(NavigationError, ValueError):
    """Grid parameters that cannot produce a graph."""


class GraphNotReady(NavigationError, RuntimeError):
    """The node graph was requested while the volume is inactive."""


class PathError(str, Enum):
    """Why a path query produced no path."""
    NO_PATH_FOUND = "no_path_found"
    GRAPH_NOT_READY = "graph_not_ready"
    ORACLE_FAILURE = "oracle_failure"


class OracleErrorPolicy(str, Enum):
    """What a search does when the traversability oracle raises."""
    OBSTRUCTED = "obstructed"  # log it, treat the cell as blocked
    FAIL = "fail"              # stop the search with PathError.ORACLE_FAILURE
