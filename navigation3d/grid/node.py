"""Vector3, Coordinate and NavNode types for the navigation grid."""

from __future__ import annotations
import math
from typing import NamedTuple, Sequence, Tuple


class Vector3:
    """3D world-space point or direction."""

    __slots__ = ('x', 'y', 'z')

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return False
        return (abs(self.x - other.x) < 1e-6 and
                abs(self.y - other.y) < 1e-6 and
                abs(self.z - other.z) < 1e-6)

    # Tolerance equality has no consistent hash
    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector3({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"

    def magnitude(self) -> float:
        """Length of the vector."""
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)

    def distance_to(self, other: Vector3) -> float:
        """Euclidean distance to another point."""
        return (other - self).magnitude()

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_list(self) -> list:
        return [self.x, self.y, self.z]

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Vector3:
        """Create from any 3-element sequence (list, tuple, numpy row)."""
        if len(values) != 3:
            raise ValueError(f"Expected 3 components, got {len(values)}")
        return cls(values[0], values[1], values[2])


class Coordinate(NamedTuple):
    """Integer cell address in grid space."""
    x: int
    y: int
    z: int

    def distance_to(self, other: Coordinate) -> float:
        """Euclidean distance in cell units."""
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )

    def shared_axes(self, other: Coordinate) -> int:
        """Number of axes on which both coordinates agree."""
        return (int(self.x == other.x) +
                int(self.y == other.y) +
                int(self.z == other.z))

    def offset(self, dx: int, dy: int, dz: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy, self.z + dz)


class NavNode:
    """
    One grid cell in the node graph.

    Nodes live in a dense array owned by a NodeGraph. Neighbors are stored
    as indices into that array and never change after the graph is built.
    Search bookkeeping (g/f scores, predecessors) is held by each search,
    not by the node.
    """

    __slots__ = ('index', 'coordinates', 'neighbors')

    def __init__(self, index: int, coordinates: Coordinate,
                 neighbors: Tuple[int, ...] = ()):
        self.index = index
        self.coordinates = coordinates
        self.neighbors = neighbors

    def __repr__(self) -> str:
        return f"NavNode({self.index}, {tuple(self.coordinates)}, neighbors={len(self.neighbors)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NavNode):
            return False
        return self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)
