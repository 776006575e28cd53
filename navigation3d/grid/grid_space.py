"""Conversion between world-space locations and grid coordinates."""

from __future__ import annotations
import math
from typing import List, Tuple

import numpy as np

from ..config import GridConfig
from .node import Coordinate, Vector3
from .transform import GridTransform


class GridSpace:
    """
    Coordinate math for one grid volume.

    All conversions clamp into the grid instead of failing: a location
    outside the volume maps to the nearest boundary cell.
    """

    def __init__(self, config: GridConfig):
        self.config = config
        self.transform = GridTransform.from_config(config)
        self._divisions = (config.divisions_x, config.divisions_y, config.divisions_z)

    @property
    def divisions(self) -> Tuple[int, int, int]:
        return self._divisions

    @property
    def division_size(self) -> float:
        return self.config.division_size

    def total_divisions(self) -> int:
        """Total number of cells in the grid."""
        nx, ny, nz = self._divisions
        return nx * ny * nz

    def grid_extent(self, axis: int) -> float:
        """Grid-local length of the volume along axis 0, 1 or 2."""
        return self._divisions[axis] * self.config.division_size

    def are_coordinates_valid(self, coordinates: Tuple[int, int, int]) -> bool:
        """Whether the coordinates address a cell inside the grid."""
        return all(0 <= c < n for c, n in zip(coordinates, self._divisions))

    def clamp_coordinates(self, coordinates: Tuple[int, int, int]) -> Coordinate:
        """Clamp each axis into [0, divisions - 1]."""
        return Coordinate(*(
            max(0, min(n - 1, int(c)))
            for c, n in zip(coordinates, self._divisions)
        ))

    def index_of(self, coordinates: Tuple[int, int, int]) -> int:
        """Linear node index of a (clamped) coordinate."""
        x, y, z = self.clamp_coordinates(coordinates)
        nx, ny, _ = self._divisions
        return z * nx * ny + y * nx + x

    def coordinates_of(self, index: int) -> Coordinate:
        """Inverse of index_of."""
        nx, ny, _ = self._divisions
        z, remainder = divmod(index, nx * ny)
        y, x = divmod(remainder, nx)
        return Coordinate(x, y, z)

    def world_to_coordinates(self, location: Vector3) -> Coordinate:
        """
        Convert a world-space location to grid coordinates.

        The location is brought into grid-local space, scaled to a
        fractional cell index, truncated toward zero and clamped.
        """
        local = self.transform.inverse_transform_location(location)
        raw = []
        for axis, value in enumerate(local):
            divisions = self._divisions[axis]
            raw.append(_truncate(divisions * (value / self.grid_extent(axis)), divisions))
        return self.clamp_coordinates(raw)

    def coordinates_to_world(self, coordinates: Tuple[int, int, int]) -> Vector3:
        """World-space center of the (clamped) cell."""
        clamped = self.clamp_coordinates(coordinates)
        size = self.config.division_size
        local = Vector3(*(c * size + size * 0.5 for c in clamped))
        return self.transform.transform_location(local)

    def world_to_coordinates_batch(self, locations: np.ndarray) -> np.ndarray:
        """Vectorized world_to_coordinates for an (N, 3) array; returns (N, 3) ints."""
        local = self.transform.inverse_transform_points(locations)
        extents = np.array([self.grid_extent(a) for a in range(3)])
        divisions = np.array(self._divisions)
        scaled = np.clip(np.nan_to_num(divisions * (local / extents), nan=0.0), -1, divisions)
        return np.clip(np.trunc(scaled).astype(np.int64), 0, divisions - 1)

    def coordinates_to_world_batch(self, coordinates: np.ndarray) -> np.ndarray:
        """Vectorized coordinates_to_world for an (N, 3) int array."""
        divisions = np.array(self._divisions)
        clamped = np.clip(np.asarray(coordinates, dtype=np.int64).reshape(-1, 3), 0, divisions - 1)
        size = self.config.division_size
        return self.transform.transform_points(clamped * size + size * 0.5)

    def world_bounds(self) -> List[Vector3]:
        """The 8 world-space corners of the grid volume."""
        corners = []
        for fx in (0.0, 1.0):
            for fy in (0.0, 1.0):
                for fz in (0.0, 1.0):
                    local = Vector3(
                        fx * self.grid_extent(0),
                        fy * self.grid_extent(1),
                        fz * self.grid_extent(2)
                    )
                    corners.append(self.transform.transform_location(local))
        return corners

    def __repr__(self) -> str:
        nx, ny, nz = self._divisions
        return f"GridSpace({nx}x{ny}x{nz}, division_size={self.config.division_size})"


def _truncate(value: float, divisions: int) -> int:
    """Truncate toward zero; NaN and infinities land outside the grid so the clamp catches them."""
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return divisions if value > 0 else -1
    return int(value)


def world_to_coordinates(config: GridConfig, location: Vector3) -> Coordinate:
    """Convert a world location to grid coordinates for the given grid."""
    return GridSpace(config).world_to_coordinates(location)


def coordinates_to_world(config: GridConfig, coordinates: Tuple[int, int, int]) -> Vector3:
    """World-space center of a grid cell for the given grid."""
    return GridSpace(config).coordinates_to_world(coordinates)
