"""
Voxel occupancy grid for fast traversability queries.

Pre-computes which voxels are occupied so each box query is a slice
lookup instead of a scan over every obstacle.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ..grid.collision import QueryFilters, TraversabilityOracle, ANY_OBJECT
from ..grid.node import Vector3
from .obstacles import ObstacleCollection, DEFAULT_OBJECT_TYPE, DEFAULT_ACTOR_CLASS

logger = logging.getLogger(__name__)


class VoxelOccupancyOracle(TraversabilityOracle):
    """
    Occupancy array aligned with the world axes.

    Voxel (i, j, k) spans origin + (i, j, k) * voxel_size to
    origin + (i + 1, j + 1, k + 1) * voxel_size. Everything outside the
    array is free space. All voxels share one object type and actor class
    for filtering.
    """

    def __init__(
        self,
        occupied: np.ndarray,
        origin: Sequence[float] = (0.0, 0.0, 0.0),
        voxel_size: float = 50.0,
        object_type: str = DEFAULT_OBJECT_TYPE,
        actor_classes: Tuple[str, ...] = (DEFAULT_ACTOR_CLASS,)
    ):
        occupied = np.asarray(occupied, dtype=bool)
        if occupied.ndim != 3:
            raise ValueError(f"Occupancy must be a 3D array, got shape {occupied.shape}")
        if voxel_size <= 0:
            raise ValueError(f"voxel_size must be positive, got {voxel_size}")

        self.occupied = occupied
        self.origin = np.asarray(origin, dtype=np.float64)
        self.voxel_size = float(voxel_size)
        self.object_type = object_type
        self.actor_classes = tuple(actor_classes)
        self.shape = np.array(occupied.shape)

    @classmethod
    def from_obstacles(
        cls,
        obstacles: ObstacleCollection,
        voxel_size: float = 50.0,
        filters: QueryFilters = ANY_OBJECT,
        bounds: Optional[Tuple[Vector3, Vector3]] = None
    ) -> VoxelOccupancyOracle:
        """
        Voxelize the obstacles that pass the filters.

        Args:
            obstacles: Obstacles to rasterize
            voxel_size: Edge length of each voxel
            filters: Only matching obstacles are rasterized
            bounds: World region to cover (defaults to the obstacles' bounds)

        The region is widened to whole multiples of voxel_size, so voxel
        faces sit on the lattice through the world origin. A voxel only partly
        covered by an obstacle counts as occupied; queries are exact when
        obstacles and query boxes both lie on that lattice and conservative
        otherwise.
        """
        if voxel_size <= 0:
            raise ValueError(f"voxel_size must be positive, got {voxel_size}")

        selected = [o for o in obstacles if o.matches(filters)]
        if bounds is None:
            bounds = ObstacleCollection(selected).bounds() or (Vector3(), Vector3())

        lo = np.floor(np.array(bounds[0].to_list()) / voxel_size) * voxel_size
        hi = np.ceil(np.array(bounds[1].to_list()) / voxel_size) * voxel_size
        dims = np.maximum(1, np.rint((hi - lo) / voxel_size).astype(int))
        occupied = np.zeros(tuple(dims), dtype=bool)

        oracle = cls(occupied, origin=lo, voxel_size=voxel_size)
        for obstacle in selected:
            span = oracle._voxel_span(
                np.array(obstacle.min_corner.to_list()),
                np.array(obstacle.max_corner.to_list())
            )
            if span is not None:
                (i0, j0, k0), (i1, j1, k1) = span
                occupied[i0:i1 + 1, j0:j1 + 1, k0:k1 + 1] = True

        occupied_count = int(np.sum(occupied))
        logger.info(f"Voxel grid {dims[0]}x{dims[1]}x{dims[2]}: "
                    f"{occupied_count} occupied ({100 * occupied_count / occupied.size:.1f}%)")
        return oracle

    def _voxel_span(self, lo: np.ndarray, hi: np.ndarray):
        """Inclusive voxel index range strictly overlapping [lo, hi], or None."""
        i_min = np.floor((lo - self.origin) / self.voxel_size).astype(int)
        i_max = np.ceil((hi - self.origin) / self.voxel_size).astype(int) - 1
        i_min = np.maximum(i_min, 0)
        i_max = np.minimum(i_max, self.shape - 1)
        if np.any(i_min > i_max):
            return None
        return tuple(i_min), tuple(i_max)

    def is_obstructed(self, center, half_extent, object_types=None, actor_class=None) -> bool:
        filters = QueryFilters.create(object_types, actor_class)
        if not filters.matches(self.object_type, self.actor_classes):
            return False

        c = np.array(center.to_list())
        span = self._voxel_span(c - half_extent, c + half_extent)
        if span is None:
            return False
        (i0, j0, k0), (i1, j1, k1) = span
        return bool(np.any(self.occupied[i0:i1 + 1, j0:j1 + 1, k0:k1 + 1]))

    @property
    def occupied_count(self) -> int:
        return int(np.sum(self.occupied))

    def __repr__(self) -> str:
        nx, ny, nz = self.occupied.shape
        return (f"VoxelOccupancyOracle({nx}x{ny}x{nz}, voxel_size={self.voxel_size}, "
                f"occupied={self.occupied_count})")
