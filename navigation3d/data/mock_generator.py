"""Mock obstacle scenes for development and testing."""

from __future__ import annotations
import logging
import os
from typing import Iterable, Optional, Tuple

import numpy as np

from ..grid.grid_space import GridSpace
from ..grid.node import Vector3
from .obstacles import Obstacle, ObstacleCollection, DEFAULT_OBJECT_TYPE

logger = logging.getLogger(__name__)


class MockDataGenerator:
    """Generate obstacle layouts inside a grid volume."""

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize generator with optional random seed.

        Args:
            seed: Random seed for reproducibility
        """
        self.rng = np.random.default_rng(seed)

    def generate_obstacles(
        self,
        space: GridSpace,
        num_obstacles: int = 10,
        min_cells: Tuple[int, int, int] = (1, 1, 1),
        max_cells: Tuple[int, int, int] = (3, 3, 3),
        keep_free: Iterable[Tuple[int, int, int]] = (),
        object_type: str = DEFAULT_OBJECT_TYPE
    ) -> ObstacleCollection:
        """
        Generate random blocks of cells and return them as world-space obstacles.

        Blocks are sized in whole cells so every obstacle obstructs exactly
        the cells it covers. Cells listed in keep_free (typically the start
        and goal of a query) are never covered.

        Args:
            space: Grid the obstacles are placed in
            num_obstacles: Number of obstacles to generate
            min_cells: Minimum block size in cells per axis
            max_cells: Maximum block size in cells per axis
            keep_free: Coordinates that must stay unobstructed
            object_type: Object type tag for every generated obstacle

        Returns:
            ObstacleCollection with generated obstacles
        """
        free = {tuple(c) for c in keep_free}
        obstacles = ObstacleCollection()
        attempts = 0
        max_attempts = num_obstacles * 20

        while len(obstacles) < num_obstacles and attempts < max_attempts:
            attempts += 1

            size = [
                int(self.rng.integers(lo, min(hi, n) + 1))
                for lo, hi, n in zip(min_cells, max_cells, space.divisions)
            ]
            origin = [
                int(self.rng.integers(0, n - s + 1))
                for n, s in zip(space.divisions, size)
            ]
            cells = [
                (x, y, z)
                for x in range(origin[0], origin[0] + size[0])
                for y in range(origin[1], origin[1] + size[1])
                for z in range(origin[2], origin[2] + size[2])
            ]
            if free.intersection(cells):
                continue

            obstacles.add(self.block_for_cells(
                space, origin, [o + s - 1 for o, s in zip(origin, size)],
                obstacle_id=f"obstacle_{len(obstacles)}",
                object_type=object_type
            ))

        logger.info(f"Generated {len(obstacles)} obstacles in {attempts} attempts")
        return obstacles

    @staticmethod
    def block_for_cells(
        space: GridSpace,
        first: Tuple[int, int, int],
        last: Tuple[int, int, int],
        obstacle_id: str = "",
        object_type: str = DEFAULT_OBJECT_TYPE,
        inset: float = 0.05
    ) -> Obstacle:
        """
        Obstacle covering the inclusive cell range first..last.

        The box is shrunk by inset * division_size on every side so it does
        not touch the neighboring cells. Only meaningful for grids whose
        placement has no rotation.
        """
        a = space.coordinates_to_world(first)
        b = space.coordinates_to_world(last)
        half = space.division_size * (0.5 - inset)
        lo = Vector3(min(a.x, b.x) - half, min(a.y, b.y) - half, min(a.z, b.z) - half)
        hi = Vector3(max(a.x, b.x) + half, max(a.y, b.y) + half, max(a.z, b.z) + half)
        return Obstacle(lo, hi, obstacle_id=obstacle_id, object_type=object_type)

    @classmethod
    def obstacles_for_cells(
        cls,
        space: GridSpace,
        cells: Iterable[Tuple[int, int, int]],
        object_type: str = DEFAULT_OBJECT_TYPE
    ) -> ObstacleCollection:
        """One single-cell obstacle per listed coordinate."""
        return ObstacleCollection([
            cls.block_for_cells(space, cell, cell, obstacle_id=f"cell_{i}", object_type=object_type)
            for i, cell in enumerate(cells)
        ])

    def generate_and_save(
        self,
        space: GridSpace,
        output_dir: str,
        num_obstacles: int = 10
    ) -> str:
        """Generate obstacles and save them as obstacles.json in output_dir."""
        os.makedirs(output_dir, exist_ok=True)
        obstacles = self.generate_obstacles(space, num_obstacles=num_obstacles)
        path = os.path.join(output_dir, "obstacles.json")
        obstacles.save_json(path)
        logger.info(f"Saved {len(obstacles)} obstacles to {path}")
        return path
