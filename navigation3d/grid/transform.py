"""Placement transform mapping grid-local space to world space."""

from __future__ import annotations
from typing import Sequence, TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation

from .node import Vector3

if TYPE_CHECKING:
    from ..config import GridConfig


class GridTransform:
    """
    Position + rotation + scale of a grid volume.

    world = rotation * (scale * local) + position

    Rotation is given as Euler angles in degrees about the x, y and z axes
    (extrinsic "xyz", i.e. roll, pitch, yaw).
    """

    def __init__(
        self,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        rotation: Sequence[float] = (0.0, 0.0, 0.0),
        scale: Sequence[float] = (1.0, 1.0, 1.0)
    ):
        self.position = np.asarray(position, dtype=np.float64)
        self.euler_degrees = np.asarray(rotation, dtype=np.float64)
        self.scale = np.asarray(scale, dtype=np.float64)
        self.rotation = Rotation.from_euler("xyz", self.euler_degrees, degrees=True)
        self._inverse_rotation = self.rotation.inv()

    @classmethod
    def from_config(cls, config: GridConfig) -> GridTransform:
        return cls(config.position, config.rotation, config.scale)

    @property
    def is_identity(self) -> bool:
        return (not np.any(self.position) and not np.any(self.euler_degrees)
                and np.all(self.scale == 1.0))

    def transform_location(self, local: Vector3) -> Vector3:
        """Grid-local point to world space."""
        world = self.rotation.apply(self.scale * np.array(local.to_list())) + self.position
        return Vector3(world[0], world[1], world[2])

    def inverse_transform_location(self, world: Vector3) -> Vector3:
        """World point to grid-local space."""
        local = self._inverse_rotation.apply(np.array(world.to_list()) - self.position) / self.scale
        return Vector3(local[0], local[1], local[2])

    def transform_points(self, local: np.ndarray) -> np.ndarray:
        """Batch version of transform_location for an (N, 3) array."""
        local = np.asarray(local, dtype=np.float64).reshape(-1, 3)
        return self.rotation.apply(local * self.scale) + self.position

    def inverse_transform_points(self, world: np.ndarray) -> np.ndarray:
        """Batch version of inverse_transform_location for an (N, 3) array."""
        world = np.asarray(world, dtype=np.float64).reshape(-1, 3)
        return self._inverse_rotation.apply(world - self.position) / self.scale

    def __repr__(self) -> str:
        return (f"GridTransform(position={self.position.tolist()}, "
                f"rotation={self.euler_degrees.tolist()}, scale={self.scale.tolist()})")
