"""
Configuration for the 3D navigation grid.

Centralized configuration that can be modified for different scenarios.
"""

from __future__ import annotations
import json
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidConfiguration, OracleErrorPolicy


@dataclass(frozen=True)
class GridConfig:
    """Grid volume configuration.

    Grid-local space has its origin at the corner of cell (0, 0, 0) and
    extends divisions * division_size along each axis. The placement
    (position, rotation, scale) maps grid-local space into world space.
    """
    divisions_x: int = 10
    divisions_y: int = 10
    divisions_z: int = 10
    division_size: float = 100.0
    # Minimum number of axes a neighbor must share with a node (0 = 26-connected,
    # 1 = 18-connected, 2 = 6-connected)
    min_shared_neighbor_axes: int = 0
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # degrees about x, y, z
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidConfiguration if the grid cannot be built."""
        for name in ('divisions_x', 'divisions_y', 'divisions_z'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidConfiguration(f"{name} must be positive, got {value}")

        if not isinstance(self.division_size, (int, float)) or isinstance(self.division_size, bool):
            raise InvalidConfiguration(f"division_size must be a number, got {self.division_size!r}")
        if not math.isfinite(self.division_size) or self.division_size <= 0:
            raise InvalidConfiguration(f"division_size must be positive, got {self.division_size}")

        if self.min_shared_neighbor_axes not in (0, 1, 2):
            raise InvalidConfiguration(
                f"min_shared_neighbor_axes must be 0, 1 or 2, got {self.min_shared_neighbor_axes}"
            )

        for name in ('position', 'rotation', 'scale'):
            if len(getattr(self, name)) != 3:
                raise InvalidConfiguration(f"{name} must have 3 components")
        if any(s == 0 for s in self.scale):
            raise InvalidConfiguration(f"scale components must be non-zero, got {self.scale}")

    @property
    def total_divisions(self) -> int:
        return self.divisions_x * self.divisions_y * self.divisions_z

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in ('position', 'rotation', 'scale'):
            data[name] = list(data[name])
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GridConfig:
        kwargs = dict(data)
        for name in ('position', 'rotation', 'scale'):
            if name in kwargs:
                kwargs[name] = tuple(float(v) for v in kwargs[name])
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise InvalidConfiguration(f"Unknown grid setting: {e}") from e


@dataclass
class ScenarioConfig:
    """A single path query."""
    start: Tuple[float, float, float]
    end: Tuple[float, float, float]
    name: Optional[str] = None


@dataclass
class NavigationConfig:
    """Complete navigation configuration."""
    grid: GridConfig = field(default_factory=GridConfig)
    scenarios: List[ScenarioConfig] = field(default_factory=list)
    # None = obstacles of every object type block; [] = nothing blocks
    object_types: Optional[List[str]] = None
    actor_class: Optional[str] = None
    obstacles_path: Optional[str] = None
    oracle_error_policy: OracleErrorPolicy = OracleErrorPolicy.OBSTRUCTED
    random_seed: int = 42
    output_dir: str = "data/output"

    def __post_init__(self):
        # Default scenarios if none provided, in world space
        if not self.scenarios:
            g = self.grid
            size = g.division_size
            near = (0.5 * size, 0.5 * size, 0.5 * size)
            far = (
                (g.divisions_x - 0.5) * size,
                (g.divisions_y - 0.5) * size,
                (g.divisions_z - 0.5) * size,
            )
            mid_y = (g.divisions_y // 2 + 0.5) * size
            mid_z = (g.divisions_z // 2 + 0.5) * size

            self.scenarios = [
                # Corner to corner (diagonal)
                ScenarioConfig(start=near, end=far, name="diagonal"),
                # Straight along X
                ScenarioConfig(
                    start=(near[0], mid_y, mid_z),
                    end=(far[0], mid_y, mid_z),
                    name="axis_x"
                ),
                # Start and end in the same cell
                ScenarioConfig(start=near, end=near, name="same_cell"),
            ]
            self.scenarios = self._placed(self.scenarios)

    def _placed(self, scenarios: List[ScenarioConfig]) -> List[ScenarioConfig]:
        """Map grid-local scenarios into world space."""
        from .grid.transform import GridTransform

        transform = GridTransform.from_config(self.grid)
        if transform.is_identity:
            return scenarios
        return [self._place(transform, s) for s in scenarios]

    @staticmethod
    def _place(transform, scenario: ScenarioConfig) -> ScenarioConfig:
        from .grid.node import Vector3

        start = transform.transform_location(Vector3(*scenario.start))
        end = transform.transform_location(Vector3(*scenario.end))
        return ScenarioConfig(start=start.to_tuple(), end=end.to_tuple(), name=scenario.name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'grid': self.grid.to_dict(),
            'scenarios': [
                {'start': list(s.start), 'end': list(s.end), 'name': s.name}
                for s in self.scenarios
            ],
            'object_types': self.object_types,
            'actor_class': self.actor_class,
            'obstacles_path': self.obstacles_path,
            'oracle_error_policy': self.oracle_error_policy.value,
            'random_seed': self.random_seed,
            'output_dir': self.output_dir,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> NavigationConfig:
        """Create from dictionary."""
        scenarios = [
            ScenarioConfig(
                start=tuple(s['start']),
                end=tuple(s['end']),
                name=s.get('name')
            )
            for s in data.get('scenarios', [])
        ]
        try:
            policy = OracleErrorPolicy(data.get('oracle_error_policy', OracleErrorPolicy.OBSTRUCTED.value))
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
        return cls(
            grid=GridConfig.from_dict(data.get('grid', {})),
            scenarios=scenarios,
            object_types=data.get('object_types'),
            actor_class=data.get('actor_class'),
            obstacles_path=data.get('obstacles_path'),
            oracle_error_policy=policy,
            random_seed=data.get('random_seed', 42),
            output_dir=data.get('output_dir', "data/output"),
        )

    def save_json(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_json(cls, filepath: str) -> NavigationConfig:
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


# Preset configurations
PRESETS = {
    "demo": NavigationConfig(),
    "small": NavigationConfig(
        grid=GridConfig(divisions_x=5, divisions_y=5, divisions_z=5, division_size=100.0),
    ),
    "large": NavigationConfig(
        grid=GridConfig(
            divisions_x=40, divisions_y=40, divisions_z=20,
            division_size=50.0,
            min_shared_neighbor_axes=1
        ),
    ),
}
