"""World-space obstacle geometry for traversability queries."""

from __future__ import annotations
import json
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..grid.collision import QueryFilters, ANY_OBJECT
from ..grid.node import Vector3

DEFAULT_OBJECT_TYPE = "WorldStatic"
DEFAULT_ACTOR_CLASS = "Actor"


class Obstacle:
    """
    Axis-aligned box in world space.

    object_type is the collision channel tag used by object-type filters.
    actor_class and base_classes form the class lineage matched by the
    actor-class filter (a filter on a base class matches its subclasses).
    """

    def __init__(self, min_corner: Vector3, max_corner: Vector3,
                 obstacle_id: str = "",
                 object_type: str = DEFAULT_OBJECT_TYPE,
                 actor_class: str = DEFAULT_ACTOR_CLASS,
                 base_classes: Tuple[str, ...] = ()):
        if (min_corner.x > max_corner.x or min_corner.y > max_corner.y
                or min_corner.z > max_corner.z):
            raise ValueError(f"Obstacle {obstacle_id!r} has min corner above max corner")
        self.min_corner = min_corner
        self.max_corner = max_corner
        self.id = obstacle_id
        self.object_type = object_type
        self.actor_class = actor_class
        self.base_classes = tuple(base_classes)

    @classmethod
    def from_center(cls, center: Vector3, half_size: Vector3, **kwargs) -> Obstacle:
        return cls(center - half_size, center + half_size, **kwargs)

    @property
    def center(self) -> Vector3:
        """Center point of the obstacle."""
        return (self.min_corner + self.max_corner) * 0.5

    @property
    def size(self) -> Vector3:
        """Dimensions of the obstacle."""
        return self.max_corner - self.min_corner

    @property
    def class_lineage(self) -> Tuple[str, ...]:
        return (self.actor_class,) + self.base_classes

    def contains_point(self, point: Vector3) -> bool:
        """Check if a point is inside the obstacle."""
        return (self.min_corner.x <= point.x <= self.max_corner.x and
                self.min_corner.y <= point.y <= self.max_corner.y and
                self.min_corner.z <= point.z <= self.max_corner.z)

    def overlaps_box(self, center: Vector3, half_extent: float) -> bool:
        """
        Check overlap with a cube centered at center.

        Strict on every axis: boxes that only share a face do not overlap.
        """
        return (center.x - half_extent < self.max_corner.x and
                center.x + half_extent > self.min_corner.x and
                center.y - half_extent < self.max_corner.y and
                center.y + half_extent > self.min_corner.y and
                center.z - half_extent < self.max_corner.z and
                center.z + half_extent > self.min_corner.z)

    def matches(self, filters: QueryFilters) -> bool:
        return filters.matches(self.object_type, self.class_lineage)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'min': self.min_corner.to_list(),
            'max': self.max_corner.to_list(),
            'object_type': self.object_type,
            'actor_class': self.actor_class,
            'base_classes': list(self.base_classes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Obstacle:
        """Create from dictionary."""
        return cls(
            min_corner=Vector3.from_sequence(data['min']),
            max_corner=Vector3.from_sequence(data['max']),
            obstacle_id=data.get('id', ''),
            object_type=data.get('object_type', DEFAULT_OBJECT_TYPE),
            actor_class=data.get('actor_class', DEFAULT_ACTOR_CLASS),
            base_classes=tuple(data.get('base_classes', ())),
        )

    def __repr__(self) -> str:
        return f"Obstacle({self.id}, {self.object_type}, {self.min_corner} to {self.max_corner})"


class ObstacleCollection:
    """Collection of obstacles for overlap queries."""

    def __init__(self, obstacles: Optional[List[Obstacle]] = None):
        self.obstacles = obstacles or []

    def add(self, obstacle: Obstacle) -> None:
        """Add an obstacle to the collection."""
        self.obstacles.append(obstacle)

    def contains_point(self, point: Vector3, filters: QueryFilters = ANY_OBJECT) -> bool:
        """Check if a point is inside any matching obstacle."""
        for obstacle in self.obstacles:
            if obstacle.matches(filters) and obstacle.contains_point(point):
                return True
        return False

    def overlaps_box(self, center: Vector3, half_extent: float,
                     filters: QueryFilters = ANY_OBJECT) -> bool:
        """Check if a cube overlaps any matching obstacle."""
        for obstacle in self.obstacles:
            if obstacle.matches(filters) and obstacle.overlaps_box(center, half_extent):
                return True
        return False

    def overlapping(self, center: Vector3, half_extent: float,
                    filters: QueryFilters = ANY_OBJECT) -> List[Obstacle]:
        """All matching obstacles overlapping a cube."""
        return [
            o for o in self.obstacles
            if o.matches(filters) and o.overlaps_box(center, half_extent)
        ]

    def bounds(self) -> Optional[Tuple[Vector3, Vector3]]:
        """Min and max corner enclosing every obstacle, or None when empty."""
        if not self.obstacles:
            return None
        return (
            Vector3(min(o.min_corner.x for o in self.obstacles),
                    min(o.min_corner.y for o in self.obstacles),
                    min(o.min_corner.z for o in self.obstacles)),
            Vector3(max(o.max_corner.x for o in self.obstacles),
                    max(o.max_corner.y for o in self.obstacles),
                    max(o.max_corner.z for o in self.obstacles)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'obstacles': [o.to_dict() for o in self.obstacles]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ObstacleCollection:
        """Create from dictionary."""
        obstacles = [Obstacle.from_dict(o) for o in data.get('obstacles', [])]
        return cls(obstacles)

    def save_json(self, filepath: str) -> None:
        """Save obstacles to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_json(cls, filepath: str) -> ObstacleCollection:
        """Load obstacles from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __len__(self) -> int:
        return len(self.obstacles)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self.obstacles)

    def __repr__(self) -> str:
        return f"ObstacleCollection({len(self.obstacles)} obstacles)"
