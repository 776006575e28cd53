"""Traversability queries against the surrounding world."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, TYPE_CHECKING

from .node import Vector3

if TYPE_CHECKING:
    from ..data.obstacles import ObstacleCollection


@dataclass(frozen=True)
class QueryFilters:
    """
    Which world objects count as obstructions.

    object_types: tags of objects that can block a cell. None means every
        type; an empty set means nothing can block.
    actor_class: only objects of this class (or a subclass of it) block.
        None means any class.
    """
    object_types: Optional[FrozenSet[str]] = None
    actor_class: Optional[str] = None

    @classmethod
    def create(cls, object_types: Optional[Iterable[str]] = None,
               actor_class: Optional[str] = None) -> QueryFilters:
        if isinstance(object_types, str):
            object_types = [object_types]
        types = frozenset(object_types) if object_types is not None else None
        return cls(object_types=types, actor_class=actor_class)

    def matches(self, object_type: str, actor_classes: Iterable[str]) -> bool:
        """Whether an object with this type and class lineage passes the filters."""
        if self.object_types is not None and object_type not in self.object_types:
            return False
        if self.actor_class is not None and self.actor_class not in actor_classes:
            return False
        return True


ANY_OBJECT = QueryFilters()


class TraversabilityOracle(ABC):
    """
    Answers whether a region of world space is currently obstructed.

    Implementations must be deterministic for the duration of one search.
    """

    @abstractmethod
    def is_obstructed(
        self,
        center: Vector3,
        half_extent: float,
        object_types: Optional[FrozenSet[str]] = None,
        actor_class: Optional[str] = None
    ) -> bool:
        """
        Check a world-axis-aligned box for obstructions.

        Args:
            center: World-space center of the box
            half_extent: Half the edge length of the (cubic) box
            object_types: Object type filter, see QueryFilters
            actor_class: Actor class filter, see QueryFilters

        Returns:
            True if any matching object overlaps the box
        """
        pass

    def query(self, center: Vector3, half_extent: float, filters: QueryFilters) -> bool:
        return self.is_obstructed(center, half_extent, filters.object_types, filters.actor_class)


class OpenSpaceOracle(TraversabilityOracle):
    """Empty world: nothing is ever obstructed."""

    def is_obstructed(self, center, half_extent, object_types=None, actor_class=None) -> bool:
        return False


class ObstacleOracle(TraversabilityOracle):
    """Box-overlap queries against a collection of world-space obstacles."""

    def __init__(self, obstacles: ObstacleCollection):
        self.obstacles = obstacles

    def is_obstructed(self, center, half_extent, object_types=None, actor_class=None) -> bool:
        filters = QueryFilters.create(object_types, actor_class)
        return self.obstacles.overlaps_box(center, half_extent, filters)

    def __repr__(self) -> str:
        return f"ObstacleOracle({len(self.obstacles)} obstacles)"


class CountingOracle(TraversabilityOracle):
    """Wraps another oracle and counts the queries made against it."""

    def __init__(self, inner: TraversabilityOracle):
        self.inner = inner
        self.calls = 0
        self.obstructed_calls = 0

    def is_obstructed(self, center, half_extent, object_types=None, actor_class=None) -> bool:
        self.calls += 1
        result = self.inner.is_obstructed(center, half_extent, object_types, actor_class)
        if result:
            self.obstructed_calls += 1
        return result

    def reset(self) -> None:
        self.calls = 0
        self.obstructed_calls = 0
