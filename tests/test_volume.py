"""Tests for the navigation volume lifecycle and queries."""

import math

import pytest

from navigation3d.config import GridConfig
from navigation3d.data.mock_generator import MockDataGenerator
from navigation3d.errors import GraphNotReady, PathError
from navigation3d.grid.collision import ObstacleOracle, OpenSpaceOracle, QueryFilters
from navigation3d.grid.grid_space import GridSpace
from navigation3d.grid.node import Vector3
from navigation3d.volume import NavigationVolume

GRID = GridConfig(divisions_x=3, divisions_y=3, divisions_z=3, division_size=100.0)


def pawn_in_center():
    space = GridSpace(GRID)
    return ObstacleOracle(MockDataGenerator.obstacles_for_cells(space, [(1, 1, 1)], object_type="Pawn"))


def test_inactive_volume_reports_graph_not_ready():
    volume = NavigationVolume(GRID, OpenSpaceOracle())
    assert not volume.is_active
    result = volume.find_path(Vector3(50, 50, 50), Vector3(250, 250, 250))
    assert not result.success
    assert result.error == PathError.GRAPH_NOT_READY
    with pytest.raises(GraphNotReady):
        volume.graph


def test_activate_builds_graph_once():
    volume = NavigationVolume(GRID, OpenSpaceOracle())
    volume.activate()
    graph = volume.graph
    assert len(graph) == 27
    volume.activate()
    assert volume.graph is graph
    assert volume.find_path(Vector3(50, 50, 50), Vector3(250, 250, 250)).success


def test_deactivate_releases_graph():
    volume = NavigationVolume(GRID, OpenSpaceOracle())
    volume.activate()
    volume.deactivate()
    assert not volume.is_active
    assert volume.find_path(Vector3(50, 50, 50), Vector3(50, 50, 50)).error == PathError.GRAPH_NOT_READY
    # Deactivating twice is harmless
    volume.deactivate()


def test_context_manager():
    with NavigationVolume(GRID, OpenSpaceOracle()) as volume:
        assert volume.is_active
    assert not volume.is_active


def test_per_query_filters_override_defaults():
    volume = NavigationVolume(GRID, pawn_in_center(), filters=QueryFilters.create(["WorldStatic"]))
    with volume:
        start, end = Vector3(50, 50, 50), Vector3(250, 250, 250)
        # Default filters ignore pawns
        assert volume.find_path(start, end).total_cost == pytest.approx(2 * math.sqrt(3))
        # Override: pawns block
        blocked = volume.find_path(start, end, object_types=["Pawn"])
        assert blocked.success
        assert (1, 1, 1) not in blocked.path_coordinates
        # Override with an empty set: nothing blocks
        assert volume.find_path(start, end, object_types=[]).total_cost == pytest.approx(2 * math.sqrt(3))


def test_conversions_and_accessors():
    grid = GridConfig(divisions_x=2, divisions_y=3, divisions_z=4, division_size=50.0,
                      position=(100.0, 0.0, 0.0))
    volume = NavigationVolume(grid, OpenSpaceOracle())
    assert volume.total_divisions == 24
    assert (volume.divisions_x, volume.divisions_y, volume.divisions_z) == (2, 3, 4)
    assert volume.division_size == 50.0
    assert volume.grid_space.divisions == (2, 3, 4)
    assert volume.convert_location_to_coordinates(Vector3(160, 80, 199)) == (1, 1, 3)
    assert volume.convert_coordinates_to_location((1, 1, 3)) == Vector3(175, 75, 175)
    assert len(volume.world_bounds()) == 8
    # Conversions do not need an active graph
    assert not volume.is_active
