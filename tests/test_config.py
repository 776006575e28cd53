"""Tests for configuration objects and presets."""

import pytest

from navigation3d.config import GridConfig, NavigationConfig, ScenarioConfig, PRESETS
from navigation3d.errors import InvalidConfiguration, OracleErrorPolicy
from navigation3d.grid.grid_space import GridSpace
from navigation3d.grid.node import Vector3


def test_grid_defaults():
    grid = GridConfig()
    assert (grid.divisions_x, grid.divisions_y, grid.divisions_z) == (10, 10, 10)
    assert grid.division_size == 100.0
    assert grid.min_shared_neighbor_axes == 0
    assert grid.total_divisions == 1000


def test_grid_dict_round_trip():
    grid = GridConfig(divisions_x=4, divisions_y=2, divisions_z=7, division_size=12.5,
                      min_shared_neighbor_axes=1, position=(1.0, 2.0, 3.0),
                      rotation=(0.0, 0.0, 45.0), scale=(2.0, 2.0, 1.0))
    data = grid.to_dict()
    assert data['position'] == [1.0, 2.0, 3.0]
    assert GridConfig.from_dict(data) == grid


def test_grid_from_dict_rejects_unknown_keys():
    with pytest.raises(InvalidConfiguration):
        GridConfig.from_dict({'divisions_x': 3, 'cell_count': 9})


def test_grid_from_dict_rejects_bad_values():
    with pytest.raises(InvalidConfiguration):
        GridConfig.from_dict({'divisions_x': 3, 'division_size': -1})
    with pytest.raises(InvalidConfiguration):
        GridConfig.from_dict({'position': [1.0, 2.0]})


def test_default_scenarios():
    config = NavigationConfig(grid=GridConfig(divisions_x=4, divisions_y=4, divisions_z=4))
    names = [s.name for s in config.scenarios]
    assert names == ["diagonal", "axis_x", "same_cell"]
    space = GridSpace(config.grid)
    diagonal = config.scenarios[0]
    assert space.world_to_coordinates(Vector3(*diagonal.start)) == (0, 0, 0)
    assert space.world_to_coordinates(Vector3(*diagonal.end)) == (3, 3, 3)


def test_default_scenarios_follow_placement():
    grid = GridConfig(divisions_x=4, divisions_y=4, divisions_z=4,
                      position=(500.0, -200.0, 0.0), rotation=(0.0, 0.0, 90.0))
    config = NavigationConfig(grid=grid)
    space = GridSpace(grid)
    diagonal = config.scenarios[0]
    assert space.world_to_coordinates(Vector3(*diagonal.start)) == (0, 0, 0)
    assert space.world_to_coordinates(Vector3(*diagonal.end)) == (3, 3, 3)


def test_explicit_scenarios_kept():
    scenario = ScenarioConfig(start=(1.0, 2.0, 3.0), end=(4.0, 5.0, 6.0), name="mine")
    config = NavigationConfig(scenarios=[scenario])
    assert config.scenarios == [scenario]


def test_navigation_config_json_round_trip(tmp_path):
    config = NavigationConfig(
        grid=GridConfig(divisions_x=5, divisions_y=5, divisions_z=2, min_shared_neighbor_axes=2),
        object_types=["WorldStatic"],
        actor_class="Actor",
        oracle_error_policy=OracleErrorPolicy.FAIL,
        random_seed=7,
    )
    path = tmp_path / "config.json"
    config.save_json(str(path))
    loaded = NavigationConfig.load_json(str(path))

    assert loaded.grid == config.grid
    assert loaded.object_types == ["WorldStatic"]
    assert loaded.actor_class == "Actor"
    assert loaded.oracle_error_policy == OracleErrorPolicy.FAIL
    assert loaded.random_seed == 7
    assert [s.name for s in loaded.scenarios] == [s.name for s in config.scenarios]


def test_unknown_error_policy_rejected():
    with pytest.raises(InvalidConfiguration):
        NavigationConfig.from_dict({'oracle_error_policy': 'retry'})


@pytest.mark.parametrize("name", sorted(PRESETS))
def test_presets_are_valid(name):
    preset = PRESETS[name]
    preset.grid.validate()
    assert preset.scenarios
