"""End-to-end tests for the command-line runner."""

import json

import pytest

from navigation3d.config import GridConfig, NavigationConfig, ScenarioConfig
from navigation3d.data.mock_generator import MockDataGenerator
from navigation3d.grid.grid_space import GridSpace
from navigation3d.main import main


def test_preset_with_random_obstacles(tmp_path, capsys):
    output = tmp_path / "out" / "paths.json"
    code = main(["--preset", "small", "--random-obstacles", "6", "--seed", "3",
                 "--verify", "--output", str(output)])
    assert code == 0

    out = capsys.readouterr().out
    assert "MISMATCH" not in out
    assert out.count("Reference:") == 3

    data = json.loads(output.read_text())
    assert data["grid"]["divisions_x"] == 5
    assert [s["name"] for s in data["scenarios"]] == ["diagonal", "axis_x", "same_cell"]
    same_cell = data["scenarios"][2]["result"]
    assert same_cell["success"] is True
    assert len(same_cell["path"]) == 1


def test_single_query_with_obstacle_file(tmp_path, capsys):
    grid = GridConfig(divisions_x=3, divisions_y=3, divisions_z=3, division_size=100.0)
    obstacles_path = tmp_path / "obstacles.json"
    MockDataGenerator.obstacles_for_cells(GridSpace(grid), [(1, 1, 1)]).save_json(str(obstacles_path))

    config_path = tmp_path / "config.json"
    NavigationConfig(grid=grid).save_json(str(config_path))

    output = tmp_path / "paths.json"
    code = main(["--config", str(config_path), "--obstacles", str(obstacles_path),
                 "--start", "50", "50", "50", "--end", "250", "250", "250",
                 "--min-shared-axes", "2", "--output", str(output)])
    assert code == 0

    data = json.loads(output.read_text())
    assert data["grid"]["min_shared_neighbor_axes"] == 2
    [scenario] = data["scenarios"]
    assert scenario["name"] == "cli"
    result = scenario["result"]
    assert result["success"] is True
    assert result["total_cost"] == pytest.approx(6.0)
    assert [1, 1, 1] not in result["path_coordinates"]


def test_unreachable_scenario_reported(tmp_path, capsys):
    grid = GridConfig(divisions_x=3, divisions_y=1, divisions_z=1, division_size=100.0)
    obstacles_path = tmp_path / "obstacles.json"
    MockDataGenerator.obstacles_for_cells(GridSpace(grid), [(1, 0, 0)]).save_json(str(obstacles_path))
    config = NavigationConfig(
        grid=grid,
        scenarios=[ScenarioConfig(start=(50.0, 50.0, 50.0), end=(250.0, 50.0, 50.0), name="wall")],
        obstacles_path=str(obstacles_path),
    )
    config_path = tmp_path / "config.json"
    config.save_json(str(config_path))

    assert main(["--config", str(config_path), "--verify"]) == 0
    out = capsys.readouterr().out
    assert "FAILED - no_path_found" in out
    assert "unreachable [OK]" in out


def test_start_requires_end():
    with pytest.raises(SystemExit):
        main(["--start", "0", "0", "0"])
