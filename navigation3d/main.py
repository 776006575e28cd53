#!/usr/bin/env python3


import argparse
import json
import logging
import os
import time
from typing import List, Optional

from .config import NavigationConfig, ScenarioConfig, GridConfig, PRESETS
from .errors import InvalidConfiguration
from .grid.collision import QueryFilters, TraversabilityOracle, ObstacleOracle, OpenSpaceOracle
from .grid.grid_space import GridSpace
from .grid.node import Vector3
from .data.obstacles import ObstacleCollection
from .data.mock_generator import MockDataGenerator
from .routing.astar import PathResult
from .routing.dijkstra import DijkstraRouter
from .volume import NavigationVolume


def print_header(text: str) -> None:
    """Print a section header."""
    print()
    print("=" * 60)
    print(f"  {text}")
    print("=" * 60)


def print_step(text: str) -> None:
    """Print a step indicator."""
    print(f"\n>> {text}")


def load_obstacles(
    config: NavigationConfig,
    space: GridSpace,
    random_count: int = 0,
    keep_free: Optional[List] = None
) -> ObstacleCollection:
    """
    Load obstacles from the configured file, or generate random ones.

    Args:
        config: Navigation configuration
        space: Grid the obstacles belong to
        random_count: Number of random obstacles to generate when no file is given
        keep_free: Cells random obstacles must not cover

    Returns:
        ObstacleCollection (possibly empty)
    """
    if config.obstacles_path:
        print_step(f"Loading obstacles: {config.obstacles_path}")
        obstacles = ObstacleCollection.load_json(config.obstacles_path)
    elif random_count > 0:
        print_step(f"Generating {random_count} random obstacles (seed={config.random_seed})")
        generator = MockDataGenerator(seed=config.random_seed)
        obstacles = generator.generate_obstacles(
            space, num_obstacles=random_count, keep_free=keep_free or []
        )
    else:
        obstacles = ObstacleCollection()
    print(f"   {len(obstacles)} obstacles")
    return obstacles


def run_scenario(
    scenario: ScenarioConfig,
    volume: NavigationVolume,
    reference: Optional[DijkstraRouter] = None
) -> PathResult:
    """Run a single path query and print its summary."""
    start = Vector3(*scenario.start)
    end = Vector3(*scenario.end)
    name = scenario.name or "scenario"

    print(f"\n   [{name}] {scenario.start} -> {scenario.end}")

    t0 = time.time()
    result = volume.find_path(start, end)
    elapsed = time.time() - t0

    if not result.success:
        print(f"   [{name}] FAILED - {result.error.value} "
              f"({result.nodes_explored} nodes explored, {elapsed * 1000:.1f}ms)")
    else:
        print(f"   [{name}] {len(result.path)} waypoints, length {result.path_length:.1f}, "
              f"cost {result.total_cost:.3f} cells "
              f"({result.nodes_explored} explored, {result.oracle_queries} oracle queries, "
              f"{elapsed * 1000:.1f}ms)")

    if reference is not None:
        start_c = volume.convert_location_to_coordinates(start)
        end_c = volume.convert_location_to_coordinates(end)
        best = reference.shortest_path_cost(start_c, end_c)
        if best is None:
            status = "OK" if not result.success else "MISMATCH"
            print(f"   [{name}] Reference: unreachable [{status}]")
        else:
            status = "OK" if result.success and abs(best - result.total_cost) < 1e-6 else "MISMATCH"
            print(f"   [{name}] Reference: cost {best:.3f} cells [{status}]")

    return result


def run_all_scenarios(
    config: NavigationConfig,
    oracle: TraversabilityOracle,
    output_path: Optional[str] = None,
    verify: bool = False
) -> List[dict]:
    """Run all scenarios and optionally save output."""
    filters = QueryFilters.create(config.object_types, config.actor_class)

    print_step("Building node graph...")
    volume = NavigationVolume(config.grid, oracle, filters, config.oracle_error_policy)
    volume.activate()
    graph = volume.graph
    print(f"   Grid: {volume.divisions_x}x{volume.divisions_y}x{volume.divisions_z} "
          f"= {volume.total_divisions} nodes, {graph.edge_count} edges")

    reference = DijkstraRouter(graph, oracle, filters) if verify else None

    print_step(f"Processing {len(config.scenarios)} scenarios...")
    outputs = []
    try:
        for scenario in config.scenarios:
            result = run_scenario(scenario, volume, reference)
            outputs.append({
                'name': scenario.name,
                'start': list(scenario.start),
                'end': list(scenario.end),
                'result': result.to_dict(),
            })
    finally:
        volume.deactivate()

    if output_path:
        print_step("Saving output...")
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump({'grid': config.grid.to_dict(), 'scenarios': outputs}, f, indent=2)
        file_size = os.path.getsize(output_path)
        print(f"   Saved: {output_path} ({file_size:,} bytes)")

    return outputs


def build_config(args: argparse.Namespace) -> NavigationConfig:
    """Resolve preset / config file / command-line overrides into one configuration."""
    if args.config:
        config = NavigationConfig.load_json(args.config)
    else:
        config = PRESETS[args.preset]

    grid = config.grid
    if args.min_shared_axes is not None:
        grid = GridConfig.from_dict({**grid.to_dict(), 'min_shared_neighbor_axes': args.min_shared_axes})

    scenarios = config.scenarios
    if args.start and args.end:
        scenarios = [ScenarioConfig(start=tuple(args.start), end=tuple(args.end), name="cli")]

    return NavigationConfig(
        grid=grid,
        scenarios=scenarios,
        object_types=args.object_types if args.object_types is not None else config.object_types,
        actor_class=args.actor_class or config.actor_class,
        obstacles_path=args.obstacles or config.obstacles_path,
        oracle_error_policy=config.oracle_error_policy,
        random_seed=args.seed if args.seed is not None else config.random_seed,
        output_dir=config.output_dir,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="3D Grid Navigation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  Default scenarios on a random obstacle field:
    python -m navigation3d.main --preset small --random-obstacles 8 --verify

  Single query:
    python -m navigation3d.main --start 50 50 50 --end 950 950 950 --obstacles obstacles.json

Presets: demo, small, large
        """
    )

    parser.add_argument("--preset", choices=list(PRESETS.keys()), default="demo",
                        help="Configuration preset (default: demo)")
    parser.add_argument("--config", help="JSON configuration file (overrides --preset)")
    parser.add_argument("--obstacles", help="JSON obstacle file")
    parser.add_argument("--random-obstacles", type=int, default=0,
                        help="Generate N random obstacles when no obstacle file is given")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for generated obstacles")
    parser.add_argument("--start", type=float, nargs=3, metavar=("X", "Y", "Z"),
                        help="Start location in world space")
    parser.add_argument("--end", type=float, nargs=3, metavar=("X", "Y", "Z"),
                        help="Destination in world space")
    parser.add_argument("--min-shared-axes", type=int, choices=[0, 1, 2], default=None,
                        help="Neighbor topology: 0 = 26, 1 = 18, 2 = 6 neighbors")
    parser.add_argument("--object-types", nargs="*", default=None,
                        help="Object types that obstruct (default: all)")
    parser.add_argument("--actor-class", default=None, help="Only this actor class obstructs")
    parser.add_argument("--verify", action="store_true",
                        help="Check every result against an exhaustive Dijkstra search")
    parser.add_argument("--output", default=None, help="Output JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = build_config(args)
    except InvalidConfiguration as e:
        parser.error(str(e))

    print_header("3D Grid Navigation")
    print(f"Preset: {args.preset if not args.config else args.config}")

    start_time = time.time()

    print_header("Loading Scene")
    space = GridSpace(config.grid)
    keep_free = []
    for s in config.scenarios:
        keep_free.append(space.world_to_coordinates(Vector3(*s.start)))
        keep_free.append(space.world_to_coordinates(Vector3(*s.end)))
    obstacles = load_obstacles(config, space, args.random_obstacles, keep_free)
    oracle = ObstacleOracle(obstacles) if len(obstacles) else OpenSpaceOracle()

    print_header("Running Pathfinding")
    run_all_scenarios(config, oracle, args.output, verify=args.verify)

    elapsed = time.time() - start_time
    print_header("Complete")
    print(f"Total time: {elapsed:.2f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
