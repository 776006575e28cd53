from .astar import AStarRouter, PathResult, heuristic, edge_cost
from .dijkstra import DijkstraRouter
from .path_utils import compute_path_length, coordinate_path_cost, follows_adjacency, path_to_list
