from .obstacles import Obstacle, ObstacleCollection
from .voxel_grid import VoxelOccupancyOracle
from .mock_generator import MockDataGenerator
