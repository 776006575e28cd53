"""
WebSocket server for path queries against a navigation volume.

Protocol:
---------
1. Client connects
2. Client sends: {"type": "get_grid"}
   Server sends: {"type": "grid", "data": {"config": {...}, "bounds": [...], ...}}
3. Client sends: {"type": "find_path", "start": [x,y,z], "end": [x,y,z],
                  "object_types": [...], "actor_class": "..."}   (filters optional)
   Server sends: {"type": "path", "data": {PathResult}}
4. Client sends: {"type": "to_coordinates", "location": [x,y,z]}
   Server sends: {"type": "coordinates", "data": [ix, iy, iz]}
   With "locations": [[x,y,z], ...] instead, "data" is a list of [ix, iy, iz].
5. Client sends: {"type": "to_location", "coordinates": [ix, iy, iz]}
   Server sends: {"type": "location", "data": [x, y, z]}

Errors are sent as {"type": "error", "message": "..."}; the connection stays open.

Usage:
------
    python -m navigation3d.server.websocket_server --port 8765 --obstacles obstacles.json
"""

import asyncio
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import websockets

from ..config import GridConfig
from ..data.obstacles import ObstacleCollection
from ..grid.collision import ObstacleOracle, OpenSpaceOracle, TraversabilityOracle
from ..grid.node import Coordinate, Vector3
from ..volume import NavigationVolume

logger = logging.getLogger(__name__)


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""
    def default(self, obj):
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


@dataclass
class ServerConfig:
    """Server configuration."""
    host: str = "localhost"
    port: int = 8765

    grid: GridConfig = field(default_factory=GridConfig)

    # Obstacle file; None serves an empty world
    obstacles_path: Optional[str] = None

    # 10MB
    max_message_size: int = 10 * 1024 * 1024


class NavigationServer:
    """
    WebSocket front end for a NavigationVolume.

    Each find_path request runs in a worker thread so a long search does
    not stall other clients; the volume's graph is shared read-only.
    """

    def __init__(self, config: Optional[ServerConfig] = None,
                 oracle: Optional[TraversabilityOracle] = None):
        """Initialize server with configuration."""
        self.config = config or ServerConfig()
        self.oracle = oracle
        self.volume: Optional[NavigationVolume] = None

    def initialize(self) -> None:
        """Load obstacles and activate the navigation volume."""
        if self.volume is not None and self.volume.is_active:
            return

        logger.info("Initializing server...")

        if self.oracle is None:
            if self.config.obstacles_path:
                logger.info(f"Loading obstacles: {self.config.obstacles_path}")
                obstacles = ObstacleCollection.load_json(self.config.obstacles_path)
                self.oracle = ObstacleOracle(obstacles)
                logger.info(f"Loaded {len(obstacles)} obstacles")
            else:
                self.oracle = OpenSpaceOracle()

        self.volume = NavigationVolume(self.config.grid, self.oracle)
        self.volume.activate()

        logger.info("Server initialization complete!")

    def shutdown(self) -> None:
        if self.volume is not None:
            self.volume.deactivate()

    def get_grid_info(self) -> Dict[str, Any]:
        """Grid configuration and world-space bounds."""
        volume = self.volume
        return {
            "config": volume.config.to_dict(),
            "total_divisions": volume.total_divisions,
            "bounds": [c.to_list() for c in volume.world_bounds()],
        }

    async def handle_client(self, websocket) -> None:
        """Handle a single client connection."""
        client_id = id(websocket)
        logger.info(f"Client {client_id} connected")

        try:
            async for message in websocket:
                try:
                    data = json.loads(message)
                    await self.handle_message(websocket, data)
                except json.JSONDecodeError:
                    await self.send_error(websocket, "Invalid JSON")
                except Exception as e:
                    logger.error(f"Error handling message: {e}")
                    await self.send_error(websocket, str(e))
        except websockets.exceptions.ConnectionClosed:
            logger.info(f"Client {client_id} disconnected")

    async def handle_message(self, websocket, data: Dict) -> None:
        """Handle incoming message from client."""
        if not isinstance(data, dict):
            await self.send_error(websocket, "Message must be a JSON object")
            return

        msg_type = data.get("type")

        if msg_type == "get_grid":
            await self.send_json(websocket, {"type": "grid", "data": self.get_grid_info()})

        elif msg_type == "find_path":
            start = self._parse_vector(data.get("start"))
            end = self._parse_vector(data.get("end"))
            if start is None or end is None:
                await self.send_error(websocket, "start and end must be [x, y, z] numbers")
                return

            object_types = data.get("object_types")
            actor_class = data.get("actor_class")
            if object_types is not None and (
                    not isinstance(object_types, list)
                    or not all(isinstance(t, str) for t in object_types)):
                await self.send_error(websocket, "object_types must be a list of strings")
                return
            if actor_class is not None and not isinstance(actor_class, str):
                await self.send_error(websocket, "actor_class must be a string")
                return
            logger.info(f"Path query: {start} -> {end}")

            result = await asyncio.to_thread(
                self.volume.find_path, start, end, object_types, actor_class
            )
            await self.send_json(websocket, {"type": "path", "data": result.to_dict()})

        elif msg_type == "to_coordinates" and "locations" in data:
            points = self._parse_points(data.get("locations"))
            if points is None:
                await self.send_error(websocket, "locations must be a list of [x, y, z] numbers")
                return
            coords = self.volume.grid_space.world_to_coordinates_batch(points)
            await self.send_json(websocket, {"type": "coordinates", "data": coords})

        elif msg_type == "to_coordinates":
            location = self._parse_vector(data.get("location"))
            if location is None:
                await self.send_error(websocket, "location must be [x, y, z] numbers")
                return
            coords = self.volume.convert_location_to_coordinates(location)
            await self.send_json(websocket, {"type": "coordinates", "data": list(coords)})

        elif msg_type == "to_location":
            coords = data.get("coordinates")
            if (not isinstance(coords, list) or len(coords) != 3
                    or not all(isinstance(c, int) for c in coords)):
                await self.send_error(websocket, "coordinates must be [ix, iy, iz] integers")
                return
            location = self.volume.convert_coordinates_to_location(Coordinate(*coords))
            await self.send_json(websocket, {"type": "location", "data": location.to_list()})

        elif msg_type == "ping":
            await self.send_json(websocket, {"type": "pong"})

        else:
            await self.send_error(websocket, f"Unknown message type: {msg_type}")

    @staticmethod
    def _parse_vector(value: Any) -> Optional[Vector3]:
        """[x, y, z] list of finite numbers to Vector3, or None."""
        if not isinstance(value, list) or len(value) != 3:
            return None
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value):
            return None
        if not all(math.isfinite(v) for v in value):
            return None
        return Vector3.from_sequence(value)

    @classmethod
    def _parse_points(cls, value: Any) -> Optional[np.ndarray]:
        """Non-empty list of [x, y, z] lists to an (N, 3) array, or None."""
        if not isinstance(value, list) or not value:
            return None
        vectors = [cls._parse_vector(v) for v in value]
        if any(v is None for v in vectors):
            return None
        return np.array([v.to_list() for v in vectors], dtype=np.float64).reshape(-1, 3)

    async def send_json(self, websocket, data: Dict) -> None:
        """Send JSON message to client."""
        await websocket.send(json.dumps(data, cls=NumpyEncoder))

    async def send_error(self, websocket, message: str) -> None:
        """Send error message to client."""
        await self.send_json(websocket, {
            "type": "error",
            "message": message
        })

    async def start(self) -> None:
        """Start the WebSocket server."""
        self.initialize()

        logger.info(f"Starting WebSocket server on ws://{self.config.host}:{self.config.port}")

        try:
            async with websockets.serve(
                self.handle_client,
                self.config.host,
                self.config.port,
                max_size=self.config.max_message_size,
            ):
                logger.info("Server running. Press Ctrl+C to stop.")
                await asyncio.Future()  # Run forever
        finally:
            self.shutdown()


def run_server(host: str = "localhost", port: int = 8765, **kwargs) -> None:
    """Run the WebSocket server."""
    config = ServerConfig(host=host, port=port, **kwargs)
    server = NavigationServer(config)
    asyncio.run(server.start())


def main(argv: Optional[List[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(description="3D Navigation WebSocket Server")
    parser.add_argument("--host", default="localhost", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8765, help="Port to bind to")
    parser.add_argument("--grid-config", type=str, default=None,
                        help="JSON file with grid settings (default: 10x10x10 cells of 100)")
    parser.add_argument("--obstacles", type=str, default=None,
                        help="JSON obstacle file (default: empty world)")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    grid = GridConfig()
    if args.grid_config:
        with open(args.grid_config, 'r') as f:
            grid = GridConfig.from_dict(json.load(f))

    run_server(
        host=args.host,
        port=args.port,
        grid=grid,
        obstacles_path=args.obstacles
    )


if __name__ == "__main__":
    main()
