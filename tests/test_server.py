"""Tests for the WebSocket message handlers, using an in-memory socket."""

import asyncio
import json

import pytest

from navigation3d.config import GridConfig
from navigation3d.data.mock_generator import MockDataGenerator
from navigation3d.grid.collision import ObstacleOracle, OpenSpaceOracle
from navigation3d.grid.grid_space import GridSpace
from navigation3d.server.websocket_server import NavigationServer, ServerConfig

GRID = GridConfig(divisions_x=3, divisions_y=3, divisions_z=3, division_size=100.0)


class FakeWebSocket:
    """Collects sent messages; iterates over a fixed list of incoming ones."""

    def __init__(self, incoming=()):
        self.incoming = list(incoming)
        self.sent = []

    async def send(self, message):
        self.sent.append(json.loads(message))

    async def _messages(self):
        for message in self.incoming:
            yield message

    def __aiter__(self):
        return self._messages()


def make_server(oracle=None):
    server = NavigationServer(ServerConfig(grid=GRID), oracle=oracle or OpenSpaceOracle())
    server.initialize()
    return server


def send(server, message):
    ws = FakeWebSocket()
    asyncio.run(server.handle_message(ws, message))
    assert len(ws.sent) == 1
    return ws.sent[0]


def test_ping():
    assert send(make_server(), {"type": "ping"}) == {"type": "pong"}


def test_get_grid():
    reply = send(make_server(), {"type": "get_grid"})
    assert reply["type"] == "grid"
    assert reply["data"]["total_divisions"] == 27
    assert reply["data"]["config"]["divisions_x"] == 3
    assert len(reply["data"]["bounds"]) == 8


def test_find_path():
    reply = send(make_server(), {"type": "find_path", "start": [50, 50, 50], "end": [250, 250, 250]})
    assert reply["type"] == "path"
    data = reply["data"]
    assert data["success"] is True
    assert data["error"] is None
    assert data["path_coordinates"] == [[0, 0, 0], [1, 1, 1], [2, 2, 2]]
    assert data["path"][0] == [50.0, 50.0, 50.0]


def test_find_path_with_filters():
    space = GridSpace(GRID)
    oracle = ObstacleOracle(MockDataGenerator.obstacles_for_cells(space, [(1, 1, 1)], object_type="Pawn"))
    server = make_server(oracle)
    message = {"type": "find_path", "start": [50, 50, 50], "end": [250, 250, 250]}

    blocked = send(server, message)["data"]
    assert [1, 1, 1] not in blocked["path_coordinates"]

    ignored = send(server, dict(message, object_types=["WorldStatic"]))["data"]
    assert ignored["path_coordinates"] == [[0, 0, 0], [1, 1, 1], [2, 2, 2]]


def test_find_path_no_path():
    space = GridSpace(GRID)
    server = make_server()
    cells = server.volume.graph.neighbor_coordinates((2, 2, 2))
    server.shutdown()
    server = make_server(ObstacleOracle(MockDataGenerator.obstacles_for_cells(space, cells)))
    data = send(server, {"type": "find_path", "start": [50, 50, 50], "end": [250, 250, 250]})["data"]
    assert data["success"] is False
    assert data["error"] == "no_path_found"
    assert data["total_cost"] is None


@pytest.mark.parametrize("start", [None, [1, 2], [1, "a", 3], [True, 0, 0], "50,50,50"])
def test_find_path_rejects_bad_vectors(start):
    reply = send(make_server(), {"type": "find_path", "start": start, "end": [0, 0, 0]})
    assert reply["type"] == "error"


def test_coordinate_conversions():
    server = make_server()
    assert send(server, {"type": "to_coordinates", "location": [150, 250, 50]}) == {
        "type": "coordinates", "data": [1, 2, 0]
    }
    assert send(server, {"type": "to_location", "coordinates": [1, 2, 0]}) == {
        "type": "location", "data": [150.0, 250.0, 50.0]
    }
    assert send(server, {"type": "to_location", "coordinates": [1.5, 2, 0]})["type"] == "error"
    assert send(server, {"type": "to_coordinates", "location": []})["type"] == "error"


def test_unknown_message_type():
    reply = send(make_server(), {"type": "launch"})
    assert reply == {"type": "error", "message": "Unknown message type: launch"}


def test_non_object_message():
    assert send(make_server(), [1, 2, 3])["type"] == "error"


def test_client_session_survives_bad_json():
    server = make_server()
    ws = FakeWebSocket(["not json", json.dumps({"type": "ping"})])
    asyncio.run(server.handle_client(ws))
    assert ws.sent == [
        {"type": "error", "message": "Invalid JSON"},
        {"type": "pong"},
    ]


def test_initialize_loads_obstacle_file(tmp_path):
    space = GridSpace(GRID)
    path = tmp_path / "obstacles.json"
    MockDataGenerator.obstacles_for_cells(space, [(1, 1, 1)]).save_json(str(path))

    server = NavigationServer(ServerConfig(grid=GRID, obstacles_path=str(path)))
    server.initialize()
    assert isinstance(server.oracle, ObstacleOracle)
    assert len(server.oracle.obstacles) == 1
    data = send(server, {"type": "find_path", "start": [50, 50, 50], "end": [250, 250, 250]})["data"]
    assert [1, 1, 1] not in data["path_coordinates"]

    server.shutdown()
    assert not server.volume.is_active


def test_find_path_rejects_malformed_filters():
    space = GridSpace(GRID)
    oracle = ObstacleOracle(MockDataGenerator.obstacles_for_cells(space, [(1, 1, 1)]))
    server = make_server(oracle)
    message = {"type": "find_path", "start": [50, 50, 50], "end": [150, 150, 150]}

    for bad in ["WorldStatic", ["WorldStatic", 3], {"WorldStatic": True}]:
        reply = send(server, dict(message, object_types=bad))
        assert reply == {"type": "error", "message": "object_types must be a list of strings"}

    reply = send(server, dict(message, actor_class=["Actor"]))
    assert reply == {"type": "error", "message": "actor_class must be a string"}

    # The well-formed version of the same filter still blocks the goal
    data = send(server, dict(message, object_types=["WorldStatic"]))["data"]
    assert data["success"] is False
    assert data["error"] == "no_path_found"


def test_batch_coordinate_conversion():
    server = make_server()
    reply = send(server, {"type": "to_coordinates",
                          "locations": [[150, 250, 50], [-500, 99999, 50], [0, 0, 0]]})
    assert reply == {"type": "coordinates", "data": [[1, 2, 0], [0, 2, 0], [0, 0, 0]]}

    assert send(server, {"type": "to_coordinates", "locations": []})["type"] == "error"
    assert send(server, {"type": "to_coordinates", "locations": [[1, 2]]})["type"] == "error"
    assert send(server, {"type": "to_coordinates", "locations": "0,0,0"})["type"] == "error"
