"""Тесты e2e: FastAPI-приложение и эндпоинт /ws."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from roomrelay.main import create_app
from roomrelay.rooms import RoomRegistry

from conftest import SequenceRandom


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(RoomRegistry(rng=SequenceRandom([4821]))))


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_status_when_idle(client: TestClient) -> None:
    assert client.get("/status").json() == {"connections": 0, "rooms": []}


def test_connect_assigns_increasing_ids(client: TestClient) -> None:
    with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
        a = first.receive_json()
        b = second.receive_json()
    assert a["type"] == b["type"] == "assignId"
    assert int(b["id"]) > int(a["id"])


def test_two_players_relay_and_leave(client: TestClient) -> None:
    with client.websocket_connect("/ws") as a:
        a.receive_json()
        a.send_json({"type": "createRoom"})
        assert a.receive_json() == {"type": "roomCreated", "code": "4821"}

        with client.websocket_connect("/ws") as b:
            b.receive_json()
            b.send_json({"type": "joinRoom", "code": "4821"})
            assert b.receive_json() == {"type": "roomJoined", "code": "4821"}
            assert a.receive_json() == {"type": "playerJoined", "code": "4821"}

            status = client.get("/status").json()
            assert status["connections"] == 2
            assert [room["code"] for room in status["rooms"]] == ["4821"]

            a.send_json({"type": "playerUpdate", "code": "4821", "state": {"x": 1}})
            assert b.receive_json() == {"type": "opponentUpdate", "state": {"x": 1}}

            b.send_json({"type": "startGame", "code": "4821"})
            assert a.receive_json() == {"type": "startGame"}
            assert b.receive_json() == {"type": "startGame"}

        assert a.receive_json() == {"type": "opponentLeft"}

        a.send_json({"type": "leaveRoom"})
        a.send_json({"type": "joinRoom", "code": "4821"})
        assert a.receive_json() == {"type": "error", "message": "Room not found"}


def test_malformed_message_keeps_socket_open(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.send_text("{oops")
        ws.send_bytes(b'{"type": "createRoom"}')
        assert ws.receive_json() == {"type": "roomCreated", "code": "4821"}


def test_create_app_keeps_given_registry() -> None:
    registry = RoomRegistry()
    app = create_app(registry)
    assert app.state.registry is registry
    assert app.state.router.registry is registry


def test_internal_error_closes_only_faulty_socket(monkeypatch) -> None:
    registry = RoomRegistry(rng=SequenceRandom([4821]))
    client = TestClient(create_app(registry))

    def broken(code):
        raise RuntimeError("boom")

    with client.websocket_connect("/ws") as a:
        a_id = a.receive_json()["id"]
        a.send_json({"type": "createRoom"})
        assert a.receive_json() == {"type": "roomCreated", "code": "4821"}

        with client.websocket_connect("/ws") as b:
            b.receive_json()
            b.send_json({"type": "joinRoom", "code": "4821"})
            assert b.receive_json() == {"type": "roomJoined", "code": "4821"}
            assert a.receive_json() == {"type": "playerJoined", "code": "4821"}

            monkeypatch.setattr(registry, "get_room", broken)
            b.send_json({"type": "playerUpdate", "code": "4821", "state": {"x": 1}})
            assert b.receive_json() == {"type": "error", "message": "Internal server error"}
            with pytest.raises(WebSocketDisconnect) as exc:
                b.receive_json()
            assert exc.value.code == 1011

        assert a.receive_json() == {"type": "opponentLeft"}
        status = client.get("/status").json()
        assert status["rooms"] == [{"code": "4821", "members": [a_id]}]
