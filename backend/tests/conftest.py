"""Общие фикстуры: фейковый сокет, который запоминает отправленное."""

import random

import pytest
from starlette.websockets import WebSocketState

from roomrelay.rooms import RoomRegistry
from roomrelay.ws_handlers import ConnectionRouter
from roomrelay.ws_manager import WSManager


class FakeWebSocket:
    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.close_code: int | None = None
        self.close_reason: str | None = None

    async def send_json(self, payload: dict) -> None:
        if self.application_state != WebSocketState.CONNECTED:
            raise RuntimeError("Cannot send once a close message has been sent.")
        self.sent.append(payload)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.application_state = WebSocketState.DISCONNECTED
        self.close_code = code
        self.close_reason = reason

    def drop(self) -> None:
        """Пир пропал без close-рукопожатия."""
        self.client_state = WebSocketState.DISCONNECTED


class SequenceRandom(random.Random):
    """randint() отдаёт заданные значения, потом обычный random."""

    def __init__(self, values: list[int]) -> None:
        super().__init__(0)
        self._values = list(values)

    def randint(self, a: int, b: int) -> int:
        if self._values:
            return self._values.pop(0)
        return super().randint(a, b)


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry(rng=random.Random(1234))


@pytest.fixture
def router(registry: RoomRegistry) -> ConnectionRouter:
    return ConnectionRouter(registry)


@pytest.fixture
def manager() -> WSManager:
    return WSManager()


@pytest.fixture
def make_client(manager: WSManager):
    def _make():
        return manager.connect(FakeWebSocket())

    return _make
