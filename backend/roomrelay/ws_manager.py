"""
Менеджер WebSocket: выдача id подключениям, best-effort отправка и закрытие.
"""
import itertools
import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket, client_id: str):
        self.ws = ws
        self.id = client_id
        # Обратная ссылка на комнату, её ведёт RoomRegistry
        self.room_code: str | None = None

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, room_code={self.room_code!r})"

    @property
    def is_open(self) -> bool:
        return (
            self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    async def send(self, payload: dict[str, Any]) -> bool:
        """Отправить, если сокет открыт. Никогда не бросает исключений."""
        if not self.is_open:
            logger.debug("send to %s skipped: socket closed", self.id)
            return False
        try:
            await self.ws.send_json(payload)
            return True
        except Exception as e:
            logger.warning("send to %s: %s", self.id, e)
            return False

    async def close(self, code: int, reason: str = "") -> None:
        if self.ws.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self.ws.close(code=code, reason=reason)
        except Exception as e:
            logger.warning("close %s (code=%s): %s", self.id, code, e)


class WSManager:
    def __init__(self):
        self._ids = itertools.count(1)
        self._by_id: dict[str, Connection] = {}

    def connect(self, ws: WebSocket) -> Connection:
        conn = Connection(ws, str(next(self._ids)))
        self._by_id[conn.id] = conn
        return conn

    def disconnect(self, client_id: str) -> None:
        self._by_id.pop(client_id, None)

    def __len__(self) -> int:
        return len(self._by_id)
