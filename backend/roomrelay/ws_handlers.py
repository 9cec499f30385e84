"""
Обработка сообщений WebSocket: createRoom, joinRoom, playerUpdate, startGame, leaveRoom.
Роутер решает, кому что отправить; сама отправка best-effort через Connection.
"""
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from . import events
from .constants import CLOSE_INTERNAL_ERROR, CLOSE_POLICY_VIOLATION, MSG_INTERNAL_ERROR
from .errors import MalformedMessage, RoomError, StaleOwner
from .events import CreateRoom, JoinRoom, LeaveRoom, PlayerUpdate, StartGame
from .rooms import RoomRegistry
from .ws_manager import Connection, WSManager

logger = logging.getLogger(__name__)


class ConnectionRouter:
    def __init__(self, registry: RoomRegistry):
        self.registry = registry

    async def dispatch(self, client: Connection, raw: str | bytes) -> bool:
        """
        Обрабатывает одно сообщение клиента.
        Возвращает False если соединение закрыто и цикл чтения нужно остановить.
        """
        try:
            event = events.parse_event(raw)
        except MalformedMessage as e:
            logger.warning("WS: malformed message from %s: %s", client.id, e)
            return True
        logger.debug("WS: msg from %s type=%s", client.id, event.type)
        try:
            await self.handle(client, event)
        except RoomError as e:
            logger.info("WS: %s from %s rejected: %s", event.type, client.id, e)
            await client.send(events.error(e.message))
        except Exception:
            logger.exception("WS: error handling %s from %s", event.type, client.id)
            await client.send(events.error(MSG_INTERNAL_ERROR))
            await client.close(CLOSE_INTERNAL_ERROR, MSG_INTERNAL_ERROR)
            return False
        return client.is_open

    async def handle(self, client: Connection, event: events.InboundEvent) -> None:
        if isinstance(event, CreateRoom):
            await self._create(client)
        elif isinstance(event, JoinRoom):
            await self._join(client, event.code)
        elif isinstance(event, PlayerUpdate):
            await self._relay_update(client, event)
        elif isinstance(event, StartGame):
            await self._start(client, event.code)
        elif isinstance(event, LeaveRoom):
            await self.leave(client)

    async def leave(self, client: Connection) -> None:
        """Выход из комнаты. Тот же путь используется при обрыве соединения."""
        departure = await self.registry.remove_client(client)
        if departure is None:
            return
        for member in departure.remaining:
            await member.send(events.opponent_left())

    disconnect = leave

    async def _create(self, client: Connection) -> None:
        if client.room_code is not None:
            await self.leave(client)
        code = await self.registry.create_room(client)
        await client.send(events.room_created(code))

    async def _join(self, client: Connection, code: str) -> None:
        if client.room_code is not None and client.room_code != code:
            await self.leave(client)
        result = await self.registry.join_room(code, client)
        owner = result.owner
        if owner.is_open and await owner.send(events.player_joined(code)):
            await client.send(events.room_joined(code))
            return
        # Владелец отвалился до уведомления: закрываем вошедшего и чистим комнату
        stale = StaleOwner(code)
        logger.warning("WS: %s, closing %s", stale, client.id)
        await client.send(events.error(stale.message))
        await client.close(CLOSE_POLICY_VIOLATION, stale.message)
        await self.registry.remove_client(owner)
        await self.registry.remove_client(client)

    def _full_room_of(self, client: Connection, code: str):
        room = self.registry.get_room(code)
        if room is None or not room.is_full or client not in room:
            logger.debug("WS: %s ignored for room %s", client.id, code)
            return None
        return room

    async def _relay_update(self, client: Connection, event: PlayerUpdate) -> None:
        room = self._full_room_of(client, event.code)
        if room is None:
            return
        for other in room.others(client):
            await other.send(events.opponent_update(event.state))

    async def _start(self, client: Connection, code: str) -> None:
        room = self._full_room_of(client, code)
        if room is None:
            return
        logger.info("Room %s: game started by %s", code, client.id)
        for member in list(room.members):
            await member.send(events.start_game())


async def ws_connection_loop(ws: WebSocket, manager: WSManager, router: ConnectionRouter) -> None:
    """
    Принять соединение, выдать id, дальше цикл приёма сообщений.
    При любом выходе из цикла — та же очистка, что и при leaveRoom.
    """
    client = None
    try:
        await ws.accept()
        client = manager.connect(ws)
        logger.info("WS: accepted %s as client %s", ws.client, client.id)
        await client.send(events.assign_id(client.id))
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            if not await router.dispatch(client, raw):
                break
    except WebSocketDisconnect as e:
        client_id = client.id if client is not None else None
        logger.info("WS: client disconnected code=%s reason=%s id=%s", e.code, e.reason or "", client_id)
    except Exception as e:
        logger.exception("WS: error %s id=%s: %s", ws.client, client.id if client is not None else None, e)
    finally:
        if client is not None:
            await router.disconnect(client)
            manager.disconnect(client.id)
            logger.info("WS: disconnected id=%s", client.id)
