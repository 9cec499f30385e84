"""
Комнаты на двоих и их реестр (in-memory).
Все изменения карты код -> комната идут под одним asyncio.Lock.
"""
import asyncio
import logging
import random
from dataclasses import dataclass, field

from .constants import ROOM_CAPACITY, ROOM_CODE_MAX, ROOM_CODE_MIN
from .errors import RoomCodesExhausted, RoomFull, RoomNotFound
from .ws_manager import Connection

logger = logging.getLogger(__name__)


@dataclass
class Room:
    code: str
    # Порядок входа: первый участник — владелец
    members: list[Connection] = field(default_factory=list)

    @property
    def owner(self) -> Connection:
        return self.members[0]

    @property
    def is_full(self) -> bool:
        return len(self.members) >= ROOM_CAPACITY

    def others(self, client: Connection) -> list[Connection]:
        return [m for m in self.members if m is not client]

    def __contains__(self, client: Connection) -> bool:
        return any(m is client for m in self.members)


@dataclass
class JoinResult:
    code: str
    owner: Connection


@dataclass
class Departure:
    code: str
    remaining: list[Connection]


class RoomRegistry:
    def __init__(self, rng: random.Random | None = None):
        self._rooms: dict[str, Room] = {}
        self._lock = asyncio.Lock()
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    def _fresh_code(self) -> str:
        if len(self._rooms) > ROOM_CODE_MAX - ROOM_CODE_MIN:
            raise RoomCodesExhausted()
        while True:
            code = str(self._rng.randint(ROOM_CODE_MIN, ROOM_CODE_MAX))
            if code not in self._rooms:
                return code

    async def create_room(self, client: Connection) -> str:
        """
        Создать комнату с клиентом-владельцем. Код — 4 цифры, уникален среди живых комнат.
        Клиент должен быть вне комнат (это обеспечивает роутер).
        """
        async with self._lock:
            code = self._fresh_code()
            self._rooms[code] = Room(code=code, members=[client])
            client.room_code = code
        logger.info("Room %s created by %s (%d live)", code, client.id, len(self._rooms))
        return code

    async def join_room(self, code: str, client: Connection) -> JoinResult:
        """Войти вторым участником. RoomNotFound / RoomFull при неудаче."""
        async with self._lock:
            room = self._rooms.get(code)
            if room is None:
                raise RoomNotFound(code)
            if room.is_full or client in room:
                raise RoomFull(code)
            room.members.append(client)
            client.room_code = code
            result = JoinResult(code=code, owner=room.owner)
        logger.info("Room %s: %s joined owner %s", code, client.id, result.owner.id)
        return result

    async def remove_client(self, client: Connection) -> Departure | None:
        """
        Убрать клиента из его комнаты. None если комнаты нет.
        Опустевшая комната удаляется сразу.
        """
        async with self._lock:
            code = client.room_code
            if code is None:
                return None
            client.room_code = None
            room = self._rooms.get(code)
            if room is None or client not in room:
                return None
            room.members = room.others(client)
            deleted = not room.members
            if deleted:
                del self._rooms[code]
            departure = Departure(code=code, remaining=list(room.members))
        if deleted:
            logger.info("Room %s deleted: %s left, nobody remains", code, client.id)
        else:
            logger.info("Room %s: %s left", code, client.id)
        return departure

    def get_room(self, code: str) -> Room | None:
        return self._rooms.get(code)

    def snapshot(self) -> list[dict]:
        """Сводка по живым комнатам для /status."""
        return [
            {"code": room.code, "members": [m.id for m in room.members]}
            for room in self._rooms.values()
        ]
