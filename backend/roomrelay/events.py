"""
Формат сообщений WebSocket.
Входящие события — закрытый набор pydantic-моделей, различаемых по полю type.
Исходящие — dict, готовые для send_json.
"""
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from . import constants as c
from .errors import MalformedMessage


class _Inbound(BaseModel):
    # Клиенты шлют код комнаты и строкой, и числом
    model_config = ConfigDict(coerce_numbers_to_str=True, frozen=True)


class CreateRoom(_Inbound):
    type: Literal["createRoom"]


class JoinRoom(_Inbound):
    type: Literal["joinRoom"]
    code: str


class PlayerUpdate(_Inbound):
    type: Literal["playerUpdate"]
    code: str
    state: Any = None


class StartGame(_Inbound):
    type: Literal["startGame"]
    code: str


class LeaveRoom(_Inbound):
    type: Literal["leaveRoom"]


InboundEvent = Annotated[
    Union[CreateRoom, JoinRoom, PlayerUpdate, StartGame, LeaveRoom],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundEvent)


def parse_event(raw: str | bytes) -> InboundEvent:
    """Разобрать одно входящее сообщение. MalformedMessage если не получилось."""
    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as e:
        raise MalformedMessage(str(e)) from e


def assign_id(client_id: str) -> dict:
    return {"type": c.ASSIGN_ID, "id": client_id}


def room_created(code: str) -> dict:
    return {"type": c.ROOM_CREATED, "code": code}


def room_joined(code: str) -> dict:
    return {"type": c.ROOM_JOINED, "code": code}


def player_joined(code: str) -> dict:
    return {"type": c.PLAYER_JOINED, "code": code}


def opponent_update(state: Any) -> dict:
    return {"type": c.OPPONENT_UPDATE, "state": state}


def opponent_left() -> dict:
    return {"type": c.OPPONENT_LEFT}


def start_game() -> dict:
    return {"type": c.START_GAME}


def error(message: str) -> dict:
    return {"type": c.ERROR, "message": message}
