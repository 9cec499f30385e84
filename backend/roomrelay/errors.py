"""Ошибки обработки сообщений и операций над комнатами."""
from .constants import (
    MSG_CODES_EXHAUSTED,
    MSG_OWNER_DISCONNECTED,
    MSG_ROOM_FULL,
    MSG_ROOM_NOT_FOUND,
)


class RelayError(Exception):
    pass


class MalformedMessage(RelayError):
    """Сообщение не разобрано: битый JSON, неизвестный type или не те поля."""


class RoomError(RelayError):
    """Ошибка, о которой сообщаем клиенту событием error{message}."""

    message = "Room error"

    def __init__(self, code: str | None = None):
        self.code = code
        super().__init__(self.message if code is None else f"{self.message}: {code}")


class RoomNotFound(RoomError):
    message = MSG_ROOM_NOT_FOUND


class RoomFull(RoomError):
    message = MSG_ROOM_FULL


class RoomCodesExhausted(RoomError):
    message = MSG_CODES_EXHAUSTED


class StaleOwner(RoomError):
    message = MSG_OWNER_DISCONNECTED
