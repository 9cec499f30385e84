"""Константы протокола комнат."""

# Входящие события
CREATE_ROOM = "createRoom"
JOIN_ROOM = "joinRoom"
PLAYER_UPDATE = "playerUpdate"
START_GAME = "startGame"
LEAVE_ROOM = "leaveRoom"

# Исходящие события
ASSIGN_ID = "assignId"
ROOM_CREATED = "roomCreated"
ROOM_JOINED = "roomJoined"
PLAYER_JOINED = "playerJoined"
OPPONENT_UPDATE = "opponentUpdate"
OPPONENT_LEFT = "opponentLeft"
ERROR = "error"

# Коды закрытия WebSocket
CLOSE_POLICY_VIOLATION = 1008
CLOSE_INTERNAL_ERROR = 1011

ROOM_CODE_MIN = 1000
ROOM_CODE_MAX = 9999
ROOM_CAPACITY = 2

MSG_ROOM_NOT_FOUND = "Room not found"
MSG_ROOM_FULL = "Room is full"
MSG_OWNER_DISCONNECTED = "Room owner disconnected"
MSG_CODES_EXHAUSTED = "No room codes available"
MSG_INTERNAL_ERROR = "Internal server error"
