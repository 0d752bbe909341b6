"""Lobby and game errors.

Lookups against missing rooms or sessions return None; these are only raised
where a caller explicitly asks for a hard failure.
"""


class LobbyException(Exception):
    """Base class for every lobby/game error."""
    pass


class RoomNotFound(LobbyException):
    def __init__(self, room_code):
        self.room_code = room_code
        super().__init__(f"Room {room_code} not found")


class SessionNotFound(LobbyException):
    def __init__(self, room_code):
        self.room_code = room_code
        super().__init__(f"No active game in room {room_code}")


class InvalidMove(LobbyException):
    """Move rejected under the strict moves policy."""
    def __init__(self, x, y, reason):
        self.x = x
        self.y = y
        self.reason = reason
        super().__init__(f"Invalid move at ({x}, {y}): {reason}")
