from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from typing import Any, Iterable, Optional

from tictactoe_lobby import socketio
from tictactoe_lobby.exceptions import LobbyException


class SocketIOTransport:
    """Channel operations for the coordinator, backed by Flask-SocketIO rooms.

    join/leave act on the socket that sent the current event, so they must be
    called from inside an event handler.
    """

    def __init__(self, sio, namespace: str = '/'):
        self.sio = sio
        self.namespace = namespace

    def join_channel(self, room_code: str) -> None:
        join_room(room_code, namespace=self.namespace)

    def leave_channel(self, room_code: str) -> None:
        leave_room(room_code, namespace=self.namespace)

    def broadcast_room(self, event: str, payload: Any, room_code: str) -> None:
        self.sio.emit(event, payload, to=room_code, namespace=self.namespace)

    def broadcast_all(self, event: str, payload: Any) -> None:
        self.sio.emit(event, payload, namespace=self.namespace)

    def active_channels(self) -> Iterable[str]:
        # Every socket also sits in a private room named after its own sid,
        # and the None room holds all connected sockets; neither is a lobby room.
        server = self.sio.server
        if server is None:
            return []
        rooms = server.manager.rooms.get(self.namespace, {})
        return [room for room, sids in rooms.items() if room is not None and sids and room not in sids]


def _coordinator():
    return current_app.extensions['tictactoe_lobby']


def _room_code(data) -> Optional[str]:
    if isinstance(data, str):
        return data or None
    if isinstance(data, dict):
        value = data.get('roomCode')
        if isinstance(value, str) and value:
            return value
    return None


def _username(data) -> Optional[str]:
    value = data.get('username') if isinstance(data, dict) else None
    return value if isinstance(value, str) and value else None


def _coord(value) -> Optional[int]:
    # whole numbers only: ints, or strings such as "2"; bools and floats are rejected
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _membership_args(data):
    room_code = _room_code(data)
    username = _username(data)
    if not room_code or not username:
        emit('error', {'message': 'roomCode and username are required'})
        return None
    return room_code, username


def _run(label: str, fn, *args):
    try:
        return fn(*args)
    except LobbyException as exc:
        current_app.logger.warning(f"[{label}-error] sid={_get_sid()} {exc}")
        emit('error', {'message': str(exc)})
        return None


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    current_app.logger.debug(f"[connect] sid={_get_sid()}")
    emit('connected', {'message': 'Connected'})


def handle_disconnect(*args):
    current_app.logger.debug(f"[disconnect] sid={_get_sid()}")


def handle_join_member(data=None):
    args = _membership_args(data)
    if args:
        _run('join-member', _coordinator().join_member, *args)


def handle_join_master(data=None):
    args = _membership_args(data)
    if args:
        _run('join-master', _coordinator().join_master, *args)


def handle_leave_member(data=None):
    args = _membership_args(data)
    if args:
        _run('leave-member', _coordinator().leave_member, *args)


def handle_leave_master(data=None):
    room_code = _room_code(data)
    if not room_code:
        emit('error', {'message': 'roomCode is required'})
        return
    username = _username(data)
    _run('leave-master', _coordinator().leave_master, room_code, username)


def handle_refresh_room(data=None):
    _run('refresh-room', _coordinator().refresh)


def handle_start_game(data=None):
    room_code = _room_code(data)
    if not room_code:
        emit('error', {'message': 'roomCode is required'})
        return
    _run('start-game', _coordinator().start_game, room_code)


def handle_leave_game(data=None):
    room_code = _room_code(data)
    if not room_code:
        emit('error', {'message': 'roomCode is required'})
        return
    _run('leave-game', _coordinator().leave_game, room_code)


def handle_turn(data=None):
    room_code = _room_code(data) if isinstance(data, dict) else None
    x = _coord(data.get('x')) if room_code else None
    y = _coord(data.get('y')) if room_code else None
    if x is None or y is None:
        emit('error', {'message': 'turn requires roomCode and integer x and y'})
        return
    _run('turn', _coordinator().turn, room_code, x, y)


EVENT_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join-member': handle_join_member,
    'join-master': handle_join_master,
    'leave-member': handle_leave_member,
    'leave-master': handle_leave_master,
    'refresh-room': handle_refresh_room,
    'start-game': handle_start_game,
    'leave-game': handle_leave_game,
    'turn': handle_turn,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the lobby's Socket.IO event handlers on ``namespace``."""
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
