"""Glue between inbound lobby events and the room/game state.

Each handler mutates the registry or session store and then broadcasts the
resulting snapshot through the transport. Handlers return the payload they
broadcast so they can be exercised without a live socket server.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from tictactoe_lobby.services.games import GameSessionStore
from tictactoe_lobby.services.rooms import RoomRegistry

ROOMS_EVENT = 'broadcast-rooms'
GAME_EVENT = 'broadcast-game'


class Transport(Protocol):
    def join_channel(self, room_code: str) -> None: ...

    def leave_channel(self, room_code: str) -> None: ...

    def broadcast_room(self, event: str, payload: Any, room_code: str) -> None: ...

    def broadcast_all(self, event: str, payload: Any) -> None: ...

    def active_channels(self) -> Iterable[str]: ...


class LobbyCoordinator:
    def __init__(self, transport: Transport, registry: Optional[RoomRegistry] = None,
                 store: Optional[GameSessionStore] = None, logger=None):
        self.transport = transport
        self.registry = registry if registry is not None else RoomRegistry()
        self.store = store if store is not None else GameSessionStore()
        self.logger = logger or logging.getLogger(__name__)

    # ---- room membership ----

    def join_member(self, room_code: str, username: str) -> List[dict]:
        self.transport.join_channel(room_code)
        self.registry.add_member(room_code, username)
        self.logger.info(f"[room-join] room={room_code} user={username} role=member")
        return self.broadcast_rooms()

    def join_master(self, room_code: str, username: str) -> List[dict]:
        self.transport.join_channel(room_code)
        self.registry.set_master(room_code, username)
        self.logger.info(f"[room-join] room={room_code} user={username} role=master")
        return self.broadcast_rooms()

    def leave_member(self, room_code: str, username: str) -> List[dict]:
        self.transport.leave_channel(room_code)
        self.registry.remove_member(room_code, username)
        self.logger.info(f"[room-leave] room={room_code} user={username} role=member")
        return self.broadcast_rooms()

    def leave_master(self, room_code: str, username: Optional[str] = None) -> List[dict]:
        self.transport.leave_channel(room_code)
        self.registry.clear_master(room_code)
        self.logger.info(f"[room-leave] room={room_code} user={username} role=master")
        return self.broadcast_rooms()

    def refresh(self) -> List[dict]:
        return self.broadcast_rooms()

    def rooms_snapshot(self) -> List[dict]:
        return self.registry.snapshot_all(self.transport.active_channels())

    def broadcast_rooms(self) -> List[dict]:
        snapshot = self.rooms_snapshot()
        self.transport.broadcast_all(ROOMS_EVENT, snapshot)
        return snapshot

    # ---- game session ----

    def game_snapshot(self, room_code: str) -> Dict[str, Any]:
        session = self.store.get(room_code)
        return session.to_dict() if session else {}

    def start_game(self, room_code: str) -> Dict[str, Any]:
        players = self.registry.participants(room_code)
        session = self.store.start_game(room_code, players)
        payload = session.to_dict()
        self.transport.broadcast_room(GAME_EVENT, payload, room_code)
        return payload

    def leave_game(self, room_code: str) -> Dict[str, Any]:
        self.store.end_game(room_code)
        payload = self.game_snapshot(room_code)
        self.transport.broadcast_room(GAME_EVENT, payload, room_code)
        return payload

    def turn(self, room_code: str, x: int, y: int) -> Optional[Dict[str, Any]]:
        session = self.store.apply_turn(room_code, x, y)
        if session is None:
            return None
        payload = session.to_dict()
        self.transport.broadcast_room(GAME_EVENT, payload, room_code)
        return payload

    def reset(self) -> None:
        self.registry.reset()
        self.store.reset()
