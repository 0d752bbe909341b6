import logging
import threading
from typing import Dict, Iterable, List, Optional

from tictactoe_lobby.exceptions import RoomNotFound
from tictactoe_lobby.models import RoomMembership


class RoomRegistry:
    """Thread-safe in-memory RoomMembership records keyed by room code.

    Every mutation creates an empty record for an unknown room first, so
    callers never have to check for existence. Two policies are off by
    default and keep the lobby's historical behaviour:

    - ``dedupe_members``: ignore an add for a username already listed
    - ``prune_empty_rooms``: drop a record once its master and members are gone
    """

    def __init__(self, dedupe_members: bool = False, prune_empty_rooms: bool = False, logger=None):
        self._rooms: Dict[str, RoomMembership] = {}
        self._lock = threading.Lock()
        self.dedupe_members = dedupe_members
        self.prune_empty_rooms = prune_empty_rooms
        self.logger = logger or logging.getLogger(__name__)

    # callers of _entry/_maybe_prune hold self._lock

    def _entry(self, room_code: str) -> RoomMembership:
        room = self._rooms.get(room_code)
        if room is None:
            room = RoomMembership(room_code=room_code)
            self._rooms[room_code] = room
        return room

    def _maybe_prune(self, room: RoomMembership) -> bool:
        if self.prune_empty_rooms and room.is_empty:
            self._rooms.pop(room.room_code, None)
            return True
        return False

    def get(self, room_code: str) -> Optional[RoomMembership]:
        with self._lock:
            return self._rooms.get(room_code)

    def require(self, room_code: str) -> RoomMembership:
        room = self.get(room_code)
        if room is None:
            raise RoomNotFound(room_code)
        return room

    def __contains__(self, room_code) -> bool:
        with self._lock:
            return room_code in self._rooms

    def add_member(self, room_code: str, username: str) -> RoomMembership:
        with self._lock:
            room = self._entry(room_code)
            if self.dedupe_members and username in room.members:
                return room
            room.members.append(username)
            return room

    def set_master(self, room_code: str, username: str) -> RoomMembership:
        with self._lock:
            room = self._entry(room_code)
            room.master = username
            return room

    def remove_member(self, room_code: str, username: str) -> RoomMembership:
        with self._lock:
            room = self._entry(room_code)
            room.members = [m for m in room.members if m != username]
            pruned = self._maybe_prune(room)
        if pruned:
            self.logger.info(f"[room-pruned] room={room_code}")
        return room

    def clear_master(self, room_code: str) -> RoomMembership:
        with self._lock:
            room = self._entry(room_code)
            room.master = None
            pruned = self._maybe_prune(room)
        if pruned:
            self.logger.info(f"[room-pruned] room={room_code}")
        return room

    def participants(self, room_code: str) -> List[str]:
        """Members in join order with the master merged in at the end."""
        with self._lock:
            room = self._rooms.get(room_code)
            if room is None:
                return []
            pool = list(room.members)
            if room.master and room.master not in pool:
                pool.append(room.master)
            return pool

    def snapshot_all(self, active_channels: Iterable[str]) -> List[dict]:
        """One snapshot per active channel, empty when nothing is recorded."""
        channels = list(active_channels)
        snapshots = []
        with self._lock:
            for room_code in channels:
                room = self._rooms.get(room_code)
                if room is None:
                    room = RoomMembership(room_code=room_code)
                snapshots.append(room.to_dict())
        return snapshots

    def reset(self) -> None:
        with self._lock:
            self._rooms.clear()
