"""Room membership: who is master and who is a member of each room."""

from .registry import RoomRegistry

__all__ = ['RoomRegistry']
