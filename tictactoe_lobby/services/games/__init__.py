"""Game domain services: board engine and per-room sessions.

This package contains pure domain logic that is imported by the
coordinator and HTTP routes, keeping transport concerns separated
from core game mechanics.
"""

from .sessions import GameSessionStore

__all__ = ['GameSessionStore']
