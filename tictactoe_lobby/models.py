from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

EMPTY = ''
SYMBOLS = ('X', 'O')
BOARD_SIZE = 3


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    mark: str = EMPTY

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'mark': self.mark}


Board = Tuple[Cell, ...]


@dataclass(frozen=True)
class Player:
    username: str
    symbol: str

    def to_dict(self):
        return {'username': self.username, 'symbol': self.symbol}


@dataclass
class RoomMembership:
    room_code: str
    master: Optional[str] = None
    members: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.master and not self.members

    def to_dict(self):
        return {
            'roomCode': self.room_code,
            'master': self.master,
            'members': list(self.members),
        }


@dataclass(frozen=True)
class GameSession:
    room_code: str
    players: Tuple[Player, Player]
    board: Board
    current_turn: Player
    finished: bool = False
    winner: Optional[str] = None
    draw: bool = False

    def player_for(self, symbol: str) -> Optional[Player]:
        for p in self.players:
            if p.symbol == symbol:
                return p
        return None

    def evolve(self, **changes) -> 'GameSession':
        return replace(self, **changes)

    def to_dict(self):
        return {
            'roomCode': self.room_code,
            'players': [p.to_dict() for p in self.players],
            'board': [c.to_dict() for c in self.board],
            'currentTurn': self.current_turn.to_dict(),
            'finished': self.finished,
            'winner': self.winner,
            'draw': self.draw,
        }
