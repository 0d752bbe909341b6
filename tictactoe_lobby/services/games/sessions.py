import logging
import random
import threading
from typing import Dict, List, Optional

from tictactoe_lobby.exceptions import InvalidMove, SessionNotFound
from tictactoe_lobby.models import EMPTY, SYMBOLS, GameSession, Player
from .engine import apply_move, detect_winner, empty_board, is_full, next_turn, other_symbol


class GameSessionStore:
    """Thread-safe store holding at most one active GameSession per room code."""

    def __init__(self, rng: Optional[random.Random] = None, strict_moves: bool = False, logger=None):
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self._rng = rng if rng is not None else random.Random()
        self.strict_moves = strict_moves
        self.logger = logger or logging.getLogger(__name__)

    def get(self, room_code: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(room_code)

    def require(self, room_code: str) -> GameSession:
        session = self.get(room_code)
        if session is None:
            raise SessionNotFound(room_code)
        return session

    def __contains__(self, room_code) -> bool:
        with self._lock:
            return room_code in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def start_game(self, room_code: str, room_members: List[str]) -> GameSession:
        """Seat two players from ``room_members`` and start a fresh board.

        The first player and their symbol are drawn at random; the second
        player is the first pool entry that is not the first player. A pool
        without two distinct usernames still produces a session, with ''
        standing in for the missing seat.
        """
        pool = list(room_members)
        with self._lock:
            first_name = self._rng.choice(pool) if pool else ''
            first_symbol = self._rng.choice(SYMBOLS)
            others = [u for u in pool if u != first_name]
            second_name = others[0] if others else ''

            first = Player(first_name, first_symbol)
            second = Player(second_name, other_symbol(first_symbol))
            session = GameSession(
                room_code=room_code,
                players=(first, second),
                board=empty_board(),
                current_turn=first,
            )
            replaced = room_code in self._sessions
            self._sessions[room_code] = session

        if not first_name or not second_name:
            self.logger.warning(
                f"[game-degraded] room={room_code} pool={pool} fewer than two distinct players"
            )
        if replaced:
            self.logger.info(f"[game-restart] room={room_code} replacing active session")
        self.logger.info(
            f"[game-start] room={room_code} {first.username}={first.symbol} {second.username}={second.symbol}"
        )
        return session

    def end_game(self, room_code: str) -> None:
        with self._lock:
            removed = self._sessions.pop(room_code, None)
        if removed is not None:
            self.logger.info(f"[game-end] room={room_code}")

    def apply_turn(self, room_code: str, x: int, y: int) -> Optional[GameSession]:
        # read, rebuild and write back under one lock so no turn is lost
        with self._lock:
            session = self._sessions.get(room_code)
            if session is None:
                return None

            mover = session.current_turn
            try:
                if self.strict_moves and (session.finished or session.draw):
                    raise InvalidMove(x, y, 'game is already over')
                board = apply_move(session.board, x, y, mover.symbol, strict=self.strict_moves)
            except InvalidMove as exc:
                self.logger.warning(f"[turn-rejected] room={room_code} user={mover.username} {exc}")
                return None

            winning_symbol = detect_winner(board)
            winner = None
            if winning_symbol != EMPTY:
                owner = session.player_for(winning_symbol)
                winner = owner.username if owner else None
            finished = winning_symbol != EMPTY

            updated = session.evolve(board=board, finished=finished, winner=winner,
                                     draw=not finished and is_full(board))
            updated = updated.evolve(current_turn=next_turn(updated))
            self._sessions[room_code] = updated

        self.logger.info(
            f"[turn] room={room_code} user={mover.username} symbol={mover.symbol} at=({x},{y}) "
            f"finished={updated.finished} winner={updated.winner} draw={updated.draw}"
        )
        return updated

    def reset(self) -> None:
        with self._lock:
            self._sessions.clear()
