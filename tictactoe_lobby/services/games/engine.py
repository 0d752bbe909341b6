from typing import Dict, List, Optional, Tuple

from tictactoe_lobby.exceptions import InvalidMove
from tictactoe_lobby.models import BOARD_SIZE, EMPTY, SYMBOLS, Board, Cell, GameSession, Player

Coord = Tuple[int, int]


def _lines() -> List[Tuple[Coord, Coord, Coord]]:
    # rows (fixed x), then columns (fixed y), then diagonals
    rows = [tuple((x, y) for y in range(BOARD_SIZE)) for x in range(BOARD_SIZE)]
    cols = [tuple((x, y) for x in range(BOARD_SIZE)) for y in range(BOARD_SIZE)]
    diagonals = [
        tuple((i, i) for i in range(BOARD_SIZE)),
        tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
    ]
    return rows + cols + diagonals


WIN_LINES = _lines()


def empty_board() -> Board:
    return tuple(Cell(x, y) for x in range(BOARD_SIZE) for y in range(BOARD_SIZE))


def in_range(x, y) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


def cell_at(board: Board, x: int, y: int):
    for cell in board:
        if cell.x == x and cell.y == y:
            return cell
    return None


def is_full(board: Board) -> bool:
    return all(cell.mark != EMPTY for cell in board)


def other_symbol(symbol: str) -> str:
    """Return the other member of the fixed two-symbol set."""
    if symbol not in SYMBOLS:
        raise ValueError(f"Unknown symbol {symbol!r}")
    return SYMBOLS[1] if symbol == SYMBOLS[0] else SYMBOLS[0]


def apply_move(board: Board, x: int, y: int, symbol: str, strict: bool = False) -> Board:
    """Return a new board with ``symbol`` placed at (x, y).

    Permissive mode mirrors the lobby's historical behaviour: coordinates off
    the board leave it unchanged and occupied cells are overwritten. With
    ``strict`` set, both cases (and unknown symbols) raise InvalidMove.
    """
    if strict:
        if symbol not in SYMBOLS:
            raise InvalidMove(x, y, f"unknown symbol {symbol!r}")
        if not in_range(x, y):
            raise InvalidMove(x, y, 'out of range')
        target = cell_at(board, x, y)
        if target is not None and target.mark != EMPTY:
            raise InvalidMove(x, y, f"cell already holds {target.mark}")
    return tuple(
        Cell(cell.x, cell.y, symbol) if (cell.x, cell.y) == (x, y) else cell
        for cell in board
    )


def winning_line(board: Board) -> Optional[Tuple[Coord, Coord, Coord]]:
    """First complete line in WIN_LINES order: rows, then columns, then diagonals."""
    marks: Dict[Coord, str] = {(c.x, c.y): c.mark for c in board}
    for line in WIN_LINES:
        a, b, c = line
        mark = marks.get(a, EMPTY)
        if mark != EMPTY and mark == marks.get(b) == marks.get(c):
            return line
    return None


def detect_winner(board: Board) -> str:
    """Symbol of the first complete line, or EMPTY.

    A full board without a line still yields EMPTY; callers infer draws
    with is_full().
    """
    line = winning_line(board)
    if line is None:
        return EMPTY
    x, y = line[0]
    return cell_at(board, x, y).mark


def next_turn(session: GameSession) -> Player:
    """The player holding the other symbol from whoever is on turn now."""
    upcoming = other_symbol(session.current_turn.symbol)
    player = session.player_for(upcoming)
    if player is None:
        return Player('', upcoming)
    return player
