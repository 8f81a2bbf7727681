"""
Board basics: cell marks, the static winning-line table, pure board queries.
Notes:
- The board is 3x3, row-major, indexed by (row, col) with both in [0, 2].
- Cells are 0=empty, 1=X, 2=O. X always starts.
- Query functions accept any 3x3 nested sequence, so they work on both the
  immutable tuples held by GameState and the mutable scratch board of the search.
"""
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidBoard

SIZE = 3


class Cell(IntEnum):
    EMPTY = 0
    X = 1
    O = 2

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


# Players are the two non-empty marks.
Player = Cell

_SYMBOLS = {Cell.EMPTY: '.', Cell.X: 'X', Cell.O: 'O'}
_PARSE = {
    '.': Cell.EMPTY, '_': Cell.EMPTY, ' ': Cell.EMPTY, '-': Cell.EMPTY, '0': Cell.EMPTY,
    'X': Cell.X, 'x': Cell.X, '1': Cell.X,
    'O': Cell.O, 'o': Cell.O, '2': Cell.O,
}

Coord = Tuple[int, int]
WinningLine = Tuple[Coord, Coord, Coord]
Board = Tuple[Tuple[Cell, ...], ...]

# Fixed table order: 3 rows, 3 columns, main diagonal, anti-diagonal.
# The order is the tie-break when a board holds more than one complete line.
WIN_LINES: Tuple[WinningLine, ...] = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


def other(player: Player) -> Player:
    if player == Cell.X:
        return Cell.O
    if player == Cell.O:
        return Cell.X
    raise ValueError(f"Not a player mark: {player!r}")


def empty_board() -> Board:
    return tuple(tuple(Cell.EMPTY for _ in range(SIZE)) for _ in range(SIZE))


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


def find_winning_line(board: Sequence[Sequence[int]]) -> Optional[Tuple[Player, WinningLine]]:
    """Return the first complete line in table order with its owner, or None."""
    for line in WIN_LINES:
        (r1, c1), (r2, c2), (r3, c3) = line
        v = board[r1][c1]
        if v != Cell.EMPTY and v == board[r2][c2] and v == board[r3][c3]:
            return Cell(v), line
    return None


def is_full(board: Sequence[Sequence[int]]) -> bool:
    return all(v != Cell.EMPTY for row in board for v in row)


def empty_cells(board: Sequence[Sequence[int]]) -> List[Coord]:
    """Empty coordinates in row-major order."""
    return [(r, c) for r in range(SIZE) for c in range(SIZE) if board[r][c] == Cell.EMPTY]


def mark_counts(board: Sequence[Sequence[int]]) -> Tuple[int, int]:
    flat = [v for row in board for v in row]
    return flat.count(Cell.X), flat.count(Cell.O)


def to_scratch(board: Sequence[Sequence[int]]) -> List[List[Cell]]:
    return [[Cell(v) for v in row] for row in board]


def freeze(board: Sequence[Sequence[int]]) -> Board:
    return tuple(tuple(Cell(v) for v in row) for row in board)


def format_board(board: Sequence[Sequence[int]], sep: str = '/') -> str:
    """Compact text form, e.g. ``XX./OO./...``."""
    return sep.join(''.join(Cell(v).symbol for v in row) for row in board)


def parse_board(text: str) -> Board:
    """Parse 9 cell characters (X/O/1/2 for marks, ./_/-/0/space for empty).

    Row separators ``/`` and ``|`` and newlines are ignored.
    """
    raw = text.replace('/', '').replace('|', '').replace('\n', '')
    if len(raw) != SIZE * SIZE or any(ch not in _PARSE for ch in raw):
        raise InvalidBoard(f"Invalid board string {text!r}. Must be 9 cells of X/O/. (or 0/1/2).")
    cells = [_PARSE[ch] for ch in raw]
    return tuple(tuple(cells[r * SIZE:(r + 1) * SIZE]) for r in range(SIZE))


def is_valid_board(board: Sequence[Sequence[int]]) -> bool:
    """True if the board can arise from legal alternating play with X first."""
    x_count, o_count = mark_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False

    def count_wins(p: Cell) -> int:
        return sum(1 for line in WIN_LINES if all(board[r][c] == p for r, c in line))

    x_wins, o_wins = count_wins(Cell.X), count_wins(Cell.O)
    if x_wins and o_wins:
        return False
    if x_wins and x_count != o_count + 1:
        return False
    if o_wins and x_count != o_count:
        return False
    return True


def side_to_move(board: Sequence[Sequence[int]]) -> Player:
    x_count, o_count = mark_counts(board)
    return Cell.X if x_count == o_count else Cell.O
