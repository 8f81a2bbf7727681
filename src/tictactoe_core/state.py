"""
Game state and its transitions.

GameState is an immutable value. ``submit_move`` is the single point of state
change: it validates the move, returns a new state, and leaves the input as
it was. The presentation layer observes states through return values.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .board import (
    Board,
    Cell,
    Coord,
    Player,
    WinningLine,
    empty_board,
    empty_cells,
    find_winning_line,
    format_board,
    freeze,
    in_bounds,
    is_full,
    is_valid_board,
    other,
    side_to_move,
)
from .errors import CellOccupied, CellOutOfRange, GameAlreadyOver, InvalidBoard, WrongTurn

Move = Tuple[int, int, Player]


class Status(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=empty_board)
    active_player: Player = Cell.X
    status: Status = Status.IN_PROGRESS
    winner: Optional[Player] = None
    winning_line: Optional[WinningLine] = None
    moves: Tuple[Move, ...] = ()

    @property
    def is_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    @property
    def to_move(self) -> Optional[Player]:
        """The player expected to move next, or None once the game is over."""
        return None if self.is_over else self.active_player

    def cell(self, row: int, col: int) -> Cell:
        return self.board[row][col]

    def empty_cells(self) -> List[Coord]:
        return empty_cells(self.board)

    def __str__(self) -> str:
        return format_board(self.board)


BoardLike = Union[GameState, Sequence[Sequence[int]]]


def _board_of(obj: BoardLike) -> Sequence[Sequence[int]]:
    return obj.board if isinstance(obj, GameState) else obj


def new_game() -> GameState:
    return GameState()


def reset() -> GameState:
    """Fresh initial state; used for "play again" and after a score reset."""
    return new_game()


def evaluate_win(obj: BoardLike) -> Optional[Tuple[Player, WinningLine]]:
    return find_winning_line(_board_of(obj))


def evaluate_draw(obj: BoardLike) -> bool:
    board = _board_of(obj)
    return is_full(board) and find_winning_line(board) is None


def submit_move(state: GameState, row: int, col: int, player: Player) -> GameState:
    """Place ``player``'s mark at (row, col) and return the resulting state.

    Raises GameAlreadyOver, CellOutOfRange, WrongTurn or CellOccupied (checked
    in that order). ``state`` is never modified.
    """
    if state.is_over:
        raise GameAlreadyOver(row, col)
    if not in_bounds(row, col):
        raise CellOutOfRange(row, col)
    if player != state.active_player:
        raise WrongTurn(row, col, player, state.active_player)
    player = Cell(player)
    if state.board[row][col] != Cell.EMPTY:
        raise CellOccupied(row, col)

    board = tuple(
        tuple(player if (r, c) == (row, col) else v for c, v in enumerate(cells))
        for r, cells in enumerate(state.board)
    )
    moves = state.moves + ((row, col, player),)

    win = evaluate_win(board)
    if win is not None:
        winner, line = win
        return replace(state, board=board, status=Status.WON, winner=winner,
                       winning_line=line, moves=moves)
    if evaluate_draw(board):
        return replace(state, board=board, status=Status.DRAW, moves=moves)
    return replace(state, board=board, active_player=other(player), moves=moves)


def from_board(board: Sequence[Sequence[int]]) -> GameState:
    """Build a state for an arbitrary reachable board (move history unknown).

    Raises InvalidBoard if no legal game reaches ``board``.
    """
    if not is_valid_board(board):
        raise InvalidBoard(f"Board is not a valid reachable state: {format_board(board)}")
    frozen = freeze(board)
    win = evaluate_win(frozen)
    if win is not None:
        winner, line = win
        return GameState(board=frozen, active_player=winner, status=Status.WON,
                         winner=winner, winning_line=line)
    if evaluate_draw(frozen):
        return GameState(board=frozen, active_player=Cell.X, status=Status.DRAW)
    return GameState(board=frozen, active_player=side_to_move(frozen))


def replay(moves: Iterable[Sequence[int]]) -> GameState:
    """Reset, then apply each move in order.

    Moves are ``(row, col)`` pairs, with the side to move filled in, or full
    ``(row, col, player)`` triples.
    """
    state = reset()
    for mv in moves:
        row, col = mv[0], mv[1]
        player = Cell(mv[2]) if len(mv) > 2 else state.active_player
        state = submit_move(state, row, col, player)
    return state
