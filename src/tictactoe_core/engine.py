"""
Move engine: picks a cell for the computer player.

Difficulty tiers:
- easy: uniform-random empty cell, no look-ahead.
- medium: minimax cut off after a few plies. Leaves at the cutoff score 0
  (same as a draw); there is no positional heuristic, so near the cutoff the
  choice among "unknown" moves falls back to row-major order.
- hard: minimax to the end of the game. Never loses.

Scoring, from the computer player's side:
- A win reached at ply p (the root move is ply 1) scores 10 - p, a loss
  -(10 - p), a draw 0. Prefer shorter wins; delay losses.
- Among equal scores the first empty cell in row-major order wins.

The search places and removes marks on a private scratch copy of the board;
every trial mark is undone before the next candidate is tried.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from .board import Cell, Coord, Player, empty_cells, find_winning_line, is_full, other, to_scratch
from .errors import EngineContractError
from .state import GameState

WIN_SCORE = 10
FULL_DEPTH = 9
DEFAULT_MEDIUM_DEPTH = 3

RngLike = Union[None, int, np.random.Generator]
MemoKey = Tuple[Tuple[Tuple[int, ...], ...], bool, int, int]


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union["Difficulty", str]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown difficulty: {value!r} (expected one of: easy, medium, hard)"
            ) from None


def minimax(
    board: List[List[Cell]],
    depth: int,
    maximizing: bool,
    ai_player: Player,
    ply: int = 1,
    memo: Optional[Dict[MemoKey, int]] = None,
) -> int:
    """Score ``board`` for ``ai_player``; the last mark placed was at ``ply``.

    ``maximizing`` is True when the AI is the next to place a mark. ``depth``
    is the number of further plies that may be searched. ``memo`` is a
    transposition table; it is only valid for one ``ai_player``.
    """
    if memo is not None:
        key = (tuple(tuple(row) for row in board), maximizing, depth, ply)
        if key in memo:
            return memo[key]
    win = find_winning_line(board)
    if win is not None:
        # The side that just moved completed the line.
        return -(WIN_SCORE - ply) if maximizing else WIN_SCORE - ply
    if is_full(board) or depth <= 0:
        return 0

    mark = ai_player if maximizing else other(ai_player)
    best: Optional[int] = None
    for r, c in empty_cells(board):
        board[r][c] = mark
        score = minimax(board, depth - 1, not maximizing, ai_player, ply + 1, memo)
        board[r][c] = Cell.EMPTY
        if best is None or (score > best if maximizing else score < best):
            best = score
    if memo is not None:
        memo[key] = best  # type: ignore[assignment]
    return best  # type: ignore[return-value]


def move_scores(board: List[List[Cell]], ai_player: Player, depth: int = FULL_DEPTH) -> Iterator[Tuple[Coord, int]]:
    """Yield ``((row, col), score)`` for every empty cell, row-major.

    Positions repeat across move orders, so one table is shared by all the
    candidates of this call.
    """
    memo: Dict[MemoKey, int] = {}
    for r, c in empty_cells(board):
        board[r][c] = ai_player
        score = minimax(board, depth - 1, False, ai_player, ply=1, memo=memo)
        board[r][c] = Cell.EMPTY
        yield (r, c), score


def best_move(board: List[List[Cell]], ai_player: Player, depth: int = FULL_DEPTH) -> Coord:
    best: Optional[Coord] = None
    best_score: Optional[int] = None
    for move, score in move_scores(board, ai_player, depth):
        if best_score is None or score > best_score:
            best, best_score = move, score
    logging.debug("best_move=%s score=%s depth=%d", best, best_score, depth)
    return best  # type: ignore[return-value]


def random_move(state: GameState, rng: RngLike = None) -> Coord:
    cells = state.empty_cells()
    gen = np.random.default_rng(rng)
    return cells[int(gen.integers(len(cells)))]


def depth_for(difficulty: Difficulty, medium_depth: Optional[int] = None) -> int:
    if difficulty is Difficulty.HARD:
        return FULL_DEPTH
    if difficulty is Difficulty.MEDIUM:
        if medium_depth is None:
            return DEFAULT_MEDIUM_DEPTH
        if not 1 <= medium_depth <= FULL_DEPTH:
            raise ValueError(f"medium_depth out of range [1,{FULL_DEPTH}]: {medium_depth}")
        return medium_depth
    return 0


def select_move(
    state: GameState,
    difficulty: Union[Difficulty, str],
    ai_player: Player,
    *,
    rng: RngLike = None,
    medium_depth: Optional[int] = None,
) -> Coord:
    """Choose ``(row, col)`` for ``ai_player``. The caller applies it with ``submit_move``.

    Raises EngineContractError if the game is over or the board is full.
    """
    if state.is_over:
        raise EngineContractError(f"select_move called on a finished game ({state.status.value})")
    if not state.empty_cells():
        raise EngineContractError("select_move called on a full board")
    difficulty = Difficulty.parse(difficulty)
    ai_player = Cell(ai_player)

    if difficulty is Difficulty.EASY:
        move = random_move(state, rng)
    else:
        move = best_move(to_scratch(state.board), ai_player, depth_for(difficulty, medium_depth))
    logging.debug("ai=%s difficulty=%s move=%s", ai_player.symbol, difficulty.value, move)
    return move


compute_ai_move = select_move
