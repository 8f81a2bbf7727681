"""tictactoe_core package.

Game-state model and move engine for tic-tac-toe against the computer, plus a
session driver for front ends and a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import Cell, Player, WIN_LINES
from .engine import Difficulty, compute_ai_move, select_move
from .errors import (
    CellOccupied,
    CellOutOfRange,
    EngineContractError,
    GameAlreadyOver,
    InvalidBoard,
    MoveError,
    WrongTurn,
)
from .session import GameSession, Scoreboard
from .state import GameState, Status, evaluate_draw, evaluate_win, new_game, replay, reset, submit_move

__all__ = [
    "Cell",
    "Player",
    "WIN_LINES",
    "Difficulty",
    "compute_ai_move",
    "select_move",
    "MoveError",
    "CellOccupied",
    "CellOutOfRange",
    "WrongTurn",
    "GameAlreadyOver",
    "InvalidBoard",
    "EngineContractError",
    "GameSession",
    "Scoreboard",
    "GameState",
    "Status",
    "new_game",
    "reset",
    "replay",
    "submit_move",
    "evaluate_win",
    "evaluate_draw",
]
