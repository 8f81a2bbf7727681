"""
Error taxonomy.

Move errors are caller-usage errors raised by ``submit_move``; the state the
caller holds is left untouched, so the move can simply be rejected.
``EngineContractError`` marks a programmer error (asking the engine to move on
a finished or full board) and is not meant to be caught.
"""
from __future__ import annotations


class MoveError(Exception):
    """Base class for rejected moves."""

    def __init__(self, row: int, col: int, message: str):
        super().__init__(message)
        self.row = row
        self.col = col


class CellOccupied(MoveError):
    def __init__(self, row: int, col: int):
        super().__init__(row, col, f"Cell ({row}, {col}) is already occupied")


class WrongTurn(MoveError):
    def __init__(self, row: int, col: int, player: object, expected: object):
        super().__init__(
            row, col,
            f"It is {getattr(expected, 'symbol', expected)}'s turn, not {getattr(player, 'symbol', player)}'s",
        )
        self.player = player
        self.expected = expected


class GameAlreadyOver(MoveError):
    def __init__(self, row: int, col: int):
        super().__init__(row, col, "The game is already over")


class CellOutOfRange(MoveError):
    def __init__(self, row: int, col: int):
        super().__init__(row, col, f"Cell ({row}, {col}) is outside the 3x3 board")


class InvalidBoard(ValueError):
    """Board text that cannot be parsed, or a board no legal game reaches."""


class EngineContractError(AssertionError):
    """The engine was asked for a move where none may be made."""
