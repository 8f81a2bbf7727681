"""
Session: the control flow a front end drives.

A human move is applied and evaluated first; only if the game goes on does
the engine pick a reply, which goes through the same ``submit_move`` path.
Scores outlive individual games. Front ends observe the session by
subscribing to state changes or by reading ``state`` after each call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import numpy as np

from .board import Cell, Player, other
from .engine import Difficulty, RngLike, depth_for, select_move
from .state import GameState, Status, new_game, submit_move

Listener = Callable[[GameState], None]


@dataclass
class Scoreboard:
    player_wins: int = 0
    ai_wins: int = 0
    draws: int = 0

    def record(self, state: GameState, human: Player) -> None:
        if state.status == Status.WON:
            if state.winner == human:
                self.player_wins += 1
            else:
                self.ai_wins += 1
        elif state.status == Status.DRAW:
            self.draws += 1

    def reset(self) -> None:
        self.player_wins = self.ai_wins = self.draws = 0

    @property
    def games(self) -> int:
        return self.player_wins + self.ai_wins + self.draws


class GameSession:
    """One human against the engine, across any number of games."""

    def __init__(
        self,
        human: Player = Cell.X,
        difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
        rng: RngLike = None,
        medium_depth: Optional[int] = None,
    ):
        self.human = Cell(human)
        self.ai = other(self.human)
        self.difficulty = Difficulty.parse(difficulty)
        if medium_depth is not None:
            depth_for(Difficulty.MEDIUM, medium_depth)
        self.medium_depth = medium_depth
        self.rng = np.random.default_rng(rng)
        self.scores = Scoreboard()
        self.state = new_game()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_difficulty(self, difficulty: Union[Difficulty, str]) -> None:
        """Takes effect at the next AI move, mid-game included."""
        self.difficulty = Difficulty.parse(difficulty)

    @property
    def ai_to_move(self) -> bool:
        return self.state.to_move == self.ai

    def play(self, row: int, col: int) -> GameState:
        """Apply the human's move, then the engine's reply if the game goes on.

        MoveError propagates and leaves the session unchanged.
        """
        self._commit(submit_move(self.state, row, col, self.human))
        if self.ai_to_move:
            self.ai_turn()
        return self.state

    def ai_turn(self) -> GameState:
        """Apply one engine move (e.g. the opening move when the human plays O)."""
        row, col = select_move(
            self.state, self.difficulty, self.ai, rng=self.rng, medium_depth=self.medium_depth
        )
        return self._commit(submit_move(self.state, row, col, self.ai))

    def play_again(self) -> GameState:
        """Start a fresh game; scores are kept."""
        return self._commit(new_game())

    def reset_scores(self) -> GameState:
        self.scores.reset()
        return self.play_again()

    def outcome_message(self) -> Optional[str]:
        if self.state.status == Status.WON:
            if self.state.winner == self.human:
                return f"Player {self.human.symbol} wins!"
            return "AI wins!"
        if self.state.status == Status.DRAW:
            return "It's a draw!"
        return None

    def _commit(self, state: GameState) -> GameState:
        self.state = state
        if state.is_over:
            self.scores.record(state, self.human)
            logging.info(
                "game over: %s (player=%d ai=%d draws=%d)",
                self.outcome_message(),
                self.scores.player_wins,
                self.scores.ai_wins,
                self.scores.draws,
            )
        for listener in list(self._listeners):
            listener(state)
        return state
