from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, TextIO

from .board import Cell, format_board, parse_board
from .config import load_settings
from .engine import FULL_DEPTH, Difficulty, select_move
from .errors import InvalidBoard, MoveError
from .session import GameSession
from .state import GameState, from_board

DIFFICULTIES = [d.value for d in Difficulty]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe against the computer")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for the easy tier's random moves")

    p_status = sub.add_parser(
        "status",
        help="Show status of a board (9 cells, X/O and . for empty, e.g. XX.OO....)",
    )
    p_status.add_argument("--board", required=True, help="Board string, e.g., XX./OO./...")

    p_move = sub.add_parser("move", help="Ask the computer for a move on a board")
    p_move.add_argument("--board", required=True, help="Board string, e.g., XX./OO./...")
    p_move.add_argument(
        "--difficulty",
        choices=DIFFICULTIES,
        default=None,
        help="Difficulty tier (default: TTT_DIFFICULTY or medium)",
    )
    p_move.add_argument(
        "--ai", choices=["X", "O"], default=None, help="Computer's mark (default: side to move)"
    )
    p_move.add_argument(
        "--depth", type=int, default=None, help="Search plies for the medium tier (1-9)"
    )

    p_play = sub.add_parser("play", help="Play an interactive game in the terminal")
    p_play.add_argument("--difficulty", choices=DIFFICULTIES, default=None, help="Difficulty tier")
    p_play.add_argument(
        "--human", choices=["X", "O"], default="X", help="Your mark; X moves first (default: X)"
    )
    p_play.add_argument(
        "--depth", type=int, default=None, help="Search plies for the medium tier (1-9)"
    )

    return p


def _load_state(raw: str) -> Optional[GameState]:
    try:
        return from_board(parse_board(raw.strip()))
    except InvalidBoard as e:
        logging.error("%s", e)
        return None


def render(state: GameState) -> str:
    rows = format_board(state.board, sep="\n").splitlines()
    lines = ["   0 1 2"]
    for r, row in enumerate(rows):
        lines.append(f"{r}  " + " ".join(row))
    return "\n".join(lines)


HELP_TEXT = (
    "Commands: '<row> <col>' to move, 'again' for a new game, 'reset' to clear scores,\n"
    "'difficulty <easy|medium|hard>', 'scores', 'quit'."
)


def run_play(session: GameSession, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    def show() -> None:
        print(render(session.state), file=stdout)
        msg = session.outcome_message()
        if msg:
            print(msg, file=stdout)
            print("Type 'again' to play another game.", file=stdout)

    def show_scores() -> None:
        s = session.scores
        print(f"Player: {s.player_wins}  AI: {s.ai_wins}  Draws: {s.draws}", file=stdout)

    print(HELP_TEXT, file=stdout)
    if session.ai_to_move:
        session.ai_turn()
    show()
    for line in stdin:
        words = line.split()
        if not words:
            continue
        cmd = words[0].lower()
        if cmd in ("quit", "exit", "q"):
            break
        if cmd == "again":
            session.play_again()
            if session.ai_to_move:
                session.ai_turn()
            show()
            continue
        if cmd == "reset":
            session.reset_scores()
            if session.ai_to_move:
                session.ai_turn()
            show_scores()
            show()
            continue
        if cmd == "scores":
            show_scores()
            continue
        if cmd == "difficulty" and len(words) == 2:
            try:
                session.set_difficulty(words[1])
            except ValueError as e:
                logging.error("%s", e)
                continue
            print(f"Difficulty: {session.difficulty.value}", file=stdout)
            continue
        if len(words) == 2 and all(w.lstrip("-").isdigit() for w in words):
            try:
                session.play(int(words[0]), int(words[1]))
            except MoveError as e:
                logging.error("%s", e)
                continue
            show()
            if session.state.is_over:
                show_scores()
            continue
        print(HELP_TEXT, file=stdout)
    show_scores()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tictactoe-core"))
        except Exception:
            print("unknown")
        return 0

    try:
        settings = load_settings()
    except ValueError as e:
        logging.error("%s", e)
        return 2
    seed = ns.seed if ns.seed is not None else settings.seed

    if ns.cmd == "status":
        state = _load_state(ns.board)
        if state is None:
            return 2
        line = list(state.winning_line) if state.winning_line else None
        logging.info(
            "status=%s winner=%s line=%s to_move=%s",
            state.status.value,
            state.winner.symbol if state.winner else None,
            line,
            state.to_move.symbol if state.to_move else None,
        )
        return 0

    if ns.cmd == "move":
        state = _load_state(ns.board)
        if state is None:
            return 2
        if state.is_over:
            logging.error("Game is already over (%s); no move to make.", state.status.value)
            return 2
        difficulty = Difficulty.parse(ns.difficulty) if ns.difficulty else settings.difficulty
        ai = Cell[ns.ai] if ns.ai else state.active_player
        depth = ns.depth if ns.depth is not None else settings.medium_depth
        if not 1 <= depth <= FULL_DEPTH:
            logging.error("Depth out of range [1,%d]: %s", FULL_DEPTH, depth)
            return 2
        try:
            row, col = select_move(state, difficulty, ai, rng=seed, medium_depth=depth)
        except ValueError as e:
            logging.error("%s", e)
            return 2
        logging.info("difficulty=%s ai=%s move=(%d, %d)", difficulty.value, ai.symbol, row, col)
        return 0

    if ns.cmd == "play":
        difficulty = Difficulty.parse(ns.difficulty) if ns.difficulty else settings.difficulty
        depth = ns.depth if ns.depth is not None else settings.medium_depth
        if not 1 <= depth <= FULL_DEPTH:
            logging.error("Depth out of range [1,%d]: %s", FULL_DEPTH, depth)
            return 2
        session = GameSession(human=Cell[ns.human], difficulty=difficulty, rng=seed, medium_depth=depth)
        return run_play(session)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
