import time

import numpy as np
import pytest

from tictactoe_core.board import Cell, parse_board, to_scratch
from tictactoe_core.engine import (
    DEFAULT_MEDIUM_DEPTH,
    Difficulty,
    best_move,
    compute_ai_move,
    minimax,
    move_scores,
    select_move,
)
from tictactoe_core.errors import EngineContractError
from tictactoe_core.state import Status, from_board, new_game, replay, submit_move

X, O, E = Cell.X, Cell.O, Cell.EMPTY


def _state(text):
    return from_board(parse_board(text))


def test_hard_takes_immediate_win_over_block():
    # O can block at (0,2) (which also wins later) or win now at (1,2)
    s = _state("XX./OO./...")
    assert select_move(s, Difficulty.HARD, O) == (1, 2)


def test_medium_takes_immediate_win():
    s = _state("XX./OO./...")
    assert select_move(s, Difficulty.MEDIUM, O) == (1, 2)


@pytest.mark.parametrize("difficulty", [Difficulty.MEDIUM, Difficulty.HARD])
def test_blocks_immediate_threat(difficulty):
    s = _state("X../XO./...")
    assert select_move(s, difficulty, O) == (2, 0)


def test_hard_answers_corner_with_center():
    s = replay([(0, 0)])
    assert select_move(s, Difficulty.HARD, O) == (1, 1)


def test_medium_cutoff_scores_unknown_lines_as_draws():
    # Three plies see no result after a corner opening, so every reply scores 0
    # and the first empty cell is chosen.
    s = replay([(0, 0)])
    assert select_move(s, Difficulty.MEDIUM, O) == (0, 1)
    scores = dict(move_scores(to_scratch(s.board), O, DEFAULT_MEDIUM_DEPTH))
    assert set(scores.values()) == {0}


def test_medium_depth_is_configurable():
    s = replay([(0, 0)])
    assert select_move(s, Difficulty.MEDIUM, O, medium_depth=9) == (1, 1)
    with pytest.raises(ValueError):
        select_move(s, Difficulty.MEDIUM, O, medium_depth=0)


def test_minimax_terminal_scores():
    # O just completed row 1 at ply 1
    b = to_scratch(parse_board("XX./OOO/X.."))
    assert minimax(b, 5, False, O, ply=1) == 9
    # the same position seen by X: the opponent just won
    assert minimax(b, 5, True, X, ply=3) == -7
    draw = to_scratch(parse_board("XOX/XOO/OXX"))
    assert minimax(draw, 5, True, X) == 0


def test_minimax_depth_cutoff_is_neutral():
    b = to_scratch(parse_board("XX./O../..."))
    # X would win next ply, but no plies remain
    assert minimax(b, 0, False, O) == 0
    assert minimax(b, 1, False, O) < 0


def test_search_restores_scratch_board():
    scratch = to_scratch(parse_board("X../.O./..X"))
    before = [row[:] for row in scratch]
    best_move(scratch, O)
    assert scratch == before
    list(move_scores(scratch, O, 4))
    assert scratch == before


def test_select_move_does_not_touch_state():
    s = _state("X../.O./..X")
    snapshot = (s.board, s.active_player, s.moves)
    select_move(s, Difficulty.HARD, O)
    assert (s.board, s.active_player, s.moves) == snapshot


def test_easy_picks_an_empty_cell():
    s = _state("XOX/OX./...")
    empties = set(s.empty_cells())
    for seed in range(30):
        assert select_move(s, Difficulty.EASY, O, rng=seed) in empties


def test_easy_is_reproducible_with_seed():
    s = new_game()
    a = [select_move(s, "easy", X, rng=np.random.default_rng(7)) for _ in range(3)]
    b = [select_move(s, "easy", X, rng=np.random.default_rng(7)) for _ in range(3)]
    assert a == b


def test_easy_covers_all_empty_cells():
    s = new_game()
    rng = np.random.default_rng(0)
    seen = {select_move(s, Difficulty.EASY, X, rng=rng) for _ in range(300)}
    assert seen == set(s.empty_cells())


def test_last_empty_cell_is_forced():
    s = _state("XOX/XOO/OX.")
    for d in Difficulty:
        assert select_move(s, d, X) == (2, 2)


@pytest.mark.parametrize("text", ["XXX/OO./...", "XOX/XOO/OXX"])
def test_select_move_on_finished_game_fails_loudly(text):
    s = _state(text)
    with pytest.raises(EngineContractError):
        select_move(s, Difficulty.HARD, O)
    # a programmer error, not a MoveError
    with pytest.raises(AssertionError):
        select_move(s, Difficulty.EASY, O)


def test_difficulty_parse():
    assert Difficulty.parse("HARD") is Difficulty.HARD
    assert Difficulty.parse(" medium ") is Difficulty.MEDIUM
    assert Difficulty.parse(Difficulty.EASY) is Difficulty.EASY
    with pytest.raises(ValueError):
        Difficulty.parse("impossible")


def test_compute_ai_move_alias():
    s = _state("XX./OO./...")
    assert compute_ai_move(s, "hard", O) == (1, 2)


def _reachable_results(ai, state, memo):
    """Explore every opponent line against the hard engine; return the set of winners."""
    if state.is_over:
        return {state.winner if state.status == Status.WON else None}
    results = set()
    if state.active_player == ai:
        key = state.board
        if key not in memo:
            memo[key] = select_move(state, Difficulty.HARD, ai)
        r, c = memo[key]
        return _reachable_results(ai, submit_move(state, r, c, ai), memo)
    for r, c in state.empty_cells():
        results |= _reachable_results(ai, submit_move(state, r, c, state.active_player), memo)
    return results


@pytest.mark.parametrize("ai", [X, O])
def test_hard_never_loses(ai):
    outcomes = _reachable_results(ai, new_game(), {})
    opponent = O if ai == X else X
    assert opponent not in outcomes
    assert outcomes <= {ai, None}


def test_hard_self_play_is_a_draw():
    s = new_game()
    while not s.is_over:
        r, c = select_move(s, Difficulty.HARD, s.active_player)
        s = submit_move(s, r, c, s.active_player)
    assert s.status == Status.DRAW


def test_memo_gives_the_same_scores():
    for text in ("X../.O./...", "XX./OO./...", "X.O/.X./...", "XO./.X./..O"):
        board = to_scratch(parse_board(text))
        ai = Cell.X if text.count("X") == text.count("O") else Cell.O
        with_memo = minimax(board, 8, True, ai, ply=0, memo={})
        plain = minimax(board, 8, True, ai, ply=0)
        assert with_memo == plain


def test_memo_leaves_scratch_board_intact():
    scratch = to_scratch(parse_board("X../.../..."))
    before = [row[:] for row in scratch]
    memo = {}
    minimax(scratch, 8, True, O, ply=1, memo=memo)
    assert scratch == before
    assert memo


def test_hard_opening_from_empty_board_is_interactive():
    t0 = time.perf_counter()
    move = select_move(new_game(), Difficulty.HARD, X)
    elapsed = time.perf_counter() - t0
    assert move == (0, 0)
    assert elapsed < 2.0
