#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from typing import List, Tuple

from tictactoe_core.engine import Difficulty, select_move
from tictactoe_core.state import new_game, replay


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    rounds: int = 5
    medium_depth: int = 3


POSITIONS = {
    "empty": [],
    "corner_opening": [(0, 0)],
    "midgame": [(0, 0), (1, 1), (2, 2)],
}


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Time select_move per difficulty tier")
    p.add_argument("--rounds", type=int, default=Config.rounds)
    p.add_argument("--medium-depth", type=int, default=Config.medium_depth)
    ns = p.parse_args(argv)
    cfg = Config(rounds=ns.rounds, medium_depth=ns.medium_depth)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    for name, moves in POSITIONS.items():
        state = replay(moves) if moves else new_game()
        for difficulty in Difficulty:
            times: List[float] = []
            for seed in range(cfg.rounds):
                t0 = time.perf_counter()
                select_move(state, difficulty, state.active_player, rng=seed, medium_depth=cfg.medium_depth)
                times.append(time.perf_counter() - t0)
            m, h = ci95(times)
            logging.info("%s %s: mean=%.4fs ± %.4fs (95%% CI, N=%d)", name, difficulty.value, m, h, cfg.rounds)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
