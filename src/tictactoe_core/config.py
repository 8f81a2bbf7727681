"""Environment-first settings.

Values come from ``TTT_*`` environment variables and fall back to defaults;
command-line flags override them in the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .engine import DEFAULT_MEDIUM_DEPTH, FULL_DEPTH, Difficulty


@dataclass(frozen=True)
class Settings:
    difficulty: Difficulty = Difficulty.MEDIUM
    medium_depth: int = DEFAULT_MEDIUM_DEPTH
    seed: Optional[int] = None


def _int_env(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``env`` (default: ``os.environ``).

    TTT_DIFFICULTY: easy|medium|hard (default medium)
    TTT_MEDIUM_DEPTH: search plies for the medium tier, 1-9 (default 3)
    TTT_SEED: seed for the easy tier's random choice
    """
    env = os.environ if env is None else env
    difficulty = Difficulty.parse(env.get("TTT_DIFFICULTY") or Difficulty.MEDIUM)
    depth = _int_env(env, "TTT_MEDIUM_DEPTH")
    if depth is None:
        depth = DEFAULT_MEDIUM_DEPTH
    if not 1 <= depth <= FULL_DEPTH:
        raise ValueError(f"TTT_MEDIUM_DEPTH out of range [1,{FULL_DEPTH}]: {depth}")
    return Settings(difficulty=difficulty, medium_depth=depth, seed=_int_env(env, "TTT_SEED"))
