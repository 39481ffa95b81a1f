# solver/batch.py: seeded batches and configuration sweeps
from __future__ import annotations

import time
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from models import Puzzle, PuzzleConfig
from progress import (
    add_failure, log_attempt_detail, set_config, set_generated, set_requested,
)
from solver.errors import AttemptBudgetExhausted
from solver.generator import generate_puzzle
from solver.rules import MoveRule, get_rule

SEED_SPREAD = 0x9E3779B97F4A7C15  # golden-ratio odd constant
_MASK64 = (1 << 64) - 1


def derive_seeds(base_seed: int, count: int) -> List[int]:
    """``seed_i = base + SPREAD * i`` in 64-bit arithmetic."""
    return [(int(base_seed) + SEED_SPREAD * i) & _MASK64 for i in range(max(0, int(count)))]


def generate_many(
    count: int,
    config: Optional[PuzzleConfig] = None,
    rule: Optional[MoveRule] = None,
) -> List[Puzzle]:
    """Generate ``count`` independent puzzles, one derived seed each.

    Identical (config, count) always yields identical puzzles. An
    AttemptBudgetExhausted from any puzzle propagates; callers sweeping many
    configurations catch it and move on.
    """
    config = config or PuzzleConfig()
    rule = rule or get_rule(config.rule)
    puzzles: List[Puzzle] = []
    for seed in derive_seeds(config.seed, count):
        puzzles.append(generate_puzzle(config.with_seed(seed), rule=rule))
    return puzzles


def sweep_configs(
    rows_range: Iterable[int],
    cols_range: Iterable[int],
    walls_range: Iterable[int],
    base: Optional[PuzzleConfig] = None,
) -> List[PuzzleConfig]:
    base = base or PuzzleConfig()
    cols_values = list(cols_range)
    walls_values = list(walls_range)
    out: List[PuzzleConfig] = []
    for rows in rows_range:
        for cols in cols_values:
            for walls in walls_values:
                out.append(replace(base, rows=rows, cols=cols, walls=walls))
    return out


def sweep(
    configs: Iterable[PuzzleConfig],
    count: int,
    rule: Optional[MoveRule] = None,
) -> Tuple[List[Tuple[PuzzleConfig, List[Puzzle]]], List[Tuple[PuzzleConfig, str]]]:
    """Run ``generate_many`` per configuration, skipping the ones that exhaust their budget.

    Returns (successes, skipped) where ``skipped`` holds (config, reason).
    """
    configs = list(configs)
    done: List[Tuple[PuzzleConfig, List[Puzzle]]] = []
    skipped: List[Tuple[PuzzleConfig, str]] = []
    generated = 0
    set_requested(len(configs) * max(0, int(count)))

    for config in configs:
        set_config(config.label)
        t0 = time.time()
        try:
            puzzles = generate_many(count, config, rule=rule)
        except AttemptBudgetExhausted as exc:
            skipped.append((config, str(exc)))
            add_failure(str(exc))
            log_attempt_detail("Config skipped", config=config.label, reason=str(exc))
            continue
        generated += len(puzzles)
        set_generated(generated)
        log_attempt_detail(
            "Config generated",
            config=config.label,
            puzzles=len(puzzles),
            duration=f"{time.time() - t0:.2f}s",
        )
        done.append((config, puzzles))

    set_config("")
    return done, skipped


__all__ = ["SEED_SPREAD", "derive_seeds", "generate_many", "sweep_configs", "sweep"]
