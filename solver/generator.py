# solver/generator.py: reverse-scramble generator with single-step backtracking
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from models import Board, Direction, Move, Puzzle, PuzzleConfig
from progress import log_attempt_detail, log_step_detail
from solver.errors import AttemptBudgetExhausted, IllegalMove, StepBudgetExhausted
from solver.rng import RandomSource
from solver.rules import RULES, MoveRule, get_rule
from solver.walls import place_random_walls


# ---------- verification ----------

def verify_forward(start: Board, moves: Iterable[Move], rule: Optional[MoveRule] = None) -> bool:
    """True when every move applies in order from ``start`` and ends all-ones."""
    rule = rule or get_rule()
    s = start.copy()
    for m in moves:
        if not rule.apply_forward(s, m):
            return False
    return s.all_ones()


def verify_puzzle(puzzle: Puzzle, rule: Optional[MoveRule] = None) -> bool:
    return verify_forward(puzzle.start, puzzle.moves, rule)


def replay(start: Board, moves: Iterable[Move], rule: Optional[MoveRule] = None) -> Iterator[Tuple[int, Move, Board]]:
    """Yield (index, move, board after the move); raise IllegalMove at the first failure."""
    rule = rule or get_rule()
    s = start.copy()
    for i, m in enumerate(moves):
        if not rule.apply_forward(s, m):
            raise IllegalMove(i, m)
        yield i, m, s.copy()


# ---------- scramble ----------

def _try_reverse_at(board: Board, rule: MoveRule, rng: RandomSource, r: int, c: int) -> Optional[Move]:
    for d in rng.shuffled(Direction):
        if board.edge_blocked(r, c, d):
            continue
        applied = rule.apply_reverse(board, r, c, d)
        if applied is not None:
            return applied
    return None


def _scramble(config: PuzzleConfig, rng: RandomSource, rule: MoveRule) -> Tuple[Board, List[Move]]:
    board = Board.solved(config.rows, config.cols)
    place_random_walls(board, rng, config.walls)

    reverse: List[Move] = []
    budget = config.step_budget
    tries = 0
    backtracks = 0

    while len(reverse) < config.reverse_steps and tries < budget:
        tries += 1
        before = board.copy()
        r = rng.next_int(config.rows)
        c = rng.next_int(config.cols)

        applied = _try_reverse_at(board, rule, rng, r, c)
        if applied is None:
            board = before
            continue
        reverse.append(applied)

        # the whole forward sequence must still solve from here
        if not verify_forward(board, reversed(reverse), rule):
            reverse.pop()
            board = before
            backtracks += 1

    if len(reverse) < config.reverse_steps:
        raise StepBudgetExhausted(len(reverse), config.reverse_steps, tries)

    log_step_detail(
        "Scramble finished",
        config=config.label,
        tries=tries,
        backtracks=backtracks,
    )
    return board, reverse


# ---------- public entrypoint ----------

def generate_puzzle(
    config: Optional[PuzzleConfig] = None,
    rng: Optional[RandomSource] = None,
    rule: Optional[MoveRule] = None,
) -> Puzzle:
    """Build one solvable puzzle by scrambling the solved board with reverse moves.

    Each attempt starts from a fresh all-ones board with fresh walls; the RNG
    keeps advancing across attempts so a retry never repeats the previous one.
    Raises AttemptBudgetExhausted once ``config.max_attempts`` attempts have
    run out of step tries.
    """
    config = config or PuzzleConfig()
    config.validate(None if rule is not None else tuple(RULES))
    rule = rule or get_rule(config.rule)
    rng = rng or RandomSource(config.seed)

    last: Optional[StepBudgetExhausted] = None
    for attempt in range(1, config.max_attempts + 1):
        try:
            board, reverse = _scramble(config, rng, rule)
        except StepBudgetExhausted as exc:
            last = exc
            log_step_detail(
                "Attempt failed",
                config=config.label,
                seed=config.seed,
                attempt=attempt,
                reached=exc.reached,
                tries=exc.tries,
            )
            continue
        if attempt > 1:
            log_attempt_detail(
                "Puzzle generated after restarts",
                config=config.label,
                seed=config.seed,
                attempts=attempt,
            )
        return Puzzle(board, tuple(reversed(reverse)))

    log_attempt_detail(
        "Attempt budget exhausted",
        config=config.label,
        seed=config.seed,
        rule=rule.name,
        attempts=config.max_attempts,
    )
    raise AttemptBudgetExhausted(config, config.max_attempts, last)


__all__ = ["generate_puzzle", "verify_forward", "verify_puzzle", "replay"]
