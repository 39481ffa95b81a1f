#!/usr/bin/env python3
"""SplitShift batch driver: generate puzzles, print them, write NDJSON."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional, Sequence

from config import CFG
from models import Puzzle, PuzzleConfig
from io_files import puzzles_to_records, write_ndjson, write_report, default_ndjson_name
from progress import reset as progress_reset, set_done, set_status, start_timer
from render import render_move, render_pretty, render_solution
from solver.batch import generate_many, sweep, sweep_configs
from solver.errors import AttemptBudgetExhausted, IllegalMove
from solver.generator import replay, verify_puzzle
from solver.rules import RULES, MoveRule, get_rule

BASE_DIR = os.getcwd()


def _print_puzzle(index: int, p: Puzzle, rule: MoveRule, out=None) -> None:
    out = out or sys.stdout
    out.write(
        f"\n== Puzzle {index} == Size: {p.rows}x{p.cols} | Sum={p.start.total()} "
        f"(must equal {p.rows * p.cols}) | Moves={len(p.moves)}\n"
    )
    out.write("Board:\n" + render_pretty(p.start) + "\n")
    out.write("Solution moves (execute in this order):\n" + render_solution(p.moves))
    ok = verify_puzzle(p, rule)
    out.write("Verification: " + ("SUCCESS - all cells are 1" if ok else "FAILED") + "\n")

    out.write("Replay (board after each move):\nBefore any moves:\n" + render_pretty(p.start) + "\n")
    board = p.board()
    try:
        for k, m, after in replay(p.start, p.moves, rule):
            v = board.grid[m.row][m.col]
            out.write(
                f"After move {k + 1}: {render_move(m)} split {v}={v - m.b}+{m.b}\n"
            )
            out.write(render_pretty(after) + "\n")
            board = after
    except IllegalMove as e:
        out.write(f" -> MOVE FAILED ({e})\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate solvable SplitShift puzzles by reverse scrambling."
    )
    parser.add_argument("--rows", type=int, default=CFG.ROWS, help="grid rows")
    parser.add_argument("--cols", type=int, default=CFG.COLS, help="grid columns")
    parser.add_argument("--walls", type=int, default=CFG.NUM_WALLS, help="number of internal walls")
    parser.add_argument(
        "--reverse", type=int, default=CFG.REVERSE_STEPS,
        help="scramble depth (number of solution moves)",
    )
    parser.add_argument("--seed", type=int, default=CFG.SEED, help="base seed")
    parser.add_argument("--count", type=int, default=CFG.PUZZLE_COUNT, help="puzzles per configuration")
    parser.add_argument(
        "--rule", choices=sorted(RULES), default=CFG.RULE,
        help="move rule variant",
    )
    parser.add_argument(
        "--max-attempts", type=int, default=CFG.MAX_ATTEMPTS,
        help="scramble restarts before a configuration is given up",
    )
    parser.add_argument(
        "--step-multiplier", type=int, default=CFG.STEP_MULTIPLIER,
        help="step tries per attempt, as a multiple of --reverse",
    )
    parser.add_argument("--out", default=None, help="NDJSON output path (auto if omitted)")
    parser.add_argument("--report", action="store_true", help="also write the replay report")
    parser.add_argument(
        "--sweep", action="store_true",
        help="enumerate rows/cols in [SS_SWEEP_MIN_SIDE, SS_SWEEP_MAX_SIDE] and walls in [0, SS_SWEEP_MAX_WALLS]",
    )
    parser.add_argument("--quiet", action="store_true", help="skip printing boards")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = PuzzleConfig(
        rows=args.rows,
        cols=args.cols,
        walls=args.walls,
        reverse_steps=args.reverse,
        seed=args.seed,
        max_attempts=args.max_attempts,
        step_multiplier=args.step_multiplier,
        rule=args.rule,
    )
    try:
        config.validate(tuple(RULES))
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    rule = get_rule(config.rule)

    progress_reset()
    start_timer()
    set_status("Generating")

    puzzles: List[Puzzle] = []
    if args.sweep:
        sides = range(CFG.SWEEP_MIN_SIDE, CFG.SWEEP_MAX_SIDE + 1)
        configs = sweep_configs(sides, sides, range(0, CFG.SWEEP_MAX_WALLS + 1), base=config)
        done, skipped = sweep(configs, args.count, rule=rule)
        for cfg, reason in skipped:
            print(f"Skipped {cfg.label}: {reason}", file=sys.stderr)
        for _cfg, batch in done:
            puzzles.extend(batch)
        fallback = f"splitshift_sweep_{len(puzzles)}.ndjson"
    else:
        try:
            puzzles = generate_many(args.count, config, rule=rule)
        except AttemptBudgetExhausted as e:
            print(f"error: {e}", file=sys.stderr)
            set_done(False, reason=str(e))
            return 1
        fallback = default_ndjson_name(config.rows, config.cols, args.count)

    if not args.quiet:
        for i, p in enumerate(puzzles, 1):
            _print_puzzle(i, p, rule)

    if not puzzles:
        set_done(False, reason="no puzzles generated")
        print("No puzzles generated.", file=sys.stderr)
        return 1

    records = puzzles_to_records(puzzles, 1)
    try:
        path = write_ndjson(records, BASE_DIR, name=args.out, fallback=fallback)
        print(f"NDJSON written to: {path}")
        if args.report:
            print(f"Report written to: {write_report(puzzles, BASE_DIR, rule)}")
    except OSError as e:
        print(f"NDJSON write failed: {e}", file=sys.stderr)
        set_done(False, reason=str(e))
        return 1

    set_done(True, reason=f"{len(puzzles)} puzzle(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
