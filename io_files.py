"""Helpers for writing generated puzzles to disk."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional

from config import CFG
from models import Board, Puzzle
from render import render_move, render_pretty, render_solution
from solver.errors import IllegalMove
from solver.generator import replay, verify_puzzle

SCHEMA_VERSION = 1

TOP, RIGHT, BOTTOM, LEFT = 1, 2, 4, 8


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def default_ndjson_name(rows: int, cols: int, count: int) -> str:
    return f"splitshift_{rows}x{cols}_{count}.ndjson"


# ---------- wire records ----------

def puzzle_to_record(puzzle: Puzzle, puzzle_id: int) -> Dict[str, Any]:
    """Start position as a schema-1 record: per-cell closed-edge mask ``w`` and weight ``v``."""

    s = puzzle.start
    return {
        "schemaVersion": SCHEMA_VERSION,
        "id": int(puzzle_id),
        "rows": s.rows,
        "cols": s.cols,
        "cells": [
            [{"w": s.cell_mask(r, c), "v": s.grid[r][c]} for c in range(s.cols)]
            for r in range(s.rows)
        ],
    }


def puzzles_to_records(puzzles: Iterable[Puzzle], start_id: int = 1) -> List[Dict[str, Any]]:
    return [puzzle_to_record(p, i) for i, p in enumerate(puzzles, start_id)]


def record_to_json(record: Dict[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


def record_to_board(record: Dict[str, Any]) -> Board:
    """Rebuild a Board (weights and walls) from a schema-1 record."""

    if record.get("schemaVersion") != SCHEMA_VERSION:
        raise ValueError(f"unsupported schemaVersion {record.get('schemaVersion')!r}")
    try:
        rows = int(record["rows"])
        cols = int(record["cols"])
        cells = record["cells"]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"malformed puzzle record: {e}") from e
    if len(cells) != rows or any(len(row) != cols for row in cells):
        raise ValueError(f"cells do not match {rows}x{cols}")

    board = Board(rows, cols)
    for r in range(rows):
        for c in range(cols):
            cell = cells[r][c]
            board.grid[r][c] = int(cell["v"])
            mask = int(cell["w"])
            if r < rows - 1 and mask & BOTTOM:
                board.v_walls[r][c] = True
            if c < cols - 1 and mask & RIGHT:
                board.h_walls[r][c] = True
    return board


# ---------- files ----------

def write_ndjson(
    records: List[Dict[str, Any]],
    base_dir: str,
    name: Optional[str] = None,
    fallback: Optional[str] = None,
) -> str:
    """Write one JSON record per line.

    ``name`` wins over ``CFG.NDJSON_OUT``; with neither set the file is named
    after ``fallback`` or the first record's board size.
    """

    if fallback is None:
        if records:
            first = records[0]
            fallback = default_ndjson_name(first["rows"], first["cols"], len(records))
        else:
            fallback = "splitshift.ndjson"
    path = _resolve_output_path(base_dir, name or CFG.NDJSON_OUT, fallback)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for rec in records:
            f.write(record_to_json(rec))
            f.write("\n")
    return path


def read_ndjson(path: str) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                out.append(json.loads(line))
    return out


def write_report(puzzles: List[Puzzle], base_dir: str, rule=None) -> str:
    """Write each puzzle with its solution and the board after every move."""

    path = _resolve_output_path(base_dir, CFG.REPORT_OUT, "splitshift_report.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if not puzzles:
            f.write("No puzzles\n")
        for i, p in enumerate(puzzles, 1):
            f.write(
                f"\n== Puzzle {i} == Size: {p.rows}x{p.cols} | Sum={p.start.total()} "
                f"(must equal {p.rows * p.cols}) | Moves={len(p.moves)}\n"
            )
            f.write("Board:\n")
            f.write(render_pretty(p.start))
            f.write("Solution moves (execute in this order):\n")
            f.write(render_solution(p.moves))
            ok = verify_puzzle(p, rule)
            f.write("Verification: " + ("SUCCESS - all cells are 1" if ok else "FAILED") + "\n")
            f.write("Replay (board after each move):\n")
            f.write(render_pretty(p.start))
            try:
                for k, m, board in replay(p.start, p.moves, rule):
                    f.write(f"After move {k + 1}: {render_move(m)}\n")
                    f.write(render_pretty(board))
            except IllegalMove as e:
                f.write(f" -> MOVE FAILED: {e}\n")
    return path


__all__ = [
    "SCHEMA_VERSION",
    "default_ndjson_name",
    "puzzle_to_record",
    "puzzles_to_records",
    "record_to_json",
    "record_to_board",
    "write_ndjson",
    "read_ndjson",
    "write_report",
]
