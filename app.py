# app.py: HTTP surface over the batch generator
from __future__ import annotations
import os
import time
from html import escape
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, Response, request, send_from_directory, jsonify, url_for

from config import CFG
from io_files import (
    _resolve_output_path, default_ndjson_name, puzzles_to_records, write_ndjson,
)
from models import PuzzleConfig
from progress import (
    reset as progress_reset,
    snapshot as progress_snapshot,
    start_timer as progress_start,
    fmt_elapsed,
    set_status, set_config, set_requested, set_generated, set_done, set_result_url,
)
from render import render_pretty, render_solution, render_solution_html, render_svg
from solver.batch import generate_many
from solver.errors import AttemptBudgetExhausted
from solver.rules import RULES, get_rule

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

MAX_COUNT = 100
MAX_SIDE = 16
MAX_REVERSE = 64

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "reason": "",
    "config": "",
    "count": 0,
    "elapsed_str": "0s",
    "records": [],
    "boards": [],
    "ndjson_path": "",
}

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)
    for k, v in request.form.to_dict(flat=True).items():
        merged.setdefault(k, v)
    for k, v in request.args.to_dict(flat=True).items():
        merged.setdefault(k, v)
    return merged


def _int_field(like: Dict[str, Any], key: str, default: int) -> int:
    raw = like.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _parse_request(like: Dict[str, Any]) -> Tuple[PuzzleConfig, int]:
    config = PuzzleConfig(
        rows=_int_field(like, "rows", CFG.ROWS),
        cols=_int_field(like, "cols", CFG.COLS),
        walls=_int_field(like, "walls", CFG.NUM_WALLS),
        reverse_steps=_int_field(like, "reverse", CFG.REVERSE_STEPS),
        seed=_int_field(like, "seed", CFG.SEED),
        rule=str(like.get("rule") or CFG.RULE),
    )
    count = _int_field(like, "count", CFG.PUZZLE_COUNT)
    config.validate(tuple(RULES))
    if config.rows > MAX_SIDE or config.cols > MAX_SIDE:
        raise ValueError(f"board sides are capped at {MAX_SIDE}")
    if config.reverse_steps > MAX_REVERSE:
        raise ValueError(f"reverse is capped at {MAX_REVERSE}")
    slots = (config.rows - 1) * config.cols + config.rows * (config.cols - 1)
    if config.walls > slots:
        raise ValueError(f"a {config.rows}x{config.cols} board has only {slots} wall slots")
    if not 1 <= count <= MAX_COUNT:
        raise ValueError(f"count must be between 1 and {MAX_COUNT}")
    return config, count


def _fail(status: int, reason: str, t0: float, config: Optional[PuzzleConfig] = None):
    set_done(False, reason=reason)
    LAST_RESULT.update({
        "ok": False,
        "reason": reason,
        "config": config.label if config else "",
        "count": 0,
        "elapsed_str": fmt_elapsed(time.time() - t0),
        "records": [],
        "boards": [],
        "ndjson_path": "",
    })
    return jsonify({"ok": False, "reason": reason}), status


@app.route("/generate", methods=["POST"])
def generate():
    progress_reset()
    progress_start()
    set_status("Generating")
    t0 = time.time()

    try:
        config, count = _parse_request(_merge_like_mapping())
    except ValueError as e:
        return _fail(400, f"Bad request: {e}", t0)

    set_config(config.label)
    set_requested(count)
    rule = get_rule(config.rule)
    try:
        puzzles = generate_many(count, config, rule=rule)
    except AttemptBudgetExhausted as e:
        return _fail(422, str(e), t0, config)
    set_generated(len(puzzles))

    records = puzzles_to_records(puzzles, 1)
    try:
        path = write_ndjson(records, BASE_DIR, fallback=default_ndjson_name(config.rows, config.cols, count))
    except OSError as e:
        return _fail(500, f"NDJSON write failed: {e}", t0, config)

    boards: List[Dict[str, Any]] = []
    for rec, p in zip(records, puzzles):
        boards.append({
            "id": rec["id"],
            "text": render_pretty(p.start),
            "solution": render_solution(p.moves),
            "svg": render_svg(p.start),
            "moves_html": render_solution_html(p.moves),
        })

    LAST_RESULT.update({
        "ok": True,
        "reason": "",
        "config": config.label,
        "count": len(puzzles),
        "elapsed_str": fmt_elapsed(time.time() - t0),
        "records": records,
        "boards": boards,
        "ndjson_path": path,
    })
    set_done(True, reason=f"{len(puzzles)} puzzle(s)")
    set_result_url(url_for("result_latest"))

    return jsonify({
        "ok": True,
        "config": config.label,
        "rule": rule.name,
        "count": len(puzzles),
        "elapsed_str": LAST_RESULT["elapsed_str"],
        "ndjson": os.path.basename(path),
        "puzzles": [
            {"record": rec, "text": b["text"], "solution": b["solution"]}
            for rec, b in zip(records, boards)
        ],
    })


@app.route("/result/latest")
def result_latest():
    sections = []
    for b in LAST_RESULT["boards"]:
        sections.append(
            f"<section class='card'><h3>Puzzle {b['id']}</h3>{b['svg']}"
            f"<ol>{b['moves_html']}</ol></section>"
        )
    status = "ok" if LAST_RESULT["ok"] else escape(LAST_RESULT["reason"] or "nothing generated yet")
    html = (
        "<!doctype html>\n<html><head><meta charset='utf-8'><title>SplitShift puzzles</title></head>"
        f"<body><h1>SplitShift puzzles</h1><p>{escape(LAST_RESULT['config'])} | {status} | "
        f"{LAST_RESULT['count']} puzzle(s) in {LAST_RESULT['elapsed_str']}</p>"
        f"{''.join(sections)}</body></html>"
    )
    return Response(html, mimetype="text/html")


@app.route("/download/ndjson")
def download_ndjson():
    path = LAST_RESULT.get("ndjson_path") or _resolve_output_path(BASE_DIR, CFG.NDJSON_OUT, "")
    if not path or not os.path.isfile(path):
        return jsonify({"ok": False, "reason": "no NDJSON written yet"}), 404
    return send_from_directory(
        os.path.dirname(path), os.path.basename(path),
        as_attachment=True, mimetype="application/x-ndjson",
    )


@app.route("/progress")
def progress():
    return jsonify(progress_snapshot())


if __name__ == "__main__":
    app.run(debug=False)
