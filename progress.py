"""Batch progress for the CLI and the /progress endpoint, plus the generator attempt log."""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

PROGRESS_LOCK = threading.Lock()

_HERE = Path(__file__).resolve().parent
STATE_FILE = Path(os.environ.get("PROGRESS_STATE_FILE") or _HERE / "logs" / "progress_state.json")
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


# ---------- attempt log ----------

def _init_logger() -> logging.Logger:
    logger = logging.getLogger("generator.attempt_log")
    if logger.handlers:
        return logger
    log_path = _HERE / "logs" / "generator_attempts.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        # read-only checkout: generation runs without an attempt log
        return logger
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


ATTEMPT_LOGGER = _init_logger()


def _emit_log(event: str, level: int = logging.INFO, **fields: Any) -> None:
    if not ATTEMPT_LOGGER.handlers:
        return
    pairs = " ".join(f"{k}={v}" for k, v in fields.items() if v is not None and v != "")
    if pairs:
        ATTEMPT_LOGGER.log(level, "%s | %s", event, pairs)
    else:
        ATTEMPT_LOGGER.log(level, "%s", event)


def log_attempt_detail(event: str, **fields: Any) -> None:
    """Record a generator event (restart, exhausted budget, skipped config)."""
    _emit_log(event, **fields)


def log_step_detail(event: str, **fields: Any) -> None:
    """Per-step noise such as backtracks; DEBUG keeps it out of the default log."""
    _emit_log(event, logging.DEBUG, **fields)


# ---------- shared state ----------

_FRESH: Dict[str, Any] = {
    "status": "Idle",          # Idle | Generating | Done | Error
    "config": "",              # label of the configuration being generated
    "generated": 0,
    "requested": 0,
    "failures": 0,             # configurations given up on
    "percent": 0.0,
    "elapsed_start": None,
    "elapsed": 0.0,
    "message": "",
    "done": False,
    "ok": None,
    "result_url": "",
}

PROGRESS: Dict[str, Any] = dict(_FRESH, run_id=0)

# when the run and the current configuration began, for the log durations
_TIMING: Dict[str, Optional[float]] = {"run": None, "config": None}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
    except OSError:
        # the in-memory state stays authoritative for this process
        pass


def _load_persisted_locked(force: bool = False) -> None:
    """Pick up state written by another process (a CLI run next to the web app)."""
    global _LAST_STATE_MTIME
    try:
        mtime = STATE_FILE.stat().st_mtime
        if not force and mtime <= _LAST_STATE_MTIME:
            return
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return
    if isinstance(data, dict):
        PROGRESS.update({k: data[k] for k in PROGRESS if k in data})
        _LAST_STATE_MTIME = mtime


def _seconds_since(t0: Optional[float]) -> Optional[str]:
    if t0 is None:
        return None
    return f"{max(0.0, time.time() - t0):.2f}s"


def _switch_config_locked(label: str) -> None:
    prev = PROGRESS["config"]
    if label == prev:
        return
    if prev:
        _emit_log("Config finished", config=prev, duration=_seconds_since(_TIMING["config"]))
    PROGRESS["config"] = label
    _TIMING["config"] = time.time()
    if label:
        _emit_log("Config started", config=label)


def _touch_elapsed_locked() -> None:
    t0 = PROGRESS["elapsed_start"]
    if t0 is not None:
        PROGRESS["elapsed"] = time.time() - float(t0)


def _count(n: Any) -> int:
    try:
        return max(0, int(n))
    except (TypeError, ValueError):
        return 0


def fmt_elapsed(seconds: float) -> str:
    seconds = max(0, int(seconds))
    if seconds < 60:
        return f"{seconds}s"
    m, s = divmod(seconds, 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"


# ---------- run lifecycle ----------

def reset() -> None:
    with PROGRESS_LOCK:
        run_id = _count(PROGRESS.get("run_id")) + 1
        PROGRESS.clear()
        PROGRESS.update(_FRESH, run_id=run_id)
        _TIMING.update(run=None, config=None)
        _emit_log("Progress reset", run=run_id)
        _persist_locked()


def start_timer() -> None:
    with PROGRESS_LOCK:
        now = time.time()
        PROGRESS["elapsed_start"] = now
        PROGRESS["elapsed"] = 0.0
        _TIMING["run"] = now
        _persist_locked()


def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()


def set_config(label: Any) -> None:
    with PROGRESS_LOCK:
        _switch_config_locked("" if label is None else str(label))
        _persist_locked()


def set_requested(n: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["requested"] = _count(n)
        _persist_locked()


def set_generated(n: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["generated"] = done = _count(n)
        if PROGRESS["requested"]:
            PROGRESS["percent"] = min(100.0, 100.0 * done / PROGRESS["requested"])
        _touch_elapsed_locked()
        _persist_locked()


def add_failure(reason: Any = None) -> None:
    with PROGRESS_LOCK:
        PROGRESS["failures"] = _count(PROGRESS["failures"]) + 1
        if reason is not None:
            PROGRESS["message"] = str(reason)
        _persist_locked()


def set_result_url(url: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["result_url"] = "" if url is None else str(url)
        _persist_locked()


def set_done(ok: Any = None, *, reason: Any = None) -> None:
    """Close the run as "Done" (``ok`` true or omitted) or "Error"; ``reason`` lands in ``message``."""
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        ok_flag = True if ok is None else bool(ok)
        PROGRESS.update(status="Done" if ok_flag else "Error", ok=ok_flag, done=True, percent=100.0)
        if reason is not None:
            PROGRESS["message"] = str(reason)
        _switch_config_locked("")
        _emit_log(
            "Run finished",
            status=PROGRESS["status"],
            duration=_seconds_since(_TIMING["run"]),
            generated=PROGRESS["generated"],
            failures=PROGRESS["failures"],
            message=PROGRESS["message"],
        )
        _TIMING["run"] = None
        _persist_locked()


def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        snap["elapsed_str"] = fmt_elapsed(PROGRESS["elapsed"])
        return snap


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
