# config.py
import os

# ======= Board shape =======
ROWS      = int(os.getenv("SS_ROWS", "6"))
COLS      = int(os.getenv("SS_COLS", "6"))
NUM_WALLS = int(os.getenv("SS_NUM_WALLS", "2"))   # two or so walls

# ======= Scramble depth / seeding =======
REVERSE_STEPS = int(os.getenv("SS_REVERSE_STEPS", "12"))
SEED          = int(os.getenv("SS_SEED", "12345"))
PUZZLE_COUNT  = int(os.getenv("SS_PUZZLE_COUNT", "10"))

# ======= Search caps =======
# Attempts restart from a fresh solved board; each attempt gets
# REVERSE_STEPS * STEP_MULTIPLIER step tries before it is discarded.
MAX_ATTEMPTS    = int(os.getenv("SS_MAX_ATTEMPTS", "1000"))
STEP_MULTIPLIER = int(os.getenv("SS_STEP_MULTIPLIER", "200"))

# ======= Rule variant =======
# "farthest" slides the ray toward its farthest empty cell,
# "line" shifts the orthogonal row/column alongside the split.
RULE = os.getenv("SS_RULE", "farthest").strip().lower()

# ======= Sweep (batch driver) knobs =======
SWEEP_MIN_SIDE  = int(os.getenv("SS_SWEEP_MIN_SIDE", "2"))
SWEEP_MAX_SIDE  = int(os.getenv("SS_SWEEP_MAX_SIDE", "6"))
SWEEP_MAX_WALLS = int(os.getenv("SS_SWEEP_MAX_WALLS", "2"))

# ======= Output names =======
# Empty NDJSON_OUT means "splitshift_{rows}x{cols}_{count}.ndjson".
NDJSON_OUT = os.getenv("SS_NDJSON_OUT", "")
REPORT_OUT = os.getenv("SS_REPORT_OUT", "splitshift_report.txt")

class CFG:
    ROWS      = ROWS
    COLS      = COLS
    NUM_WALLS = NUM_WALLS

    REVERSE_STEPS = REVERSE_STEPS
    SEED          = SEED
    PUZZLE_COUNT  = PUZZLE_COUNT

    MAX_ATTEMPTS    = MAX_ATTEMPTS
    STEP_MULTIPLIER = STEP_MULTIPLIER

    RULE = RULE

    SWEEP_MIN_SIDE  = SWEEP_MIN_SIDE
    SWEEP_MAX_SIDE  = SWEEP_MAX_SIDE
    SWEEP_MAX_WALLS = SWEEP_MAX_WALLS

    NDJSON_OUT = NDJSON_OUT
    REPORT_OUT = REPORT_OUT

__all__ = ["CFG"]
