import os
import sys
import tempfile

# Ensure the repo root is importable and keep progress state out of the tree.
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ.setdefault(
    "PROGRESS_STATE_FILE",
    os.path.join(tempfile.mkdtemp(prefix="splitshift-progress-"), "progress_state.json"),
)

from tests.helpers import board_from_rows  # noqa: E402

__all__ = ["board_from_rows"]
