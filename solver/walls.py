# solver/walls.py
from typing import List, Tuple

from models import Board
from solver.rng import RandomSource

VERTICAL = 0
HORIZONTAL = 1

WallSlot = Tuple[int, int, int]  # (kind, r, c)


def wall_slots(board: Board) -> List[WallSlot]:
    slots: List[WallSlot] = []
    for r in range(board.rows - 1):
        for c in range(board.cols):
            slots.append((VERTICAL, r, c))
    for r in range(board.rows):
        for c in range(board.cols - 1):
            slots.append((HORIZONTAL, r, c))
    return slots


def place_random_walls(board: Board, rng: RandomSource, count: int) -> int:
    """Set up to ``count`` distinct, previously open wall slots; return how many were set."""
    count = max(0, int(count))
    slots = rng.shuffle(wall_slots(board))
    placed = 0
    for kind, r, c in slots:
        if placed >= count:
            break
        walls = board.v_walls if kind == VERTICAL else board.h_walls
        if not walls[r][c]:
            walls[r][c] = True
            placed += 1
    return placed


__all__ = ["place_random_walls", "wall_slots", "VERTICAL", "HORIZONTAL"]
