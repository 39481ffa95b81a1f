from typing import Iterable, List, Tuple

from models import Board


def board_from_rows(
    rows: List[List[int]],
    v_walls: Iterable[Tuple[int, int]] = (),
    h_walls: Iterable[Tuple[int, int]] = (),
) -> Board:
    """Board with the given weights; walls as (r, c) slots of each matrix."""
    board = Board(len(rows), len(rows[0]), grid=[list(r) for r in rows])
    for r, c in v_walls:
        board.v_walls[r][c] = True
    for r, c in h_walls:
        board.h_walls[r][c] = True
    return board
