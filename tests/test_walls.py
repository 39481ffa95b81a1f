import pytest

from models import Board
from solver.rng import RandomSource
from solver.walls import HORIZONTAL, VERTICAL, place_random_walls, wall_slots


def test_wall_slots_cover_every_internal_edge():
    slots = wall_slots(Board(2, 3))
    assert len(slots) == 3 + 4
    assert slots[0] == (VERTICAL, 0, 0)
    assert slots[-1] == (HORIZONTAL, 1, 1)
    assert wall_slots(Board(1, 1)) == []


@pytest.mark.parametrize("count", [0, 1, 5, 12])
def test_place_random_walls_sets_distinct_slots(count):
    board = Board.solved(3, 3)
    placed = place_random_walls(board, RandomSource(7), count)
    assert placed == count
    assert board.wall_count() == count
    assert board.total() == 9


def test_place_random_walls_caps_at_available_slots():
    board = Board.solved(2, 2)
    assert place_random_walls(board, RandomSource(1), 10) == 4
    assert board.wall_count() == 4


def test_place_random_walls_is_seeded():
    a, b = Board.solved(4, 4), Board.solved(4, 4)
    place_random_walls(a, RandomSource(99), 3)
    place_random_walls(b, RandomSource(99), 3)
    assert (a.v_walls, a.h_walls) == (b.v_walls, b.h_walls)
