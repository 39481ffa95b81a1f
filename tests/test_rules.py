import random

import pytest

from models import Direction, Move
from solver.rules import FarthestEmptyRule, LineShiftRule, MoveRule, get_rule
from tests.helpers import board_from_rows

RIGHT = Direction.RIGHT
UP = Direction.UP


# ---------- farthest-empty rule ----------

def test_farthest_forward_slides_ray_to_farthest_empty():
    rule = FarthestEmptyRule()
    board = board_from_rows([[3, 0, 2, 0]])

    assert rule.apply_forward(board, Move(0, 0, RIGHT, 1))
    assert board.grid == [[2, 1, 0, 2]]


def test_farthest_forward_ray_stops_at_wall():
    rule = FarthestEmptyRule()
    board = board_from_rows([[3, 0, 2, 0]], h_walls=[(0, 2)])

    assert rule.apply_forward(board, Move(0, 0, RIGHT, 1))
    assert board.grid == [[2, 1, 2, 0]]


@pytest.mark.parametrize(
    "rows, move",
    [
        ([[3, 1, 0, 0]], Move(0, 0, RIGHT, 1)),   # neighbour holding 1 blocks
        ([[3, 2, 2, 2]], Move(0, 0, RIGHT, 1)),   # no empty on the ray
        ([[3, 0, 0, 0]], Move(0, 0, RIGHT, 3)),   # b must stay below v
        ([[3, 0, 0, 0]], Move(0, 0, RIGHT, 0)),   # b must be positive
        ([[3, 0, 0, 0]], Move(0, 3, RIGHT, 1)),   # off the board
        ([[3, 0, 0, 0]], Move(0, 0, UP, 1)),      # border
    ],
)
def test_farthest_forward_illegal_leaves_board_untouched(rows, move):
    rule = FarthestEmptyRule()
    board = board_from_rows(rows)
    before = board.copy()

    assert not rule.is_legal_forward(board, move)
    assert not rule.apply_forward(board, move)
    assert board.grid == before.grid


def test_farthest_forward_blocked_by_wall_on_source_edge():
    rule = FarthestEmptyRule()
    board = board_from_rows([[3, 0]], h_walls=[(0, 0)])
    assert not rule.apply_forward(board, Move(0, 0, RIGHT, 1))
    assert board.grid == [[3, 0]]


def test_farthest_reverse_pulls_ray_and_merges_neighbour():
    rule = FarthestEmptyRule()
    board = board_from_rows([[2, 1, 0, 2]])

    move = rule.apply_reverse(board, 0, 0, RIGHT)

    assert move == Move(0, 0, RIGHT, 1)
    assert board.grid == [[3, 0, 2, 0]]


def test_farthest_reverse_needs_non_empty_neighbour():
    rule = FarthestEmptyRule()
    board = board_from_rows([[1, 0, 1]])
    assert rule.apply_reverse(board, 0, 0, RIGHT) is None
    assert board.grid == [[1, 0, 1]]


# ---------- line-shift rule ----------

def test_line_forward_drags_orthogonal_row():
    rule = LineShiftRule()
    board = board_from_rows([[0, 0, 0], [3, 2, 1]])

    assert rule.apply_forward(board, Move(1, 0, UP, 1))
    # the 2 rides along, the 1 never moves
    assert board.grid == [[1, 2, 0], [2, 0, 1]]


def test_line_forward_respects_walls_and_occupied_destinations():
    rule = LineShiftRule()
    walled = board_from_rows([[0, 0, 0], [3, 2, 1]], v_walls=[(0, 1)])
    assert rule.apply_forward(walled, Move(1, 0, UP, 1))
    assert walled.grid == [[1, 0, 0], [2, 2, 1]]

    occupied = board_from_rows([[0, 5, 0], [3, 2, 0]])
    assert rule.apply_forward(occupied, Move(1, 0, UP, 2))
    assert occupied.grid == [[2, 5, 0], [1, 2, 0]]


def test_line_forward_column_shift_for_horizontal_moves():
    rule = LineShiftRule()
    board = board_from_rows([[4, 0], [3, 0], [1, 0]])

    assert rule.apply_forward(board, Move(0, 0, RIGHT, 2))
    assert board.grid == [[2, 2], [0, 3], [1, 0]]


def test_line_forward_requires_empty_neighbour():
    rule = LineShiftRule()
    for nbr in (1, 2):
        board = board_from_rows([[nbr, 0], [3, 2]])
        assert not rule.apply_forward(board, Move(1, 0, UP, 1))
        assert board.grid == [[nbr, 0], [3, 2]]


def test_line_reverse_undoes_forward():
    rule = LineShiftRule()
    board = board_from_rows([[1, 2, 0], [2, 0, 1]])

    move = rule.apply_reverse(board, 1, 0, UP)

    assert move == Move(1, 0, UP, 1)
    assert board.grid == [[0, 0, 0], [3, 2, 1]]


def test_line_reverse_rejected_when_forward_would_differ():
    rule = LineShiftRule()
    board = board_from_rows([[1, 0], [1, 3]])

    # forward from [[0,0],[2,3]] would also drag the 3 upward
    assert rule.apply_reverse(board, 1, 0, UP) is None
    assert board.grid == [[1, 0], [1, 3]]


# ---------- shared properties ----------

def _random_boards(seed: int, count: int):
    rnd = random.Random(seed)
    for _ in range(count):
        rows, cols = rnd.randint(1, 4), rnd.randint(2, 5)
        grid = [[rnd.choice((0, 0, 1, 1, 1, 2, 3, 4)) for _ in range(cols)] for _ in range(rows)]
        board = board_from_rows(grid)
        for r in range(rows - 1):
            for c in range(cols):
                board.v_walls[r][c] = rnd.random() < 0.15
        for r in range(rows):
            for c in range(cols - 1):
                board.h_walls[r][c] = rnd.random() < 0.15
        yield board


@pytest.mark.parametrize("rule", [FarthestEmptyRule(), LineShiftRule()], ids=lambda r: r.name)
def test_reverse_then_forward_restores_board(rule: MoveRule):
    checked = 0
    for board in _random_boards(11, 150):
        for r, c in board.cells():
            for d in Direction:
                work = board.copy()
                move = rule.apply_reverse(work, r, c, d)
                if move is None:
                    assert work.grid == board.grid
                    continue
                assert work.total() == board.total()
                if not rule.is_legal_forward(work, move):
                    continue
                assert rule.apply_forward(work, move)
                assert work.grid == board.grid
                checked += 1
    assert checked > 50


@pytest.mark.parametrize("rule", [FarthestEmptyRule(), LineShiftRule()], ids=lambda r: r.name)
def test_forward_conserves_weight_and_never_splits_onto_a_one(rule: MoveRule):
    applied = 0
    for board in _random_boards(23, 150):
        for r, c in board.cells():
            v = board.grid[r][c]
            for d in Direction:
                for b in range(1, max(1, v)):
                    work = board.copy()
                    nr, nc = r + d.dr, c + d.dc
                    if rule.apply_forward(work, Move(r, c, d, b)):
                        applied += 1
                        assert work.total() == board.total()
                        assert board.grid[nr][nc] != 1
                        assert work.grid[nr][nc] == b
                        assert work.grid[r][c] == v - b
    assert applied > 50


def test_line_rule_never_displaces_a_one():
    rule = LineShiftRule()
    for board in _random_boards(5, 150):
        for r, c in board.cells():
            v = board.grid[r][c]
            for d in Direction:
                for b in range(1, max(1, v)):
                    work = board.copy()
                    if rule.apply_forward(work, Move(r, c, d, b)):
                        for pr, pc in board.cells():
                            if board.grid[pr][pc] == 1:
                                assert work.grid[pr][pc] == 1


def test_get_rule_lookup():
    assert isinstance(get_rule(), FarthestEmptyRule)
    assert isinstance(get_rule("LINE"), LineShiftRule)
    with pytest.raises(ValueError):
        get_rule("spiral")
