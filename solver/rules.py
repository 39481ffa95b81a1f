# solver/rules.py: forward/reverse move rules
from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Type

from models import Board, Direction, Move

Pos = Tuple[int, int]


class MoveRule:
    """Forward/reverse move semantics.

    ``apply_forward`` returns False and leaves the board untouched when the
    move is illegal. ``apply_reverse`` merges the neighbour of (r, c) back into
    the source and returns the forward move that undoes it, or None when no
    such move exists from this position.
    """

    name = ""

    def is_legal_forward(self, board: Board, move: Move) -> bool:
        raise NotImplementedError

    def apply_forward(self, board: Board, move: Move) -> bool:
        raise NotImplementedError

    def apply_reverse(self, board: Board, r: int, c: int, d: Direction) -> Optional[Move]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _split_ok(board: Board, move: Move) -> bool:
    if not board.in_bounds(move.row, move.col):
        return False
    v = board.grid[move.row][move.col]
    if move.b < 1 or v <= move.b:  # need v - b >= 1
        return False
    return not board.edge_blocked(move.row, move.col, move.direction)


class FarthestEmptyRule(MoveRule):
    """Split pushes the ray beyond the neighbour toward its farthest empty cell.

    Forward: the neighbour must not hold 1 and the ray from the neighbour to the
    first wall/border must contain an empty cell. Cells from the neighbour up to
    the farthest empty slide one step outward, then the neighbour receives b.
    """

    name = "farthest"

    def _plan(self, board: Board, move: Move) -> Optional[Tuple[List[Pos], int]]:
        if not _split_ok(board, move):
            return None
        nr, nc = move.target
        if board.grid[nr][nc] == 1:  # a 1 blocks the split
            return None
        pos = board.line_from(move.row, move.col, move.direction)
        for i in range(len(pos) - 1, -1, -1):
            pr, pc = pos[i]
            if board.grid[pr][pc] == 0:
                return pos, i
        return None

    def is_legal_forward(self, board: Board, move: Move) -> bool:
        return self._plan(board, move) is not None

    def apply_forward(self, board: Board, move: Move) -> bool:
        plan = self._plan(board, move)
        if plan is None:
            return False
        pos, empty_idx = plan
        g = board.grid
        v = g[move.row][move.col]
        for i in range(empty_idx, 0, -1):
            (fr, fc), (tr, tc) = pos[i - 1], pos[i]
            g[tr][tc] = g[fr][fc]
        nr, nc = pos[0]
        g[nr][nc] = move.b
        g[move.row][move.col] = v - move.b
        return True

    def apply_reverse(self, board: Board, r: int, c: int, d: Direction) -> Optional[Move]:
        if board.edge_blocked(r, c, d):
            return None
        pos = board.line_from(r, c, d)
        if not pos:
            return None
        g = board.grid
        nr, nc = pos[0]
        b = g[nr][nc]
        if b <= 0:  # forward must be able to produce b >= 1
            return None
        # pull values back toward the source
        for i in range(len(pos) - 1):
            (fr, fc), (tr, tc) = pos[i + 1], pos[i]
            g[tr][tc] = g[fr][fc]
        lr, lc = pos[-1]
        g[lr][lc] = 0  # the empty the forward move slides into
        g[r][c] += b
        return Move(r, c, d, b)


class LineShiftRule(MoveRule):
    """Split drags the source's orthogonal line one step along with it.

    For an UP/DOWN move every other cell of the source's row, and for a
    LEFT/RIGHT move every other cell of its column, moves one step in the move
    direction when it holds more than 1, its own edge is open and the
    destination is empty. Cells holding 0 or 1 never move, and the neighbour
    receiving b must be empty.
    """

    name = "line"

    @staticmethod
    def _line_shifts(board: Board, r: int, c: int, d: Direction) -> List[Tuple[Pos, Pos]]:
        """(from, to) pairs for the line through (r, c), excluding (r, c) itself."""
        if d.vertical:
            line = [(r, cc) for cc in range(board.cols) if cc != c]
        else:
            line = [(rr, c) for rr in range(board.rows) if rr != r]
        g = board.grid
        shifts: List[Tuple[Pos, Pos]] = []
        for pr, pc in line:
            if g[pr][pc] <= 1 or board.edge_blocked(pr, pc, d):
                continue
            tr, tc = pr + d.dr, pc + d.dc
            if g[tr][tc] == 0:
                shifts.append(((pr, pc), (tr, tc)))
        return shifts

    @staticmethod
    def _apply_shifts(board: Board, shifts: List[Tuple[Pos, Pos]]) -> None:
        g = board.grid
        values = [g[fr][fc] for (fr, fc), _ in shifts]
        for (_, (tr, tc)), v in zip(shifts, values):
            g[tr][tc] = v
        for (fr, fc), _ in shifts:
            g[fr][fc] = 0

    def is_legal_forward(self, board: Board, move: Move) -> bool:
        if not _split_ok(board, move):
            return False
        nr, nc = move.target
        return board.grid[nr][nc] == 0

    def apply_forward(self, board: Board, move: Move) -> bool:
        if not self.is_legal_forward(board, move):
            return False
        g = board.grid
        v = g[move.row][move.col]
        self._apply_shifts(board, self._line_shifts(board, move.row, move.col, move.direction))
        nr, nc = move.target
        g[nr][nc] = move.b
        g[move.row][move.col] = v - move.b
        return True

    def apply_reverse(self, board: Board, r: int, c: int, d: Direction) -> Optional[Move]:
        if board.edge_blocked(r, c, d):
            return None
        nr, nc = r + d.dr, c + d.dc
        g = board.grid
        b = g[nr][nc]
        if b <= 0:
            return None
        before = board.copy()
        g[nr][nc] = 0
        g[r][c] += b
        self._apply_shifts(board, self._line_shifts(board, nr, nc, d.opposite))
        move = Move(r, c, d, b)
        # accept only if the forward move reproduces the pre-reverse board
        probe = board.copy()
        if not self.apply_forward(probe, move) or probe.grid != before.grid:
            board.grid = before.grid
            return None
        return move


RULES: Dict[str, Type[MoveRule]] = {
    FarthestEmptyRule.name: FarthestEmptyRule,
    LineShiftRule.name: LineShiftRule,
}

DEFAULT_RULE = FarthestEmptyRule.name


def get_rule(name: Optional[str] = None) -> MoveRule:
    key = (name or DEFAULT_RULE).strip().lower()
    try:
        return RULES[key]()
    except KeyError:
        raise ValueError(f"unknown rule {name!r}; expected one of {', '.join(RULES)}") from None


__all__ = ["MoveRule", "FarthestEmptyRule", "LineShiftRule", "RULES", "DEFAULT_RULE", "get_rule"]
