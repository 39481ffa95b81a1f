from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from config import CFG


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def dr(self) -> int:
        return self.value[0]

    @property
    def dc(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    @property
    def vertical(self) -> bool:
        return self.dc == 0


_OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass(frozen=True)
class Move:
    """Split ``b`` off the cell at (row, col) toward ``direction``.

    Only ``b`` is stored; at play time the source value v becomes (v - b) + b.
    """

    row: int
    col: int
    direction: Direction
    b: int

    @property
    def target(self) -> Tuple[int, int]:
        return self.row + self.direction.dr, self.col + self.direction.dc

    def __str__(self) -> str:
        return f"(r={self.row},c={self.col}) split-off b={self.b} {self.direction.name}"


@dataclass
class Board:
    """Weights plus wall matrices for one rows x cols puzzle.

    ``v_walls[r][c]`` separates (r, c) from (r + 1, c) and ``h_walls[r][c]``
    separates (r, c) from (r, c + 1). A weight of 0 is an empty cell.
    """

    rows: int
    cols: int
    grid: List[List[int]] = field(default_factory=list)
    v_walls: List[List[bool]] = field(default_factory=list)
    h_walls: List[List[bool]] = field(default_factory=list)

    def __post_init__(self):
        if not self.grid:
            self.grid = [[0] * self.cols for _ in range(self.rows)]
        if not self.v_walls:
            self.v_walls = [[False] * self.cols for _ in range(max(0, self.rows - 1))]
        if not self.h_walls:
            self.h_walls = [[False] * max(0, self.cols - 1) for _ in range(self.rows)]

    @classmethod
    def solved(cls, rows: int, cols: int) -> "Board":
        return cls(rows, cols, grid=[[1] * cols for _ in range(rows)])

    def copy(self) -> "Board":
        return Board(
            self.rows,
            self.cols,
            grid=[list(row) for row in self.grid],
            v_walls=[list(row) for row in self.v_walls],
            h_walls=[list(row) for row in self.h_walls],
        )

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def edge_blocked(self, r: int, c: int, d: Direction) -> bool:
        nr, nc = r + d.dr, c + d.dc
        if not self.in_bounds(r, c) or not self.in_bounds(nr, nc):
            return True
        if d is Direction.UP:
            return self.v_walls[r - 1][c]
        if d is Direction.DOWN:
            return self.v_walls[r][c]
        if d is Direction.LEFT:
            return self.h_walls[r][c - 1]
        return self.h_walls[r][c]

    def line_from(self, r: int, c: int, d: Direction) -> List[Tuple[int, int]]:
        """Positions from the neighbour of (r, c) outward until a wall or the border.

        Empty when the edge of (r, c) itself is closed.
        """
        if self.edge_blocked(r, c, d):
            return []
        out: List[Tuple[int, int]] = []
        pr, pc = r + d.dr, c + d.dc
        while self.in_bounds(pr, pc):
            out.append((pr, pc))
            if self.edge_blocked(pr, pc, d):
                break
            pr, pc = pr + d.dr, pc + d.dc
        return out

    def cells(self) -> Iterator[Tuple[int, int]]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield r, c

    def total(self) -> int:
        return sum(sum(row) for row in self.grid)

    def all_ones(self) -> bool:
        return all(v == 1 for row in self.grid for v in row)

    def wall_count(self) -> int:
        return sum(map(sum, self.v_walls)) + sum(map(sum, self.h_walls))

    def cell_mask(self, r: int, c: int) -> int:
        """4-bit closed-edge mask: 1=top, 2=right, 4=bottom, 8=left."""
        top = r == 0 or self.v_walls[r - 1][c]
        right = c == self.cols - 1 or self.h_walls[r][c]
        bottom = r == self.rows - 1 or self.v_walls[r][c]
        left = c == 0 or self.h_walls[r][c - 1]
        return (1 if top else 0) | (2 if right else 0) | (4 if bottom else 0) | (8 if left else 0)


@dataclass(frozen=True)
class Puzzle:
    start: Board
    moves: Tuple[Move, ...]

    @property
    def rows(self) -> int:
        return self.start.rows

    @property
    def cols(self) -> int:
        return self.start.cols

    def board(self) -> Board:
        """Fresh copy of the start position, safe to play on."""
        return self.start.copy()


@dataclass(frozen=True)
class PuzzleConfig:
    rows: int = field(default_factory=lambda: CFG.ROWS)
    cols: int = field(default_factory=lambda: CFG.COLS)
    walls: int = field(default_factory=lambda: CFG.NUM_WALLS)
    reverse_steps: int = field(default_factory=lambda: CFG.REVERSE_STEPS)
    seed: int = field(default_factory=lambda: CFG.SEED)
    max_attempts: int = field(default_factory=lambda: CFG.MAX_ATTEMPTS)
    step_multiplier: int = field(default_factory=lambda: CFG.STEP_MULTIPLIER)
    rule: str = field(default_factory=lambda: CFG.RULE)

    def __post_init__(self):
        # rule names are matched case-insensitively everywhere
        object.__setattr__(self, "rule", str(self.rule or "").strip().lower())

    @property
    def label(self) -> str:
        return f"{self.rows}x{self.cols} walls={self.walls} reverse={self.reverse_steps}"

    @property
    def step_budget(self) -> int:
        return self.reverse_steps * self.step_multiplier

    def with_seed(self, seed: int) -> "PuzzleConfig":
        return replace(self, seed=seed)

    def validate(self, rule_names: Optional[Tuple[str, ...]] = None) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"board must be at least 1x1, got {self.rows}x{self.cols}")
        if self.walls < 0:
            raise ValueError(f"walls must be >= 0, got {self.walls}")
        if self.reverse_steps < 0:
            raise ValueError(f"reverse_steps must be >= 0, got {self.reverse_steps}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.step_multiplier < 1:
            raise ValueError(f"step_multiplier must be >= 1, got {self.step_multiplier}")
        if rule_names is not None and self.rule not in rule_names:
            raise ValueError(f"unknown rule {self.rule!r}; expected one of {', '.join(rule_names)}")
