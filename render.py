import random
from html import escape
from typing import Dict, Iterable, List

from models import Board, Move


# ---------- text ----------

def _pad_center(s: str, width: int) -> str:
    n = len(s)
    if n >= width:
        return s
    left = (width - n) // 2
    return " " * left + s + " " * (width - n - left)


def render_grid(board: Board) -> str:
    """Plain numeric dump, three columns per cell."""
    return "".join("".join(f"{v:3d}" for v in row) + "\n" for row in board.grid)


def render_pretty(board: Board) -> str:
    """Maze-style board with 0-based row/column labels.

    ``|`` between two cells is a wall, ``---`` under a cell is a wall below it,
    ``.`` is an empty cell.
    """
    max_val = max([1] + [v for row in board.grid for v in row])
    cell_w = max(3, len(str(max_val)), len(str(max(0, board.cols - 1))))
    label_w = max(2, len(str(max(0, board.rows - 1))))
    gutter = " " * (label_w + 1)
    full_border = gutter + "+" + "".join("-" * cell_w + "+" for _ in range(board.cols)) + "\n"

    out: List[str] = []
    out.append(" " * (label_w + 2) + " ".join(_pad_center(str(c), cell_w) for c in range(board.cols)) + "\n")
    out.append(full_border)
    for r in range(board.rows):
        line = [f"{r:>{label_w}} |"]
        for c in range(board.cols):
            v = board.grid[r][c]
            line.append(_pad_center("." if v == 0 else str(v), cell_w))
            if c < board.cols - 1:
                line.append("|" if board.h_walls[r][c] else " ")
            else:
                line.append("|")
        out.append("".join(line) + "\n")
        if r < board.rows - 1:
            seg = "".join(
                ("-" * cell_w if board.v_walls[r][c] else " " * cell_w) + "+"
                for c in range(board.cols)
            )
            out.append(gutter + "+" + seg + "\n")
        else:
            out.append(full_border)
    return "".join(out)


def render_walls(board: Board) -> str:
    out = ["Vertical walls (between (r,c) and (r+1,c)):\n"]
    for r in range(board.rows - 1):
        for c in range(board.cols):
            if board.v_walls[r][c]:
                out.append(f"  ({r},{c})-({r + 1},{c})\n")
    out.append("Horizontal walls (between (r,c) and (r,c+1)):\n")
    for r in range(board.rows):
        for c in range(board.cols - 1):
            if board.h_walls[r][c]:
                out.append(f"  ({r},{c})-({r},{c + 1})\n")
    return "".join(out)


def render_move(move: Move) -> str:
    return f"(r={move.row},c={move.col}) b={move.b} {move.direction.name}"


def render_solution(moves: Iterable[Move]) -> str:
    return "".join(f"{i:2d}) {render_move(m)}\n" for i, m in enumerate(moves, 1))


# ---------- svg preview ----------

def _color(weight: int) -> str:
    if weight == 0:
        return "rgb(235,235,235)"
    if weight == 1:
        return "rgb(255,255,255)"
    rnd = random.Random(weight * 7919)
    r = rnd.randint(120, 230)
    g = rnd.randint(120, 230)
    b = rnd.randint(120, 230)
    return f"rgb({r},{g},{b})"

def render_svg(board: Board, scale: int = 40) -> str:
    palette: Dict[int, str] = {}
    svg_w = board.cols * scale + 4
    svg_h = board.rows * scale + 4

    cells = []
    for r, c in board.cells():
        v = board.grid[r][c]
        fill = palette.setdefault(v, _color(v))
        x = 2 + c * scale
        y = 2 + r * scale
        label = "" if v == 0 else str(v)
        cells.append(
            f'<rect x="{x}" y="{y}" width="{scale}" height="{scale}" fill="{fill}" stroke="#bbb" stroke-width="1"/>'
            f'<text x="{x + scale // 2}" y="{y + scale // 2 + 5}" font-size="14" text-anchor="middle" fill="black">{label}</text>'
        )

    walls = []
    for r in range(board.rows - 1):
        for c in range(board.cols):
            if board.v_walls[r][c]:
                y = 2 + (r + 1) * scale
                walls.append(f'<line x1="{2 + c * scale}" y1="{y}" x2="{2 + (c + 1) * scale}" y2="{y}" stroke="black" stroke-width="4"/>')
    for r in range(board.rows):
        for c in range(board.cols - 1):
            if board.h_walls[r][c]:
                x = 2 + (c + 1) * scale
                walls.append(f'<line x1="{x}" y1="{2 + r * scale}" x2="{x}" y2="{2 + (r + 1) * scale}" stroke="black" stroke-width="4"/>')

    frame = f'<rect x="2" y="2" width="{svg_w - 4}" height="{svg_h - 4}" fill="none" stroke="black" stroke-width="3"/>'
    return (
        f'<svg class="board-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(cells)}{"".join(walls)}{frame}</svg>'
    )

def render_solution_html(moves: Iterable[Move]) -> str:
    return "".join(f"<li>{escape(render_move(m))}</li>" for m in moves)
