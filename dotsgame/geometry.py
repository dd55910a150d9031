"""Two-dimensional geometry for encirclements.

Dots are treated as polygon vertices at scaled board coordinates
(``row * CELL_SIZE``, ``column * CELL_SIZE``). Two containment tests are
provided:

- :func:`is_inside_polygon` is the crossing-number (ray casting) test used
  for scoring. It uses the half-open edge rule ``(yi > y) != (yj > y)`` so a
  ray through a vertex is counted once.
- :func:`is_inside_by_quadrants` only looks at path dots on the same row or
  column as the test dot and requires one on each of the four sides. It is
  exact for the grid-aligned loops players draw and serves as a cross-check.
"""

from __future__ import annotations

from collections.abc import Sequence

from .board_manager import BoardManager
from .models import BoardState, Dot

CELL_SIZE = 35

# A closed loop needs at least this many distinct dots
MIN_LOOP_DOTS = 3


def _vertices(path: Sequence[Dot]) -> list[tuple[int, int]]:
    return [(dot.row * CELL_SIZE, dot.column * CELL_SIZE) for dot in path]


def is_inside_polygon(dot: Dot, path: Sequence[Dot]) -> bool:
    """Return True if ``dot`` lies strictly inside the closed ``path``.

    ``path`` may or may not repeat its first dot at the end; a zero-length
    closing edge never crosses the ray.
    """
    polygon = _vertices(path)
    x, y = dot.row * CELL_SIZE, dot.column * CELL_SIZE
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > y) != (yj > y):
            cross_x = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < cross_x:
                inside = not inside
        j = i
    return inside


def is_inside_by_quadrants(dot: Dot, path: Sequence[Dot]) -> bool:
    less_rows = high_rows = less_cols = high_cols = False
    for node in path:
        if node.row == dot.row:
            if node.column < dot.column:
                less_cols = True
            elif node.column > dot.column:
                high_cols = True
        elif node.column == dot.column:
            if node.row < dot.row:
                less_rows = True
            else:
                high_rows = True
        if less_rows and high_rows and less_cols and high_cols:
            return True
    return False


def could_connect(a: Dot, b: Dot, path: Sequence[Dot]) -> bool:
    """Return True if a line may be drawn from ``a`` to ``b``.

    The dots must be distinct same-colored neighbours. A dot already on the
    in-progress ``path`` is only reachable when it is the path's start
    and the path already holds at least ``MIN_LOOP_DOTS`` dots, which
    closes the loop.
    """
    if any(node.id == b.id for node in path):
        if path[0].id != b.id or len(path) < MIN_LOOP_DOTS:
            return False
        return BoardManager.is_neighbour(a, b) and a.color == b.color
    return (
        a.id != b.id
        and BoardManager.is_neighbour(a, b)
        and a.color == b.color
    )


def polygon_area(path: Sequence[Dot]) -> float:
    """Shoelace area of ``path`` in board units (cells, not pixels)."""
    if len(path) < 3:
        return 0.0
    total = 0
    for i in range(len(path)):
        a, b = path[i], path[(i + 1) % len(path)]
        total += a.row * b.column - b.row * a.column
    return abs(total) / 2.0


def bounding_box(path: Sequence[Dot]) -> tuple[int, int, int, int]:
    rows = [dot.row for dot in path]
    cols = [dot.column for dot in path]
    return min(rows), min(cols), max(rows), max(cols)


def dots_inside(board: BoardState, path: Sequence[Dot]) -> list[Dot]:
    """Dots strictly inside ``path``, searched only within its bounding box."""
    if len(path) < 3:
        return []
    on_path = {dot.id for dot in path}
    min_row, min_col, max_row, max_col = bounding_box(path)
    inside = []
    for row in range(min_row + 1, max_row):
        for column in range(min_col + 1, max_col):
            dot = BoardManager.get_dot(board, row, column)
            if dot.id not in on_path and is_inside_polygon(dot, path):
                inside.append(dot)
    return inside
