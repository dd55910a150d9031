"""Board-level helpers for the Dots game.

The board is a fixed ``N x N`` arena of dots addressed by 1-based
``(row, column)``. Each dot's 8-neighbourhood is computed once when the
board is created; afterwards adjacency is a lookup into
``Dot.neighbours``. The partner relation (dots joined by a drawn line) is
kept on the dots as sets of arena ids.
"""
from __future__ import annotations

from .models import BoardState, Dot, DotColor, Line

__all__ = ["BoardManager"]


class BoardManager:
    """Helper for grid and connectivity operations.

    Callers pass in ``BoardState`` instances; the helpers either derive
    views from them or apply the small set of mutations the rules need
    (partner joins and line bookkeeping).
    """

    # Square board directions (8 neighbours), row-major order
    DIRECTIONS: list[tuple[int, int]] = [
        (-1, -1),
        (-1, 0),
        (-1, 1),
        (0, -1),
        (0, 1),
        (1, -1),
        (1, 0),
        (1, 1),
    ]

    @staticmethod
    def create_board(size: int) -> BoardState:
        """Create a neutral ``size x size`` board with precomputed neighbours."""
        dots = []
        for row in range(1, size + 1):
            for column in range(1, size + 1):
                dots.append(
                    Dot(
                        id=BoardManager.calculate_id(row, column, size),
                        row=row,
                        column=column,
                    )
                )
        board = BoardState(size=size, dots=dots)
        for dot in board.dots:
            dot.neighbours = BoardManager._find_all_neighbours(dot, size)
        return board

    @staticmethod
    def calculate_id(row: int, column: int, size: int) -> int:
        """Return the arena id of ``(row, column)``.

        Only meaningful on square boards; ids run from 1 to ``size**2``.
        """
        return size * (row - 1) + column

    @staticmethod
    def is_valid_position(row: int, column: int, size: int) -> bool:
        return 1 <= row <= size and 1 <= column <= size

    @staticmethod
    def _find_all_neighbours(dot: Dot, size: int) -> list[int]:
        neighbours: list[int] = []
        for dr, dc in BoardManager.DIRECTIONS:
            row, column = dot.row + dr, dot.column + dc
            if BoardManager.is_valid_position(row, column, size):
                neighbours.append(BoardManager.calculate_id(row, column, size))
        return neighbours

    @staticmethod
    def get_dot(board: BoardState, row: int, column: int) -> Dot:
        """Return the dot at ``(row, column)``.

        Raises:
            IndexError: if the position is off the board.
        """
        if not BoardManager.is_valid_position(row, column, board.size):
            raise IndexError(f"({row}, {column}) is off a {board.size}x{board.size} board")
        return board.dots[BoardManager.calculate_id(row, column, board.size) - 1]

    @staticmethod
    def dot_by_id(board: BoardState, dot_id: int) -> Dot:
        return board.dots[dot_id - 1]

    @staticmethod
    def neighbours_of(board: BoardState, dot: Dot) -> list[Dot]:
        """Return the up to 8 dots around ``dot``."""
        return [board.dots[i - 1] for i in dot.neighbours]

    @staticmethod
    def aligned_neighbours(board: BoardState, dot: Dot) -> list[Dot]:
        """Return the up to 4 neighbours sharing ``dot``'s row or column."""
        return [
            n for n in BoardManager.neighbours_of(board, dot)
            if BoardManager.is_same_row_or_column(dot, n)
        ]

    @staticmethod
    def is_neighbour(a: Dot, b: Dot) -> bool:
        return b.id in a.neighbours

    @staticmethod
    def is_same_row_or_column(a: Dot, b: Dot) -> bool:
        """True if the dots share exactly one of row or column."""
        return (a.row == b.row) != (a.column == b.column)

    @staticmethod
    def is_edge_dot(dot: Dot, size: int) -> bool:
        return dot.row in (1, size) or dot.column in (1, size)

    @staticmethod
    def join(a: Dot, b: Dot) -> None:
        """Record ``a`` and ``b`` as partners. Symmetric and idempotent."""
        a.partners.add(b.id)
        b.partners.add(a.id)

    @staticmethod
    def are_partners(a: Dot, b: Dot) -> bool:
        return b.id in a.partners

    @staticmethod
    def add_line(board: BoardState, start: Dot, end: Dot) -> Line:
        line = Line(start_id=start.id, end_id=end.id, color=start.color)
        board.lines.append(line)
        return line

    @staticmethod
    def remove_last_line(board: BoardState) -> Line | None:
        if not board.lines:
            return None
        return board.lines.pop()

    @staticmethod
    def free_dots(board: BoardState) -> list[Dot]:
        """Dots that are neutral and not yet resolved by a loop."""
        return [dot for dot in board.dots if dot.is_free]

    @staticmethod
    def render_ascii(board: BoardState) -> str:
        """Debug rendering, one character per dot (``.`` neutral, ``x`` gray)."""
        symbols = {DotColor.NEUTRAL: ".", DotColor.GRAY: "x"}
        rows = []
        for row in range(1, board.size + 1):
            chars = []
            for column in range(1, board.size + 1):
                dot = BoardManager.get_dot(board, row, column)
                char = symbols.get(dot.color, dot.color.value[0].upper())
                chars.append(char.lower() if dot.encircled and dot.color.is_player_color else char)
            rows.append("".join(chars))
        return "\n".join(rows)
