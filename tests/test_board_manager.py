import pytest

from dotsgame.board_manager import BoardManager
from dotsgame.models import DotColor


def test_create_board_assigns_ids_row_major():
    board = BoardManager.create_board(5)

    assert len(board.dots) == 25
    assert [d.id for d in board.dots] == list(range(1, 26))
    dot = BoardManager.get_dot(board, 2, 3)
    assert dot.id == BoardManager.calculate_id(2, 3, 5) == 8
    assert dot.position == (2, 3)
    assert all(d.color == DotColor.NEUTRAL for d in board.dots)


def test_neighbours_are_precomputed():
    board = BoardManager.create_board(5)

    corner = BoardManager.get_dot(board, 1, 1)
    center = BoardManager.get_dot(board, 3, 3)
    edge = BoardManager.get_dot(board, 1, 3)

    assert corner.neighbours == [2, 6, 7]
    assert len(center.neighbours) == 8
    assert len(edge.neighbours) == 5
    assert BoardManager.is_neighbour(center, BoardManager.get_dot(board, 2, 2))
    assert not BoardManager.is_neighbour(center, BoardManager.get_dot(board, 1, 1))


def test_get_dot_off_board_raises():
    board = BoardManager.create_board(3)

    with pytest.raises(IndexError):
        BoardManager.get_dot(board, 0, 1)
    with pytest.raises(IndexError):
        BoardManager.get_dot(board, 2, 4)


def test_same_row_or_column_excludes_diagonals_and_self():
    board = BoardManager.create_board(4)
    a = BoardManager.get_dot(board, 2, 2)

    assert BoardManager.is_same_row_or_column(a, BoardManager.get_dot(board, 2, 3))
    assert BoardManager.is_same_row_or_column(a, BoardManager.get_dot(board, 4, 2))
    assert not BoardManager.is_same_row_or_column(a, BoardManager.get_dot(board, 3, 3))
    assert not BoardManager.is_same_row_or_column(a, a)


def test_aligned_neighbours():
    board = BoardManager.create_board(5)

    center = BoardManager.get_dot(board, 3, 3)
    corner = BoardManager.get_dot(board, 1, 1)

    assert sorted(d.position for d in BoardManager.aligned_neighbours(board, center)) == [
        (2, 3), (3, 2), (3, 4), (4, 3),
    ]
    assert len(BoardManager.aligned_neighbours(board, corner)) == 2


def test_join_is_symmetric_and_idempotent():
    board = BoardManager.create_board(3)
    a = BoardManager.get_dot(board, 1, 1)
    b = BoardManager.get_dot(board, 2, 2)

    BoardManager.join(a, b)
    BoardManager.join(b, a)

    assert a.partners == {b.id}
    assert b.partners == {a.id}
    assert BoardManager.are_partners(a, b) and BoardManager.are_partners(b, a)


def test_lines_are_added_and_removed_in_order():
    board = BoardManager.create_board(3)
    a = BoardManager.get_dot(board, 1, 1)
    b = BoardManager.get_dot(board, 1, 2)
    a.color = b.color = DotColor.RED

    line = BoardManager.add_line(board, a, b)

    assert (line.start_id, line.end_id, line.color) == (a.id, b.id, DotColor.RED)
    assert BoardManager.remove_last_line(board) == line
    assert BoardManager.remove_last_line(board) is None


def test_edge_dots():
    board = BoardManager.create_board(4)

    assert BoardManager.is_edge_dot(BoardManager.get_dot(board, 1, 2), 4)
    assert BoardManager.is_edge_dot(BoardManager.get_dot(board, 3, 4), 4)
    assert not BoardManager.is_edge_dot(BoardManager.get_dot(board, 2, 3), 4)


def test_free_dots_and_render_ascii():
    board = BoardManager.create_board(3)
    BoardManager.get_dot(board, 2, 2).color = DotColor.RED
    gray = BoardManager.get_dot(board, 1, 1)
    gray.color = DotColor.GRAY
    gray.encircled = True
    captured = BoardManager.get_dot(board, 3, 3)
    captured.color = DotColor.BLACK
    captured.encircled = True

    assert len(BoardManager.free_dots(board)) == 6
    assert BoardManager.render_ascii(board) == "x..\n.R.\n..b"
