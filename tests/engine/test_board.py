"""Tests for the Board mechanics."""

import random

import pytest

from seabattle.engine.board import BOARD_SIZE, Board, Cell
from seabattle.engine.errors import (
    AlreadyAttackedError,
    InsufficientSpaceError,
    InvalidCoordinateError,
    InvalidSizeError,
)


def occupied(board: Board) -> set[tuple[int, int]]:
    return {
        (row, col)
        for row, cells in enumerate(board.get_board())
        for col, cell in enumerate(cells)
        if cell.content is not None
    }


def test_new_board_is_empty_ten_by_ten() -> None:
    grid = Board().get_board()
    assert len(grid) == BOARD_SIZE
    assert all(len(row) == BOARD_SIZE for row in grid)
    assert all(cell == Cell() for row in grid for cell in row)


def test_place_ship_horizontally() -> None:
    board = Board()
    ship_id = board.place_ship(2, 0, 0)
    assert ship_id == 0
    assert occupied(board) == {(0, 0), (0, 1)}
    assert board.get_ships()[ship_id].length == 2


def test_place_ship_vertically() -> None:
    board = Board()
    board.place_ship(3, 2, 4, vertical=True)
    assert occupied(board) == {(2, 4), (3, 4), (4, 4)}


def test_ship_ids_increase_in_placement_order() -> None:
    board = Board()
    first = board.place_ship(2, 0, 0)
    second = board.place_ship(3, 5, 5, vertical=True)
    assert (first, second) == (0, 1)
    assert list(board.get_ships()) == [first, second]


@pytest.mark.parametrize("size", [0, 6, -1])
def test_place_ship_rejects_invalid_size(size: int) -> None:
    with pytest.raises(InvalidSizeError):
        Board().place_ship(size, 0, 0)


@pytest.mark.parametrize("row, col", [(0, 10), (-1, 0), (10, 3)])
def test_place_ship_rejects_invalid_coordinates(row: int, col: int) -> None:
    with pytest.raises(InvalidCoordinateError):
        Board().place_ship(2, row, col)


def test_place_ship_rejects_overflow_past_edge() -> None:
    board = Board()
    with pytest.raises(InsufficientSpaceError):
        board.place_ship(2, 9, 9, False)
    with pytest.raises(InsufficientSpaceError):
        board.place_ship(2, 0, 9)


def test_place_ship_rejects_overlap() -> None:
    board = Board()
    board.place_ship(4, 0, 0)
    with pytest.raises(InsufficientSpaceError):
        board.place_ship(4, 0, 0)
    with pytest.raises(InsufficientSpaceError):
        board.place_ship(2, 0, 1, vertical=True)


def test_failed_placement_leaves_board_untouched() -> None:
    board = Board()
    board.place_ship(3, 4, 4)
    grid_before = board.get_board()
    ships_before = board.get_ships()

    for args in [(6, 0, 0, False), (2, 12, 0, False), (3, 4, 2, False), (4, 8, 0, True)]:
        with pytest.raises(ValueError):
            board.place_ship(*args)

    assert board.get_board() == grid_before
    assert board.get_ships() == ships_before
    assert board.place_ship(1, 0, 0) == 1


def test_get_ships_returns_detached_copies() -> None:
    board = Board()
    ship_id = board.place_ship(1, 2, 2)
    ships_before = board.get_ships()

    board.get_ships()[ship_id].hit()
    assert board.get_ships() == ships_before
    assert not board.all_sunk()

    board.receive_attack(2, 2)
    assert board.get_ships() != ships_before
    assert ships_before[ship_id].hit_count == 0
    assert board.all_sunk()


def test_enough_place_agrees_with_place_ship() -> None:
    rng = random.Random(7)
    board = Board()
    for _ in range(300):
        size = rng.randint(1, 5)
        row = rng.randrange(BOARD_SIZE)
        col = rng.randrange(BOARD_SIZE)
        vertical = rng.random() > 0.5
        expected = board.enough_place(size, row, col, vertical)
        before = occupied(board)
        try:
            board.place_ship(size, row, col, vertical)
            placed = True
        except InsufficientSpaceError:
            placed = False
        assert placed is expected
        if placed:
            added = occupied(board) - before
            if vertical:
                assert added == {(row + i, col) for i in range(size)}
            else:
                assert added == {(row, col + i) for i in range(size)}
        else:
            assert occupied(board) == before


def test_enough_place_does_not_mutate() -> None:
    board = Board()
    assert board.enough_place(5, 0, 0)
    assert occupied(board) == set()
    assert board.get_ships() == {}


def test_receive_attack_hit_and_miss() -> None:
    board = Board()
    ship_id = board.place_ship(2, 0, 0)

    assert board.receive_attack(0, 0) is True
    assert board.get_ships()[ship_id].hit_count == 1
    assert board.get_board()[0][0] == Cell(content=ship_id, hit=True)

    assert board.receive_attack(5, 5) is False
    assert board.get_board()[5][5] == Cell(content=None, hit=True)
    assert not board.all_sunk()


def test_receive_attack_rejects_duplicates_without_double_counting() -> None:
    board = Board()
    ship_id = board.place_ship(3, 1, 1)
    board.receive_attack(1, 1)
    board.receive_attack(7, 7)

    with pytest.raises(AlreadyAttackedError):
        board.receive_attack(1, 1)
    with pytest.raises(AlreadyAttackedError):
        board.receive_attack(7, 7)
    assert board.get_ships()[ship_id].hit_count == 1


def test_receive_attack_rejects_out_of_bounds() -> None:
    board = Board()
    with pytest.raises(InvalidCoordinateError):
        board.receive_attack(11, 11)
    with pytest.raises(InvalidCoordinateError):
        board.receive_attack(0, -1)


def test_sinking_a_carrier_finishes_the_board() -> None:
    board = Board()
    board.place_ship(5, 0, 0, False)
    for col in range(5):
        assert board.receive_attack(0, col)
    assert board.all_sunk()


def test_all_sunk_tracks_every_ship() -> None:
    board = Board()
    assert board.all_sunk()

    board.place_ship(1, 0, 0)
    board.place_ship(2, 5, 5, vertical=True)
    board.receive_attack(0, 0)
    assert not board.all_sunk()
    board.receive_attack(5, 5)
    board.receive_attack(6, 5)
    assert board.all_sunk()
    assert all(ship.hit_count >= ship.length for ship in board.get_ships().values())


def test_snapshot_is_detached_from_later_attacks() -> None:
    board = Board()
    snapshot = board.get_board()
    board.receive_attack(3, 3)
    assert snapshot[3][3].hit is False
    assert board.get_board()[3][3].hit is True


def test_place_randomly_deploys_fleet_without_overlap() -> None:
    board = Board()
    sizes = [5, 4, 3, 3, 2]
    ids = board.place_randomly(sizes, random.Random(123))
    assert len(ids) == len(sizes)
    assert sorted(ship.length for ship in board.get_ships().values()) == sorted(sizes)
    assert len(occupied(board)) == sum(sizes)
