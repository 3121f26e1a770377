"""Tests for Ship domain logic."""

import pytest

from seabattle.engine.errors import MissingLengthError
from seabattle.engine.ship import Ship


def test_ship_requires_length() -> None:
    with pytest.raises(MissingLengthError):
        Ship()
    with pytest.raises(MissingLengthError):
        Ship(0)


def test_ship_hit_returns_running_total() -> None:
    ship = Ship(3)
    assert [ship.hit(), ship.hit(), ship.hit()] == [1, 2, 3]


def test_ship_hit_and_sink() -> None:
    ship = Ship(3)
    for count in range(1, 4):
        ship.hit()
        assert ship.is_sunk() is (count == 3)


def test_ship_hits_are_not_clamped() -> None:
    ship = Ship(1)
    ship.hit()
    ship.hit()
    assert ship.hit_count == 2
    assert ship.is_sunk()
