"""Tests for the terminal front-end helpers."""

from __future__ import annotations

import pytest

from seabattle import cli
from seabattle.engine.board import Board, Coordinate
from seabattle.engine.game import Side
from seabattle.engine.player import Shot


@pytest.mark.parametrize(
    "text, expected",
    [
        ("A1", Coordinate(0, 0)),
        ("j10", Coordinate(9, 9)),
        (" c5 ", Coordinate(2, 4)),
        ("3 7", Coordinate(2, 6)),
        ("10 10", Coordinate(9, 9)),
    ],
)
def test_coordinate_from_input(text: str, expected: Coordinate) -> None:
    assert cli._coordinate_from_input(text) == expected


@pytest.mark.parametrize("text", ["", "K1", "A0", "A11", "Ax", "1 2 3", "10 0", "0 5", "11 1", "1 x"])
def test_coordinate_from_input_rejects_garbage(text: str) -> None:
    with pytest.raises(ValueError):
        cli._coordinate_from_input(text)


def test_numeric_coordinates_match_the_rendered_labels() -> None:
    coord = cli._coordinate_from_input("3 7")
    assert coord == cli._coordinate_from_input("C7")
    assert cli._label(coord) == "C7"


def test_format_board_hides_ships_from_the_enemy() -> None:
    board = Board()
    board.place_ship(2, 0, 0)
    board.receive_attack(0, 0)
    board.receive_attack(1, 1)

    own = cli._format_board(board.get_board(), show_ships=True).splitlines()
    enemy = cli._format_board(board.get_board(), show_ships=False).splitlines()

    assert own[0].split() == [str(col) for col in range(1, 11)]
    assert own[1].split()[2:5] == ["X", "S", "."]
    assert enemy[1].split()[2:5] == ["X", ".", "."]
    assert own[2].split()[2:4] == [".", "o"]


def test_describe_shots() -> None:
    assert cli._describe_human_shot(Coordinate(0, 4), True, False) == "You fired at A5: hit"
    sunk = Shot(coord=Coordinate(9, 9), hit=True, ship_id=None, sunk=True)
    assert cli._describe_computer_shot(sunk).endswith("sank one of your ships!")


def test_play_game_against_scripted_input(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    cells = iter(f"{row} {col}" for row in range(10) for col in range(10))
    monkeypatch.setattr("builtins.input", lambda prompt="": next(cells))

    winner = cli.play_game(seed=8, auto_place=True)

    assert winner in {Side.HUMAN, Side.COMPUTER}
    out = capsys.readouterr().out
    assert "Welcome to Sea Battle!" in out
    assert "positioned automatically" in out


def test_manual_setup_prompts_for_each_ship(monkeypatch: pytest.MonkeyPatch) -> None:
    answers = iter(["y", "H", "A1", "H", "A1", "H", "B1", "V", "C1", "H", "C2", "H", "D2"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    captured: dict[str, object] = {}

    def capture_start(self) -> None:
        ships = self.players[Side.HUMAN].board.get_ships().values()
        captured["ships"] = sorted(ship.length for ship in ships)
        raise SystemExit("stop")

    monkeypatch.setattr(cli.InstrumentedBattleshipGame, "start", capture_start)
    with pytest.raises(SystemExit):
        cli.play_game(seed=1)
    assert captured["ships"] == [2, 3, 3, 4, 5]
