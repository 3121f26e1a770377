"""Command-line driver for playing against the computer."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from opentelemetry.instrumentation.logging import LoggingInstrumentor

from seabattle.engine.board import BOARD_SIZE, Coordinate, Grid
from seabattle.engine.errors import SeaBattleError
from seabattle.engine.game import FleetEntry, GamePhase, Side
from seabattle.engine.instrumented_game import InstrumentedBattleshipGame
from seabattle.engine.player import Shot
from seabattle.telemetry import configure_console_logging, init_telemetry

ROW_LABELS = "ABCDEFGHIJ"

logger = logging.getLogger(__name__)


def _coordinate_from_input(text: str) -> Coordinate:
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    if cleaned[0].isalpha():
        if cleaned[0] not in ROW_LABELS:
            raise ValueError("Row must be between A and J.")
        row = ROW_LABELS.index(cleaned[0])
        try:
            col = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError("Column must be a number between 1 and 10.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or '3 7'.")
        # Both forms count from 1, matching the rendered board.
        row, col = (int(part) - 1 for part in parts)
    if row not in range(BOARD_SIZE) or col not in range(BOARD_SIZE):
        raise ValueError("Coordinates must be within the 10x10 board.")
    return Coordinate(row, col)


def _label(coord: Coordinate) -> str:
    return f"{ROW_LABELS[coord.row]}{coord.col + 1}"


def _format_board(grid: Grid, show_ships: bool) -> str:
    header = "    " + " ".join(f"{col+1:>2}" for col in range(len(grid)))
    rows = [header]
    for row, cells in enumerate(grid):
        symbols = []
        for cell in cells:
            if cell.hit:
                symbol = "X" if cell.content is not None else "o"
            else:
                symbol = "S" if show_ships and cell.content is not None else "."
            symbols.append(f"{symbol:>2}")
        rows.append(f"{ROW_LABELS[row]} |" + " ".join(symbols))
    return "\n".join(rows)


def _describe_human_shot(coord: Coordinate, hit: bool, sunk: bool) -> str:
    outcome = "hit" if hit else "miss"
    if sunk:
        outcome = "you sank an enemy ship!"
    return f"You fired at {_label(coord)}: {outcome}"


def _describe_computer_shot(shot: Shot) -> str:
    outcome = "hit" if shot.hit else "miss"
    if shot.sunk:
        outcome = "sank one of your ships!"
    return f"The computer fired at {_label(shot.coord)}: {outcome}"


def _prompt_for_coordinate(grid: Grid) -> Coordinate:
    while True:
        raw = input("Enter target coordinate (e.g., A5) or 'q' to quit: ").strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            coord = _coordinate_from_input(raw)
        except ValueError as exc:
            print(f"Invalid input: {exc}")
            continue
        if grid[coord.row][coord.col].hit:
            print("That cell has already been targeted. Choose another.")
            continue
        return coord


def _prompt_vertical(entry: FleetEntry) -> bool:
    while True:
        raw = (
            input(f"Place your {entry.name} (length {entry.size}). Orientation [H/V]: ")
            .strip()
            .upper()
        )
        if raw in {"H", "HOR", "HORIZONTAL"}:
            return False
        if raw in {"V", "VER", "VERTICAL"}:
            return True
        print("Please enter H for horizontal or V for vertical.")


def _manual_ship_placement(game: InstrumentedBattleshipGame) -> None:
    while (entry := game.pending_ship()) is not None:
        print("\nCurrent layout:")
        print(_format_board(game.get_state().boards[Side.HUMAN], show_ships=True))
        vertical = _prompt_vertical(entry)
        try:
            start = _coordinate_from_input(input("Enter starting coordinate (e.g., A1): "))
        except ValueError as exc:
            print(f"Invalid coordinate: {exc}")
            continue
        if not game.validate_placement(entry.size, start.row, start.col, vertical):
            print("Ship cannot be placed there (out of bounds or overlaps). Try again.")
            continue
        game.place_next_ship(start.row, start.col, vertical)


def _prompt_manual_setup() -> bool:
    while True:
        raw = input("Would you like to place your ships manually? [Y/n]: ").strip().lower()
        if raw in {"", "y", "yes"}:
            return True
        if raw in {"n", "no"}:
            return False
        print("Please answer with 'y' or 'n'.")


def _enemy_ship_sunk(game: InstrumentedBattleshipGame, coord: Coordinate) -> bool:
    enemy = game.players[Side.COMPUTER].board
    ship_id = enemy.cell(coord.row, coord.col).content
    return ship_id is not None and enemy.get_ships()[ship_id].is_sunk()


def play_game(seed: int | None = None, auto_place: bool = False) -> Side | None:
    print("Welcome to Sea Battle!\n")
    game = InstrumentedBattleshipGame(rng_seed=seed)

    if not auto_place and _prompt_manual_setup():
        _manual_ship_placement(game)
    else:
        game.auto_place(Side.HUMAN)
        print("\nYour ships have been positioned automatically.")

    game.start()

    while game.phase is GamePhase.IN_PROGRESS:
        state = game.get_state()
        if state.current_side is Side.HUMAN:
            print("\nYour Board:")
            print(_format_board(state.boards[Side.HUMAN], show_ships=True))
            print("\nEnemy Waters:")
            print(_format_board(state.boards[Side.COMPUTER], show_ships=False))

            coord = _prompt_for_coordinate(state.boards[Side.COMPUTER])
            try:
                hit = game.human_attack(coord.row, coord.col)
            except SeaBattleError as exc:
                print(f"Move rejected: {exc}")
                continue
            print(_describe_human_shot(coord, hit, _enemy_ship_sunk(game, coord)))
        else:
            print(_describe_computer_shot(game.computer_attack()))

    if game.winner is Side.HUMAN:
        print("\nCongratulations, you won!")
    else:
        print("\nThe computer won this time. Better luck next battle!")
    return game.winner


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Sea Battle via the CLI.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--auto-place", action="store_true", help="Position your fleet automatically."
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Console log level (default: WARNING)."
    )
    args = parser.parse_args(argv)

    configure_console_logging(args.log_level.upper())
    config = init_telemetry()
    if config.enable_logging or config.enable_tracing:
        LoggingInstrumentor().instrument()
    logger.debug("cli_started", extra={"seed": args.seed, "auto_place": args.auto_place})
    play_game(seed=args.seed, auto_place=args.auto_place)


if __name__ == "__main__":
    main()
