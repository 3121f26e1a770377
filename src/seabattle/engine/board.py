"""Single-player board management for the sea battle engine."""

from __future__ import annotations

import logging
import random
from copy import copy
from dataclasses import dataclass, replace
from typing import Iterable, NewType

from seabattle.telemetry import get_meter, get_tracer

from .errors import (
    AlreadyAttackedError,
    InsufficientSpaceError,
    InvalidCoordinateError,
    InvalidSizeError,
)
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.board")
meter = get_meter("seabattle.engine.board")

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

SHOT_COUNTER = meter.create_counter(
    "seabattle_engine_shots",
    unit="1",
    description="Attacks received by a board",
)

BOARD_SIZE = 10
MIN_SHIP_SIZE = 1
MAX_SHIP_SIZE = 5

ShipId = NewType("ShipId", int)


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int


@dataclass(frozen=True)
class Cell:
    """One grid position: the ship occupying it, if any, and whether it was attacked."""

    content: ShipId | None = None
    hit: bool = False


Grid = tuple[tuple[Cell, ...], ...]


def in_bounds(row: int, col: int) -> bool:
    """Check whether a coordinate lies inside a standard board."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


class Board:
    """A player's 10×10 grid and the registry of ships placed on it."""

    size = BOARD_SIZE

    def __init__(self, owner: str = "unknown") -> None:
        self.owner = owner
        self._grid: list[list[Cell]] = [[Cell() for _ in range(self.size)] for _ in range(self.size)]
        self._ships: dict[ShipId, Ship] = {}
        self._next_id = 0

    def is_valid_coordinate(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return in_bounds(row, col)

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at ``(row, col)``."""
        if not self.is_valid_coordinate(row, col):
            raise InvalidCoordinateError(f"Coordinate ({row}, {col}) is outside the board.")
        return self._grid[row][col]

    def enough_place(self, size: int, row: int, col: int, vertical: bool = False) -> bool:
        """Return True if ``size`` cells from (row, col) are on the board and empty."""
        for row_i, col_i in _span(size, row, col, vertical):
            if not self.is_valid_coordinate(row_i, col_i):
                return False
            if self._grid[row_i][col_i].content is not None:
                return False
        return True

    def place_ship(self, size: int, row: int, col: int, vertical: bool = False) -> ShipId:
        """Create a ship of ``size`` at (row, col) and return its identifier."""
        with tracer.start_as_current_span("board.place_ship") as span:
            span.set_attribute("ship.length", size)
            span.set_attribute("ship.start.row", row)
            span.set_attribute("ship.start.col", col)
            span.set_attribute("ship.vertical", vertical)
            span.set_attribute("board.owner", self.owner)
            placement = {
                "owner": self.owner,
                "size": size,
                "row": row,
                "col": col,
                "vertical": vertical,
            }

            if not MIN_SHIP_SIZE <= size <= MAX_SHIP_SIZE:
                self._reject_placement("invalid_size", placement)
                raise InvalidSizeError(
                    f"Ship size must be between {MIN_SHIP_SIZE} and {MAX_SHIP_SIZE}."
                )
            if not self.is_valid_coordinate(row, col):
                self._reject_placement("invalid_coordinate", placement)
                raise InvalidCoordinateError("Coordinates must be valid.")
            if not self.enough_place(size, row, col, vertical):
                self._reject_placement("insufficient_space", placement)
                raise InsufficientSpaceError("There must be enough place available for the ship.")

            ship_id = ShipId(self._next_id)
            self._next_id += 1
            self._ships[ship_id] = Ship(size)
            for row_i, col_i in _span(size, row, col, vertical):
                self._grid[row_i][col_i] = replace(self._grid[row_i][col_i], content=ship_id)

            span.set_attribute("ship.id", ship_id)
            PLACEMENT_COUNTER.add(1, attributes={"result": "success", "owner": self.owner})
            logger.info("ship_placed", extra={**placement, "ship_id": ship_id})
            return ship_id

    def receive_attack(self, row: int, col: int) -> bool:
        """Register an attack on this board; return True on a hit."""
        with tracer.start_as_current_span("board.receive_attack") as span:
            span.set_attribute("shot.row", row)
            span.set_attribute("shot.col", col)
            span.set_attribute("board.owner", self.owner)
            if not self.is_valid_coordinate(row, col):
                logger.error(
                    "shot_out_of_bounds",
                    extra={"row": row, "col": col, "owner": self.owner},
                )
                raise InvalidCoordinateError("Coordinates must be valid.")
            cell = self._grid[row][col]
            if cell.hit:
                logger.error(
                    "shot_duplicate",
                    extra={"row": row, "col": col, "owner": self.owner},
                )
                raise AlreadyAttackedError("Position already attacked!")

            self._grid[row][col] = replace(cell, hit=True)

            if cell.content is None:
                span.set_attribute("shot.outcome", "miss")
                SHOT_COUNTER.add(1, attributes={"outcome": "miss", "owner": self.owner})
                logger.info("shot_miss", extra={"row": row, "col": col, "owner": self.owner})
                return False

            ship = self._ships[cell.content]
            ship.hit()
            span.set_attribute("shot.outcome", "hit")
            span.set_attribute("ship.sunk", ship.is_sunk())
            SHOT_COUNTER.add(1, attributes={"outcome": "hit", "owner": self.owner})
            logger.info(
                "shot_hit",
                extra={
                    "row": row,
                    "col": col,
                    "ship_id": cell.content,
                    "sunk": ship.is_sunk(),
                    "owner": self.owner,
                },
            )
            return True

    def all_sunk(self) -> bool:
        """Check whether every placed ship has been sunk."""
        return all(ship.is_sunk() for ship in self._ships.values())

    def get_board(self) -> Grid:
        """Return a read-only snapshot of the grid."""
        return tuple(tuple(row) for row in self._grid)

    def get_ships(self) -> dict[ShipId, Ship]:
        """Return copies of the registered ships keyed by identifier, in placement order."""
        return {ship_id: copy(ship) for ship_id, ship in self._ships.items()}

    def place_randomly(self, sizes: Iterable[int], rng: random.Random) -> list[ShipId]:
        """Place one ship per size at random free positions."""
        with tracer.start_as_current_span("board.place_randomly") as span:
            span.set_attribute("board.owner", self.owner)
            placed: list[ShipId] = []
            for size in sizes:
                attempts = 0
                while True:
                    attempts += 1
                    row = rng.randrange(self.size)
                    col = rng.randrange(self.size)
                    vertical = rng.random() > 0.5
                    if self.enough_place(size, row, col, vertical):
                        placed.append(self.place_ship(size, row, col, vertical))
                        break
                logger.debug(
                    "random_ship_placed",
                    extra={"size": size, "attempts": attempts, "owner": self.owner},
                )
            return placed

    def _reject_placement(self, reason: str, placement: dict[str, object]) -> None:
        PLACEMENT_COUNTER.add(1, attributes={"result": "failed", "owner": self.owner})
        logger.warning("ship_placement_failed", extra={**placement, "reason": reason})


def _span(size: int, row: int, col: int, vertical: bool) -> list[tuple[int, int]]:
    if vertical:
        return [(row + offset, col) for offset in range(size)]
    return [(row, col + offset) for offset in range(size)]
