"""Human-versus-computer game controller."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from seabattle.ai.targeting import IndexChooser
from seabattle.telemetry import get_meter, get_tracer

from .board import Grid, ShipId
from .player import Player, Shot

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")
meter = get_meter("seabattle.engine.game")

MOVE_COUNTER = meter.create_counter(
    "seabattle_engine_moves",
    unit="1",
    description="Number of moves made in BattleshipGame",
)


@dataclass(frozen=True)
class FleetEntry:
    """A ship every player must deploy."""

    name: str
    size: int


FLEET: tuple[FleetEntry, ...] = (
    FleetEntry("Carrier", 5),
    FleetEntry("Battleship", 4),
    FleetEntry("Cruiser", 3),
    FleetEntry("Submarine", 3),
    FleetEntry("Destroyer", 2),
)


class GamePhase(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Side(Enum):
    """The two seats at the table."""

    HUMAN = "human"
    COMPUTER = "computer"

    def opponent(self) -> Side:
        """Return the opposing side."""
        return Side.COMPUTER if self is Side.HUMAN else Side.HUMAN


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the current game."""

    phase: GamePhase
    current_side: Side
    winner: Side | None
    boards: dict[Side, Grid]


class BattleshipGame:
    """Sequences setup and alternating turns between a human and the computer."""

    def __init__(self, rng_seed: int | None = None, choose_index: IndexChooser | None = None) -> None:
        self._rng_seed = rng_seed
        self._choose_index = choose_index
        self._rng = random.Random(rng_seed)
        self._new_match()

    def _new_match(self) -> None:
        self.players: dict[Side, Player] = {
            Side.HUMAN: Player(owner=Side.HUMAN.value),
            Side.COMPUTER: Player(
                owner=Side.COMPUTER.value,
                rng_seed=self._rng_seed,
                choose_index=self._choose_index,
            ),
        }
        self.phase = GamePhase.SETUP
        self.current_side = Side.HUMAN
        self.winner: Side | None = None
        self._human_fleet: list[FleetEntry] = list(FLEET)

    def pending_ship(self) -> FleetEntry | None:
        """Return the next ship the human still has to place."""
        return self._human_fleet[0] if self._human_fleet else None

    def validate_placement(self, size: int, row: int, col: int, vertical: bool = False) -> bool:
        """Check a prospective placement on the human board."""
        return self.players[Side.HUMAN].board.enough_place(size, row, col, vertical)

    def place_next_ship(self, row: int, col: int, vertical: bool = False) -> ShipId:
        """Place the next pending human ship at (row, col)."""
        if self.phase is not GamePhase.SETUP:
            raise RuntimeError("Ships can only be placed during setup.")
        entry = self.pending_ship()
        if entry is None:
            raise RuntimeError("The whole fleet has already been placed.")
        ship_id = self.players[Side.HUMAN].board.place_ship(entry.size, row, col, vertical)
        self._human_fleet.pop(0)
        logger.info("fleet_ship_placed", extra={"ship_name": entry.name, "ship_id": ship_id})
        return ship_id

    def auto_place(self, side: Side) -> None:
        """Randomly deploy the remaining fleet for ``side``."""
        if self.phase is not GamePhase.SETUP:
            raise RuntimeError("Ships can only be placed during setup.")
        board = self.players[side].board
        if side is Side.HUMAN:
            entries, self._human_fleet = self._human_fleet, []
        else:
            entries = list(FLEET)
        board.place_randomly([entry.size for entry in entries], self._rng)
        logger.debug("game_random_placement", extra={"board_owner": side.value})

    def start(self) -> None:
        """Deploy the computer fleet and hand the first move to the human."""
        with tracer.start_as_current_span("game.start"):
            if self.phase is not GamePhase.SETUP:
                raise RuntimeError("Game has already started.")
            if self._human_fleet:
                raise RuntimeError("Human fleet is not fully deployed.")
            if not self.players[Side.COMPUTER].board.get_ships():
                self.auto_place(Side.COMPUTER)
            self.phase = GamePhase.IN_PROGRESS
            self.current_side = Side.HUMAN
            self.winner = None
            logger.info(
                "game_started",
                extra={"phase": self.phase.value, "current_side": self.current_side.value},
            )

    def human_attack(self, row: int, col: int) -> bool:
        """Apply the human's shot at (row, col)."""
        with tracer.start_as_current_span("game.human_attack") as span:
            span.set_attribute("row", row)
            span.set_attribute("col", col)
            self._check_turn(Side.HUMAN)
            hit = self.players[Side.HUMAN].attack(self.players[Side.COMPUTER], row, col)
            self._end_turn(Side.HUMAN, hit)
            return hit

    def computer_attack(self) -> Shot:
        """Let the computer take its shot."""
        with tracer.start_as_current_span("game.computer_attack") as span:
            self._check_turn(Side.COMPUTER)
            shot = self.players[Side.COMPUTER].auto_attack(self.players[Side.HUMAN])
            span.set_attribute("row", shot.coord.row)
            span.set_attribute("col", shot.coord.col)
            self._end_turn(Side.COMPUTER, shot.hit)
            return shot

    def reset(self) -> None:
        """Discard the current match and return to setup."""
        self._new_match()
        logger.info("game_reset")

    def get_state(self) -> GameState:
        """Return an immutable view of the current match."""
        return GameState(
            phase=self.phase,
            current_side=self.current_side,
            winner=self.winner,
            boards={side: player.board.get_board() for side, player in self.players.items()},
        )

    def _check_turn(self, side: Side) -> None:
        if self.phase is not GamePhase.IN_PROGRESS:
            logger.error(
                "move_rejected_game_not_in_progress",
                extra={"side": side.value, "phase": self.phase.value},
            )
            raise RuntimeError("Game is not in progress.")
        if side is not self.current_side:
            logger.error(
                "move_rejected_wrong_side",
                extra={"side": side.value, "current": self.current_side.value},
            )
            raise RuntimeError("It is not this side's turn.")

    def _end_turn(self, side: Side, hit: bool) -> None:
        MOVE_COUNTER.add(1, attributes={"result": "hit" if hit else "miss", "side": side.value})
        if self.players[side.opponent()].board.all_sunk():
            self.winner = side
            self.phase = GamePhase.FINISHED
            logger.info("game_finished", extra={"winner": side.value})
        else:
            self.current_side = side.opponent()
