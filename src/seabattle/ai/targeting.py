"""Hunt/target/destroy targeting for the computer player.

The engine only sees hit/miss feedback and the ship identifier revealed by a
hit. It cycles through three behaviours:

* ``SEARCH`` fires at any cell that has not been attacked yet.
* ``TARGET`` probes the four neighbours of the first hit on the focused ship.
* ``DESTROY`` walks along the axis inferred from two or more hits, first at
  both ends and, once a miss reveals which end is closed, in one direction.

Ships hit while another ship is being pursued are queued and handled in
first-hit order once the focused ship sinks.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from seabattle.engine.board import Board, Coordinate, ShipId, in_bounds
from seabattle.engine.errors import TargetingError
from seabattle.telemetry import get_meter

logger = logging.getLogger(__name__)
meter = get_meter("seabattle.ai.targeting")

DECISION_COUNTER = meter.create_counter(
    "seabattle_ai_targeting_decisions",
    unit="1",
    description="Shots chosen by the targeting engine, by behaviour",
)

IndexChooser = Callable[[int], int]


class Behavior(Enum):
    """Phase of the targeting state machine."""

    SEARCH = "search"
    TARGET = "target"
    DESTROY = "destroy"


class Axis(Enum):
    """Line a partially hit ship lies along."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Orientation(Enum):
    """Direction in which an axis run is extended."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class TargetingState:
    """Mutable memory of the targeting engine."""

    behavior: Behavior = Behavior.SEARCH
    ships_hit: deque[ShipId] = field(default_factory=deque)
    hits: dict[ShipId, list[Coordinate]] = field(default_factory=dict)
    potential_hits: list[Coordinate] = field(default_factory=list)
    axis: Axis | None = None
    focus: ShipId | None = None
    orientation: Orientation | None = None


class TargetingAI:
    """Chooses shots against an opponent board and learns from their outcome."""

    def __init__(self, choose_index: IndexChooser | None = None, rng_seed: int | None = None) -> None:
        if choose_index is None:
            choose_index = random.Random(rng_seed).randrange
        self._choose_index = choose_index
        self._state = TargetingState()

    @property
    def state(self) -> TargetingState:
        return self._state

    def candidates(self, board: Board) -> list[Coordinate]:
        """Return the cells the current behaviour allows shooting at."""
        grid = board.get_board()
        state = self._state
        if state.behavior is Behavior.SEARCH:
            return [
                Coordinate(row, col)
                for row, cells in enumerate(grid)
                for col, cell in enumerate(cells)
                if not cell.hit
            ]

        def open_cells(coords: list[Coordinate]) -> list[Coordinate]:
            return [
                coord
                for coord in coords
                if in_bounds(coord.row, coord.col) and not grid[coord.row][coord.col].hit
            ]

        hits = self._focus_hits()
        first, last = hits[0], hits[-1]

        if state.behavior is Behavior.TARGET:
            return open_cells(
                [
                    Coordinate(first.row - 1, first.col),
                    Coordinate(first.row + 1, first.col),
                    Coordinate(first.row, first.col - 1),
                    Coordinate(first.row, first.col + 1),
                ]
            )

        gaps = open_cells(self._gap_cells(hits))
        if gaps:
            return gaps

        if state.orientation is None:
            if state.axis is Axis.HORIZONTAL:
                ends = [Coordinate(first.row, first.col - 1), Coordinate(last.row, last.col + 1)]
            else:
                ends = [Coordinate(first.row - 1, first.col), Coordinate(last.row + 1, last.col)]
            return open_cells(ends)

        step = {
            Orientation.UP: Coordinate(first.row - 1, first.col),
            Orientation.DOWN: Coordinate(last.row + 1, first.col),
            Orientation.LEFT: Coordinate(first.row, first.col - 1),
            Orientation.RIGHT: Coordinate(first.row, last.col + 1),
        }
        return open_cells([step[state.orientation]])

    def select(self, board: Board) -> Coordinate:
        """Pick the next shot uniformly among the current candidates."""
        state = self._state
        state.potential_hits = self.candidates(board)
        if not state.potential_hits:
            raise TargetingError(
                f"No candidate cells in {state.behavior.value} behaviour (focus={state.focus})."
            )
        index = self._choose_index(len(state.potential_hits))
        if not 0 <= index < len(state.potential_hits):
            raise TargetingError(
                f"Index chooser returned {index} for {len(state.potential_hits)} candidates."
            )
        DECISION_COUNTER.add(1, attributes={"behavior": state.behavior.value})
        return state.potential_hits[index]

    def record(self, board: Board, coord: Coordinate, hit: bool) -> ShipId | None:
        """Update the state after a shot at ``coord``; return the ship hit, if any."""
        state = self._state
        ship_id: ShipId | None = None
        if hit:
            ship_id = board.cell(coord.row, coord.col).content
            if ship_id is None:
                raise TargetingError(f"Hit reported at {coord} but the cell holds no ship.")
            self._track_hit(ship_id, coord)
            if board.get_ships()[ship_id].is_sunk():
                self._handle_sunk(ship_id)
            else:
                self._refresh_behavior()
        elif (
            state.behavior is Behavior.DESTROY
            and state.orientation is None
            and len(self._focus_hits()) > 2
        ):
            self._infer_orientation(coord)
        state.potential_hits = []
        return ship_id

    def reset(self) -> None:
        """Forget everything and go back to searching."""
        self._state = TargetingState()
        logger.debug("targeting_reset")

    def _focus_hits(self) -> list[Coordinate]:
        if self._state.focus is None:
            raise TargetingError("No ship is in focus.")
        return self._state.hits[self._state.focus]

    def _track_hit(self, ship_id: ShipId, coord: Coordinate) -> None:
        state = self._state
        if ship_id not in state.ships_hit:
            state.ships_hit.append(ship_id)
        hits = state.hits.setdefault(ship_id, [])
        hits.append(coord)
        if all(hit.row == hits[0].row for hit in hits):
            hits.sort(key=lambda hit: hit.col)
        else:
            hits.sort(key=lambda hit: hit.row)
        if state.focus is None:
            state.focus = state.ships_hit[0]

    def _handle_sunk(self, ship_id: ShipId) -> None:
        state = self._state
        state.ships_hit.remove(ship_id)
        state.hits.pop(ship_id, None)
        logger.debug("targeting_ship_sunk", extra={"ship_id": ship_id})
        if not state.ships_hit:
            self.reset()
            return
        if state.focus != state.ships_hit[0]:
            state.focus = state.ships_hit[0]
            state.axis = None
            state.orientation = None
            logger.debug("targeting_focus_changed", extra={"ship_id": state.focus})
        self._refresh_behavior()

    def _refresh_behavior(self) -> None:
        state = self._state
        hits = self._focus_hits()
        if len(hits) >= 2:
            state.behavior = Behavior.DESTROY
            state.axis = _axis_of(hits)
        else:
            state.behavior = Behavior.TARGET
            state.axis = None

    def _infer_orientation(self, missed: Coordinate) -> None:
        state = self._state
        hits = self._focus_hits()
        first, last = hits[0], hits[-1]
        if state.axis is Axis.VERTICAL:
            if missed.row > last.row:
                state.orientation = Orientation.UP
            elif missed.row < first.row:
                state.orientation = Orientation.DOWN
        elif state.axis is Axis.HORIZONTAL:
            if missed.col > last.col:
                state.orientation = Orientation.LEFT
            elif missed.col < first.col:
                state.orientation = Orientation.RIGHT
        if state.orientation is not None:
            logger.debug(
                "targeting_orientation_inferred",
                extra={"ship_id": state.focus, "orientation": state.orientation.value},
            )

    def _gap_cells(self, hits: list[Coordinate]) -> list[Coordinate]:
        first, last = hits[0], hits[-1]
        if self._state.axis is Axis.HORIZONTAL:
            taken = {hit.col for hit in hits}
            return [Coordinate(first.row, col) for col in range(first.col + 1, last.col) if col not in taken]
        taken = {hit.row for hit in hits}
        return [Coordinate(row, first.col) for row in range(first.row + 1, last.row) if row not in taken]


def _axis_of(hits: list[Coordinate]) -> Axis:
    first, last = hits[0], hits[-1]
    if first.row == last.row:
        return Axis.HORIZONTAL
    if first.col == last.col:
        return Axis.VERTICAL
    raise TargetingError(f"Hits {first} and {last} are not on a common line.")
