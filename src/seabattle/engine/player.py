"""Players own a board and fire at their opponent's."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from seabattle.ai.targeting import IndexChooser, TargetingAI
from seabattle.telemetry import get_tracer

from .board import Board, Coordinate, ShipId
from .errors import AlreadyAttackedError, InvalidCoordinateError, TargetingError

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.player")


@dataclass(frozen=True)
class Shot:
    """Outcome of one autonomous attack."""

    coord: Coordinate
    hit: bool
    ship_id: ShipId | None = None
    sunk: bool = False


class Player:
    """A participant with its own board and an optional autonomous targeting engine."""

    def __init__(
        self,
        owner: str = "player",
        rng_seed: int | None = None,
        choose_index: IndexChooser | None = None,
    ) -> None:
        self.owner = owner
        self.board = Board(owner=owner)
        self.targeting = TargetingAI(choose_index=choose_index, rng_seed=rng_seed)

    def attack(self, opponent: Player, row: int, col: int) -> bool:
        """Fire at ``(row, col)`` on the opponent's board."""
        return opponent.board.receive_attack(row, col)

    def auto_attack(self, opponent: Player) -> Shot:
        """Let the targeting engine take one shot at the opponent."""
        with tracer.start_as_current_span("player.auto_attack") as span:
            span.set_attribute("player.owner", self.owner)
            span.set_attribute("targeting.behavior", self.targeting.state.behavior.value)
            target_board = opponent.board
            coord = self.targeting.select(target_board)
            try:
                hit = self.attack(opponent, coord.row, coord.col)
            except (AlreadyAttackedError, InvalidCoordinateError) as exc:
                span.record_exception(exc)
                raise TargetingError(f"Targeting engine chose an illegal cell {coord}.") from exc
            ship_id = self.targeting.record(target_board, coord, hit)
            sunk = ship_id is not None and target_board.get_ships()[ship_id].is_sunk()

            span.set_attribute("shot.row", coord.row)
            span.set_attribute("shot.col", coord.col)
            span.set_attribute("shot.outcome", "hit" if hit else "miss")
            logger.debug(
                "auto_attack",
                extra={
                    "owner": self.owner,
                    "row": coord.row,
                    "col": coord.col,
                    "hit": hit,
                    "sunk": sunk,
                    "behavior": self.targeting.state.behavior.value,
                },
            )
            return Shot(coord=coord, hit=hit, ship_id=ship_id, sunk=sunk)
