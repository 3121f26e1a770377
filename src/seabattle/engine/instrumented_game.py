"""Game controller with telemetry hooks."""

from __future__ import annotations

import time

from seabattle.engine.errors import SeaBattleError
from seabattle.engine.game import BattleshipGame, GamePhase, Side
from seabattle.engine.player import Shot
from seabattle.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedBattleshipGame(BattleshipGame):
    """Wraps BattleshipGame with tracing, metrics, and logging."""

    def __init__(self, *args, **kwargs) -> None:
        self._logger = get_logger("seabattle.engine")
        self._tracer = get_tracer("seabattle.engine")
        self._game_span_cm = None
        self._game_span = None
        self._game_start_time: float | None = None
        self._game_id_counter = 0
        super().__init__(*args, **kwargs)

    def start(self) -> None:
        with self._tracer.start_as_current_span("seabattle.engine.start") as span:
            self._logger.info("Game start requested")
            super().start()
            human_ships = len(self.players[Side.HUMAN].board.get_ships())
            computer_ships = len(self.players[Side.COMPUTER].board.get_ships())
            span.set_attribute("human_ships", human_ships)
            span.set_attribute("computer_ships", computer_ships)
            record_game_metric(
                "seabattle_game_setup_total",
                1,
                {"human_ships": human_ships, "computer_ships": computer_ships},
            )
        self._start_game_span()

    def human_attack(self, row: int, col: int) -> bool:
        with self._tracer.start_as_current_span("seabattle.engine.human_attack") as span:
            span.set_attribute("game.id", self._game_id_counter)
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)
            try:
                hit = super().human_attack(row, col)
            except (SeaBattleError, RuntimeError) as exc:
                record_game_metric(
                    "seabattle_game_invalid_moves_total",
                    1,
                    {"side": Side.HUMAN.value, "reason": type(exc).__name__},
                )
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error("Invalid move from human at (%d,%d): %s", row, col, exc)
                raise
            self._after_move(span, Side.HUMAN, row, col, hit)
            return hit

    def computer_attack(self) -> Shot:
        with self._tracer.start_as_current_span("seabattle.engine.computer_attack") as span:
            span.set_attribute("game.id", self._game_id_counter)
            shot = super().computer_attack()
            span.set_attribute("sunk", shot.sunk)
            self._after_move(span, Side.COMPUTER, shot.coord.row, shot.coord.col, shot.hit)
            return shot

    def reset(self) -> None:
        self._close_game_span()
        super().reset()

    def _after_move(self, span, side: Side, row: int, col: int, hit: bool) -> None:
        span.set_attribute("hit", hit)
        record_game_metric("seabattle_shots_total", 1, {"side": side.value})
        record_game_metric(
            "seabattle_shots_by_result_total",
            1,
            {"side": side.value, "result": "hit" if hit else "miss"},
        )
        self._logger.info(
            "move side=%s coord=(%d,%d) outcome=%s",
            side.value,
            row,
            col,
            "hit" if hit else "miss",
        )
        if self.phase is GamePhase.FINISHED and self.winner:
            span.set_attribute("winner", self.winner.value)
            self._finish_game()

    def _start_game_span(self) -> None:
        self._close_game_span()
        self._game_start_time = time.perf_counter()
        self._game_id_counter += 1
        self._game_span_cm = self._tracer.start_as_current_span("seabattle.engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("game.id", self._game_id_counter)

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0
        total_turns = sum(
            cell.hit for grid in self.get_state().boards.values() for row in grid for cell in row
        )
        winner = self.winner.value if self.winner else "unknown"

        record_game_metric("seabattle_game_completed_total", 1, {"winner": winner})
        record_game_metric("seabattle_game_duration_seconds", duration, {"winner": winner})

        with self._tracer.start_as_current_span("seabattle.engine.game_complete") as span:
            span.set_attribute("game.id", self._game_id_counter)
            span.set_attribute("winner", winner)
            span.set_attribute("turns", total_turns)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("winner", winner)
            self._game_span.set_attribute("turns", total_turns)
            self._game_span.set_attribute("duration_ms", duration * 1000)

        self._logger.info("Game finished. Winner=%s turns=%d duration_s=%.3f", winner, total_turns, duration)
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
