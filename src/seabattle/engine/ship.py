"""Ship domain model for the sea battle engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import MissingLengthError


@dataclass
class Ship:
    """A ship of fixed length that accumulates hits."""

    length: int = 0
    hit_count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not self.length:
            raise MissingLengthError("Ship length must be provided.")

    def hit(self) -> int:
        """Register one more hit and return the running total.

        The counter is not clamped at ``length``.
        """
        self.hit_count += 1
        return self.hit_count

    def is_sunk(self) -> bool:
        """Return True once the ship has taken at least ``length`` hits."""
        return self.hit_count >= self.length
