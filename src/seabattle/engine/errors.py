"""Exceptions raised by the sea battle engine."""

from __future__ import annotations


class SeaBattleError(Exception):
    """Base class for every engine error."""


class MissingLengthError(SeaBattleError, ValueError):
    """A ship was created without a length."""


class InvalidSizeError(SeaBattleError, ValueError):
    """A ship size outside the supported range was requested."""


class InvalidCoordinateError(SeaBattleError, ValueError):
    """A coordinate lies outside the board."""


class InsufficientSpaceError(SeaBattleError, ValueError):
    """A ship does not fit at the requested position."""


class AlreadyAttackedError(SeaBattleError, ValueError):
    """The targeted cell has already been attacked."""


class TargetingError(SeaBattleError, RuntimeError):
    """The targeting algorithm reached a state it cannot shoot from.

    This signals a defect in candidate selection rather than a legal game
    situation, so callers should let it propagate.
    """
