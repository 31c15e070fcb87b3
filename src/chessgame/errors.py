"""Exceptions raised by the rules engine.

Every rejection is recoverable: the state passed in is never modified, so
callers keep their previous `GameState` and re-prompt.
"""


class ChessEngineError(Exception):
    """Base class for all engine errors."""


class InvalidMoveError(ChessEngineError, ValueError):
    """The requested move fails validation for the current state."""


class GameOverError(InvalidMoveError):
    """A move was requested after the game reached a terminal result."""


class IllegalPromotionChoiceError(ChessEngineError, ValueError):
    """Promotion to a king, a pawn, or an unrecognized piece kind."""


class SnapshotError(ChessEngineError, ValueError):
    """A persisted snapshot could not be read back into a GameState."""
