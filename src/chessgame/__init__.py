"""Chess rules engine for the mobile chess game.

Pure functions over immutable values: the UI holds a `GameState`, issues
commands, and receives a new `GameState` back. No I/O happens here.
"""

from chessgame.board import Board
from chessgame.errors import (
    ChessEngineError,
    GameOverError,
    IllegalPromotionChoiceError,
    InvalidMoveError,
    SnapshotError,
)
from chessgame.evaluation import evaluate
from chessgame.game import (
    CapturedPieces,
    GameState,
    apply_move,
    choose_promotion,
    computer_move,
    game_result,
    initialize,
    is_in_check,
    legal_destinations,
    legal_moves,
    on_time_expired,
    play_computer_move,
    select_computer_move,
    start_from,
)
from chessgame.serialization import deserialize, dumps, loads, serialize
from chessgame.types import (
    CastlingRights,
    Color,
    GameResult,
    Move,
    MoveContext,
    PendingPromotion,
    Piece,
    PieceKind,
    ResultKind,
    SideCastlingRights,
    Square,
)

__all__ = [
    "Board",
    "CapturedPieces",
    "CastlingRights",
    "ChessEngineError",
    "Color",
    "GameOverError",
    "GameResult",
    "GameState",
    "IllegalPromotionChoiceError",
    "InvalidMoveError",
    "Move",
    "MoveContext",
    "PendingPromotion",
    "Piece",
    "PieceKind",
    "ResultKind",
    "SideCastlingRights",
    "SnapshotError",
    "Square",
    "apply_move",
    "choose_promotion",
    "computer_move",
    "deserialize",
    "dumps",
    "evaluate",
    "game_result",
    "initialize",
    "is_in_check",
    "legal_destinations",
    "legal_moves",
    "loads",
    "on_time_expired",
    "play_computer_move",
    "select_computer_move",
    "serialize",
    "start_from",
]
