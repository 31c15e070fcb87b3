"""Game state machine.

`GameState` is an immutable value. Every transition (`apply_move`,
`choose_promotion`, `on_time_expired`) returns a new state or raises,
leaving the state it was given untouched:

    AwaitingMove -> validate/apply -> [AwaitingPromotionChoice]
                 -> result check -> Ongoing (side flips) | Checkmate | Stalemate

`TimeOut` is entered only through `on_time_expired`, driven by the UI clock.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace

from chessgame import applier, movegen, selector, validator
from chessgame.board import Board
from chessgame.difficulty import get_profile
from chessgame.errors import GameOverError, IllegalPromotionChoiceError, InvalidMoveError
from chessgame.types import (
    PROMOTION_KINDS,
    CastlingRights,
    Color,
    GameResult,
    Move,
    MoveContext,
    PendingPromotion,
    Piece,
    PieceKind,
    ResultKind,
    Square,
)

logger = logging.getLogger(__name__)

SquareLike = Square | tuple[int, int] | str


@dataclass(frozen=True)
class CapturedPieces:
    """Pieces taken so far, keyed by the color that took them."""
    white: tuple[Piece, ...] = ()
    black: tuple[Piece, ...] = ()

    def for_color(self, color: Color) -> tuple[Piece, ...]:
        return self.white if color is Color.WHITE else self.black

    def add(self, capturer: Color, piece: Piece) -> CapturedPieces:
        if capturer is Color.WHITE:
            return replace(self, white=self.white + (piece,))
        return replace(self, black=self.black + (piece,))


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_target: Square | None = None
    move_history: tuple[Move, ...] = ()
    captured_pieces: CapturedPieces = field(default_factory=CapturedPieces)
    pending_promotion: PendingPromotion | None = None
    result: GameResult = field(default_factory=GameResult)

    @property
    def context(self) -> MoveContext:
        return self.context_for(self.side_to_move)

    def context_for(self, side: Color) -> MoveContext:
        # The en-passant target only belongs to the side on move.
        en_passant = self.en_passant_target if side is self.side_to_move else None
        return MoveContext(side, self.castling_rights, en_passant)

    @property
    def is_terminal(self) -> bool:
        return self.result.is_terminal

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1] if self.move_history else None


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def to_square(value: SquareLike) -> Square:
    """Accept a Square, a (row, col) pair, or an algebraic name like 'e4'.

    Raises ValueError for coordinates off the board.
    """
    if isinstance(value, str):
        return Square.parse(value)
    row, col = value
    square = Square(int(row), int(col))
    if not (0 <= square.row <= 7 and 0 <= square.col <= 7):
        raise ValueError(f"Square out of bounds: {value!r}")
    return square


def to_color(value: Color | str) -> Color:
    if isinstance(value, Color):
        return value
    return Color(value.strip().lower())


def _promotion_kind(choice: PieceKind | str) -> PieceKind:
    if isinstance(choice, PieceKind):
        kind = choice
    else:
        try:
            kind = PieceKind.parse(str(choice))
        except ValueError as e:
            raise IllegalPromotionChoiceError(f"Unrecognized promotion piece: {choice!r}") from e
    if kind not in PROMOTION_KINDS:
        raise IllegalPromotionChoiceError(f"Cannot promote to {kind.value}")
    return kind


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def initialize() -> GameState:
    """Standard starting position, White to move."""
    return GameState()


def start_from(
    board: Board,
    side_to_move: Color = Color.WHITE,
    castling_rights: CastlingRights | None = None,
    en_passant_target: Square | None = None,
) -> GameState:
    """Build a state from an arbitrary position and classify it.

    Each side must have exactly one king.
    """
    for color in Color:
        if board.count(Piece(color, PieceKind.KING)) != 1:
            raise ValueError(f"{color.value} must have exactly one king")
    state = GameState(
        board=board,
        side_to_move=side_to_move,
        castling_rights=castling_rights if castling_rights is not None else CastlingRights.none(),
        en_passant_target=en_passant_target,
    )
    return replace(state, result=movegen.classify(board, state.context))


def legal_moves(state: GameState, side: Color | str | None = None) -> list[Move]:
    side = state.side_to_move if side is None else to_color(side)
    return movegen.generate_moves(state.board, state.context_for(side))


def legal_destinations(state: GameState, from_square: SquareLike) -> list[Square]:
    """Destinations to highlight for the piece on from_square."""
    if state.is_terminal or state.pending_promotion is not None:
        return []
    return movegen.destinations_from(state.board, state.context, to_square(from_square))


def is_in_check(state: GameState, side: Color | str) -> bool:
    return validator.is_in_check(state.board, to_color(side))


def game_result(state: GameState) -> GameResult:
    return state.result


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _finalize(
    state: GameState, from_square: Square, to_sq: Square, promotion: PieceKind | None
) -> GameState:
    mover = state.side_to_move
    opponent = mover.opponent
    transition = applier.apply_move(state.board, from_square, to_sq, state.context, promotion)

    next_context = MoveContext(opponent, transition.castling_rights, transition.en_passant_target)
    result = movegen.classify(transition.board, next_context)
    move = replace(
        transition.move,
        is_check=validator.is_in_check(transition.board, opponent),
        is_checkmate=result.kind is ResultKind.CHECKMATE,
    )

    captured = state.captured_pieces
    if move.captured is not None:
        captured = captured.add(mover, move.captured)

    if result.is_terminal:
        logger.info(
            "Game over after %s: %s (winner=%s)",
            move.uci, result.kind.value, result.winner.value if result.winner else None,
        )

    return GameState(
        board=transition.board,
        side_to_move=opponent,
        castling_rights=transition.castling_rights,
        en_passant_target=transition.en_passant_target,
        move_history=state.move_history + (move,),
        captured_pieces=captured,
        pending_promotion=None,
        result=result,
    )


def apply_move(
    state: GameState,
    from_square: SquareLike,
    to_sq: SquareLike,
    promotion: PieceKind | str | None = None,
) -> GameState:
    """Validate and play a move.

    A pawn reaching the last rank without a promotion choice returns a state
    with `pending_promotion` set and the board unchanged; finish it with
    `choose_promotion`. A promotion choice on a non-promoting move is ignored.

    Raises InvalidMoveError (GameOverError once terminal) or
    IllegalPromotionChoiceError; the given state is never modified.
    """
    if state.is_terminal:
        raise GameOverError(f"Game is over: {state.result.kind.value}")
    try:
        origin, target = to_square(from_square), to_square(to_sq)
    except (TypeError, ValueError) as e:
        raise InvalidMoveError(f"Invalid square in move {from_square!r} -> {to_sq!r}") from e

    pending = state.pending_promotion
    if pending is not None:
        if (origin, target) != (pending.from_square, pending.to_square):
            raise InvalidMoveError(
                f"Promotion on {pending.to_square.name} is waiting for a piece choice"
            )
        if promotion is None:
            raise IllegalPromotionChoiceError("A promotion piece is required")
        return choose_promotion(state, promotion)

    if not validator.is_legal(state.board, origin, target, state.context):
        logger.debug("Illegal move %s%s for %s", origin.name, target.name, state.side_to_move.value)
        raise InvalidMoveError(f"Illegal move: {origin.name}{target.name}")

    piece = state.board.piece_at(origin)
    if not applier.reaches_last_rank(piece, target):
        return _finalize(state, origin, target, None)
    if promotion is None:
        return replace(state, pending_promotion=PendingPromotion(origin, target, piece))
    return _finalize(state, origin, target, _promotion_kind(promotion))


def choose_promotion(state: GameState, piece: PieceKind | str) -> GameState:
    """Complete a pending promotion. Invalid choices keep the promotion pending."""
    if state.is_terminal:
        raise GameOverError(f"Game is over: {state.result.kind.value}")
    pending = state.pending_promotion
    if pending is None:
        raise InvalidMoveError("No promotion is pending")
    kind = _promotion_kind(piece)
    return _finalize(state, pending.from_square, pending.to_square, kind)


def on_time_expired(state: GameState, side: Color | str) -> GameState:
    """The side's clock ran out; the opponent wins. No-op once terminal."""
    if state.is_terminal:
        return state
    loser = to_color(side)
    logger.info("%s ran out of time", loser.value)
    return replace(state, result=GameResult.timeout(loser.opponent))


# ---------------------------------------------------------------------------
# Computer opponent
# ---------------------------------------------------------------------------


def computer_move(
    state: GameState,
    rng: random.Random | None = None,
    difficulty: str | None = None,
    candidate_pool: int | None = None,
) -> selector.ComputerMoveResult:
    if state.is_terminal:
        raise GameOverError(f"Game is over: {state.result.kind.value}")
    if state.pending_promotion is not None:
        raise InvalidMoveError("A promotion choice is pending")
    result = selector.choose_move(
        state.board,
        state.context,
        state.move_history,
        rng=rng,
        profile=get_profile(difficulty),
        candidate_pool=candidate_pool,
    )
    if result is None:
        raise GameOverError("No legal moves available")
    return result


def select_computer_move(
    state: GameState,
    rng: random.Random | None = None,
    difficulty: str | None = None,
) -> Move:
    """The move the computer plays for the side to move.

    Promotions always carry promoted_to=QUEEN.
    """
    return computer_move(state, rng=rng, difficulty=difficulty).move


def play_computer_move(
    state: GameState,
    rng: random.Random | None = None,
    difficulty: str | None = None,
    candidate_pool: int | None = None,
) -> tuple[GameState, Move]:
    """Select and apply the computer's move. Returns (new state, recorded move)."""
    chosen = computer_move(state, rng=rng, difficulty=difficulty, candidate_pool=candidate_pool).move
    next_state = apply_move(state, chosen.from_square, chosen.to_square, chosen.promoted_to)
    return next_state, next_state.move_history[-1]
