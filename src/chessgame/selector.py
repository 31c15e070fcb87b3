"""Computer opponent move selection.

Single-ply heuristic: every legal move is simulated and scored with the
static evaluator plus tactical bonuses, then one of the best few is picked
at random so the opponent does not play the same game twice.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, replace

from chessgame.applier import apply_move
from chessgame.attacks import attacked_pieces, is_attacked
from chessgame.board import Board
from chessgame.constants import CENTER_SQUARES, PIECE_VALUES
from chessgame.difficulty import DifficultyProfile, get_profile
from chessgame.evaluation import evaluate
from chessgame.movegen import generate_moves
from chessgame.types import Move, MoveContext, PieceKind
from chessgame.validator import is_in_check

logger = logging.getLogger(__name__)

CAPTURE_WEIGHT = 2.0
OVERCOMMIT_PENALTY = 0.5     # per point the capturer outvalues its victim
SAFE_CAPTURE_WEIGHT = 0.5    # extra for captures that cannot be retaken at once
CHECK_BONUS = 2.0
CENTER_BONUS = 0.5
FORK_BONUS = 3.0
CASTLING_BONUS = 2.0
REPEAT_PENALTY = 0.5
EARLY_GAME_MOVES = 10

AI_PROMOTION = PieceKind.QUEEN


@dataclass
class ScoredMove:
    move: Move
    score: float


@dataclass
class ComputerMoveResult:
    move: Move
    score: float
    candidates: list[ScoredMove]   # the pool the move was drawn from, best first
    difficulty: str


def times_piece_moved(history: Sequence[Move], move: Move) -> int:
    """How often the piece now standing on move.from_square has moved.

    Walks the history backwards following the piece from square to square.
    """
    square = move.from_square
    count = 0
    for past in reversed(history):
        if past.piece.color is not move.piece.color:
            continue
        if past.to_square == square:
            count += 1
            square = past.from_square
    return count


def score_move(
    board: Board,
    context: MoveContext,
    move: Move,
    history: Sequence[Move] = (),
) -> float:
    side = context.side_to_move
    opponent = side.opponent
    promotion = AI_PROMOTION if move.is_promotion else None
    transition = apply_move(board, move.from_square, move.to_square, context, promotion)
    after = transition.board

    after_context = MoveContext(side_to_move=side, castling_rights=transition.castling_rights)
    score = evaluate(after, side, after_context)

    if move.captured is not None:
        captured_value = PIECE_VALUES[move.captured.kind]
        mover_value = PIECE_VALUES[move.piece.kind]
        score += CAPTURE_WEIGHT * captured_value
        score -= OVERCOMMIT_PENALTY * max(0, mover_value - captured_value)
        if not is_attacked(after, move.to_square, opponent):
            score += SAFE_CAPTURE_WEIGHT * captured_value

    if is_in_check(after, opponent):
        score += CHECK_BONUS
    if move.to_square in CENTER_SQUARES:
        score += CENTER_BONUS
    if len(attacked_pieces(after, move.to_square)) >= 2:
        score += FORK_BONUS
    if move.is_castling:
        score += CASTLING_BONUS
    if len(history) < EARLY_GAME_MOVES:
        score -= REPEAT_PENALTY * times_piece_moved(history, move)
    return score


def rank_moves(
    board: Board, context: MoveContext, history: Sequence[Move] = ()
) -> list[ScoredMove]:
    """All legal moves scored, best first. Ties keep generation order."""
    scored = [
        ScoredMove(move, score_move(board, context, move, history))
        for move in generate_moves(board, context)
    ]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored


def choose_move(
    board: Board,
    context: MoveContext,
    history: Sequence[Move] = (),
    rng: random.Random | None = None,
    profile: DifficultyProfile | None = None,
    candidate_pool: int | None = None,
) -> ComputerMoveResult | None:
    """Pick uniformly among the top-scored moves. None when no move exists."""
    profile = profile or get_profile(None)
    rng = rng or random.Random()
    pool_size = max(1, candidate_pool or profile.candidate_pool)

    ranked = rank_moves(board, context, history)
    if not ranked:
        return None

    pool = ranked[:pool_size]
    chosen = rng.choice(pool)
    move = chosen.move
    if move.is_promotion:
        move = replace(move, promoted_to=AI_PROMOTION)

    logger.debug(
        "Computer (%s) picked %s score=%.2f from %s",
        profile.name, move.uci, chosen.score,
        ", ".join(f"{s.move.uci}:{s.score:.2f}" for s in pool),
    )
    return ComputerMoveResult(
        move=move, score=chosen.score, candidates=pool, difficulty=profile.name
    )
