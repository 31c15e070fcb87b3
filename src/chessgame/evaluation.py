"""Static position evaluation.

Scores are in pawn units from one side's perspective: positive is good for
that side. The terms are material, piece-square placement, center
occupation, mobility and a bonus for a castled king.
"""

from __future__ import annotations

from dataclasses import dataclass

from chessgame.board import Board
from chessgame.constants import CENTER_SQUARES, PIECE_VALUES, piece_square_bonus
from chessgame.movegen import generate_moves
from chessgame.types import CastlingRights, Color, MoveContext, Piece, PieceKind, Square

__all__ = ["EvaluationBreakdown", "evaluate", "evaluate_breakdown", "is_castled"]

PIECE_SQUARE_WEIGHT = 0.1
CENTER_OCCUPANCY_WEIGHT = 0.2
MOBILITY_WEIGHT = 0.1
CASTLED_KING_BONUS = 0.5


@dataclass
class EvaluationBreakdown:
    material: float
    placement: float
    center: float
    mobility: float
    king_safety: float

    @property
    def total(self) -> float:
        return self.material + self.placement + self.center + self.mobility + self.king_safety


# King file -> file of the rook beside it after castling.
_CASTLED_ROOK_FILE = {6: 5, 2: 3}


def is_castled(board: Board, color: Color) -> bool:
    """King on g1/c1 (g8/c8) with its own rook on f1/d1 (f8/d8)."""
    king = board.king_square(color)
    if king is None or king.row != color.home_row or king.col not in _CASTLED_ROOK_FILE:
        return False
    rook_square = Square(king.row, _CASTLED_ROOK_FILE[king.col])
    return board.piece_at(rook_square) == Piece(color, PieceKind.ROOK)


def evaluate_breakdown(
    board: Board, side: Color, context: MoveContext | None = None
) -> EvaluationBreakdown:
    material = placement = center = 0.0
    for square, piece in board.pieces():
        sign = 1 if piece.color is side else -1
        material += sign * PIECE_VALUES[piece.kind]
        placement += sign * PIECE_SQUARE_WEIGHT * piece_square_bonus(piece, square)
        if square in CENTER_SQUARES:
            center += sign * CENTER_OCCUPANCY_WEIGHT

    # Mobility is counted for `side` as the mover, whoever is actually on move.
    if context is None or context.side_to_move is not side:
        context = MoveContext(side_to_move=side, castling_rights=CastlingRights.none())
    mobility = MOBILITY_WEIGHT * len(generate_moves(board, context))

    king_safety = CASTLED_KING_BONUS if is_castled(board, side) else 0.0
    return EvaluationBreakdown(material, placement, center, mobility, king_safety)


def evaluate(board: Board, side: Color, context: MoveContext | None = None) -> float:
    return evaluate_breakdown(board, side, context).total
