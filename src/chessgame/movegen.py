"""Legal move enumeration and terminal-result classification."""

from __future__ import annotations

from chessgame.applier import reaches_last_rank
from chessgame.board import ALL_SQUARES, Board
from chessgame.types import GameResult, Move, MoveContext, Square
from chessgame.validator import (
    en_passant_victim,
    is_castling_move,
    is_en_passant_capture,
    is_in_check,
    is_legal,
)

__all__ = [
    "generate_moves",
    "destinations_from",
    "has_legal_move",
    "classify",
]


def _candidate(board: Board, from_square: Square, to_square: Square, context: MoveContext) -> Move:
    piece = board.piece_at(from_square)
    en_passant = is_en_passant_capture(board, from_square, to_square, context)
    if en_passant:
        captured = board.piece_at(en_passant_victim(from_square, to_square))
    else:
        captured = board.piece_at(to_square)
    return Move(
        from_square=from_square,
        to_square=to_square,
        piece=piece,
        captured=captured,
        is_castling=is_castling_move(board, from_square, to_square),
        is_en_passant=en_passant,
        is_promotion=reaches_last_rank(piece, to_square),
    )


def destinations_from(board: Board, context: MoveContext, from_square: Square) -> list[Square]:
    """Legal destinations for the piece on from_square, in board order."""
    return [
        to_square for to_square in ALL_SQUARES
        if is_legal(board, from_square, to_square, context)
    ]


def generate_moves(board: Board, context: MoveContext) -> list[Move]:
    """Every legal move for context.side_to_move.

    Promotions appear once per from/to pair with promoted_to unset; the
    piece choice is made when the move is applied.
    """
    moves = []
    for from_square, _ in board.pieces(context.side_to_move):
        for to_square in destinations_from(board, context, from_square):
            moves.append(_candidate(board, from_square, to_square, context))
    return moves


def has_legal_move(board: Board, context: MoveContext) -> bool:
    for from_square, _ in board.pieces(context.side_to_move):
        for to_square in ALL_SQUARES:
            if is_legal(board, from_square, to_square, context):
                return True
    return False


def classify(board: Board, context: MoveContext) -> GameResult:
    """Checkmate, stalemate or ongoing for the side to move."""
    if has_legal_move(board, context):
        return GameResult.ongoing()
    side = context.side_to_move
    if is_in_check(board, side):
        return GameResult.checkmate(side.opponent)
    return GameResult.stalemate()
