"""Execute a move that the validator has already accepted.

Produces the next board together with the updated castling rights and
en-passant target. The caller decides what to do with a pawn that reaches
the last rank without a promotion choice.
"""

from __future__ import annotations

from dataclasses import dataclass

from chessgame.board import Board
from chessgame.errors import IllegalPromotionChoiceError, InvalidMoveError
from chessgame.types import (
    PROMOTION_KINDS,
    CastlingRights,
    Color,
    Move,
    MoveContext,
    Piece,
    PieceKind,
    Square,
)
from chessgame.validator import (
    castling_rook_squares,
    en_passant_victim,
    is_castling_move,
    is_en_passant_capture,
)

__all__ = ["Transition", "apply_move", "update_castling_rights", "reaches_last_rank"]

# Rook home squares and the right each one carries.
_ROOK_CORNERS: dict[Square, tuple[Color, str]] = {
    Square(7, 7): (Color.WHITE, "king_side"),
    Square(7, 0): (Color.WHITE, "queen_side"),
    Square(0, 7): (Color.BLACK, "king_side"),
    Square(0, 0): (Color.BLACK, "queen_side"),
}


@dataclass(frozen=True)
class Transition:
    board: Board
    castling_rights: CastlingRights
    en_passant_target: Square | None
    move: Move

    @property
    def promotion_pending(self) -> bool:
        return self.move.is_promotion and self.move.promoted_to is None


def reaches_last_rank(piece: Piece, to_square: Square) -> bool:
    return piece.kind is PieceKind.PAWN and to_square.row == piece.color.promotion_row


def update_castling_rights(
    rights: CastlingRights, piece: Piece, from_square: Square, to_square: Square
) -> CastlingRights:
    """Revoke rights for a king move, or a move from/onto a rook corner."""
    if piece.kind is PieceKind.KING:
        rights = rights.revoke(piece.color, king_side=True, queen_side=True)
    for square in (from_square, to_square):
        corner = _ROOK_CORNERS.get(square)
        if corner is not None:
            color, side = corner
            rights = rights.revoke(color, **{side: True})
    return rights


def apply_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    context: MoveContext,
    promotion: PieceKind | None = None,
) -> Transition:
    piece = board.piece_at(from_square)
    if piece is None:
        raise InvalidMoveError(f"No piece on {from_square.name}")

    en_passant = is_en_passant_capture(board, from_square, to_square, context)
    castling = is_castling_move(board, from_square, to_square)
    promoting = reaches_last_rank(piece, to_square)
    if promotion is not None and (not promoting or promotion not in PROMOTION_KINDS):
        raise IllegalPromotionChoiceError(
            f"Cannot promote to {promotion.value} on {from_square.name}{to_square.name}"
        )

    if en_passant:
        victim_square = en_passant_victim(from_square, to_square)
        captured = board.piece_at(victim_square)
        next_board = board.with_move(from_square, to_square).with_piece(victim_square, None)
    else:
        captured = board.piece_at(to_square)
        next_board = board.with_move(from_square, to_square)

    if castling:
        rook_from, rook_to = castling_rook_squares(from_square, to_square)
        next_board = next_board.with_move(rook_from, rook_to)
        rights = context.castling_rights.revoke(piece.color, king_side=True, queen_side=True)
    else:
        rights = update_castling_rights(context.castling_rights, piece, from_square, to_square)

    if promoting and promotion is not None:
        next_board = next_board.with_piece(to_square, Piece(piece.color, promotion))

    en_passant_target = None
    if piece.kind is PieceKind.PAWN and abs(to_square.row - from_square.row) == 2:
        en_passant_target = Square((from_square.row + to_square.row) // 2, from_square.col)

    move = Move(
        from_square=from_square,
        to_square=to_square,
        piece=piece,
        captured=captured,
        is_castling=castling,
        is_en_passant=en_passant,
        is_promotion=promoting,
        promoted_to=promotion if promoting else None,
    )
    return Transition(
        board=next_board,
        castling_rights=rights,
        en_passant_target=en_passant_target,
        move=move,
    )
