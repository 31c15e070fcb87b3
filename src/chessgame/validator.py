"""Move legality.

`is_legal` runs the checks in a fixed order: ownership, destination,
per-piece geometry (special moves included), then king safety on a
simulated board. Square-attack questions always go through
`chessgame.attacks`, never back through `is_legal`.
"""

from __future__ import annotations

import logging

from chessgame.attacks import is_attacked, path_clear
from chessgame.board import Board
from chessgame.types import Color, MoveContext, Piece, PieceKind, Square

__all__ = [
    "is_in_check",
    "is_pseudo_legal",
    "is_legal",
    "is_castling_move",
    "is_en_passant_capture",
    "en_passant_victim",
    "castling_rook_squares",
]

logger = logging.getLogger(__name__)


def is_in_check(board: Board, color: Color) -> bool:
    king = board.king_square(color)
    if king is None:
        return False
    return is_attacked(board, king, color.opponent)


def castling_rook_squares(king_from: Square, king_to: Square) -> tuple[Square, Square]:
    """(rook origin, rook destination) for a castling king move."""
    if king_to.col > king_from.col:
        return Square(king_from.row, 7), Square(king_from.row, king_to.col - 1)
    return Square(king_from.row, 0), Square(king_from.row, king_to.col + 1)


def is_castling_move(board: Board, from_square: Square, to_square: Square) -> bool:
    piece = board.piece_at(from_square)
    return (
        piece is not None
        and piece.kind is PieceKind.KING
        and from_square.row == to_square.row
        and abs(to_square.col - from_square.col) == 2
    )


def en_passant_victim(from_square: Square, to_square: Square) -> Square:
    """The pawn taken en passant stands on the mover's rank, target's file."""
    return Square(from_square.row, to_square.col)


def is_en_passant_capture(
    board: Board, from_square: Square, to_square: Square, context: MoveContext
) -> bool:
    piece = board.piece_at(from_square)
    return (
        piece is not None
        and piece.kind is PieceKind.PAWN
        and context.en_passant_target is not None
        and to_square == context.en_passant_target
        and from_square.col != to_square.col
        and board.is_empty(to_square)
    )


def _pawn_geometry(
    board: Board, piece: Piece, from_square: Square, to_square: Square, context: MoveContext
) -> bool:
    forward = piece.color.forward
    drow = to_square.row - from_square.row
    dcol = to_square.col - from_square.col
    target = board.piece_at(to_square)

    if dcol == 0:
        if target is not None:
            return False
        if drow == forward:
            return True
        if drow == 2 * forward and from_square.row == piece.color.pawn_row:
            return board.is_empty(Square(from_square.row + forward, from_square.col))
        return False

    if abs(dcol) != 1 or drow != forward:
        return False
    if target is not None:
        return True
    if not is_en_passant_capture(board, from_square, to_square, context):
        return False
    victim = board.piece_at(en_passant_victim(from_square, to_square))
    return victim == Piece(piece.color.opponent, PieceKind.PAWN)


def _castling_allowed(
    board: Board, piece: Piece, from_square: Square, to_square: Square, context: MoveContext
) -> bool:
    color = piece.color
    if from_square != Square(color.home_row, 4) or to_square.row != from_square.row:
        return False

    king_side = to_square.col > from_square.col
    rights = context.castling_rights.for_color(color)
    if not (rights.king_side if king_side else rights.queen_side):
        return False

    rook_square, _ = castling_rook_squares(from_square, to_square)
    if board.piece_at(rook_square) != Piece(color, PieceKind.ROOK):
        return False
    if not path_clear(board, from_square, rook_square):
        return False

    # King may not start in, pass through, or land on an attacked square.
    step = 1 if king_side else -1
    for col in (from_square.col, from_square.col + step, from_square.col + 2 * step):
        if is_attacked(board, Square(from_square.row, col), color.opponent):
            return False
    return True


def _geometry_ok(
    board: Board, piece: Piece, from_square: Square, to_square: Square, context: MoveContext
) -> bool:
    drow = to_square.row - from_square.row
    dcol = to_square.col - from_square.col
    kind = piece.kind

    if kind is PieceKind.PAWN:
        return _pawn_geometry(board, piece, from_square, to_square, context)
    if kind is PieceKind.KNIGHT:
        return {abs(drow), abs(dcol)} == {1, 2}
    if kind is PieceKind.BISHOP:
        return abs(drow) == abs(dcol) and path_clear(board, from_square, to_square)
    if kind is PieceKind.ROOK:
        return (drow == 0 or dcol == 0) and path_clear(board, from_square, to_square)
    if kind is PieceKind.QUEEN:
        aligned = drow == 0 or dcol == 0 or abs(drow) == abs(dcol)
        return aligned and path_clear(board, from_square, to_square)
    if kind is PieceKind.KING:
        if max(abs(drow), abs(dcol)) == 1:
            return True
        if drow == 0 and abs(dcol) == 2:
            return _castling_allowed(board, piece, from_square, to_square, context)
        return False
    raise ValueError(f"Unhandled piece kind: {kind}")


def is_pseudo_legal(
    board: Board, from_square: Square, to_square: Square, context: MoveContext
) -> bool:
    """Ownership, destination and geometry checks, ignoring king safety."""
    piece = board.piece_at(from_square)
    if piece is None or piece.color is not context.side_to_move:
        return False
    if from_square == to_square:
        return False

    target = board.piece_at(to_square)
    if target is not None and (target.color is piece.color or target.kind is PieceKind.KING):
        return False

    return _geometry_ok(board, piece, from_square, to_square, context)


def _on_board(square: Square) -> bool:
    return 0 <= square[0] <= 7 and 0 <= square[1] <= 7


def _simulate(
    board: Board, from_square: Square, to_square: Square, context: MoveContext
) -> Board:
    result = board.with_move(from_square, to_square)
    if is_en_passant_capture(board, from_square, to_square, context):
        result = result.with_piece(en_passant_victim(from_square, to_square), None)
    elif is_castling_move(board, from_square, to_square):
        rook_from, rook_to = castling_rook_squares(from_square, to_square)
        result = result.with_move(rook_from, rook_to)
    return result


def is_legal(
    board: Board, from_square: Square, to_square: Square, context: MoveContext
) -> bool:
    """Full legality: pseudo-legal and does not leave the mover in check."""
    if not (_on_board(from_square) and _on_board(to_square)):
        logger.debug("Rejected off-board move %r -> %r", from_square, to_square)
        return False
    if not is_pseudo_legal(board, from_square, to_square, context):
        return False
    mover = board.piece_at(from_square).color
    return not is_in_check(_simulate(board, from_square, to_square, context), mover)
