"""Raw attack geometry.

Answers "could the piece on X strike Y next move" from movement patterns
alone. Nothing here looks at king safety, castling rights or en passant, and
nothing here may call into the validator: check detection and castling
legality are both built on top of these functions.
"""

from __future__ import annotations

from chessgame.board import Board
from chessgame.types import Color, PieceKind, Square

__all__ = [
    "path_clear",
    "can_strike",
    "is_attacked",
    "attackers",
    "attacked_pieces",
]


def _step(delta: int) -> int:
    return (delta > 0) - (delta < 0)


def path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    """True when every square strictly between the two is empty.

    The squares must share a rank, file or diagonal.
    """
    drow = _step(to_square.row - from_square.row)
    dcol = _step(to_square.col - from_square.col)
    row, col = from_square.row + drow, from_square.col + dcol
    while (row, col) != (to_square.row, to_square.col):
        if board.piece_at(Square(row, col)) is not None:
            return False
        row += drow
        col += dcol
    return True


def can_strike(board: Board, from_square: Square, to_square: Square) -> bool:
    """Whether the piece on from_square attacks to_square by geometry alone.

    Pawns only strike diagonally forward; their pushes are not attacks.
    """
    piece = board.piece_at(from_square)
    if piece is None or from_square == to_square:
        return False
    drow = to_square.row - from_square.row
    dcol = to_square.col - from_square.col
    kind = piece.kind

    if kind is PieceKind.PAWN:
        return drow == piece.color.forward and abs(dcol) == 1
    if kind is PieceKind.KNIGHT:
        return {abs(drow), abs(dcol)} == {1, 2}
    if kind is PieceKind.KING:
        return max(abs(drow), abs(dcol)) == 1
    if kind is PieceKind.ROOK:
        straight = drow == 0 or dcol == 0
        return straight and path_clear(board, from_square, to_square)
    if kind is PieceKind.BISHOP:
        diagonal = abs(drow) == abs(dcol)
        return diagonal and path_clear(board, from_square, to_square)
    if kind is PieceKind.QUEEN:
        aligned = drow == 0 or dcol == 0 or abs(drow) == abs(dcol)
        return aligned and path_clear(board, from_square, to_square)
    raise ValueError(f"Unhandled piece kind: {kind}")


def is_attacked(board: Board, square: Square, by_color: Color) -> bool:
    return any(
        can_strike(board, origin, square) for origin, _ in board.pieces(by_color)
    )


def attackers(board: Board, square: Square, by_color: Color) -> list[Square]:
    """Squares of by_color pieces that strike square."""
    return [
        origin for origin, _ in board.pieces(by_color)
        if can_strike(board, origin, square)
    ]


def attacked_pieces(board: Board, from_square: Square) -> list[Square]:
    """Enemy-occupied squares the piece on from_square currently strikes."""
    piece = board.piece_at(from_square)
    if piece is None:
        return []
    return [
        target for target, _ in board.pieces(piece.color.opponent)
        if can_strike(board, from_square, target)
    ]
