"""Constants shared across the engine: board geometry, piece values, tables."""

from chessgame.types import Color, Piece, PieceKind, Square

__all__ = [
    "BOARD_SIZE",
    "CENTER_SQUARES",
    "PIECE_VALUES",
    "get_piece_value",
    "PIECE_SQUARE_TABLES",
    "piece_square_bonus",
    "INITIAL_LAYOUT",
]

BOARD_SIZE = 8

# d5, e5, d4, e4
CENTER_SQUARES = frozenset({Square(3, 3), Square(3, 4), Square(4, 3), Square(4, 4)})

PIECE_VALUES: dict[PieceKind, int] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 100,
}


def get_piece_value(kind: PieceKind) -> int:
    return PIECE_VALUES[kind]


# Piece-square tables from White's point of view, row 0 = rank 8.
# Values are in tenths of a pawn; the evaluator applies the 0.1 weight.
PIECE_SQUARE_TABLES: dict[PieceKind, tuple[tuple[float, ...], ...]] = {
    PieceKind.PAWN: (
        (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
        (5.0, 5.0, 5.0, 5.0, 5.0, 5.0, 5.0, 5.0),
        (1.0, 1.0, 2.0, 3.0, 3.0, 2.0, 1.0, 1.0),
        (0.5, 0.5, 1.0, 2.5, 2.5, 1.0, 0.5, 0.5),
        (0.0, 0.0, 0.0, 2.0, 2.0, 0.0, 0.0, 0.0),
        (0.5, -0.5, -1.0, 0.0, 0.0, -1.0, -0.5, 0.5),
        (0.5, 1.0, 1.0, -2.0, -2.0, 1.0, 1.0, 0.5),
        (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    ),
    PieceKind.KNIGHT: (
        (-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0),
        (-4.0, -2.0, 0.0, 0.0, 0.0, 0.0, -2.0, -4.0),
        (-3.0, 0.0, 1.0, 1.5, 1.5, 1.0, 0.0, -3.0),
        (-3.0, 0.5, 1.5, 2.0, 2.0, 1.5, 0.5, -3.0),
        (-3.0, 0.0, 1.5, 2.0, 2.0, 1.5, 0.0, -3.0),
        (-3.0, 0.5, 1.0, 1.5, 1.5, 1.0, 0.5, -3.0),
        (-4.0, -2.0, 0.0, 0.5, 0.5, 0.0, -2.0, -4.0),
        (-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0),
    ),
    PieceKind.BISHOP: (
        (-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0),
        (-1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -1.0),
        (-1.0, 0.0, 0.5, 1.0, 1.0, 0.5, 0.0, -1.0),
        (-1.0, 0.5, 0.5, 1.0, 1.0, 0.5, 0.5, -1.0),
        (-1.0, 0.0, 1.0, 1.0, 1.0, 1.0, 0.0, -1.0),
        (-1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, -1.0),
        (-1.0, 0.5, 0.0, 0.0, 0.0, 0.0, 0.5, -1.0),
        (-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0),
    ),
    PieceKind.ROOK: (
        (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
        (0.5, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 0.5),
        (-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5),
        (-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5),
        (-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5),
        (-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5),
        (-0.5, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.5),
        (0.0, 0.0, 0.0, 0.5, 0.5, 0.0, 0.0, 0.0),
    ),
    PieceKind.QUEEN: (
        (-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0),
        (-1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -1.0),
        (-1.0, 0.0, 0.5, 0.5, 0.5, 0.5, 0.0, -1.0),
        (-0.5, 0.0, 0.5, 0.5, 0.5, 0.5, 0.0, -0.5),
        (0.0, 0.0, 0.5, 0.5, 0.5, 0.5, 0.0, -0.5),
        (-1.0, 0.5, 0.5, 0.5, 0.5, 0.5, 0.0, -1.0),
        (-1.0, 0.0, 0.5, 0.0, 0.0, 0.0, 0.0, -1.0),
        (-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0),
    ),
    PieceKind.KING: (
        (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
        (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
        (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
        (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
        (-2.0, -3.0, -3.0, -4.0, -4.0, -3.0, -3.0, -2.0),
        (-1.0, -2.0, -2.0, -2.0, -2.0, -2.0, -2.0, -1.0),
        (2.0, 2.0, 0.0, 0.0, 0.0, 0.0, 2.0, 2.0),
        (2.0, 3.0, 1.0, 0.0, 0.0, 1.0, 3.0, 2.0),
    ),
}


def piece_square_bonus(piece: Piece, square: Square) -> float:
    """Raw table entry for piece on square; Black reads the table mirrored."""
    row = square.row if piece.color is Color.WHITE else 7 - square.row
    return PIECE_SQUARE_TABLES[piece.kind][row][square.col]


_BACK_RANK = (
    PieceKind.ROOK, PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.QUEEN,
    PieceKind.KING, PieceKind.BISHOP, PieceKind.KNIGHT, PieceKind.ROOK,
)

INITIAL_LAYOUT: dict[Square, Piece] = {
    **{Square(0, c): Piece(Color.BLACK, k) for c, k in enumerate(_BACK_RANK)},
    **{Square(1, c): Piece(Color.BLACK, PieceKind.PAWN) for c in range(BOARD_SIZE)},
    **{Square(6, c): Piece(Color.WHITE, PieceKind.PAWN) for c in range(BOARD_SIZE)},
    **{Square(7, c): Piece(Color.WHITE, k) for c, k in enumerate(_BACK_RANK)},
}
