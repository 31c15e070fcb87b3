"""Immutable 8x8 board value.

The board only executes moves literally; all rule knowledge lives in the
validator and applier.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from chessgame.constants import BOARD_SIZE, INITIAL_LAYOUT
from chessgame.types import Color, Piece, PieceKind, Square

__all__ = ["Board", "ALL_SQUARES"]

ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)
)


def _index(square: Square) -> int:
    row, col = square
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise ValueError(f"Square out of bounds: {square!r}")
    return row * BOARD_SIZE + col


@dataclass(frozen=True)
class Board:
    cells: tuple[Piece | None, ...] = (None,) * (BOARD_SIZE * BOARD_SIZE)

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE * BOARD_SIZE:
            raise ValueError(f"Board needs 64 cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def initial(cls) -> Board:
        return cls.from_mapping(INITIAL_LAYOUT)

    @classmethod
    def from_mapping(cls, pieces: Mapping[Square, Piece]) -> Board:
        cells: list[Piece | None] = [None] * (BOARD_SIZE * BOARD_SIZE)
        for square, piece in pieces.items():
            cells[_index(square)] = piece
        return cls(tuple(cells))

    @classmethod
    def from_rows(cls, rows: list[list[Piece | None]]) -> Board:
        if len(rows) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in rows):
            raise ValueError("Board rows must be 8x8")
        return cls(tuple(piece for row in rows for piece in row))

    def to_rows(self) -> list[list[Piece | None]]:
        return [
            list(self.cells[r * BOARD_SIZE:(r + 1) * BOARD_SIZE])
            for r in range(BOARD_SIZE)
        ]

    def piece_at(self, square: Square) -> Piece | None:
        return self.cells[_index(square)]

    def is_empty(self, square: Square) -> bool:
        return self.piece_at(square) is None

    def with_piece(self, square: Square, piece: Piece | None) -> Board:
        cells = list(self.cells)
        cells[_index(square)] = piece
        return Board(tuple(cells))

    def with_move(self, from_square: Square, to_square: Square) -> Board:
        """Relocate whatever sits on from_square, overwriting to_square."""
        cells = list(self.cells)
        cells[_index(to_square)] = cells[_index(from_square)]
        cells[_index(from_square)] = None
        return Board(tuple(cells))

    def pieces(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        for square, piece in zip(ALL_SQUARES, self.cells):
            if piece is not None and (color is None or piece.color is color):
                yield square, piece

    def king_square(self, color: Color) -> Square | None:
        king = Piece(color, PieceKind.KING)
        for square, piece in self.pieces(color):
            if piece == king:
                return square
        return None

    def count(self, piece: Piece) -> int:
        return sum(1 for p in self.cells if p == piece)

    def __str__(self) -> str:
        lines = []
        for row in self.to_rows():
            lines.append(" ".join(p.symbol if p else "." for p in row))
        return "\n".join(lines)
