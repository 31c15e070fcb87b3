"""Core value types: colors, pieces, squares, moves and results.

Every type here is immutable and compares structurally, so whole game
states can be checked for equality and shared without copying.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import NamedTuple

import chess

__all__ = [
    "Color",
    "PieceKind",
    "PROMOTION_KINDS",
    "Square",
    "Piece",
    "SideCastlingRights",
    "CastlingRights",
    "MoveContext",
    "Move",
    "PendingPromotion",
    "ResultKind",
    "GameResult",
]


class Color(enum.Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a pawn advance (row 0 is rank 8)."""
        return -1 if self is Color.WHITE else 1

    @property
    def home_row(self) -> int:
        return 7 if self is Color.WHITE else 0

    @property
    def pawn_row(self) -> int:
        return 6 if self is Color.WHITE else 1

    @property
    def promotion_row(self) -> int:
        return 0 if self is Color.WHITE else 7


class PieceKind(enum.Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"

    @property
    def letter(self) -> str:
        return "N" if self is PieceKind.KNIGHT else self.value[0].upper()

    @classmethod
    def parse(cls, text: str) -> PieceKind:
        """Accept a kind name ("queen") or letter ("Q"/"q")."""
        text = text.strip().lower()
        for kind in cls:
            if text == kind.value or text == kind.letter.lower():
                return kind
        raise ValueError(f"Unknown piece kind: {text!r}")


PROMOTION_KINDS = (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT)


class Square(NamedTuple):
    """Board coordinate. Row 0 is rank 8, col 0 is file a."""
    row: int
    col: int

    @property
    def name(self) -> str:
        return chess.square_name(chess.square(self.col, 7 - self.row))

    @classmethod
    def parse(cls, name: str) -> Square:
        """'e4' -> Square(4, 4). Raises ValueError on anything else."""
        sq = chess.parse_square(name.strip().lower())
        return cls(7 - chess.square_rank(sq), chess.square_file(sq))

    def offset(self, drow: int, dcol: int) -> Square | None:
        row, col = self.row + drow, self.col + dcol
        if 0 <= row <= 7 and 0 <= col <= 7:
            return Square(row, col)
        return None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Piece:
    color: Color
    kind: PieceKind

    @property
    def key(self) -> str:
        """Persistence key, e.g. 'white_pawn'."""
        return f"{self.color.value}_{self.kind.value}"

    @classmethod
    def from_key(cls, key: str) -> Piece:
        color, _, kind = key.partition("_")
        return cls(Color(color), PieceKind(kind))

    @property
    def symbol(self) -> str:
        """FEN-style letter: uppercase for white, lowercase for black."""
        letter = self.kind.letter
        return letter if self.color is Color.WHITE else letter.lower()

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class SideCastlingRights:
    king_side: bool = True
    queen_side: bool = True


@dataclass(frozen=True)
class CastlingRights:
    white: SideCastlingRights = field(default_factory=SideCastlingRights)
    black: SideCastlingRights = field(default_factory=SideCastlingRights)

    @classmethod
    def none(cls) -> CastlingRights:
        off = SideCastlingRights(False, False)
        return cls(white=off, black=off)

    def for_color(self, color: Color) -> SideCastlingRights:
        return self.white if color is Color.WHITE else self.black

    def revoke(
        self, color: Color, *, king_side: bool = False, queen_side: bool = False
    ) -> CastlingRights:
        """Turn rights off. Rights are never turned back on."""
        current = self.for_color(color)
        updated = SideCastlingRights(
            king_side=current.king_side and not king_side,
            queen_side=current.queen_side and not queen_side,
        )
        if updated == current:
            return self
        if color is Color.WHITE:
            return replace(self, white=updated)
        return replace(self, black=updated)


@dataclass(frozen=True)
class MoveContext:
    """Position facts the grid alone cannot express."""
    side_to_move: Color
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_target: Square | None = None


@dataclass(frozen=True)
class Move:
    from_square: Square
    to_square: Square
    piece: Piece
    captured: Piece | None = None
    is_castling: bool = False
    is_en_passant: bool = False
    is_promotion: bool = False
    promoted_to: PieceKind | None = None
    is_check: bool = False
    is_checkmate: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def uci(self) -> str:
        suffix = self.promoted_to.letter.lower() if self.promoted_to else ""
        return f"{self.from_square.name}{self.to_square.name}{suffix}"


@dataclass(frozen=True)
class PendingPromotion:
    """A pawn move onto the last rank waiting for the player's piece choice."""
    from_square: Square
    to_square: Square
    piece: Piece


class ResultKind(enum.Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class GameResult:
    kind: ResultKind = ResultKind.ONGOING
    winner: Color | None = None

    @classmethod
    def ongoing(cls) -> GameResult:
        return cls()

    @classmethod
    def checkmate(cls, winner: Color) -> GameResult:
        return cls(ResultKind.CHECKMATE, winner)

    @classmethod
    def stalemate(cls) -> GameResult:
        return cls(ResultKind.STALEMATE)

    @classmethod
    def timeout(cls, winner: Color) -> GameResult:
        return cls(ResultKind.TIMEOUT, winner)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not ResultKind.ONGOING
