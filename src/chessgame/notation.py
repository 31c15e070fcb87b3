"""Human-readable move notation for the move list.

Short algebraic style without disambiguation: "Nf3", "exd6", "e8=Q+",
"O-O", "Qh4#". Square names come from `Square.name`.
"""

from __future__ import annotations

from collections.abc import Iterable

from chessgame.types import Move, PieceKind


def move_notation(move: Move) -> str:
    if move.is_castling:
        body = "O-O" if move.to_square.col > move.from_square.col else "O-O-O"
    else:
        if move.piece.kind is PieceKind.PAWN:
            prefix = move.from_square.name[0] if move.is_capture else ""
        else:
            prefix = move.piece.kind.letter
        capture = "x" if move.is_capture else ""
        promotion = f"={move.promoted_to.letter}" if move.promoted_to else ""
        body = f"{prefix}{capture}{move.to_square.name}{promotion}"

    if move.is_checkmate:
        return body + "#"
    if move.is_check:
        return body + "+"
    return body


def format_history(moves: Iterable[Move]) -> str:
    """'1. e4 e5 2. Nf3 Nc6' for a history starting with White."""
    parts = []
    for i, move in enumerate(moves):
        san = move_notation(move)
        if i % 2 == 0:
            parts.append(f"{i // 2 + 1}. {san}")
        else:
            parts.append(san)
    return " ".join(parts)
