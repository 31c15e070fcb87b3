"""JSON snapshots of a GameState for the storage collaborator.

The engine owns the format only; where and when snapshots are written is up
to the caller. Snapshots written by the earlier app build (which used
`currentPlayer` and had no `result` or `pendingPromotion`) still load.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any

from chessgame import movegen
from chessgame.board import Board
from chessgame.errors import SnapshotError
from chessgame.game import CapturedPieces, GameState
from chessgame.types import (
    CastlingRights,
    Color,
    GameResult,
    Move,
    PendingPromotion,
    Piece,
    PieceKind,
    ResultKind,
    SideCastlingRights,
    Square,
)

__all__ = ["serialize", "deserialize", "dumps", "loads"]


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _piece_key(piece: Piece | None) -> str | None:
    return piece.key if piece is not None else None


def _square_pair(square: Square) -> list[int]:
    return [square.row, square.col]


def _move_to_dict(move: Move) -> dict[str, Any]:
    return {
        "piece": move.piece.key,
        "from": _square_pair(move.from_square),
        "to": _square_pair(move.to_square),
        "captured": _piece_key(move.captured),
        "player": move.piece.color.value,
        "isCastling": move.is_castling,
        "isEnPassant": move.is_en_passant,
        "isPromotion": move.is_promotion,
        "promotedTo": move.promoted_to.value if move.promoted_to else None,
        "isCheck": move.is_check,
        "isCheckmate": move.is_checkmate,
    }


def _rights_to_dict(rights: SideCastlingRights) -> dict[str, bool]:
    return {"kingSide": rights.king_side, "queenSide": rights.queen_side}


def serialize(state: GameState) -> dict[str, Any]:
    pending = state.pending_promotion
    ep = state.en_passant_target
    return {
        "board": [[_piece_key(p) for p in row] for row in state.board.to_rows()],
        "sideToMove": state.side_to_move.value,
        "capturedPieces": {
            color.value: [p.key for p in state.captured_pieces.for_color(color)]
            for color in Color
        },
        "moveHistory": [_move_to_dict(m) for m in state.move_history],
        "enPassantTarget": {"row": ep.row, "col": ep.col} if ep else None,
        "castlingRights": {
            color.value: _rights_to_dict(state.castling_rights.for_color(color))
            for color in Color
        },
        "pendingPromotion": {
            "from": _square_pair(pending.from_square),
            "to": _square_pair(pending.to_square),
            "piece": pending.piece.key,
        } if pending else None,
        "result": {
            "kind": state.result.kind.value,
            "winner": state.result.winner.value if state.result.winner else None,
        },
    }


def dumps(state: GameState) -> str:
    return json.dumps(serialize(state))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _square(value: Any) -> Square:
    if isinstance(value, dict):
        row, col = value["row"], value["col"]
    else:
        row, col = value
    square = Square(int(row), int(col))
    if not (0 <= square.row <= 7 and 0 <= square.col <= 7):
        raise ValueError(f"Square out of bounds: {value!r}")
    return square


def _optional_piece(key: str | None) -> Piece | None:
    return Piece.from_key(key) if key is not None else None


def _move_from_dict(data: dict[str, Any]) -> Move:
    promoted = data.get("promotedTo")
    return Move(
        from_square=_square(data["from"]),
        to_square=_square(data["to"]),
        piece=Piece.from_key(data["piece"]),
        captured=_optional_piece(data.get("captured")),
        is_castling=bool(data.get("isCastling", False)),
        is_en_passant=bool(data.get("isEnPassant", False)),
        is_promotion=bool(data.get("isPromotion", False)),
        promoted_to=PieceKind.parse(promoted) if promoted else None,
        is_check=bool(data.get("isCheck", False)),
        is_checkmate=bool(data.get("isCheckmate", False)),
    )


def _rights_from_dict(data: dict[str, Any]) -> CastlingRights:
    def side(color: Color) -> SideCastlingRights:
        entry = data[color.value]
        return SideCastlingRights(bool(entry["kingSide"]), bool(entry["queenSide"]))

    return CastlingRights(white=side(Color.WHITE), black=side(Color.BLACK))


def _decode(data: dict[str, Any]) -> GameState:
    board = Board.from_rows([[_optional_piece(key) for key in row] for row in data["board"]])
    side = Color(data.get("sideToMove", data.get("currentPlayer")))

    captured_data = data.get("capturedPieces") or {}
    captured = CapturedPieces(
        white=tuple(Piece.from_key(k) for k in captured_data.get("white", [])),
        black=tuple(Piece.from_key(k) for k in captured_data.get("black", [])),
    )

    rights_data = data.get("castlingRights")
    rights = _rights_from_dict(rights_data) if rights_data else CastlingRights()
    ep_data = data.get("enPassantTarget")

    pending_data = data.get("pendingPromotion")
    pending = None
    if pending_data:
        pending = PendingPromotion(
            from_square=_square(pending_data["from"]),
            to_square=_square(pending_data["to"]),
            piece=Piece.from_key(pending_data["piece"]),
        )

    state = GameState(
        board=board,
        side_to_move=side,
        castling_rights=rights,
        en_passant_target=_square(ep_data) if ep_data else None,
        move_history=tuple(_move_from_dict(m) for m in data.get("moveHistory") or []),
        captured_pieces=captured,
        pending_promotion=pending,
    )

    result_data = data.get("result")
    if result_data:
        winner = result_data.get("winner")
        result = GameResult(ResultKind(result_data["kind"]), Color(winner) if winner else None)
    else:
        result = movegen.classify(board, state.context)
    return replace(state, result=result)


def deserialize(data: dict[str, Any]) -> GameState:
    """Rebuild a GameState. Raises SnapshotError on anything unreadable."""
    try:
        state = _decode(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise SnapshotError(f"Unreadable game snapshot: {e}") from e
    for color in Color:
        if state.board.count(Piece(color, PieceKind.KING)) != 1:
            raise SnapshotError(f"Snapshot must hold exactly one {color.value} king")
    return state


def loads(text: str) -> GameState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    return deserialize(data)
