"""Tests for JSON game snapshots."""

import json

import pytest

from chessgame import game
from chessgame.board import Board
from chessgame.errors import SnapshotError
from chessgame.serialization import deserialize, dumps, loads, serialize
from chessgame.types import Color, Piece, PieceKind, ResultKind, Square


def play(state, *moves):
    for text in moves:
        state = game.apply_move(state, text[:2], text[2:4], text[4:] or None)
    return state


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


class TestSerialize:
    def test_initial_snapshot_shape(self):
        data = serialize(game.initialize())
        assert data["board"][0][0] == "black_rook"
        assert data["board"][7][4] == "white_king"
        assert data["board"][4][4] is None
        assert data["sideToMove"] == "white"
        assert data["enPassantTarget"] is None
        assert data["castlingRights"]["white"] == {"kingSide": True, "queenSide": True}
        assert data["capturedPieces"] == {"white": [], "black": []}
        assert data["moveHistory"] == []
        assert data["pendingPromotion"] is None
        assert data["result"] == {"kind": "ongoing", "winner": None}

    def test_history_entries(self):
        state = play(game.initialize(), "e2e4", "d7d5", "e4d5")
        data = serialize(state)
        assert data["enPassantTarget"] is None
        last = data["moveHistory"][-1]
        assert last["piece"] == "white_pawn"
        assert last["from"] == [4, 4]
        assert last["to"] == [3, 3]
        assert last["captured"] == "black_pawn"
        assert last["player"] == "white"
        assert data["capturedPieces"]["white"] == ["black_pawn"]

    def test_is_json_serializable(self):
        state = play(game.initialize(), "e2e4")
        text = dumps(state)
        assert json.loads(text)["enPassantTarget"] == {"row": 5, "col": 4}


# ---------------------------------------------------------------------------
# Round trips through interesting states
# ---------------------------------------------------------------------------


class TestRoundTrip:
    def test_mid_game_with_en_passant_target(self):
        state = play(game.initialize(), "e2e4", "b8c6", "e4e5", "d7d5")
        restored = loads(dumps(state))
        assert restored == state
        assert game.legal_destinations(restored, "e5") == game.legal_destinations(state, "e5")

    def test_after_castling(self):
        state = play(game.initialize(), "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1")
        assert loads(dumps(state)) == state

    def test_checkmate_result(self):
        state = play(game.initialize(), "f2f3", "e7e5", "g2g4", "d8h4")
        restored = deserialize(serialize(state))
        assert restored.result.kind is ResultKind.CHECKMATE
        assert restored.result.winner is Color.BLACK

    def test_pending_promotion(self):
        board = Board.from_mapping({
            Square.parse("e1"): Piece(Color.WHITE, PieceKind.KING),
            Square.parse("h5"): Piece(Color.BLACK, PieceKind.KING),
            Square.parse("a7"): Piece(Color.WHITE, PieceKind.PAWN),
        })
        state = game.apply_move(game.start_from(board), "a7", "a8")
        restored = loads(dumps(state))
        assert restored.pending_promotion == state.pending_promotion
        done = game.choose_promotion(restored, "queen")
        assert done.board.piece_at(Square.parse("a8")) == Piece(Color.WHITE, PieceKind.QUEEN)

    def test_timeout(self):
        state = game.on_time_expired(game.initialize(), "white")
        assert loads(dumps(state)) == state


# ---------------------------------------------------------------------------
# Older snapshots and bad input
# ---------------------------------------------------------------------------


class TestDeserialize:
    def test_legacy_current_player_key(self):
        data = serialize(play(game.initialize(), "e2e4"))
        data["currentPlayer"] = data.pop("sideToMove")
        del data["result"]
        del data["pendingPromotion"]
        state = deserialize(data)
        assert state.side_to_move is Color.BLACK
        assert state.result.kind is ResultKind.ONGOING
        assert state.en_passant_target == Square(5, 4)

    def test_missing_result_is_classified(self):
        data = serialize(play(game.initialize(), "f2f3", "e7e5", "g2g4", "d8h4"))
        del data["result"]
        assert deserialize(data).result.kind is ResultKind.CHECKMATE

    def test_not_json(self):
        with pytest.raises(SnapshotError):
            loads("{not json")

    def test_missing_board(self):
        with pytest.raises(SnapshotError):
            deserialize({"sideToMove": "white"})

    def test_unknown_piece(self):
        data = serialize(game.initialize())
        data["board"][4][4] = "white_dragon"
        with pytest.raises(SnapshotError):
            deserialize(data)

    def test_wrong_board_shape(self):
        data = serialize(game.initialize())
        data["board"] = data["board"][:7]
        with pytest.raises(SnapshotError):
            deserialize(data)

    def test_missing_king(self):
        data = serialize(game.initialize())
        data["board"][0][4] = None
        with pytest.raises(SnapshotError):
            deserialize(data)

    def test_snapshot_error_is_value_error(self):
        with pytest.raises(ValueError):
            loads("[]")
