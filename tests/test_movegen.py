"""Tests for legal move generation and result classification.

Move sets are cross-checked against python-chess over seeded random games.
"""

import random

import chess
import pytest

from chessgame import game
from chessgame.board import Board
from chessgame.movegen import classify, destinations_from, generate_moves, has_legal_move
from chessgame.types import CastlingRights, Color, MoveContext, Piece, PieceKind, ResultKind, Square


def _board(layout: dict[str, str]) -> Board:
    return Board.from_mapping({Square.parse(sq): Piece.from_key(key) for sq, key in layout.items()})


def sq(name: str) -> Square:
    return Square.parse(name)


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------


class TestGenerateMoves:
    def test_twenty_opening_moves(self):
        moves = generate_moves(Board.initial(), MoveContext(Color.WHITE))
        assert len(moves) == 20
        assert all(m.piece.color is Color.WHITE for m in moves)

    def test_black_also_has_twenty(self):
        assert len(generate_moves(Board.initial(), MoveContext(Color.BLACK))) == 20

    def test_knight_destinations(self):
        dests = destinations_from(Board.initial(), MoveContext(Color.WHITE), sq("b1"))
        assert sorted(d.name for d in dests) == ["a3", "c3"]

    def test_opponent_piece_has_no_destinations(self):
        assert destinations_from(Board.initial(), MoveContext(Color.WHITE), sq("b8")) == []

    def test_promotion_listed_once(self):
        board = _board({"e1": "white_king", "h5": "black_king", "a7": "white_pawn"})
        moves = generate_moves(board, MoveContext(Color.WHITE, CastlingRights.none()))
        promotions = [m for m in moves if m.is_promotion]
        assert len(promotions) == 1
        assert promotions[0].promoted_to is None

    def test_flags_on_candidates(self):
        board = _board({
            "e1": "white_king", "h1": "white_rook", "e8": "black_king",
            "e5": "white_pawn", "d5": "black_pawn",
        })
        rights = CastlingRights(black=CastlingRights.none().black)
        context = MoveContext(Color.WHITE, rights, en_passant_target=sq("d6"))
        by_uci = {m.uci: m for m in generate_moves(board, context)}
        assert by_uci["e1g1"].is_castling
        assert by_uci["e5d6"].is_en_passant
        assert by_uci["e5d6"].captured == Piece(Color.BLACK, PieceKind.PAWN)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassify:
    def test_initial_is_ongoing(self):
        assert classify(Board.initial(), MoveContext(Color.WHITE)).kind is ResultKind.ONGOING

    def test_back_rank_mate(self):
        board = _board({
            "g8": "black_king", "f7": "black_pawn", "g7": "black_pawn", "h7": "black_pawn",
            "e8": "white_rook", "g1": "white_king",
        })
        result = classify(board, MoveContext(Color.BLACK, CastlingRights.none()))
        assert result.kind is ResultKind.CHECKMATE
        assert result.winner is Color.WHITE

    def test_stalemate(self):
        board = _board({"h8": "black_king", "f7": "white_queen", "g6": "white_king"})
        context = MoveContext(Color.BLACK, CastlingRights.none())
        assert not has_legal_move(board, context)
        result = classify(board, context)
        assert result.kind is ResultKind.STALEMATE
        assert result.winner is None

    def test_check_with_escape_is_ongoing(self):
        board = _board({"e8": "black_king", "e1": "white_rook", "a1": "white_king"})
        assert classify(board, MoveContext(Color.BLACK, CastlingRights.none())).kind is ResultKind.ONGOING


# ---------------------------------------------------------------------------
# Cross-check against python-chess
# ---------------------------------------------------------------------------


def _reference_moves(board: chess.Board) -> set[str]:
    # Our generator lists a promotion once; collapse python-chess's four.
    return {m.uci()[:4] for m in board.legal_moves}


def _our_moves(state) -> set[str]:
    return {m.uci[:4] for m in game.legal_moves(state)}


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_matches_python_chess_over_random_game(seed):
    rng = random.Random(seed)
    state = game.initialize()
    reference = chess.Board()

    for _ in range(120):
        ours = _our_moves(state)
        assert ours == _reference_moves(reference), reference.fen()
        assert game.is_in_check(state, state.side_to_move) == reference.is_check()
        if not ours:
            break

        uci = rng.choice(sorted(ours))
        promotion = None
        if any(m.is_promotion and m.uci == uci for m in game.legal_moves(state)):
            promotion = rng.choice(["q", "r", "b", "n"])
        state = game.apply_move(state, uci[:2], uci[2:4], promotion)
        reference.push_uci(uci + (promotion or ""))

    if reference.is_checkmate():
        assert state.result.kind is ResultKind.CHECKMATE
    elif reference.is_stalemate():
        assert state.result.kind is ResultKind.STALEMATE
    else:
        assert state.result.kind is ResultKind.ONGOING
