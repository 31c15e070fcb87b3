"""Tests for the game state machine.

Covers the full-game scenarios (en passant, castling, fool's mate,
stalemate, promotion) plus rejection and timeout behaviour.
"""

import random

import pytest

from chessgame import game
from chessgame.board import Board
from chessgame.errors import GameOverError, IllegalPromotionChoiceError, InvalidMoveError
from chessgame.game import CapturedPieces, GameState
from chessgame.types import (
    CastlingRights,
    Color,
    GameResult,
    Piece,
    PieceKind,
    ResultKind,
    SideCastlingRights,
    Square,
)


def _board(layout: dict[str, str]) -> Board:
    return Board.from_mapping({Square.parse(sq): Piece.from_key(key) for sq, key in layout.items()})


def sq(name: str) -> Square:
    return Square.parse(name)


def play(state: GameState, *moves: str) -> GameState:
    for text in moves:
        state = game.apply_move(state, text[:2], text[2:4], text[4:] or None)
    return state


def key_at(state: GameState, name: str) -> str | None:
    piece = state.board.piece_at(sq(name))
    return piece.key if piece else None


# ---------------------------------------------------------------------------
# Initial state and queries
# ---------------------------------------------------------------------------


class TestInitialize:
    def test_defaults(self):
        state = game.initialize()
        assert state.board == Board.initial()
        assert state.side_to_move is Color.WHITE
        assert state.castling_rights == CastlingRights()
        assert state.en_passant_target is None
        assert state.move_history == ()
        assert state.captured_pieces == CapturedPieces()
        assert state.pending_promotion is None
        assert game.game_result(state) == GameResult.ongoing()

    def test_legal_destinations_accept_names_and_pairs(self):
        state = game.initialize()
        by_name = game.legal_destinations(state, "g1")
        by_pair = game.legal_destinations(state, (7, 6))
        assert by_name == by_pair == [sq("f3"), sq("h3")]

    def test_legal_moves_for_other_side(self):
        state = game.initialize()
        black = game.legal_moves(state, "black")
        assert len(black) == 20
        assert all(m.piece.color is Color.BLACK for m in black)

    def test_start_from_requires_kings(self):
        with pytest.raises(ValueError):
            game.start_from(_board({"e1": "white_king"}))


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestEnPassantScenario:
    def test_capture_in_passing(self):
        state = play(game.initialize(), "e2e4", "b8c6", "e4e5", "d7d5")
        assert state.en_passant_target == sq("d6")
        assert sq("d6") in game.legal_destinations(state, "e5")

        state = play(state, "e5d6")
        last = state.last_move
        assert last.is_en_passant
        assert last.captured == Piece(Color.BLACK, PieceKind.PAWN)
        assert key_at(state, "d5") is None
        assert key_at(state, "d6") == "white_pawn"
        assert state.captured_pieces.for_color(Color.WHITE) == (Piece(Color.BLACK, PieceKind.PAWN),)

    def test_right_expires_after_one_turn(self):
        state = play(game.initialize(), "e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "a6a5")
        assert state.en_passant_target is None
        assert sq("d6") not in game.legal_destinations(state, "e5")
        with pytest.raises(InvalidMoveError):
            game.apply_move(state, "e5", "d6")


class TestCastlingScenario:
    def test_king_side_castle(self):
        state = play(game.initialize(), "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6")
        assert sq("g1") in game.legal_destinations(state, "e1")

        state = play(state, "e1g1")
        assert key_at(state, "g1") == "white_king"
        assert key_at(state, "f1") == "white_rook"
        assert key_at(state, "h1") is None
        assert key_at(state, "e1") is None
        assert state.castling_rights.white == SideCastlingRights(False, False)
        assert state.castling_rights.black == SideCastlingRights()
        assert state.last_move.is_castling

    def test_rights_lost_after_king_returns(self):
        state = play(
            game.initialize(),
            "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1e2", "a7a6", "e2e1", "a6a5",
        )
        assert state.castling_rights.white == SideCastlingRights(False, False)
        assert sq("g1") not in game.legal_destinations(state, "e1")


class TestFoolsMate:
    def test_checkmate(self):
        state = play(game.initialize(), "f2f3", "e7e5", "g2g4", "d8h4")
        assert state.result.kind is ResultKind.CHECKMATE
        assert state.result.winner is Color.BLACK
        assert state.is_terminal
        assert state.last_move.is_check
        assert state.last_move.is_checkmate
        assert game.is_in_check(state, Color.WHITE)
        assert game.legal_moves(state) == []

    def test_no_moves_after_mate(self):
        state = play(game.initialize(), "f2f3", "e7e5", "g2g4", "d8h4")
        with pytest.raises(GameOverError):
            game.apply_move(state, "a2", "a3")
        assert game.legal_destinations(state, "a2") == []
        with pytest.raises(GameOverError):
            game.computer_move(state)


class TestStalemate:
    def test_stalemate_position(self):
        board = _board({"h8": "black_king", "f7": "white_queen", "g6": "white_king"})
        state = game.start_from(board, side_to_move=Color.BLACK)
        assert state.result.kind is ResultKind.STALEMATE
        assert state.result.winner is None
        assert not game.is_in_check(state, Color.BLACK)

    def test_move_into_stalemate(self):
        board = _board({"h8": "black_king", "e7": "white_queen", "g6": "white_king"})
        state = play(game.start_from(board), "e7f7")
        assert state.result.kind is ResultKind.STALEMATE
        assert not state.last_move.is_check


class TestPromotion:
    LAYOUT = {"e1": "white_king", "h5": "black_king", "a7": "white_pawn"}

    def _state(self):
        return game.start_from(_board(self.LAYOUT))

    def test_move_awaits_choice(self):
        state = self._state()
        pending = game.apply_move(state, "a7", "a8")
        assert pending.pending_promotion is not None
        assert pending.pending_promotion.to_square == sq("a8")
        assert pending.board == state.board
        assert pending.side_to_move is Color.WHITE
        assert pending.move_history == ()

    def test_choose_queen(self):
        state = game.apply_move(self._state(), "a7", "a8")
        done = game.choose_promotion(state, "queen")
        assert key_at(done, "a8") == "white_queen"
        assert key_at(done, "a7") is None
        assert done.pending_promotion is None
        assert done.side_to_move is Color.BLACK
        assert done.last_move.promoted_to is PieceKind.QUEEN

    def test_choice_given_up_front(self):
        done = game.apply_move(self._state(), "a7", "a8", "n")
        assert key_at(done, "a8") == "white_knight"

    @pytest.mark.parametrize("choice", ["king", "pawn", "dragon"])
    def test_illegal_choice_keeps_pending(self, choice):
        state = game.apply_move(self._state(), "a7", "a8")
        with pytest.raises(IllegalPromotionChoiceError):
            game.choose_promotion(state, choice)
        assert state.pending_promotion is not None
        assert game.choose_promotion(state, PieceKind.ROOK).last_move.promoted_to is PieceKind.ROOK

    def test_other_moves_blocked_while_pending(self):
        state = game.apply_move(self._state(), "a7", "a8")
        with pytest.raises(InvalidMoveError):
            game.apply_move(state, "e1", "e2")
        assert game.legal_destinations(state, "e1") == []

    def test_repeat_move_with_choice_completes(self):
        state = game.apply_move(self._state(), "a7", "a8")
        done = game.apply_move(state, "a7", "a8", "bishop")
        assert key_at(done, "a8") == "white_bishop"

    def test_choose_without_pending(self):
        with pytest.raises(InvalidMoveError):
            game.choose_promotion(game.initialize(), "queen")

    def test_choice_on_normal_move_ignored(self):
        state = game.apply_move(game.initialize(), "e2", "e4", "queen")
        assert key_at(state, "e4") == "white_pawn"


# ---------------------------------------------------------------------------
# Rejection leaves state intact
# ---------------------------------------------------------------------------


class TestInvalidMoves:
    @pytest.mark.parametrize("frm,to", [
        ("e2", "e5"),   # too far
        ("e7", "e5"),   # not your piece
        ("e4", "e5"),   # empty square
        ("a1", "a3"),   # blocked
        ("e1", "g1"),   # castle through pieces
    ])
    def test_rejected(self, frm, to):
        state = game.initialize()
        with pytest.raises(InvalidMoveError):
            game.apply_move(state, frm, to)
        assert state == game.initialize()

    def test_bad_square_text(self):
        with pytest.raises(InvalidMoveError):
            game.apply_move(game.initialize(), "z9", "e4")

    @pytest.mark.parametrize("frm,to", [
        ((6, 4), (8, 4)),
        ((-1, 4), (4, 4)),
        ((6, 4), (-1, 4)),
        ((100, 0), (0, 0)),
    ])
    def test_off_board_pair(self, frm, to):
        state = game.initialize()
        with pytest.raises(InvalidMoveError):
            game.apply_move(state, frm, to)
        assert state == game.initialize()

    def test_off_board_destinations_query(self):
        with pytest.raises(ValueError):
            game.legal_destinations(game.initialize(), (-1, 4))

    def test_cannot_ignore_check(self):
        state = play(game.initialize(), "e2e4", "f7f6", "d1h5")
        assert game.is_in_check(state, Color.BLACK)
        with pytest.raises(InvalidMoveError):
            game.apply_move(state, "a7", "a6")


# ---------------------------------------------------------------------------
# Timeout
# ---------------------------------------------------------------------------


class TestTimeout:
    def test_opponent_wins(self):
        state = game.on_time_expired(game.initialize(), Color.WHITE)
        assert state.result == GameResult.timeout(Color.BLACK)
        assert state.board == Board.initial()

    def test_idempotent(self):
        once = game.on_time_expired(game.initialize(), "black")
        twice = game.on_time_expired(once, "black")
        assert twice == once
        assert game.on_time_expired(once, "white") == once

    def test_no_moves_after_timeout(self):
        state = game.on_time_expired(game.initialize(), "white")
        with pytest.raises(GameOverError):
            game.apply_move(state, "e2", "e4")

    def test_no_timeout_after_mate(self):
        mated = play(game.initialize(), "f2f3", "e7e5", "g2g4", "d8h4")
        assert game.on_time_expired(mated, "black") == mated


# ---------------------------------------------------------------------------
# Invariants over a longer game
# ---------------------------------------------------------------------------


def test_history_and_kings_over_random_game():
    rng = random.Random(5)
    state = game.initialize()
    for ply in range(80):
        moves = game.legal_moves(state)
        if not moves:
            break
        move = rng.choice(moves)
        state = game.apply_move(state, move.from_square, move.to_square, "queen" if move.is_promotion else None)
        assert len(state.move_history) == ply + 1
        for color in Color:
            assert state.board.count(Piece(color, PieceKind.KING)) == 1
        # The side that just moved is never left in check.
        assert not game.is_in_check(state, state.side_to_move.opponent)
        captured = len(state.captured_pieces.white) + len(state.captured_pieces.black)
        assert captured == 32 - len(list(state.board.pieces()))


class TestComputerMove:
    def test_plays_a_legal_move(self):
        state = game.initialize()
        nxt, move = game.play_computer_move(state, rng=random.Random(1), difficulty="hard")
        assert move.uci[:4] in {m.uci for m in game.legal_moves(state)}
        assert nxt.side_to_move is Color.BLACK
        assert nxt.last_move == move

    def test_select_does_not_change_state(self):
        state = game.initialize()
        move = game.select_computer_move(state, rng=random.Random(2))
        assert move.piece.color is Color.WHITE
        assert state == game.initialize()

    def test_refuses_while_promotion_pending(self):
        state = game.start_from(_board(TestPromotion.LAYOUT))
        pending = game.apply_move(state, "a7", "a8")
        with pytest.raises(InvalidMoveError):
            game.computer_move(pending)
