"""Tests for move-list notation."""

from chessgame import game
from chessgame.board import Board
from chessgame.notation import format_history, move_notation
from chessgame.types import Color, Piece, PieceKind, Square


def play(state, *moves):
    for text in moves:
        state = game.apply_move(state, text[:2], text[2:4], text[4:] or None)
    return state


def test_opening_moves():
    state = play(game.initialize(), "e2e4", "e7e5", "g1f3", "b8c6")
    assert format_history(state.move_history) == "1. e4 e5 2. Nf3 Nc6"


def test_pawn_capture_uses_file():
    state = play(game.initialize(), "e2e4", "d7d5", "e4d5")
    assert move_notation(state.last_move) == "exd5"


def test_piece_capture():
    state = play(game.initialize(), "e2e4", "d7d5", "e4d5", "d8d5")
    assert move_notation(state.last_move) == "Qxd5"


def test_castling():
    state = play(game.initialize(), "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1")
    assert move_notation(state.last_move) == "O-O"


def test_check_and_mate_suffixes():
    state = play(game.initialize(), "e2e4", "f7f6", "d1h5")
    assert move_notation(state.last_move) == "Qh5+"
    mate = play(game.initialize(), "f2f3", "e7e5", "g2g4", "d8h4")
    assert format_history(mate.move_history) == "1. f3 e5 2. g4 Qh4#"


def test_promotion_suffix():
    board = Board.from_mapping({
        Square.parse("e1"): Piece(Color.WHITE, PieceKind.KING),
        Square.parse("h5"): Piece(Color.BLACK, PieceKind.KING),
        Square.parse("a7"): Piece(Color.WHITE, PieceKind.PAWN),
    })
    state = game.apply_move(game.start_from(board), "a7", "a8", "queen")
    assert move_notation(state.last_move) == "a8=Q"


def test_empty_history():
    assert format_history([]) == ""
