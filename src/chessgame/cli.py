"""Command line utility for exercising the engine without a UI.

Usage:
    python -m chessgame.cli selfplay [--seed N] [--max-plies N]
        [--white-difficulty NAME] [--black-difficulty NAME]
    python -m chessgame.cli moves <square> [--after e2e4 e7e5 ...]

Prints JSON to stdout.
"""

from __future__ import annotations

import argparse
import json
import random
import sys

from chessgame import game
from chessgame.config import Settings, configure_logging
from chessgame.difficulty import DIFFICULTY_PROFILES
from chessgame.errors import ChessEngineError
from chessgame.game import GameState
from chessgame.notation import format_history
from chessgame.serialization import serialize
from chessgame.types import Color


def _replay(moves: list[str]) -> GameState:
    """Play UCI-style moves ('e2e4', 'e7e8q') from the initial position."""
    state = game.initialize()
    for text in moves:
        promotion = text[4:] or None
        state = game.apply_move(state, text[:2], text[2:4], promotion)
    return state


def self_play(
    seed: int | None,
    max_plies: int,
    difficulties: dict[Color, str],
) -> dict:
    rng = random.Random(seed)
    state = game.initialize()
    while not state.is_terminal and len(state.move_history) < max_plies:
        state, _ = game.play_computer_move(
            state, rng=rng, difficulty=difficulties[state.side_to_move]
        )
    result = state.result
    return {
        "plies": len(state.move_history),
        "result": result.kind.value,
        "winner": result.winner.value if result.winner else None,
        "moves": format_history(state.move_history),
        "final": serialize(state),
    }


def _cmd_selfplay(args: argparse.Namespace, settings: Settings) -> dict:
    seed = args.seed if args.seed is not None else settings.ai_seed
    return self_play(
        seed,
        args.max_plies,
        {
            Color.WHITE: args.white_difficulty or settings.difficulty,
            Color.BLACK: args.black_difficulty or settings.difficulty,
        },
    )


def _cmd_moves(args: argparse.Namespace, settings: Settings) -> dict:
    state = _replay(args.after)
    return {
        "side_to_move": state.side_to_move.value,
        "from": args.square,
        "destinations": [sq.name for sq in game.legal_destinations(state, args.square)],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessgame",
        description="Chess rules engine utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    play = sub.add_parser("selfplay", help="Computer vs computer game")
    play.add_argument("--seed", type=int, default=None, help="Random seed for move choice")
    play.add_argument("--max-plies", type=int, default=200, help="Stop after this many plies")
    for color in ("white", "black"):
        play.add_argument(
            f"--{color}-difficulty", choices=list(DIFFICULTY_PROFILES), default=None,
            help=f"Difficulty for {color} (default: settings)",
        )
    play.set_defaults(handler=_cmd_selfplay)

    moves = sub.add_parser("moves", help="Legal destinations for a square")
    moves.add_argument("square", help="Origin square, e.g. e2")
    moves.add_argument(
        "--after", nargs="*", default=[], metavar="MOVE",
        help="Moves to play first, in from-to form (e2e4, e7e8q)",
    )
    moves.set_defaults(handler=_cmd_moves)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings, stream=sys.stderr)

    try:
        result = args.handler(args, settings)
    except (ChessEngineError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    json.dump(result, sys.stdout, indent=2)
    print()


if __name__ == "__main__":
    main()
