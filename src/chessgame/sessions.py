from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field

from chessgame import game
from chessgame.config import Settings
from chessgame.difficulty import get_profile
from chessgame.game import GameState
from chessgame.types import Move, Square

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    state: GameState = field(default_factory=game.initialize)
    difficulty: str = "medium"
    rng: random.Random = field(default_factory=random.Random)


class GameManager:
    """In-memory game sessions for the HTTP surface.

    Each session holds one GameState that is replaced, never mutated, after
    every successful transition. A failed transition leaves it as it was.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or Settings()
        self._sessions: dict[str, GameSession] = {}

    def new_game(self, difficulty: str | None = None) -> tuple[str, GameSession]:
        """Create a new game session. Returns (session_id, session)."""
        session_id = str(uuid.uuid4())
        profile = get_profile(difficulty or self._settings.difficulty)
        session = GameSession(
            difficulty=profile.name,
            rng=random.Random(self._settings.ai_seed),
        )
        self._sessions[session_id] = session
        logger.debug("New game %s (difficulty=%s)", session_id, profile.name)
        return session_id, session

    def get_game(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session not found: {session_id}")
        return session

    def legal_destinations(self, session_id: str, square: str) -> list[Square]:
        return game.legal_destinations(self._require(session_id).state, square)

    def make_move(
        self, session_id: str, from_square: str, to_square: str, promotion: str | None = None
    ) -> GameState:
        session = self._require(session_id)
        session.state = game.apply_move(session.state, from_square, to_square, promotion)
        return session.state

    def promote(self, session_id: str, piece: str) -> GameState:
        session = self._require(session_id)
        session.state = game.choose_promotion(session.state, piece)
        return session.state

    def computer_move(self, session_id: str) -> tuple[GameState, Move]:
        session = self._require(session_id)
        state, move = game.play_computer_move(
            session.state,
            rng=session.rng,
            difficulty=session.difficulty,
            candidate_pool=self._settings.ai_candidate_pool,
        )
        session.state = state
        return state, move

    def time_expired(self, session_id: str, side: str) -> GameState:
        session = self._require(session_id)
        session.state = game.on_time_expired(session.state, side)
        return session.state
