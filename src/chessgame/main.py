import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from chessgame.config import Settings, configure_logging
from chessgame.difficulty import DIFFICULTY_PROFILES
from chessgame.errors import GameOverError
from chessgame.game import GameState, is_in_check
from chessgame.notation import format_history, move_notation
from chessgame.serialization import serialize
from chessgame.sessions import GameManager

logger = logging.getLogger(__name__)

settings = Settings()
configure_logging(settings)

games = GameManager(settings)

app = FastAPI(title="Chess Game Engine")


# --- Request/Response models ---

class NewGameRequest(BaseModel):
    difficulty: str | None = None


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str
    from_square: str = Field(alias="from")
    to_square: str = Field(alias="to")
    promotion: str | None = None


class PromotionRequest(BaseModel):
    session_id: str
    piece: str


class SessionRequest(BaseModel):
    session_id: str


class TimeoutRequest(BaseModel):
    session_id: str
    side: str


def _payload(session_id: str, state: GameState) -> dict:
    result = state.result
    return {
        "session_id": session_id,
        "status": result.kind.value,
        "winner": result.winner.value if result.winner else None,
        "in_check": is_in_check(state, state.side_to_move),
        "awaiting_promotion": state.pending_promotion is not None,
        "history": format_history(state.move_history),
        "state": serialize(state),
    }


def _to_http(e: Exception) -> HTTPException:
    if isinstance(e, KeyError):
        return HTTPException(status_code=404, detail="Session not found")
    if isinstance(e, GameOverError):
        return HTTPException(status_code=409, detail=str(e))
    logger.warning("Rejected request: %s", e)
    return HTTPException(status_code=400, detail=str(e))


# --- Endpoints ---

@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/difficulties")
async def difficulties():
    return [
        {"name": p.name, "label": p.label, "candidate_pool": p.candidate_pool}
        for p in DIFFICULTY_PROFILES.values()
    ]


@app.post("/api/game/new")
async def new_game(req: NewGameRequest | None = None):
    session_id, session = games.new_game(difficulty=req.difficulty if req else None)
    payload = _payload(session_id, session.state)
    payload["difficulty"] = session.difficulty
    return payload


@app.get("/api/game/{session_id}")
async def get_game(session_id: str):
    session = games.get_game(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return _payload(session_id, session.state)


@app.get("/api/game/{session_id}/moves/{square}")
async def legal_moves(session_id: str, square: str):
    try:
        destinations = games.legal_destinations(session_id, square)
    except (KeyError, ValueError) as e:
        raise _to_http(e) from e
    return {"from": square, "destinations": [sq.name for sq in destinations]}


@app.post("/api/game/move")
async def game_move(req: MoveRequest):
    try:
        state = games.make_move(req.session_id, req.from_square, req.to_square, req.promotion)
    except (KeyError, ValueError) as e:
        raise _to_http(e) from e
    payload = _payload(req.session_id, state)
    payload["last_move"] = move_notation(state.last_move) if state.pending_promotion is None else None
    return payload


@app.post("/api/game/promote")
async def game_promote(req: PromotionRequest):
    try:
        state = games.promote(req.session_id, req.piece)
    except (KeyError, ValueError) as e:
        raise _to_http(e) from e
    payload = _payload(req.session_id, state)
    payload["last_move"] = move_notation(state.last_move)
    return payload


@app.post("/api/game/computer-move")
async def game_computer_move(req: SessionRequest):
    try:
        state, move = games.computer_move(req.session_id)
    except (KeyError, ValueError) as e:
        raise _to_http(e) from e
    payload = _payload(req.session_id, state)
    payload["last_move"] = move_notation(move)
    payload["move"] = {"from": move.from_square.name, "to": move.to_square.name, "uci": move.uci}
    return payload


@app.post("/api/game/timeout")
async def game_timeout(req: TimeoutRequest):
    try:
        state = games.time_expired(req.session_id, req.side)
    except (KeyError, ValueError) as e:
        raise _to_http(e) from e
    return _payload(req.session_id, state)
