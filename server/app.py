from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from imperial import serialize_snapshot
from imperial.exceptions import (
    GameNotFoundError,
    InvalidSetupError,
    InvariantViolation,
    UnknownActionError,
)
from server.database import close_db, init_db
from server.registry import GameRegistry, GameSession
from server.schemas import (
    ActionModel,
    ActionResponse,
    CreateGameRequest,
    CreateGameResponse,
    LegalActionsResponse,
    LogResponse,
)
from server.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting Imperial server")
    if settings.persist_logs:
        await init_db()

    yield

    logger.info("Shutting down Imperial server")
    if settings.persist_logs:
        await close_db()


app = FastAPI(title="Imperial Server", version="0.1.0", lifespan=lifespan)
registry = GameRegistry(persist=settings.persist_logs)


async def _get_session(game_id: str) -> GameSession:
    try:
        return await registry.get(game_id)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found") from None


@app.post("/games", response_model=CreateGameResponse)
async def create_game(req: CreateGameRequest):
    players = [player.to_descriptor() for player in req.players]
    try:
        game_id = await registry.create_game(players, solo_mode=req.solo_mode)
    except InvalidSetupError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return CreateGameResponse(game_id=game_id)


@app.get("/games/{game_id}/snapshot")
async def get_snapshot(game_id: str):
    session = await _get_session(game_id)
    return serialize_snapshot(session.game)


@app.get("/games/{game_id}/legal_actions", response_model=LegalActionsResponse)
async def legal_actions(game_id: str):
    session = await _get_session(game_id)
    game = session.game
    return LegalActionsResponse(
        game_id=game_id,
        current_player=game.current_player_name,
        actions=[action.to_dict() for action in game.available_actions],
    )


@app.post("/games/{game_id}/actions", response_model=ActionResponse)
async def apply_action(game_id: str, req: ActionModel):
    session = await _get_session(game_id)
    try:
        action = req.to_action()
    except UnknownActionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        accepted = await registry.apply(game_id, action)
    except InvariantViolation as e:
        logger.warning(f"Invariant violation in game {game_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e)) from e
    return ActionResponse(
        accepted=accepted, legal_action_count=len(session.game.available_actions)
    )


@app.get("/games/{game_id}/log", response_model=LogResponse)
async def get_log(game_id: str):
    session = await _get_session(game_id)
    game = session.game
    return LogResponse(
        game_id=game_id,
        log=[action.to_dict() for action in game.log],
        annotated_log=[action.to_dict() for action in game.annotated_log],
    )


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host=settings.host, port=settings.port)
