from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from imperial import Action, GameState, PlayerDescriptor, create_game
from imperial.exceptions import GameNotFoundError
from server.database import GameLogRepository, session_scope

logger = logging.getLogger(__name__)


class GameSession:
    """A running game and the lock that serializes actions against it."""

    def __init__(self, game_id: str, game: GameState):
        self.game_id = game_id
        self.game = game
        self.lock = asyncio.Lock()
        # Log entries already written to the database
        self.persisted_length = 0


class GameRegistry:
    """
    In-memory registry of running games.

    Each game has its own lock; actions for one game id never overlap.
    With ``persist`` enabled every accepted action is appended to the
    database and unknown ids are rebuilt by replaying their stored log.
    """

    def __init__(self, persist: bool = False):
        self.persist = persist
        self._games: Dict[str, GameSession] = {}
        self._lock = asyncio.Lock()

    async def create_game(self, players: List[PlayerDescriptor], solo_mode: bool = False) -> str:
        game_id = uuid.uuid4().hex[:12]
        game = create_game(players, solo_mode=solo_mode)
        session = GameSession(game_id, game)

        async with self._lock:
            self._games[game_id] = session

        if self.persist:
            await self._create_record(session, players, solo_mode)
        logger.info(f"Created game {game_id} for {len(players)} players")
        return game_id

    async def get(self, game_id: str) -> GameSession:
        """
        Look up a game.

        Raises:
            GameNotFoundError: If the id is unknown here and in the database
        """
        session = self._games.get(game_id)
        if session is not None:
            return session

        if self.persist:
            async with self._lock:
                session = self._games.get(game_id)
                if session is None:
                    session = await self._load(game_id)
                    if session is not None:
                        self._games[game_id] = session
            if session is not None:
                return session

        raise GameNotFoundError(f"Game {game_id} not found")

    async def apply(self, game_id: str, action: Action) -> bool:
        """Apply an action to a game under its lock."""
        session = await self.get(game_id)
        async with session.lock:
            accepted = session.game.apply(action)
            if accepted and self.persist:
                await self._persist(session)
        return accepted

    async def remove(self, game_id: str) -> bool:
        async with self._lock:
            return self._games.pop(game_id, None) is not None

    # ---- Persistence ----

    async def _create_record(
        self, session: GameSession, players: List[PlayerDescriptor], solo_mode: bool
    ) -> None:
        try:
            async with session_scope() as db:
                repo = GameLogRepository(db)
                await repo.create_game(
                    session.game_id, [player.to_dict() for player in players], solo_mode
                )
                await repo.append_actions(
                    session.game_id, [action.to_dict() for action in session.game.log], 0
                )
            session.persisted_length = len(session.game.log)
        except (SQLAlchemyError, RuntimeError) as e:
            logger.warning(f"Failed to persist game {session.game_id}: {e}")

    async def _persist(self, session: GameSession) -> None:
        game = session.game
        pending = [action.to_dict() for action in game.log[session.persisted_length:]]
        if not pending:
            return
        try:
            async with session_scope() as db:
                repo = GameLogRepository(db)
                await repo.append_actions(session.game_id, pending, session.persisted_length)
                if game.game_over:
                    await repo.mark_finished(session.game_id, game.winner)
            session.persisted_length = len(game.log)
        except (SQLAlchemyError, RuntimeError) as e:
            logger.warning(f"Failed to persist actions for game {session.game_id}: {e}")

    async def _load(self, game_id: str) -> Optional[GameSession]:
        try:
            async with session_scope() as db:
                log = await GameLogRepository(db).load_log(game_id)
        except (SQLAlchemyError, RuntimeError) as e:
            logger.warning(f"Failed to load game {game_id}: {e}")
            return None
        if log is None:
            return None

        session = GameSession(game_id, GameState.from_log(log))
        session.persisted_length = len(session.game.log)
        logger.info(f"Restored game {game_id} from {len(log)} logged actions")
        return session
