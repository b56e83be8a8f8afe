"""
Repository for persisted action logs.

Encapsulates the queries behind event-sourced games: a game row plus the
ordered canonical log it is replayed from.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from server.database.models import ActionRecord, GameRecord

logger = logging.getLogger(__name__)


class GameLogRepository:
    """Repository for games and their canonical action logs."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a database session.

        Args:
            session: Active async SQLAlchemy session
        """
        self.session = session

    async def create_game(
        self,
        game_id: str,
        players: List[Dict[str, Any]],
        solo_mode: bool = False,
    ) -> GameRecord:
        game = GameRecord(game_id=game_id, players=players, solo_mode=solo_mode, status="running")
        self.session.add(game)
        await self.session.flush()
        logger.info(f"Created game record: {game_id} (UUID: {game.id})")
        return game

    async def get_game(self, game_id: str) -> Optional[GameRecord]:
        stmt = select(GameRecord).where(GameRecord.game_id == game_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def append_actions(
        self,
        game_id: str,
        actions: List[Dict[str, Any]],
        start_sequence: int,
    ) -> int:
        """
        Append wire actions to a game's log.

        Args:
            game_id: Game identifier
            actions: Actions in wire form, in log order
            start_sequence: Log position of the first action

        Returns:
            Number of rows written
        """
        game = await self.get_game(game_id)
        if game is None:
            logger.warning(f"Cannot append actions: game {game_id} not found")
            return 0

        for offset, action in enumerate(actions):
            self.session.add(
                ActionRecord(
                    game_uuid=game.id,
                    sequence_number=start_sequence + offset,
                    action_type=action["type"],
                    payload=action.get("payload") or {},
                )
            )
        await self.session.flush()
        return len(actions)

    async def load_log(self, game_id: str) -> Optional[List[Dict[str, Any]]]:
        """The canonical log of a game in wire form, or None if unknown."""
        game = await self.get_game(game_id)
        if game is None:
            return None

        stmt = (
            select(ActionRecord)
            .where(ActionRecord.game_uuid == game.id)
            .order_by(ActionRecord.sequence_number)
        )
        result = await self.session.execute(stmt)
        return [record.to_wire() for record in result.scalars().all()]

    async def mark_finished(self, game_id: str, winner: Optional[str]) -> None:
        game = await self.get_game(game_id)
        if game is None:
            return
        game.status = "finished"
        game.winner = winner
        await self.session.flush()
        logger.info(f"Game {game_id} finished, winner: {winner}")
