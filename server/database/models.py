"""
SQLAlchemy models for persisted Imperial games.

Architecture:
- GameRecord: one row per game, with its seating and settings
- ActionRecord: event sourcing - the canonical action log, in order (JSONB payload)

Game state is never stored; it is rebuilt by replaying ActionRecord rows.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def utc_now() -> datetime:
    """Generate timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class GameRecord(Base):
    """Game metadata table."""

    __tablename__ = "games"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    game_id: Mapped[str] = mapped_column(
        String(128),
        unique=True,
        nullable=False,
        index=True,
        comment="Game ID handed out by GameRegistry",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="running",
        index=True,
        comment="running | finished",
    )
    players: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )
    solo_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    winner: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    actions: Mapped[List["ActionRecord"]] = relationship(
        "ActionRecord",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="ActionRecord.sequence_number",
    )

    def __repr__(self) -> str:
        return f"<GameRecord(game_id='{self.game_id}', status='{self.status}')>"


class ActionRecord(Base):
    """One entry of a game's canonical action log."""

    __tablename__ = "game_actions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    game_uuid: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
    )
    sequence_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Position in the canonical log, starting at 0",
    )
    action_type: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    game: Mapped["GameRecord"] = relationship("GameRecord", back_populates="actions")

    __table_args__ = (
        UniqueConstraint("game_uuid", "sequence_number", name="uq_game_action_sequence"),
        Index("idx_game_actions_game_seq", "game_uuid", "sequence_number"),
    )

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.action_type, "payload": self.payload}

    def __repr__(self) -> str:
        return f"<ActionRecord(seq={self.sequence_number}, type='{self.action_type}')>"
