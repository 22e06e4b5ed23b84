"""
SQLAlchemy ORM Models

Games own their mistakes; deleting a game deletes every mistake recorded
against it. A game's movetext is its dedup key and never changes.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, relationship

JSONType = JSON().with_variant(JSONB, "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Game(Base):
    """An imported game, validated by full replay at import time."""

    __tablename__ = "games"

    id = Column(String, primary_key=True, default=_new_id)
    pgn = Column(Text, unique=True, nullable=False)
    player_color = Column(String, nullable=False)  # 'white' | 'black'
    opponent_rating = Column(Integer, nullable=True)
    time_control = Column(String, nullable=True)
    date_played = Column(Date, nullable=True)
    white_player = Column(String, nullable=True)
    black_player = Column(String, nullable=True)
    result = Column(String, nullable=True)
    total_plies = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())

    mistakes = relationship(
        "Mistake",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="Mistake.ply_index",
    )

    __table_args__ = (Index("ix_games_date_played", "date_played"),)


class Mistake(Base):
    """
    A journaled position. ``ply_index`` and ``fen_position`` are captured
    together at creation and never edited afterwards.
    """

    __tablename__ = "mistakes"

    id = Column(String, primary_key=True, default=_new_id)
    game_id = Column(String, ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    ply_index = Column(Integer, nullable=False)
    fen_position = Column(Text, nullable=False)
    brief_description = Column(Text, nullable=False)
    primary_tag = Column(String, nullable=False)
    detailed_reflection = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    game = relationship("Game", back_populates="mistakes")

    __table_args__ = (
        Index("ix_mistakes_game", "game_id"),
        Index("ix_mistakes_tag", "primary_tag"),
        Index("ix_mistakes_created", "created_at"),
    )


class Insight(Base):
    """A stored LLM pattern summary over a batch of recent mistakes."""

    __tablename__ = "insights"

    id = Column(String, primary_key=True, default=_new_id)
    content = Column(JSONType, nullable=False)  # [{title, description, mistakeCount}]
    mistakes_analyzed = Column(Integer, nullable=False)
    mistake_ids = Column(JSONType, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())

    __table_args__ = (Index("ix_insights_created", "created_at"),)
