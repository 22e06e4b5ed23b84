"""
Game store. Every function takes the session it works on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chess_journal.db.models import Game
from chess_journal.errors import DuplicateGameError

logger = logging.getLogger(__name__)


@dataclass
class CreateGameInput:
    pgn: str
    player_color: str
    total_plies: int
    opponent_rating: Optional[int] = None
    time_control: Optional[str] = None
    date_played: Optional[date] = None
    white_player: Optional[str] = None
    black_player: Optional[str] = None
    result: Optional[str] = None


_UNSET = object()


async def create_game(db: AsyncSession, data: CreateGameInput) -> Game:
    """Insert a game. Raises DuplicateGameError if the movetext already exists."""
    existing = await db.execute(select(Game.id).where(Game.pgn == data.pgn))
    if existing.scalar_one_or_none() is not None:
        raise DuplicateGameError("This game has already been imported")

    game = Game(
        pgn=data.pgn,
        player_color=data.player_color,
        total_plies=data.total_plies,
        opponent_rating=data.opponent_rating,
        time_control=data.time_control,
        date_played=data.date_played,
        white_player=data.white_player,
        black_player=data.black_player,
        result=data.result,
    )
    db.add(game)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent import of the same movetext
        await db.rollback()
        raise DuplicateGameError("This game has already been imported") from exc

    await db.refresh(game)
    return game


async def get_game(db: AsyncSession, game_id: str) -> Optional[Game]:
    result = await db.execute(select(Game).where(Game.id == game_id))
    return result.scalar_one_or_none()


async def get_game_with_mistakes(db: AsyncSession, game_id: str) -> Optional[Game]:
    """Game with ``mistakes`` eagerly loaded in ply order."""
    result = await db.execute(
        select(Game)
        .options(selectinload(Game.mistakes))
        .where(Game.id == game_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_games(db: AsyncSession) -> list[Game]:
    """All games, most recently imported first."""
    result = await db.execute(select(Game).order_by(Game.created_at.desc(), Game.id.desc()))
    return list(result.scalars().all())


async def update_game_metadata(
    db: AsyncSession,
    game_id: str,
    *,
    opponent_rating=_UNSET,
    time_control=_UNSET,
    date_played=_UNSET,
) -> Optional[Game]:
    """Patch the optional metadata. Movetext and colour are not editable."""
    game = await get_game(db, game_id)
    if game is None:
        return None

    if opponent_rating is not _UNSET:
        game.opponent_rating = opponent_rating
    if time_control is not _UNSET:
        game.time_control = time_control
    if date_played is not _UNSET:
        game.date_played = date_played

    db.add(game)
    await db.commit()
    await db.refresh(game)
    return game


async def delete_game(db: AsyncSession, game_id: str) -> bool:
    """Delete a game and its mistakes. Returns False if it did not exist."""
    game = await get_game_with_mistakes(db, game_id)
    if game is None:
        return False

    await db.delete(game)
    await db.commit()
    logger.info("Deleted game %s", game_id)
    return True


async def count_games(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Game.id)))).scalar() or 0
