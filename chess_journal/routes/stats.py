"""
Stats route – Tag frequencies and journal totals for the dashboard.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.auth import require_session
from chess_journal.db import games_repository as games_repo
from chess_journal.db import mistakes_repository as mistakes_repo
from chess_journal.db.session import get_db

router = APIRouter(dependencies=[Depends(require_session)])

TOP_TAGS = 10


class TagCountOut(BaseModel):
    tag: str
    count: int


class StatsResponse(BaseModel):
    top_tags: list[TagCountOut]
    total_mistakes: int
    total_games: int


@router.get("", response_model=StatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Top tags by frequency plus overall counts."""
    counts = await mistakes_repo.tag_counts(db, limit=TOP_TAGS)
    return StatsResponse(
        top_tags=[TagCountOut(tag=c.tag, count=c.count) for c in counts],
        total_mistakes=await mistakes_repo.count_mistakes(db),
        total_games=await games_repo.count_games(db),
    )
