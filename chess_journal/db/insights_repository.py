"""Insight history store."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.db.models import Insight


async def save_insight(
    db: AsyncSession, insights: list[dict], mistake_ids: list[str]
) -> Insight:
    row = Insight(
        content=insights,
        mistakes_analyzed=len(mistake_ids),
        mistake_ids=mistake_ids,
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def list_insights(db: AsyncSession, limit: int = 10) -> list[Insight]:
    """Most recent first."""
    result = await db.execute(
        select(Insight).order_by(Insight.created_at.desc(), Insight.id.desc()).limit(limit)
    )
    return list(result.scalars().all())
