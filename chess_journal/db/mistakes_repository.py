"""
Mistake (annotation) store – CRUD, filtered listing and tag aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chess_journal.db.models import Mistake


@dataclass
class CreateMistakeInput:
    game_id: str
    ply_index: int
    fen_position: str
    brief_description: str
    primary_tag: str
    detailed_reflection: Optional[str] = None


@dataclass
class TagCount:
    tag: str
    count: int


_UNSET = object()


async def create_mistake(db: AsyncSession, data: CreateMistakeInput) -> Mistake:
    """
    Store a mistake. The caller has already checked ``ply_index`` against
    the game and computed ``fen_position`` for it.
    """
    mistake = Mistake(
        game_id=data.game_id,
        ply_index=data.ply_index,
        fen_position=data.fen_position,
        brief_description=data.brief_description,
        primary_tag=data.primary_tag,
        detailed_reflection=data.detailed_reflection,
    )
    db.add(mistake)
    await db.commit()
    await db.refresh(mistake)
    return mistake


async def get_mistake(db: AsyncSession, mistake_id: str) -> Optional[Mistake]:
    result = await db.execute(
        select(Mistake)
        .options(selectinload(Mistake.game))
        .where(Mistake.id == mistake_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_mistakes_for_game(db: AsyncSession, game_id: str) -> list[Mistake]:
    result = await db.execute(
        select(Mistake)
        .where(Mistake.game_id == game_id)
        .order_by(Mistake.ply_index, Mistake.created_at, Mistake.id)
    )
    return list(result.scalars().all())


async def list_mistakes(
    db: AsyncSession,
    *,
    game_id: Optional[str] = None,
    tag: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Mistake], int]:
    """Newest-first page of mistakes plus the total matching the filters."""
    query = select(Mistake)
    if game_id:
        query = query.where(Mistake.game_id == game_id)
    if tag:
        query = query.where(Mistake.primary_tag == tag)

    count_q = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_q)).scalar() or 0

    query = (
        query.options(selectinload(Mistake.game))
        .order_by(Mistake.created_at.desc(), Mistake.id.desc())
        .offset(offset)
        .limit(limit)
    )
    rows = (await db.execute(query)).scalars().all()
    return list(rows), total


async def recent_mistakes(db: AsyncSession, limit: int = 50) -> list[Mistake]:
    rows, _ = await list_mistakes(db, limit=limit)
    return rows


async def update_mistake(
    db: AsyncSession,
    mistake_id: str,
    *,
    brief_description=_UNSET,
    primary_tag=_UNSET,
    detailed_reflection=_UNSET,
) -> Optional[Mistake]:
    """
    Edit the free-text fields; only the arguments passed change. A None
    reflection clears it. Ply and snapshot stay as recorded.
    """
    mistake = await get_mistake(db, mistake_id)
    if mistake is None:
        return None

    if brief_description is not _UNSET:
        mistake.brief_description = brief_description
    if primary_tag is not _UNSET:
        mistake.primary_tag = primary_tag
    if detailed_reflection is not _UNSET:
        mistake.detailed_reflection = detailed_reflection

    db.add(mistake)
    await db.commit()
    return await get_mistake(db, mistake_id)


async def delete_mistake(db: AsyncSession, mistake_id: str) -> bool:
    mistake = await db.get(Mistake, mistake_id)
    if mistake is None:
        return False
    await db.delete(mistake)
    await db.commit()
    return True


async def count_mistakes(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Mistake.id)))).scalar() or 0


async def unique_tags(db: AsyncSession) -> list[str]:
    """Distinct tags, alphabetical. Tags are compared by exact string."""
    result = await db.execute(
        select(Mistake.primary_tag).distinct().order_by(Mistake.primary_tag)
    )
    return [row[0] for row in result.all()]


async def tag_counts(db: AsyncSession, limit: Optional[int] = 10) -> list[TagCount]:
    """Most frequent tags first; ties broken alphabetically."""
    count_col = func.count(Mistake.id).label("n")
    query = (
        select(Mistake.primary_tag, count_col)
        .group_by(Mistake.primary_tag)
        .order_by(count_col.desc(), Mistake.primary_tag)
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return [TagCount(tag=tag, count=n) for tag, n in result.all()]
