"""
Mistakes routes – Record, browse, edit and delete journaled positions.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.auth import require_session
from chess_journal.db import games_repository as games_repo
from chess_journal.db import mistakes_repository as mistakes_repo
from chess_journal.db.session import get_db
from chess_journal.errors import IndexOutOfRange
from chess_journal.game_positions import snapshot_for
from chess_journal.schemas import MistakeOut, mistake_out

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_session)])


# ═══════════════════════════════════════════════════════════
# Schemas
# ═══════════════════════════════════════════════════════════


class CreateMistakeRequest(BaseModel):
    game_id: str
    ply_index: int
    brief_description: str
    primary_tag: str
    detailed_reflection: Optional[str] = None


class UpdateMistakeRequest(BaseModel):
    brief_description: Optional[str] = None
    primary_tag: Optional[str] = None
    detailed_reflection: Optional[str] = None


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class MistakesListResponse(BaseModel):
    mistakes: list[MistakeOut]
    pagination: Pagination


# ═══════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════


@router.post("", response_model=MistakeOut, status_code=201)
async def create_mistake(body: CreateMistakeRequest, db: AsyncSession = Depends(get_db)):
    """
    Journal the position at ``ply_index`` of a game. The FEN snapshot is
    computed here from the stored game and kept verbatim from then on.
    """
    description = body.brief_description.strip()
    tag = body.primary_tag.strip()
    if not description or not tag:
        raise HTTPException(
            status_code=400,
            detail="brief_description and primary_tag are required",
        )

    game = await games_repo.get_game(db, body.game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    try:
        fen = snapshot_for(game, body.ply_index)
    except IndexOutOfRange as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    reflection = (body.detailed_reflection or "").strip() or None
    mistake = await mistakes_repo.create_mistake(
        db,
        mistakes_repo.CreateMistakeInput(
            game_id=game.id,
            ply_index=body.ply_index,
            fen_position=fen,
            brief_description=description,
            primary_tag=tag,
            detailed_reflection=reflection,
        ),
    )
    logger.info("Recorded mistake %s on game %s at ply %d", mistake.id, game.id, mistake.ply_index)
    return mistake_out(mistake)


@router.get("", response_model=MistakesListResponse)
async def list_mistakes(
    game_id: Optional[str] = None,
    tag: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Newest-first mistakes, optionally filtered by game and/or tag."""
    rows, total = await mistakes_repo.list_mistakes(
        db, game_id=game_id, tag=tag, limit=limit, offset=offset
    )
    return MistakesListResponse(
        mistakes=[mistake_out(m, m.game) for m in rows],
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        ),
    )


@router.get("/{mistake_id}", response_model=MistakeOut)
async def get_mistake(mistake_id: str, db: AsyncSession = Depends(get_db)):
    mistake = await mistakes_repo.get_mistake(db, mistake_id)
    if not mistake:
        raise HTTPException(status_code=404, detail="Mistake not found")
    return mistake_out(mistake, mistake.game)


@router.patch("/{mistake_id}", response_model=MistakeOut)
async def update_mistake(
    mistake_id: str,
    body: UpdateMistakeRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Edit description, tag or reflection. Only fields present in the body
    change; a null or blank reflection clears it. The ply and snapshot are fixed.
    """
    changes = {}
    for name in body.model_fields_set:
        value = getattr(body, name)
        if name == "detailed_reflection":
            changes[name] = (value or "").strip() or None
            continue
        if value is None or not value.strip():
            raise HTTPException(status_code=400, detail=f"{name} cannot be empty")
        changes[name] = value.strip()

    mistake = await mistakes_repo.update_mistake(db, mistake_id, **changes)
    if not mistake:
        raise HTTPException(status_code=404, detail="Mistake not found")
    return mistake_out(mistake, mistake.game)


@router.delete("/{mistake_id}")
async def delete_mistake(mistake_id: str, db: AsyncSession = Depends(get_db)):
    deleted = await mistakes_repo.delete_mistake(db, mistake_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Mistake not found")
    return {"success": True}
