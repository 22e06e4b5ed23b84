"""
Insights routes – LLM pattern summaries over recent mistakes, and history.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.auth import require_session
from chess_journal.config import Settings, app_settings
from chess_journal.db import insights_repository as insights_repo
from chess_journal.db import mistakes_repository as mistakes_repo
from chess_journal.db.session import get_db
from chess_journal.insights_client import (
    InsightsNotConfigured,
    InsightsServiceError,
    generate_pattern_summary,
)

router = APIRouter(dependencies=[Depends(require_session)])


class InsightItem(BaseModel):
    title: str
    description: str
    mistakeCount: int


class InsightOut(BaseModel):
    id: str
    insights: list[InsightItem]
    mistakes_analyzed: int
    mistake_ids: list[str]
    generated_at: Optional[datetime] = None


class InsightsHistoryResponse(BaseModel):
    insights: list[InsightOut]


def llm_client(request: Request) -> Optional[httpx.AsyncClient]:
    """Shared HTTP client for the LLM provider, if the app was given one."""
    return getattr(request.app.state, "llm_client", None)


def _insight_out(row) -> InsightOut:
    return InsightOut(
        id=row.id,
        insights=[InsightItem(**i) for i in (row.content or [])],
        mistakes_analyzed=row.mistakes_analyzed,
        mistake_ids=list(row.mistake_ids or []),
        generated_at=row.created_at,
    )


@router.post("/generate", response_model=InsightOut)
async def generate_insights(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(app_settings),
    client: Optional[httpx.AsyncClient] = Depends(llm_client),
):
    """Summarise recurring patterns across the most recent mistakes."""
    if not settings.openai_api_key:
        raise HTTPException(
            status_code=503,
            detail="AI insights are not configured (missing OpenAI API key)",
        )

    mistakes = await mistakes_repo.recent_mistakes(db, limit=settings.insight_sample_size)
    if not mistakes:
        raise HTTPException(
            status_code=400,
            detail="No mistakes found. Record some mistakes first!",
        )

    try:
        insights = await generate_pattern_summary(mistakes, settings, client=client)
    except InsightsNotConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except InsightsServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    row = await insights_repo.save_insight(db, insights, [m.id for m in mistakes])
    return _insight_out(row)


@router.get("", response_model=InsightsHistoryResponse)
async def list_insights(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Previously generated insights, newest first."""
    rows = await insights_repo.list_insights(db, limit=limit)
    return InsightsHistoryResponse(insights=[_insight_out(r) for r in rows])
