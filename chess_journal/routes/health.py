"""Health check endpoints – liveness and database reachability."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE = "chess-journal-api"
VERSION = "1.0.0"


@router.get("/")
async def root():
    return {"status": "ok", "service": SERVICE, "version": VERSION}


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """503 when the journal database cannot be reached."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable"},
        )
    return {"status": "healthy", "database": "ok"}
