"""Tags route – distinct tags for autocomplete."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.auth import require_session
from chess_journal.db import mistakes_repository as mistakes_repo
from chess_journal.db.session import get_db

router = APIRouter(dependencies=[Depends(require_session)])


@router.get("")
async def list_tags(db: AsyncSession = Depends(get_db)):
    return {"tags": await mistakes_repo.unique_tags(db)}
