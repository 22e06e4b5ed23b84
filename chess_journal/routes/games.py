"""
Games routes – Import PGN, list/inspect/patch/delete games, replay positions.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from chess_journal.auth import require_session
from chess_journal.config import Settings, app_settings
from chess_journal.db import games_repository as games_repo
from chess_journal.db.session import get_db
from chess_journal.errors import DuplicateGameError, IndexOutOfRange, ParseError
from chess_journal.game_positions import cursor_for, stored_moves
from chess_journal.move_index import resolve_move_reference
from chess_journal.pgn_parser import extract_game_metadata, parse_pgn
from chess_journal.schemas import (
    GameDetailOut,
    GameOut,
    PositionOut,
    game_out,
    mistake_out,
    position_out,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_session)])


# ═══════════════════════════════════════════════════════════
# Schemas
# ═══════════════════════════════════════════════════════════


class ImportGameRequest(BaseModel):
    pgn: str
    player_color: Optional[Literal["white", "black"]] = None


class UpdateGameRequest(BaseModel):
    opponent_rating: Optional[int] = None
    time_control: Optional[str] = None
    date_played: Optional[date] = None


class GamesListResponse(BaseModel):
    games: list[GameOut]
    total: int


# ═══════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════


@router.post("", response_model=GameOut, status_code=201)
async def import_game(
    body: ImportGameRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(app_settings),
):
    """Validate a PGN by full replay and store it with its metadata."""
    try:
        parsed = parse_pgn(body.pgn)
        meta = extract_game_metadata(parsed, body.player_color, settings.player_name)
    except ParseError as exc:
        logger.info("Rejected import: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        game = await games_repo.create_game(
            db,
            games_repo.CreateGameInput(
                pgn=body.pgn.strip(),
                player_color=meta.player_color,
                total_plies=meta.total_plies,
                opponent_rating=meta.opponent_rating,
                time_control=meta.time_control,
                date_played=meta.date_played,
                white_player=meta.white_player,
                black_player=meta.black_player,
                result=meta.result,
            ),
        )
    except DuplicateGameError as exc:
        logger.warning("Duplicate import rejected")
        raise HTTPException(status_code=409, detail=str(exc))

    logger.info("Imported game %s (%d plies)", game.id, game.total_plies)
    return game_out(game)


@router.get("", response_model=GamesListResponse)
async def list_games(db: AsyncSession = Depends(get_db)):
    """All games, newest import first."""
    games = await games_repo.list_games(db)
    return GamesListResponse(games=[game_out(g) for g in games], total=len(games))


@router.get("/{game_id}", response_model=GameDetailOut)
async def get_game(game_id: str, db: AsyncSession = Depends(get_db)):
    """A game with its move list and journaled mistakes (in ply order)."""
    game = await games_repo.get_game_with_mistakes(db, game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    base = game_out(game)
    return GameDetailOut(
        **base.model_dump(),
        pgn=game.pgn,
        moves=stored_moves(game),
        mistakes=[mistake_out(m) for m in game.mistakes],
    )


@router.patch("/{game_id}", response_model=GameOut)
async def update_game(
    game_id: str,
    body: UpdateGameRequest,
    db: AsyncSession = Depends(get_db),
):
    """Patch rating, time control or date. Only fields present in the body change."""
    changes = {name: getattr(body, name) for name in body.model_fields_set}
    game = await games_repo.update_game_metadata(db, game_id, **changes)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game_out(game)


@router.delete("/{game_id}")
async def delete_game(game_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a game together with all of its mistakes."""
    deleted = await games_repo.delete_game(db, game_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Game not found")
    return {"success": True}


@router.get("/{game_id}/position", response_model=PositionOut)
async def get_position(
    game_id: str,
    ply: int = Query(0),
    db: AsyncSession = Depends(get_db),
):
    """Board position after ``ply`` half-moves."""
    game = await games_repo.get_game(db, game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    try:
        cursor = cursor_for(game, ply)
    except IndexOutOfRange as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return position_out(game.id, cursor)


@router.get("/{game_id}/navigate", response_model=PositionOut)
async def navigate_to_move(
    game_id: str,
    move_number: int = Query(..., ge=1),
    color: Optional[Literal["white", "black"]] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Best-effort jump to a move number. Defaults to the journaling player's
    own move; references past the end of the game land on the final ply.
    """
    game = await games_repo.get_game(db, game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    ply = resolve_move_reference(move_number, color or game.player_color, game.total_plies)
    return position_out(game.id, cursor_for(game, ply))
