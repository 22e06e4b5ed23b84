"""
Response schemas shared by the routers, plus ORM -> schema converters.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from chess_journal.db.models import Game, Mistake
from chess_journal.formatting import format_time_control
from chess_journal.move_index import (
    MoveCursor,
    format_move_display,
    is_white_ply,
    ply_color,
    ply_to_move_number,
    side_to_move_from_fen,
)


class GameOut(BaseModel):
    id: str
    player_color: str
    opponent_rating: Optional[int] = None
    time_control: Optional[str] = None
    time_control_display: str = ""
    date_played: Optional[date] = None
    white_player: Optional[str] = None
    black_player: Optional[str] = None
    result: Optional[str] = None
    total_plies: int
    created_at: Optional[datetime] = None


class MistakeOut(BaseModel):
    id: str
    game_id: str
    ply_index: int
    move_number: int
    move_display: str
    played_by: Optional[str] = None  # side whose move produced the position
    fen_position: str
    brief_description: str
    primary_tag: str
    detailed_reflection: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    game: Optional[GameOut] = None


class GameDetailOut(GameOut):
    pgn: str
    moves: list[str]
    mistakes: list[MistakeOut]


class PositionOut(BaseModel):
    game_id: str
    ply: int
    total_plies: int
    fen: str
    move_number: int
    display: str
    san: Optional[str] = None
    is_white: bool
    played_by: Optional[str] = None
    side_to_move: str
    at_start: bool
    at_end: bool


def game_out(game: Game) -> GameOut:
    return GameOut(
        id=game.id,
        player_color=game.player_color,
        opponent_rating=game.opponent_rating,
        time_control=game.time_control,
        time_control_display=format_time_control(game.time_control),
        date_played=game.date_played,
        white_player=game.white_player,
        black_player=game.black_player,
        result=game.result,
        total_plies=game.total_plies or 0,
        created_at=game.created_at,
    )


def mistake_out(mistake: Mistake, game: Optional[Game] = None) -> MistakeOut:
    return MistakeOut(
        id=mistake.id,
        game_id=mistake.game_id,
        ply_index=mistake.ply_index,
        move_number=ply_to_move_number(mistake.ply_index),
        move_display=format_move_display(mistake.ply_index),
        played_by=ply_color(mistake.ply_index),
        fen_position=mistake.fen_position,
        brief_description=mistake.brief_description,
        primary_tag=mistake.primary_tag,
        detailed_reflection=mistake.detailed_reflection,
        created_at=mistake.created_at,
        updated_at=mistake.updated_at,
        game=game_out(game) if game is not None else None,
    )


def position_out(game_id: str, cursor: MoveCursor) -> PositionOut:
    fen = cursor.fen()
    return PositionOut(
        game_id=game_id,
        ply=cursor.current_ply,
        total_plies=cursor.total_plies,
        fen=fen,
        move_number=ply_to_move_number(cursor.current_ply),
        display=cursor.display(),
        san=cursor.current_move(),
        is_white=cursor.current_ply > 0 and is_white_ply(cursor.current_ply),
        played_by=ply_color(cursor.current_ply),
        side_to_move=side_to_move_from_fen(fen),
        at_start=cursor.at_start(),
        at_end=cursor.at_end(),
    )
