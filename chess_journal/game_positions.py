"""
Replay helpers for stored games.

Stored movetext was validated at import, so any failure here means the row
is corrupt. Such failures surface as ReplayError and are logged; they are
never retried or papered over.
"""

from __future__ import annotations

import logging

from chess_journal.db.models import Game
from chess_journal.errors import ParseError, ReplayError
from chess_journal.move_index import MoveCursor, position_at
from chess_journal.pgn_parser import parse_pgn

logger = logging.getLogger(__name__)


def stored_moves(game: Game) -> list[str]:
    """Mainline SAN moves of a stored game."""
    try:
        moves = parse_pgn(game.pgn).moves
    except ParseError as exc:
        logger.error("Stored PGN for game %s no longer parses: %s", game.id, exc)
        raise ReplayError(f"Stored game {game.id} could not be parsed: {exc}") from exc

    if game.total_plies is not None and len(moves) != game.total_plies:
        logger.error(
            "Game %s replays to %d plies but %d were recorded at import",
            game.id, len(moves), game.total_plies,
        )
        raise ReplayError(f"Stored game {game.id} has an inconsistent move count")
    return moves


def snapshot_for(game: Game, ply_index: int) -> str:
    """FEN to store with a new mistake at ``ply_index``."""
    moves = stored_moves(game)
    try:
        return position_at(moves, ply_index)
    except ReplayError as exc:
        logger.error("Replay of game %s failed at ply %s: %s", game.id, exc.ply_index, exc)
        raise


def cursor_for(game: Game, ply_index: int) -> MoveCursor:
    """Cursor positioned at ``ply_index``; IndexOutOfRange if it is not a ply of the game."""
    moves = stored_moves(game)
    cursor = MoveCursor(moves)
    cursor.seek(ply_index)
    return cursor

