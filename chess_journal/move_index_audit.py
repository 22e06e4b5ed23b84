"""
Consistency audit for stored mistakes.

A mistake's ``ply_index`` and ``fen_position`` are captured together, so
replaying the game to that ply must reproduce the snapshot exactly. Rows
written by older code with a shifted index fail this check. The repair
searches the game for the ply whose position matches the snapshot rather
than nudging the index by arithmetic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chess_journal.db.models import Mistake
from chess_journal.errors import ReplayError
from chess_journal.game_positions import stored_moves
from chess_journal.move_index import (
    BLACK,
    WHITE,
    is_white_ply,
    position_at,
    side_to_move_from_fen,
    total_plies,
)

logger = logging.getLogger(__name__)


@dataclass
class MoveIndexIssue:
    mistake_id: str
    game_id: str
    ply_index: int
    reason: str
    suggested_ply: Optional[int] = None
    fixed: bool = False


def parity_matches(ply_index: int, fen: str) -> bool:
    """After a White ply Black is to move, and vice versa. Ply 0 has White to move."""
    side = side_to_move_from_fen(fen)
    if ply_index == 0:
        return side == WHITE
    return side == (BLACK if is_white_ply(ply_index) else WHITE)


def find_matching_ply(moves: list[str], fen: str, near: int) -> Optional[int]:
    """Ply whose replayed FEN equals ``fen``, preferring the one closest to ``near``."""
    matches = [
        ply for ply in range(total_plies(moves) + 1)
        if position_at(moves, ply) == fen
    ]
    if not matches:
        return None
    return min(matches, key=lambda ply: abs(ply - near))


def check_mistake(mistake: Mistake, moves: list[str]) -> Optional[MoveIndexIssue]:
    """None when the mistake is consistent with its game."""
    ply = mistake.ply_index
    if ply < 0 or ply > total_plies(moves):
        reason = f"ply {ply} outside 0..{total_plies(moves)}"
    elif position_at(moves, ply) == mistake.fen_position:
        return None
    elif not parity_matches(ply, mistake.fen_position):
        reason = "side to move in snapshot does not match ply parity"
    else:
        reason = "snapshot differs from replayed position"

    return MoveIndexIssue(
        mistake_id=mistake.id,
        game_id=mistake.game_id,
        ply_index=ply,
        reason=reason,
        suggested_ply=find_matching_ply(moves, mistake.fen_position, ply),
    )


async def audit_move_indexes(db: AsyncSession, fix: bool = False) -> list[MoveIndexIssue]:
    """Check every mistake against its game; optionally move it to the matching ply."""
    result = await db.execute(select(Mistake).options(selectinload(Mistake.game)))
    mistakes = result.scalars().all()

    issues: list[MoveIndexIssue] = []
    moves_by_game: dict[str, list[str]] = {}

    for mistake in mistakes:
        game = mistake.game
        if game.id not in moves_by_game:
            try:
                moves_by_game[game.id] = stored_moves(game)
            except ReplayError as exc:
                issues.append(MoveIndexIssue(
                    mistake_id=mistake.id,
                    game_id=game.id,
                    ply_index=mistake.ply_index,
                    reason=f"game cannot be replayed: {exc}",
                ))
                continue

        issue = check_mistake(mistake, moves_by_game[game.id])
        if issue is None:
            continue

        if fix and issue.suggested_ply is not None:
            logger.info(
                "Moving mistake %s from ply %d to %d",
                mistake.id, mistake.ply_index, issue.suggested_ply,
            )
            mistake.ply_index = issue.suggested_ply
            issue.fixed = True
        issues.append(issue)

    if fix:
        await db.commit()
    return issues
