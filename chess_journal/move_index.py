"""
Move-Index Model – ply bookkeeping and position replay.

Conventions used throughout the journal:

- ``ply_index`` counts completed half-moves. Ply 0 is the initial position,
  ply 1 is the position after White's first move, ply 2 after Black's first
  move, and so on.
- A move number is the conventional 1-based counter that increments after
  Black moves. Ply 1 and ply 2 both belong to move 1.

Every conversion between the two lives here. Call sites must not re-derive
``(move_number - 1) * 2 + ...`` inline.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import chess

from chess_journal.errors import IndexOutOfRange, ReplayError

logger = logging.getLogger(__name__)

STARTING_FEN = chess.STARTING_FEN

WHITE = "white"
BLACK = "black"
COLORS = (WHITE, BLACK)


# ═══════════════════════════════════════════════════════════
# Replay
# ═══════════════════════════════════════════════════════════


def total_plies(moves: Sequence[str]) -> int:
    """Number of half-moves in an already validated SAN move list."""
    return len(moves)


def check_ply(moves: Sequence[str], ply_index: int) -> None:
    """Raise ``IndexOutOfRange`` unless ``0 <= ply_index <= total_plies``."""
    total = total_plies(moves)
    if ply_index < 0 or ply_index > total:
        raise IndexOutOfRange(ply_index, total)


def board_at(moves: Sequence[str], ply_index: int) -> chess.Board:
    """
    Replay ``moves[:ply_index]`` on a fresh board and return it.

    The board is private to this call, so concurrent requests never share
    replay state.
    """
    check_ply(moves, ply_index)

    board = chess.Board()
    for i, san in enumerate(moves[:ply_index]):
        try:
            board.push_san(san)
        except ValueError as exc:
            raise ReplayError(
                f"Failed to replay ply {i + 1} ({san}): {exc}", ply_index=i + 1
            ) from exc
    return board


def position_at(moves: Sequence[str], ply_index: int) -> str:
    """FEN of the position reached after ``ply_index`` half-moves."""
    check_ply(moves, ply_index)
    if ply_index == 0:
        return STARTING_FEN
    return board_at(moves, ply_index).fen()


def move_at(moves: Sequence[str], ply_index: int) -> Optional[str]:
    """SAN of the move that produced ``ply_index`` (None at the start)."""
    check_ply(moves, ply_index)
    if ply_index == 0:
        return None
    return moves[ply_index - 1]


# ═══════════════════════════════════════════════════════════
# Ply <-> move number
# ═══════════════════════════════════════════════════════════


def ply_to_move_number(ply_index: int) -> int:
    """
    Move number of the half-move that produced ``ply_index``.

    Ply 0 yields 0, which display code renders as "Start".
    """
    if ply_index < 0:
        raise ValueError(f"ply_index must be non-negative, got {ply_index}")
    return (ply_index + 1) // 2


def is_white_ply(ply_index: int) -> bool:
    """True when the half-move producing ``ply_index`` was played by White."""
    return ply_index % 2 == 1


def ply_color(ply_index: int) -> Optional[str]:
    """'white' / 'black' for the side that produced the ply, None at ply 0."""
    if ply_index == 0:
        return None
    return WHITE if is_white_ply(ply_index) else BLACK


def move_number_and_color_to_ply(move_number: int, color: str) -> int:
    """
    Ply produced by ``color``'s move ``move_number``.

    Unclamped. Use ``resolve_move_reference`` for navigation targets.
    """
    if color not in COLORS:
        raise ValueError(f"color must be 'white' or 'black', got {color!r}")
    if move_number < 1:
        raise ValueError(f"move_number must be >= 1, got {move_number}")
    if color == WHITE:
        return (move_number - 1) * 2 + 1
    return (move_number - 1) * 2 + 2


def clamp_ply(ply_index: int, total: int) -> int:
    return max(0, min(ply_index, total))


def resolve_move_reference(move_number: int, color: str, total: int) -> int:
    """
    Best-effort ply for "``color``'s move ``move_number``" in a game of
    ``total`` plies. References past the end land on the final ply.
    """
    ply = move_number_and_color_to_ply(move_number, color)
    clamped = clamp_ply(ply, total)
    if clamped != ply:
        logger.debug(
            "Clamped move reference %s/%s from ply %d to %d (total %d)",
            move_number, color, ply, clamped, total,
        )
    return clamped


def format_move_display(ply_index: int) -> str:
    """'Start', 'Move 5' (White) or 'Move 5...' (Black)."""
    if ply_index == 0:
        return "Start"
    suffix = "" if is_white_ply(ply_index) else "..."
    return f"Move {ply_to_move_number(ply_index)}{suffix}"


def side_to_move_from_fen(fen: str) -> str:
    """'white' or 'black' from the active-colour field of a FEN."""
    parts = fen.split()
    if len(parts) < 2 or parts[1] not in ("w", "b"):
        raise ValueError(f"Malformed FEN: {fen!r}")
    return WHITE if parts[1] == "w" else BLACK


# ═══════════════════════════════════════════════════════════
# Navigation cursor
# ═══════════════════════════════════════════════════════════


class MoveCursor:
    """
    Forward / backward / jump navigation over a fixed move list.

    The only state is ``current_ply``. The board is always re-derived with
    ``position_at`` so the cursor and the displayed position cannot diverge.
    """

    def __init__(self, moves: Sequence[str], start_ply: int = 0):
        self._moves = tuple(moves)
        check_ply(self._moves, start_ply)
        self._ply = start_ply

    @property
    def moves(self) -> tuple[str, ...]:
        return self._moves

    @property
    def current_ply(self) -> int:
        return self._ply

    @property
    def total_plies(self) -> int:
        return total_plies(self._moves)

    def advance(self) -> bool:
        if not self.can_advance():
            return False
        self._ply += 1
        return True

    def retreat(self) -> bool:
        if not self.can_retreat():
            return False
        self._ply -= 1
        return True

    def seek(self, ply_index: int) -> None:
        """Jump to ``ply_index``; on ``IndexOutOfRange`` the cursor is untouched."""
        check_ply(self._moves, ply_index)
        self._ply = ply_index

    def go_to_start(self) -> None:
        self._ply = 0

    def go_to_end(self) -> None:
        self._ply = self.total_plies

    def at_start(self) -> bool:
        return self._ply == 0

    def at_end(self) -> bool:
        return self._ply == self.total_plies

    def can_advance(self) -> bool:
        return self._ply < self.total_plies

    def can_retreat(self) -> bool:
        return self._ply > 0

    def fen(self) -> str:
        return position_at(self._moves, self._ply)

    def current_move(self) -> Optional[str]:
        return move_at(self._moves, self._ply)

    def display(self) -> str:
        return format_move_display(self._ply)

    def __repr__(self) -> str:
        return f"MoveCursor(ply={self._ply}/{self.total_plies})"
