"""
Chess Journal

Single-user chess mistake journal: import games from PGN, annotate positions
with reflections and tags, then query and summarise those annotations.

Modules:
- move_index: ply bookkeeping, position replay and the navigation cursor
- pgn_parser: PGN validation and header extraction for imports
- db: ORM models, the Database handle and repositories
- routes: FastAPI routers (see main.create_app)
"""

from .errors import DuplicateGameError, IndexOutOfRange, JournalError, ParseError, ReplayError
from .move_index import (
    STARTING_FEN,
    MoveCursor,
    format_move_display,
    is_white_ply,
    move_number_and_color_to_ply,
    ply_to_move_number,
    position_at,
    resolve_move_reference,
    total_plies,
)
from .pgn_parser import ParsedGame, parse_pgn

__all__ = [
    "DuplicateGameError",
    "IndexOutOfRange",
    "JournalError",
    "ParseError",
    "ReplayError",
    "STARTING_FEN",
    "MoveCursor",
    "format_move_display",
    "is_white_ply",
    "move_number_and_color_to_ply",
    "ply_to_move_number",
    "position_at",
    "resolve_move_reference",
    "total_plies",
    "ParsedGame",
    "parse_pgn",
]
