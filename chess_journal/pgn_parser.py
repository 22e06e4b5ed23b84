"""
PGN import – validate movetext by full replay and extract header metadata.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import chess
import chess.pgn

from chess_journal.errors import ParseError
from chess_journal.move_index import BLACK, COLORS, WHITE

# [%clk 0:03:00], [%eval 0.23], [%emt ...] command annotations
_COMMAND_RE = re.compile(r"\[%[^\]]*\]")
_EMPTY_COMMENT_RE = re.compile(r"\{\s*\}")
_HEADER_RE = re.compile(r'^\s*\[(\w+)\s+"([^"]*)"\]', re.MULTILINE)

# Movetext pieces that are not moves
_TAG_PAIR_RE = re.compile(r'\[\s*\w+\s+"(?:[^"\\]|\\.)*"\s*\]')
_BRACE_COMMENT_RE = re.compile(r"\{[^}]*\}")
_LINE_COMMENT_RE = re.compile(r"(?:;|^%)[^\n]*", re.MULTILINE)
_VARIATION_RE = re.compile(r"\([^()]*\)")
_NAG_RE = re.compile(r"\$\d+")
_MOVE_NUMBER_RE = re.compile(r"\b\d+\.+")
_RESULTS = {"1-0", "0-1", "1/2-1/2", "*"}


@dataclass
class ParsedGame:
    headers: dict[str, str]
    moves: list[str]  # mainline SAN, one entry per ply
    result: str = "*"

    @property
    def total_plies(self) -> int:
        return len(self.moves)


@dataclass
class GameMetadata:
    player_color: str
    opponent_rating: Optional[int] = None
    time_control: Optional[str] = None
    date_played: Optional[date] = None
    white_player: Optional[str] = None
    black_player: Optional[str] = None
    result: str = "*"
    total_plies: int = 0
    headers: dict[str, str] = field(default_factory=dict)


def clean_movetext(pgn_text: str) -> str:
    """Strip clock/eval command annotations that some exports embed in comments."""
    text = _COMMAND_RE.sub("", pgn_text)
    text = _EMPTY_COMMENT_RE.sub("", text)
    return text.strip()


def movetext_tokens(pgn_text: str) -> list[str]:
    """
    Mainline move tokens of the text as written, with tag pairs, comments,
    variations, NAGs, move numbers, results and !/? suffixes removed.
    """
    text = _TAG_PAIR_RE.sub(" ", pgn_text)
    text = _BRACE_COMMENT_RE.sub(" ", text)
    text = _LINE_COMMENT_RE.sub(" ", text)
    previous = None
    while previous != text:
        previous = text
        text = _VARIATION_RE.sub(" ", text)
    text = _NAG_RE.sub(" ", text)
    text = _MOVE_NUMBER_RE.sub(" ", text)

    tokens = []
    for token in text.split():
        if token in _RESULTS:
            continue
        token = token.rstrip("!?")
        if token:
            tokens.append(token)
    return tokens


def _check_all_tokens_consumed(cleaned: str, moves: list[str]) -> None:
    """
    read_game skips tokens it cannot tokenize, so replay the written tokens
    and fail on the first one that is not a legal move here.
    """
    tokens = movetext_tokens(cleaned)
    board = chess.Board()
    for token in tokens:
        try:
            board.push(board.parse_san(token))
        except ValueError as exc:
            raise ParseError(f"Invalid PGN format: unrecognised token {token!r}") from exc

    if len(tokens) != len(moves):
        raise ParseError(
            f"Invalid PGN format: movetext has {len(tokens)} moves but {len(moves)} were read"
        )


def parse_pgn(pgn_text: str) -> ParsedGame:
    """
    Parse a single game and return its headers and mainline SAN moves.

    Raises ParseError for empty input, unreadable text or illegal moves.
    Variations are ignored.
    """
    if not pgn_text or not pgn_text.strip():
        raise ParseError("PGN cannot be empty")

    cleaned = clean_movetext(pgn_text)
    stream = io.StringIO(cleaned)

    try:
        game = chess.pgn.read_game(stream)
        extra = chess.pgn.read_game(stream)
    except (ValueError, KeyError) as exc:
        raise ParseError(f"Invalid PGN format: {exc}") from exc

    if game is None:
        raise ParseError("Invalid PGN format: no game found")

    if game.errors:
        raise ParseError(f"Invalid PGN format: {game.errors[0]}")

    if extra is not None and (extra.errors or extra.next() is not None):
        raise ParseError("PGN contains more than one game; import them one at a time")

    moves: list[str] = []
    board = game.board()
    if board.fen() != chess.STARTING_FEN:
        raise ParseError("Games starting from a custom position are not supported")

    for move in game.mainline_moves():
        moves.append(board.san(move))
        board.push(move)

    if not moves and not _HEADER_RE.search(cleaned):
        raise ParseError("Invalid PGN format: no moves or headers found")

    _check_all_tokens_consumed(cleaned, moves)

    headers = {k: v for k, v in game.headers.items()}
    result = headers.get("Result", "*") or "*"

    return ParsedGame(headers=headers, moves=moves, result=result)


# ═══════════════════════════════════════════════════════════
# Header extraction
# ═══════════════════════════════════════════════════════════


def get_player_color(parsed: ParsedGame, player_name: Optional[str] = None) -> str:
    """
    Colour the journaling player had, matched by name against the headers.
    Defaults to white when no name is given or nothing matches.
    """
    if not player_name:
        return WHITE

    search = player_name.lower()
    white_name = parsed.headers.get("White", "").lower()
    black_name = parsed.headers.get("Black", "").lower()

    if search in white_name:
        return WHITE
    if search in black_name:
        return BLACK
    return WHITE


def get_time_control(parsed: ParsedGame) -> Optional[str]:
    tc = parsed.headers.get("TimeControl")
    if not tc or tc in ("?", "-"):
        return None
    return tc


def get_opponent_rating(parsed: ParsedGame, player_color: str) -> Optional[int]:
    key = "BlackElo" if player_color == WHITE else "WhiteElo"
    raw = parsed.headers.get(key)
    if not raw:
        return None
    try:
        return int(raw)
    except (ValueError, TypeError):
        return None


def get_date_played(parsed: ParsedGame) -> Optional[date]:
    """PGN dates are 'YYYY.MM.DD'; unknown parts ('??') give None."""
    date_str = parsed.headers.get("Date") or parsed.headers.get("UTCDate")
    if not date_str:
        return None

    parts = date_str.split(".")
    if len(parts) != 3:
        return None

    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def _player_name(parsed: ParsedGame, key: str) -> Optional[str]:
    name = parsed.headers.get(key, "")
    if not name or name == "?":
        return None
    return name


def extract_game_metadata(
    parsed: ParsedGame,
    player_color: Optional[str] = None,
    player_name: Optional[str] = None,
) -> GameMetadata:
    """Collect everything the game store needs from a parsed game."""
    if player_color is not None and player_color not in COLORS:
        raise ParseError(f"player_color must be 'white' or 'black', got {player_color!r}")

    color = player_color or get_player_color(parsed, player_name)

    return GameMetadata(
        player_color=color,
        opponent_rating=get_opponent_rating(parsed, color),
        time_control=get_time_control(parsed),
        date_played=get_date_played(parsed),
        white_player=_player_name(parsed, "White"),
        black_player=_player_name(parsed, "Black"),
        result=parsed.result,
        total_plies=parsed.total_plies,
        headers=parsed.headers,
    )
