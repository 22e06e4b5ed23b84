"""
Domain errors for the mistake journal.

None of these are transient, so callers never retry them.
"""

from __future__ import annotations


class JournalError(Exception):
    """Base class for journal errors."""


class ParseError(JournalError):
    """Movetext could not be parsed or replayed as legal chess."""


class IndexOutOfRange(JournalError):
    """A ply index fell outside ``[0, total_plies]``."""

    def __init__(self, ply_index: int, total_plies: int):
        self.ply_index = ply_index
        self.total_plies = total_plies
        super().__init__(
            f"Ply {ply_index} is out of range (0..{total_plies})"
        )


class ReplayError(JournalError):
    """Stored, previously validated movetext failed to replay."""

    def __init__(self, message: str, ply_index: int | None = None):
        self.ply_index = ply_index
        super().__init__(message)


class DuplicateGameError(JournalError):
    """A game with identical movetext already exists."""
