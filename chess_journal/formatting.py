"""Display helpers for game metadata."""

from __future__ import annotations

from typing import Optional


def format_time_control(tc: Optional[str]) -> str:
    """
    Convert a PGN time control in seconds to minutes.

    "180+2" -> "3+2", "600" -> "10". Anything unparseable is returned as-is.
    """
    if not tc:
        return ""

    base, sep, increment = tc.partition("+")
    try:
        minutes = int(base) // 60
    except ValueError:
        return tc

    if sep:
        return f"{minutes}+{increment}"
    return str(minutes)
