#!/usr/bin/env python3
"""
Audit journaled mistakes for ply-index drift.

Replays each mistake's game to its recorded ply and compares the result with
the stored FEN snapshot. With --fix, mismatched rows are moved to the ply
whose position matches the snapshot.

Usage:
    DATABASE_URL=... python scripts/check_move_index.py [--fix]
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from chess_journal.config import get_settings
from chess_journal.db.session import Database
from chess_journal.main import configure_logging
from chess_journal.move_index_audit import audit_move_indexes


async def main(fix: bool) -> int:
    settings = get_settings()
    configure_logging(settings)
    database = Database.from_settings(settings)

    try:
        async with database.session() as db:
            issues = await audit_move_indexes(db, fix=fix)
    finally:
        await database.dispose()

    if not issues:
        print("All mistakes match their games")
        return 0

    for issue in issues:
        status = "fixed" if issue.fixed else "needs attention"
        target = f" -> {issue.suggested_ply}" if issue.suggested_ply is not None else ""
        print(
            f"{issue.mistake_id} (game {issue.game_id}) ply {issue.ply_index}{target}: "
            f"{issue.reason} [{status}]"
        )

    print(f"\n{len(issues)} inconsistent mistakes, {sum(i.fixed for i in issues)} fixed")
    return 0 if fix and all(i.fixed for i in issues) else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--fix", action="store_true", help="rewrite mismatched ply indexes")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.fix)))
