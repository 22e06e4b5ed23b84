"""Persistence layer: ORM models, the Database handle and repositories."""

from .models import Base, Game, Insight, Mistake
from .session import Database, get_db

__all__ = ["Base", "Database", "Game", "Insight", "Mistake", "get_db"]
