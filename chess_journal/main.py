"""
Chess Journal Backend - FastAPI Application

Main application factory with middleware, routes, and lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chess_journal.config import Settings, get_settings
from chess_journal.db.session import Database
from chess_journal.errors import ReplayError
from chess_journal.routes import auth, games, health, insights, mistakes, stats, tags

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def _replay_error_handler(request: Request, exc: ReplayError):
    logger.error("Replay failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Stored game could not be replayed"},
    )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    owns_database = database is None
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown lifecycle."""
        # Create tables if they don't exist (dev only; run migrations in prod)
        if not settings.is_production:
            await database.create_all()

        # One pooled client for LLM calls unless the caller supplied one
        owns_llm_client = getattr(app.state, "llm_client", None) is None
        if owns_llm_client:
            app.state.llm_client = httpx.AsyncClient(timeout=60)

        yield

        if owns_llm_client:
            await app.state.llm_client.aclose()
            app.state.llm_client = None
        if owns_database:
            await database.dispose()

    app = FastAPI(
        title="Chess Journal API",
        version="1.0.0",
        description="Single-user chess mistake journal – import games, annotate positions, find patterns",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # ── CORS ──
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ReplayError, _replay_error_handler)

    # ── Routes ──
    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(games.router, prefix="/api/games", tags=["games"])
    app.include_router(mistakes.router, prefix="/api/mistakes", tags=["mistakes"])
    app.include_router(tags.router, prefix="/api/tags", tags=["tags"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(insights.router, prefix="/api/insights", tags=["insights"])

    return app
