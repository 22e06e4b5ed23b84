"""Test wiring: in-memory database, settings and an API test base class."""

import unittest

import httpx
from sqlalchemy.pool import StaticPool

from chess_journal.config import Settings
from chess_journal.db.session import Database
from chess_journal.main import create_app
from tests.sample_pgns import SIMPLE_GAME

TEST_DB_URL = "sqlite+aiosqlite://"


def make_database() -> Database:
    return Database(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": TEST_DB_URL,
        "site_password": "",
        "session_secret": "test-secret",
        "openai_api_key": "",
        "player_name": None,
        "env": "test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class ApiTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh app and database per test. ASGITransport skips lifespan, so tables are created here."""

    settings_overrides: dict = {}

    async def asyncSetUp(self):
        self.settings = make_settings(**self.settings_overrides)
        self.database = make_database()
        await self.database.create_all()
        self.app = create_app(self.settings, self.database)
        self.client = self._client()

    async def asyncTearDown(self):
        await self.client.aclose()
        await self.database.dispose()

    def _client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app),
            base_url="http://test",
            **kwargs,
        )

    async def import_game(self, pgn=SIMPLE_GAME, **extra) -> dict:
        resp = await self.client.post("/api/games", json={"pgn": pgn, **extra})
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    async def record_mistake(self, game_id, ply, tag="tactics", description="Missed it") -> dict:
        resp = await self.client.post("/api/mistakes", json={
            "game_id": game_id,
            "ply_index": ply,
            "brief_description": description,
            "primary_tag": tag,
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()
