"""
Tests for settings parsing.
"""

import unittest

from pydantic import ValidationError

from tests.helpers import make_settings


class TestSettings(unittest.TestCase):

    def test_postgres_urls_use_asyncpg(self):
        for url in ("postgres://u:p@db:5432/j", "postgresql://u:p@db:5432/j"):
            settings = make_settings(database_url=url)
            self.assertEqual(settings.database_url_async, "postgresql+asyncpg://u:p@db:5432/j")

    def test_other_urls_pass_through(self):
        settings = make_settings(database_url="sqlite+aiosqlite:///journal.db")
        self.assertEqual(settings.database_url_async, "sqlite+aiosqlite:///journal.db")

    def test_cors_origin_list(self):
        settings = make_settings(cors_origins="http://a.test, http://b.test,")
        self.assertEqual(settings.cors_origin_list, ["http://a.test", "http://b.test"])

    def test_log_level_upper_cased(self):
        self.assertEqual(make_settings(log_level="debug").log_level, "DEBUG")

    def test_production_flag(self):
        self.assertFalse(make_settings().is_production)
        self.assertTrue(make_settings(env="production").is_production)

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            make_settings(insight_sample_size=0)
        with self.assertRaises(ValidationError):
            make_settings(env="staging")


if __name__ == "__main__":
    unittest.main()
