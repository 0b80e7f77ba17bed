"""Runs the Alembic migrations against a temporary SQLite file."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from cms.core.config import get_settings

ROOT = Path(__file__).resolve().parents[1]


class TestMigrations(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.url = f"sqlite:///{self.path}"
        env = patch.dict(os.environ, {"DATABASE_URL": self.url})
        env.start()
        self.addCleanup(env.stop)
        get_settings.cache_clear()
        self.addCleanup(get_settings.cache_clear)
        self.addCleanup(os.remove, self.path)

        self.config = Config(str(ROOT / "alembic.ini"))
        self.config.set_main_option("script_location", str(ROOT / "alembic"))

    def test_upgrade_creates_all_tables_and_downgrade_drops_them(self) -> None:
        command.upgrade(self.config, "head")
        engine = create_engine(self.url)
        try:
            tables = set(inspect(engine).get_table_names())
            self.assertTrue({"users", "pages", "website", "revoked_tokens"} <= tables)
            email_index = [
                ix for ix in inspect(engine).get_indexes("users") if ix["column_names"] == ["email"]
            ]
            self.assertTrue(email_index[0]["unique"])
        finally:
            engine.dispose()

        command.downgrade(self.config, "base")
        engine = create_engine(self.url)
        try:
            self.assertNotIn("users", inspect(engine).get_table_names())
        finally:
            engine.dispose()
