"""Tests for settings and application startup."""

from __future__ import annotations

import pytest

from chatroom.config import Settings
from chatroom.main import create_app
from chatroom.store import Store


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.sweep_interval == 15.0
        assert settings.stale_after == 10.0
        assert settings.broadcast_target == "Todos"
        assert settings.cors_origins == ["*"]
        assert settings.port == 5000

    def test_threshold_must_be_shorter_than_two_sweeps(self) -> None:
        with pytest.raises(ValueError):
            Settings(sweep_interval=5, stale_after=10)

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        monkeypatch.setenv("CHATROOM_SWEEP_INTERVAL", "30")
        monkeypatch.setenv("CHATROOM_STALE_AFTER", "20")
        monkeypatch.setenv("CHATROOM_BROADCAST_TARGET", "All")
        monkeypatch.setenv("CHATROOM_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("CHATROOM_SQL_ECHO", "true")
        monkeypatch.setenv("CHATROOM_LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///./test.db"
        assert (settings.sweep_interval, settings.stale_after) == (30.0, 20.0)
        assert settings.broadcast_target == "All"
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.echo_sql is True
        assert settings.log_level == "DEBUG"


class TestLifespan:
    async def test_startup_builds_store_and_sweeper(self) -> None:
        settings = Settings(database_url="sqlite+aiosqlite://", sweep_interval=60, stale_after=10)
        app = create_app(settings)
        assert app.state.store is None

        async with app.router.lifespan_context(app):
            assert isinstance(app.state.store, Store)
            await app.state.presence.register("Alice")
            assert [p.name for p in await app.state.presence.list()] == ["Alice"]
