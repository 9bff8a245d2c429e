"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pocket_arcade.config.settings import Settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.points_url == "http://localhost:5000/api/user/points"
        assert settings.games.win_tile == 2048
        assert settings.games.memory_time_s == 120
        assert settings.games.seed is None
        assert not settings.demo

    def test_nested_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("POCKET_ARCADE_WALLET__API_URL", "https://bounty.example/")
        monkeypatch.setenv("POCKET_ARCADE_GAMES__SEED", "42")
        monkeypatch.setenv("POCKET_ARCADE_DEMO", "true")
        monkeypatch.setenv("POCKET_ARCADE_SCORES__PATH", "/tmp/arcade.json")

        settings = Settings(_env_file=None)

        assert settings.points_url == "https://bounty.example/api/user/points"
        assert settings.games.seed == 42
        assert settings.demo
        assert settings.scores.path == Path("/tmp/arcade.json")

    def test_rejects_bad_values(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, display={"fps": 0})
        with pytest.raises(ValidationError):
            Settings(_env_file=None, wallet={"timeout": -1})
