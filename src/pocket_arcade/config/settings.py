"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested values use a double underscore, e.g. ``POCKET_ARCADE_WALLET__API_URL``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WalletSettings(BaseModel):
    """Points wallet API."""

    api_url: str = "http://localhost:5000"
    points_path: str = "/api/user/points"
    user_path: str = "/api/auth/user"

    # Session cookie forwarded verbatim to the API (``connect.sid=...``)
    session_cookie: str = ""

    timeout: float = Field(default=10.0, gt=0)


class DisplaySettings(BaseModel):
    """Simulator window settings."""

    fps: int = Field(default=60, ge=1, le=240)
    scale: float = Field(default=1.5, gt=0)
    title: str = "Pocket Arcade"
    hud_height: int = 48


class ScoreSettings(BaseModel):
    """Best-score persistence."""

    path: Path = Field(default_factory=lambda: Path.home() / ".pocket_arcade" / "best_scores.json")
    persist: bool = True


class GameSettings(BaseModel):
    """Tunables shared with the games."""

    win_tile: int = Field(default=2048, ge=4)
    memory_time_s: int = Field(default=120, ge=1)
    whack_time_s: int = Field(default=60, ge=1)

    # Fixed seed for a reproducible session; None draws from the OS
    seed: Optional[int] = None


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="POCKET_ARCADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False
    demo: bool = False
    log_file: Optional[Path] = None

    # Nested settings
    wallet: WalletSettings = Field(default_factory=WalletSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    scores: ScoreSettings = Field(default_factory=ScoreSettings)
    games: GameSettings = Field(default_factory=GameSettings)

    @property
    def points_url(self) -> str:
        """Full URL of the points-award endpoint."""
        return self.wallet.api_url.rstrip("/") + self.wallet.points_path

    @property
    def user_url(self) -> str:
        """Full URL of the signed-in user endpoint, read for the balance."""
        return self.wallet.api_url.rstrip("/") + self.wallet.user_path


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
