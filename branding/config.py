"""
Application configuration loaded from environment variables.

All variables use the ``BRANDING_`` prefix and may also be placed in a
``.env`` file next to the process working directory, e.g.::

    BRANDING_API_TOKEN=change-me
    BRANDING_PUBLIC_DIR=/srv/branding/public
    BRANDING_PUBLIC_URL=https://cdn.example.com/storage
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

ASSETS_DIR = Path(__file__).resolve().parent / "assets"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BRANDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared secret expected as "Authorization: Bearer <token>".
    # Empty means every request is rejected.
    api_token: str = ""

    # Where branded images are written and how they are addressed publicly.
    public_dir: Path = Path("./storage/public")
    public_url: Optional[str] = None

    # Logo variants and the caption font
    assets_dir: Path = ASSETS_DIR
    logo_black: str = "logo_black.png"
    logo_white: str = "logo_white.png"
    font_file: str = "Lato-Light.ttf"

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    host: str = "0.0.0.0"
    port: int = 8000

    def asset_path(self, name: str) -> Path:
        return self.assets_dir / name

    @property
    def font_path(self) -> Path:
        return self.asset_path(self.font_file)


@lru_cache
def get_settings() -> Settings:
    return Settings()
