"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Space Compliance Engine"
    debug: bool = False

    # ── Catalogs ─────────────────────────────────────────
    catalog_dir: str = ""  # empty = packaged catalog/data directory
    default_framework: str = "eu_space_act"

    # ── Rules ────────────────────────────────────────────
    rules_config_path: str = ""  # JSON file with rule table overrides

    # ── API ──────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
