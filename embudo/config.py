"""EMBUDO — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Remote Sheet ──
    sheet_csv_url: str = ""
    sheet_fetch_timeout: float = 30.0

    # ── Parsing ──
    header_scan_rows: int = 10
    fallback_year: int = 2025  # Monthly sheets without a "20xx" token

    # ── Database ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    sync_on_startup: bool = True
    scheduler_enabled: bool = False
    sync_interval_minutes: int = 60

    @property
    def effective_database_url(self) -> str:
        """Return the configured database URL, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/embudo.db"
        return "sqlite:///./embudo.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
