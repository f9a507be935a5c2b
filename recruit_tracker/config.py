"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Recruit Tracker"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite:// accepted for tests)
    database_url: str = "postgresql+psycopg://localhost:5432/recruit_tracker_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""
    internal_job_token: str = ""  # Required for /internal/* endpoints

    # Suggestions
    suggestion_duplicate_window_days: int = 7
    suggestion_surface_limit: int = 3  # max promoted from pending per trigger
    suggestion_reevaluate_after_days: int = 14  # dismissed rows older than this may reappear
    # When True, a logged interaction only completes log_interaction suggestions
    # tagged to the same school instead of every open one.
    suggestion_autocomplete_strict: bool = False
    # "D1:2026-11-09:2026-11-12,D2:..." ; empty = no dead periods
    suggestion_dead_periods: list[tuple[str, str, str]] = ()

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'recruit_tracker_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")
        self.internal_job_token = os.getenv("INTERNAL_JOB_TOKEN", "")

        self.suggestion_duplicate_window_days = int(
            os.getenv(
                "SUGGESTION_DUPLICATE_WINDOW_DAYS",
                str(self.suggestion_duplicate_window_days),
            )
        )
        self.suggestion_surface_limit = int(
            os.getenv("SUGGESTION_SURFACE_LIMIT", str(self.suggestion_surface_limit))
        )
        self.suggestion_reevaluate_after_days = int(
            os.getenv(
                "SUGGESTION_REEVALUATE_AFTER_DAYS",
                str(self.suggestion_reevaluate_after_days),
            )
        )
        self.suggestion_autocomplete_strict = (
            os.getenv("SUGGESTION_AUTOCOMPLETE_STRICT", "false").lower() == "true"
        )

        # Dead periods: comma-separated DIV:START:END entries, dates as YYYY-MM-DD
        _raw = os.getenv("SUGGESTION_DEAD_PERIODS", "").strip()
        periods: list[tuple[str, str, str]] = []
        for entry in _raw.split(","):
            parts = [p.strip() for p in entry.split(":")]
            if len(parts) == 3 and all(parts):
                periods.append((parts[0].upper(), parts[1], parts[2]))
        self.suggestion_dead_periods = periods
