from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    log_level: str

    # External profile fetch API
    profile_api_url: str | None
    profile_api_token: str | None
    fetch_delay_seconds: float
    http_timeout_seconds: int
    max_retries: int

    # Validation limits
    max_headline_length: int
    max_summary_length: int
    max_connections: int

    # Runs
    default_run_kind: str  # full | incremental
    runs_list_limit: int

    # Output
    export_dir: str = "exports"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    default_run_kind = os.getenv("DEFAULT_RUN_KIND", "incremental").lower()
    if default_run_kind not in ("full", "incremental"):
        raise RuntimeError(
            f"DEFAULT_RUN_KIND must be 'full' or 'incremental', got {default_run_kind!r}"
        )
    return Settings(
        db_path=os.getenv("DB_PATH", "profiles.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        profile_api_url=os.getenv("PROFILE_API_URL"),
        profile_api_token=os.getenv("PROFILE_API_TOKEN"),
        fetch_delay_seconds=float(os.getenv("FETCH_DELAY_SECONDS", "0.5")),
        http_timeout_seconds=int(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
        max_retries=int(os.getenv("MAX_RETRIES", "3")),
        max_headline_length=int(os.getenv("MAX_HEADLINE_LENGTH", "220")),
        max_summary_length=int(os.getenv("MAX_SUMMARY_LENGTH", "2600")),
        max_connections=int(os.getenv("MAX_CONNECTIONS", "30000")),
        default_run_kind=default_run_kind,
        runs_list_limit=int(os.getenv("RUNS_LIST_LIMIT", "10")),
        export_dir=os.getenv("EXPORT_DIR", "exports"),
    )
