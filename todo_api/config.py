# todo_api/config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

# ---------------- ENV ----------------
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./tasks.db"
    sql_echo: bool = False
    api_prefix: str = "/api"
    frontend_origin: str | None = None
    log_level: str = "INFO"
    log_dir: str | None = None
    host: str = "127.0.0.1"
    port: int = 3030


def load_settings() -> Settings:
    # If DATABASE_URL is NOT provided -> use local SQLite
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./tasks.db"),
        sql_echo=_env_bool("SQL_ECHO"),
        api_prefix=os.getenv("API_PREFIX", "/api").rstrip("/"),
        frontend_origin=os.getenv("FRONTEND_ORIGIN") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LOG_DIR") or None,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3030")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
