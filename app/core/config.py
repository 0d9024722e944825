from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.lower() in ("true", "1", "yes")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    database_url: str
    sql_echo: bool
    log_level: str
    db_timeout_seconds: float


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Reads settings from the environment (and a local .env, if present) once."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./guilds.db"),
        sql_echo=_env_bool("SQL_ECHO", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        db_timeout_seconds=_env_float("DB_TIMEOUT_SECONDS", 30.0),
    )
