"""
Environment-backed settings.

Every reader falls back to its default when the variable is unset, empty
or unparsable, so a half-configured dev shell still boots.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def pool_min_size() -> int:
    return max(env_int("DB_POOL_MIN_SIZE", 1), 1)


def pool_max_size() -> int:
    return max(env_int("DB_POOL_MAX_SIZE", 5), pool_min_size())


def command_timeout_s() -> int:
    return env_int("DB_COMMAND_TIMEOUT_S", 30)


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
