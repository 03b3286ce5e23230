"""
Environment-driven settings.

Values are read on every call so tests (and `.env` files loaded at startup)
can change them without reloading modules.
"""

from __future__ import annotations

import os

from .errors import ConfigError

DEFAULT_PORT = 8080
DEFAULT_ADMIN_EMAILS = ("admin@example.com",)

STORAGE_MODE_DATABASE = "database"
STORAGE_MODE_SAMPLE = "sample"
STORAGE_MODES = (STORAGE_MODE_DATABASE, STORAGE_MODE_SAMPLE)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip() or os.environ.get("POSTGRES_URL", "").strip()
    if not url:
        raise ConfigError("DATABASE_URL is not set.")
    return url


def storage_mode() -> str:
    mode = os.environ.get("STORAGE_MODE", STORAGE_MODE_DATABASE).strip().lower() or STORAGE_MODE_DATABASE
    if mode not in STORAGE_MODES:
        raise ConfigError(f"STORAGE_MODE must be one of {', '.join(STORAGE_MODES)}; got {mode!r}.")
    return mode


def pool_min_size() -> int:
    return max(_env_int("DB_POOL_MIN_SIZE", 2), 0)


def pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", 10), 1)


def command_timeout() -> float:
    return float(max(_env_int("DB_COMMAND_TIMEOUT", 30), 1))


def host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def admin_emails() -> list[str]:
    """
    Admin allowlist from ADMIN_EMAILS (comma-separated), else the built-in default.
    """
    emails = _env_list("ADMIN_EMAILS")
    return emails or list(DEFAULT_ADMIN_EMAILS)


def cors_origins() -> list[str]:
    return _env_list("CORS_ORIGINS") or ["*"]
