"""Environment-driven settings.

Every value is read from the process environment at call time so tests can
patch ``os.environ`` without reloading modules.
"""

from __future__ import annotations

import os

VARIANT_HARMONY = "harmony"
VARIANT_LEGACY = "legacy"
VARIANTS = (VARIANT_HARMONY, VARIANT_LEGACY)

_DEFAULT_POOL_MIN = 1
_DEFAULT_POOL_MAX = 10
_DEFAULT_STATEMENT_TIMEOUT_MS = 15_000


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def get_variant() -> str:
    variant = os.environ.get("API_VARIANT", VARIANT_HARMONY).strip().lower()
    if variant not in VARIANTS:
        raise RuntimeError(f"API_VARIANT must be one of {', '.join(VARIANTS)}, got {variant!r}")
    return variant


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def get_pool_bounds() -> tuple[int, int]:
    min_size = _int_env("DB_POOL_MIN_SIZE", _DEFAULT_POOL_MIN)
    max_size = _int_env("DB_POOL_MAX_SIZE", _DEFAULT_POOL_MAX)
    if min_size < 0 or max_size < 1 or min_size > max_size:
        raise RuntimeError(f"invalid pool bounds: min={min_size} max={max_size}")
    return min_size, max_size


def get_sslmode() -> str:
    # libpq "require" encrypts the link but skips certificate verification.
    return os.environ.get("DB_SSLMODE", "require").strip() or "require"


def get_statement_timeout_ms() -> int:
    return max(0, _int_env("DB_STATEMENT_TIMEOUT_MS", _DEFAULT_STATEMENT_TIMEOUT_MS))


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def get_cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]
