from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from .config import get_database_url, get_pool_bounds, get_sslmode, get_statement_timeout_ms

log = logging.getLogger(__name__)

_pool: ConnectionPool | None = None


def _connection_kwargs() -> dict:
    kwargs: dict = {"row_factory": dict_row, "sslmode": get_sslmode()}
    timeout_ms = get_statement_timeout_ms()
    if timeout_ms:
        kwargs["options"] = f"-c statement_timeout={timeout_ms}"
    return kwargs


def open_pool() -> ConnectionPool:
    """Open the process-wide connection pool (idempotent)."""
    global _pool
    if _pool is not None:
        return _pool

    min_size, max_size = get_pool_bounds()
    pool = ConnectionPool(
        get_database_url(),
        min_size=min_size,
        max_size=max_size,
        kwargs=_connection_kwargs(),
        open=False,
    )
    pool.open(wait=min_size > 0)
    _pool = pool
    log.info("connection pool opened (min=%s max=%s)", min_size, max_size)
    return pool


def close_pool() -> None:
    """Drain and close the pool. Safe to call when it was never opened."""
    global _pool
    if _pool is None:
        return
    pool, _pool = _pool, None
    pool.close()
    log.info("connection pool closed")


def get_pool() -> ConnectionPool:
    if _pool is None:
        raise RuntimeError("connection pool is not open")
    return _pool


@contextmanager
def db_conn() -> Iterator[psycopg.Connection]:
    """Borrow a pooled connection.

    The pool commits when the block exits normally and rolls back when it
    raises, so single-statement handlers need no explicit ``commit()``.
    """
    with get_pool().connection() as conn:
        yield conn
