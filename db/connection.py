"""
db/connection.py
----------------
The query execution facade: the only sanctioned way into the database.

``init_pool()`` builds the primary (optional) and fallback backends once per
process; repositories then call ``execute`` / ``query_one``.
"""

from typing import Any, Optional, Sequence

import psycopg2

import config
from db.backends import FallbackBackend, PrimaryBackend
from db.classifier import Classification, classify, sqlstate_of
from db.params import count_placeholders
from db.router import FailoverRouter, WarningState
from errors import BackendUnavailable, QueryRejected, RecordsError
from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Execute / query-one semantics on top of a ``FailoverRouter``."""

    def __init__(self, router: FailoverRouter):
        self.router = router

    def execute(self, query: str, params: Sequence[Any] = ()) -> list[dict]:
        """
        Run a statement and return all result rows.

        Returns:
            A list of row dicts (empty on zero matches). For INSERT/UPDATE
            statements with RETURNING, the returned rows.

        Raises:
            QueryRejected: Placeholder/parameter mismatch, or the backend
                rejected the statement.
            BackendUnavailable: Neither backend could be reached.
        """
        params = list(params or ())
        expected = count_placeholders(query)
        if expected != len(params):
            raise QueryRejected(
                f"Query expects {expected} parameter(s) but {len(params)} were supplied."
            )

        try:
            return self.router.run(query, params)
        except RecordsError as e:
            logger.error(f"Database query error: {e}")
            raise
        except (psycopg2.Error, OSError) as e:
            logger.error(f"Database query error: {e}")
            if classify(e) is Classification.RETRYABLE:
                raise BackendUnavailable(f"Database unavailable: {str(e).strip()}") from e
            raise QueryRejected(str(e).strip() or type(e).__name__, sqlstate=sqlstate_of(e)) from e

    def query_one(self, query: str, params: Sequence[Any] = ()) -> Optional[dict]:
        """Return the first row, or None when nothing matches."""
        rows = self.execute(query, params)
        return rows[0] if rows else None

    def test_connection(self) -> bool:
        """Liveness check over primary then fallback. Never raises."""
        return self.router.test_connection()

    def close(self) -> None:
        self.router.close()


_database: Optional[Database] = None
_warnings = WarningState()


def init_pool() -> None:
    """
    Build the primary and fallback backends from ``config``.
    Safe to call multiple times.
    """
    global _database
    if _database is not None:
        return

    primary = None
    if config.DATABASE_URL:
        primary = PrimaryBackend.from_dsn(
            config.DATABASE_URL,
            require_tls=config.DB_SSL,
            max_size=config.DB_POOL_MAX,
            idle_timeout_ms=config.DB_IDLE_TIMEOUT_MS,
            connect_timeout=config.DB_CONNECT_TIMEOUT,
        )
    fallback = FallbackBackend.from_params(
        host=config.DB_HOST,
        port=config.DB_PORT,
        user=config.DB_USER,
        password=config.DB_PASSWORD,
        database=config.DB_NAME,
        max_size=config.DB_POOL_MAX,
        idle_timeout_ms=config.DB_IDLE_TIMEOUT_MS,
        connect_timeout=config.DB_CONNECT_TIMEOUT,
    )
    _database = Database(FailoverRouter(primary, fallback, _warnings))
    label = "primary + fallback" if primary else "fallback only"
    logger.info(f"Database pools initialized ({label}).")


def get_database() -> Database:
    """
    Get the process-wide facade.

    Raises:
        RuntimeError: If the pools have not been initialized.
    """
    if _database is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _database


def execute(query: str, params: Sequence[Any] = ()) -> list[dict]:
    return get_database().execute(query, params)


def query_one(query: str, params: Sequence[Any] = ()) -> Optional[dict]:
    return get_database().query_one(query, params)


def test_connection() -> bool:
    return get_database().test_connection()


def close_pool() -> None:
    """Close all connections in both pools."""
    global _database
    if _database is not None:
        _database.close()
        _database = None
        logger.info("Database connection pools closed.")
