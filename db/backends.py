"""
db/backends.py
--------------
A queryable backend: one connection pool plus the knowledge of how to run a
statement on it. Two variants exist for the process lifetime, the primary
(online, DSN-configured) and the local fallback.
"""

from typing import Any, Optional, Sequence

import psycopg2
from psycopg2 import extras

from db.params import Convention
from db.pool import ConnectionPool
from utils.logger import get_logger

logger = get_logger(__name__)


class Backend:
    """Runs statements on a pooled PostgreSQL connection."""

    paramstyle = Convention.FORMAT

    def __init__(self, name: str, pool: ConnectionPool):
        self.name = name
        self.pool = pool

    def run(self, query: str, params: Optional[Sequence[Any]] = None) -> list[dict]:
        """
        Execute one statement and commit.

        Args:
            query: SQL already written in this backend's ``paramstyle``.
            params: Positional parameter values.

        Returns:
            Result rows as dicts; an empty list for statements that return
            nothing.
        """
        conn = self.pool.acquire()
        discard = False
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(query, tuple(params) if params else None)
                rows = [dict(r) for r in cur.fetchall()] if cur.description else []
            conn.commit()
            return rows
        except Exception:
            discard = self._rollback(conn)
            raise
        finally:
            self.pool.release(conn, discard=discard)

    def ping(self) -> None:
        """Round-trip a trivial query; raises on failure."""
        self.run("SELECT 1")

    def close(self) -> None:
        self.pool.close()

    def _rollback(self, conn) -> bool:
        """Roll back after a failure. Returns True if the connection is unusable."""
        if conn.closed:
            return True
        try:
            conn.rollback()
        except psycopg2.Error as e:
            logger.warning(f"Rollback failed on {self.name} database: {e}")
            return True
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class PrimaryBackend(Backend):
    """The externally configured online database."""

    @classmethod
    def from_dsn(
        cls,
        dsn: str,
        require_tls: bool = False,
        max_size: int = 10,
        idle_timeout_ms: int = 30000,
        connect_timeout: int = 10,
    ) -> "PrimaryBackend":
        options: dict[str, Any] = {"connect_timeout": connect_timeout}
        if require_tls:
            # encrypted, certificate not verified
            options["sslmode"] = "require"

        pool = ConnectionPool(
            "primary", dsn, max_size=max_size, idle_timeout_ms=idle_timeout_ms, **options
        )
        return cls("primary", pool)


class FallbackBackend(Backend):
    """The always-configured local database."""

    @classmethod
    def from_params(
        cls,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        max_size: int = 10,
        idle_timeout_ms: int = 30000,
        connect_timeout: int = 10,
    ) -> "FallbackBackend":
        pool = ConnectionPool(
            "fallback",
            max_size=max_size,
            idle_timeout_ms=idle_timeout_ms,
            host=host,
            port=port,
            user=user,
            password=password,
            dbname=database,
            connect_timeout=connect_timeout,
        )
        return cls("fallback", pool)
