"""
db/pool.py
----------
Connection pool for one backend, built on psycopg2's ThreadedConnectionPool.

psycopg2's pool raises ``PoolError`` when exhausted; here callers beyond
``max_size`` wait for a free slot instead. Connections are opened on first
use, kept for reuse, and dropped once they have sat idle longer than
``idle_timeout_ms``.
"""

import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator

import psycopg2
from psycopg2 import pool

from db.classifier import Classification, classify
from errors import BackendUnavailable
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionPool(pool.ThreadedConnectionPool):
    """
    A bounded set of reusable connections to one database.

    Args:
        name: Label used in logs ("primary", "fallback").
        *args, **kwargs: Passed to ``psycopg2.connect`` for every new connection.
        max_size: Maximum connections outstanding at once.
        idle_timeout_ms: Idle connections older than this are closed.
        clock: Monotonic time source (seconds).
    """

    def __init__(
        self,
        name: str,
        *args,
        max_size: int = 10,
        idle_timeout_ms: int = 30000,
        clock: Callable[[], float] = time.monotonic,
        **kwargs,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        super().__init__(0, max_size, *args, **kwargs)
        # Nothing is opened up front, but every returned connection is kept
        self.minconn = max_size
        self.name = name
        self.max_size = max_size
        self.idle_timeout_ms = idle_timeout_ms
        self._clock = clock
        self._slots = threading.BoundedSemaphore(max_size)
        self._idle_since: dict[int, float] = {}

    # ── Lending ───────────────────────────────────────────

    def acquire(self):
        """
        Borrow a connection, blocking while ``max_size`` are already lent.

        Raises:
            BackendUnavailable: If a new connection is needed and the server
                cannot be reached.
            psycopg2.OperationalError: If the server was reached but refused
                the connection (e.g. authentication failure).
            psycopg2.pool.PoolError: If the pool has been closed.
        """
        self._slots.acquire()
        try:
            self.reclaim_idle()
            return self.getconn()
        except psycopg2.OperationalError as e:
            self._slots.release()
            if classify(e) is Classification.RETRYABLE:
                raise BackendUnavailable(
                    f"Database '{self.name}' is unreachable: {str(e).strip()}"
                ) from e
            raise
        except BaseException:
            self._slots.release()
            raise

    def release(self, conn, discard: bool = False) -> None:
        """
        Return a connection to the pool.

        Args:
            conn: A connection obtained from ``acquire``.
            discard: Close the connection instead of keeping it for reuse.
                Connections that are already closed are never kept.
        """
        try:
            if self.closed:
                self._close_quietly(conn)
                return
            self.putconn(conn, close=discard)
            with self._lock:
                if conn in self._pool:
                    self._idle_since[id(conn)] = self._clock()
            self.reclaim_idle()
        finally:
            self._slots.release()

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Lend a connection for the duration of a ``with`` block."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    # ── Idle reclaim ──────────────────────────────────────

    def reclaim_idle(self) -> int:
        """Close connections idle longer than the timeout. Returns how many."""
        cutoff = self._clock() - self.idle_timeout_ms / 1000.0
        with self._lock:
            if self.closed:
                return 0
            expired = [
                conn for conn in self._pool
                if self._idle_since.get(id(conn), cutoff + 1) <= cutoff
            ]
            self._pool = [conn for conn in self._pool if conn not in expired]
            live = {id(conn) for conn in self._pool}
            self._idle_since = {k: v for k, v in self._idle_since.items() if k in live}
        for conn in expired:
            self._close_quietly(conn)
        if expired:
            logger.debug(f"Reclaimed {len(expired)} idle connection(s) from '{self.name}' pool.")
        return len(expired)

    @property
    def idle_count(self) -> int:
        with self._lock:
            return len(self._pool)

    def close(self) -> None:
        """Close every connection and refuse further lending."""
        if self.closed:
            return
        self.closeall()
        self._idle_since.clear()
        logger.info(f"Connection pool '{self.name}' closed.")

    def _close_quietly(self, conn) -> None:
        try:
            conn.close()
        except psycopg2.Error as e:
            logger.warning(f"Failed to close connection from '{self.name}' pool: {e}")
