"""Tests for the bounded connection pool."""

import threading

import psycopg2
import pytest
from psycopg2.pool import PoolError

from conftest import auth_failed, connection_refused
from db.pool import ConnectionPool
from errors import BackendUnavailable


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def pool(factory, clock):
    p = ConnectionPool("test", "dbname=records", max_size=2, idle_timeout_ms=60000, clock=clock)
    yield p
    p.close()


def test_nothing_is_opened_up_front(pool, factory):
    assert factory.opened == []


def test_connect_arguments_are_passed_through(factory, clock):
    p = ConnectionPool("test", "postgresql://db/records", max_size=1, clock=clock, connect_timeout=5)
    p.release(p.acquire())
    assert factory.connect_args == [(("postgresql://db/records",), {"connect_timeout": 5})]
    p.close()


def test_released_connection_is_reused(pool, factory):
    conn = pool.acquire()
    pool.release(conn)
    assert pool.acquire() is conn
    assert len(factory.opened) == 1


def test_most_recently_released_connection_is_lent_first(pool):
    first, second = pool.acquire(), pool.acquire()
    pool.release(first)
    pool.release(second)
    assert pool.acquire() is second


def test_acquire_blocks_while_pool_is_exhausted(pool):
    held = [pool.acquire(), pool.acquire()]
    got = threading.Event()

    def borrower():
        conn = pool.acquire()
        got.set()
        pool.release(conn)

    t = threading.Thread(target=borrower, daemon=True)
    t.start()
    assert not got.wait(0.2)

    pool.release(held.pop())
    assert got.wait(2)
    t.join(2)
    pool.release(held.pop())


def test_idle_connections_are_closed_after_timeout(pool, clock):
    conn = pool.acquire()
    pool.release(conn)

    clock.now += 30
    assert pool.reclaim_idle() == 0
    assert pool.idle_count == 1

    clock.now += 31
    assert pool.reclaim_idle() == 1
    assert pool.idle_count == 0
    assert conn.closed


def test_expired_connection_is_replaced_on_acquire(pool, factory, clock):
    stale = pool.acquire()
    pool.release(stale)
    clock.now += 120

    fresh = pool.acquire()
    assert fresh is not stale
    assert stale.closed
    assert len(factory.opened) == 2
    pool.release(fresh)


def test_release_reclaims_other_stale_connections(pool, clock):
    stale, busy = pool.acquire(), pool.acquire()
    pool.release(stale)
    clock.now += 120
    pool.release(busy)

    assert stale.closed
    assert not busy.closed
    assert pool.idle_count == 1


def test_closed_connection_is_not_returned_to_idle(pool):
    conn = pool.acquire()
    conn.closed = 2
    pool.release(conn)
    assert pool.idle_count == 0


def test_discard_closes_connection(pool):
    conn = pool.acquire()
    pool.release(conn, discard=True)
    assert conn.closed
    assert pool.idle_count == 0


def test_context_manager_returns_connection(pool):
    with pool.connection() as conn:
        assert not conn.closed
    assert pool.idle_count == 1


def test_unreachable_server_becomes_backend_unavailable(factory, clock):
    factory.error = connection_refused()
    pool = ConnectionPool("test", max_size=1, clock=clock)
    with pytest.raises(BackendUnavailable) as exc_info:
        pool.acquire()
    assert isinstance(exc_info.value.__cause__, psycopg2.OperationalError)

    # The failed attempt gave its slot back
    factory.error = None
    pool.release(pool.acquire())
    pool.close()


def test_authentication_failure_is_raised_as_is(factory, clock):
    factory.error = auth_failed()
    pool = ConnectionPool("test", max_size=1, clock=clock)
    with pytest.raises(psycopg2.OperationalError, match="password authentication failed"):
        pool.acquire()
    pool.close()


def test_refused_address_then_authentication_failure_is_not_an_outage(factory, clock):
    factory.error = psycopg2.OperationalError(
        'connection to server at "localhost" (::1), port 5432 failed: Connection refused\n'
        "\tIs the server running on that host and accepting TCP/IP connections?\n"
        'connection to server at "localhost" (127.0.0.1), port 5432 failed: '
        'FATAL:  password authentication failed for user "records"'
    )
    pool = ConnectionPool("test", max_size=1, clock=clock)
    with pytest.raises(psycopg2.OperationalError, match="password authentication failed"):
        pool.acquire()
    pool.close()


def test_close_closes_lent_and_idle_connections(pool):
    idle, lent = pool.acquire(), pool.acquire()
    pool.release(idle)
    pool.close()

    assert idle.closed and lent.closed
    pool.release(lent)


def test_closed_pool_refuses_to_lend(pool):
    pool.close()
    with pytest.raises(PoolError):
        pool.acquire()


def test_max_size_must_be_positive(factory):
    with pytest.raises(ValueError):
        ConnectionPool("test", max_size=0)


def test_connection_in_failed_transaction_is_rolled_back_on_return(pool):
    conn = pool.acquire()
    conn.info.transaction_status = psycopg2.extensions.TRANSACTION_STATUS_INERROR
    pool.release(conn)
    assert conn.rollbacks == 1
    assert pool.idle_count == 1

