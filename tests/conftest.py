"""Pytest configuration, fakes and fixtures.

Nothing here needs a live PostgreSQL server: connections, backends and the
records tables are replaced by in-memory stand-ins.
"""

import threading
from datetime import datetime
from types import SimpleNamespace
from typing import Callable, Optional

import psycopg2
import pytest
from psycopg2 import extensions

from db.connection import Database
from db.params import Convention
from db.router import FailoverRouter, WarningState
from models.user import SessionUser
from security.permissions import Role


# ── Driver errors ─────────────────────────────────────────


class FakePgError(psycopg2.DatabaseError):
    """A driver error carrying a SQLSTATE, as the server would send it."""

    def __init__(self, message: str, sqlstate: str):
        super().__init__(message)
        self.sqlstate = sqlstate


def connection_refused() -> psycopg2.OperationalError:
    return psycopg2.OperationalError(
        'connection to server at "db.example.com" (10.0.0.5), port 5432 failed: '
        "Connection refused\n\tIs the server running on that host and accepting TCP/IP connections?"
    )


def auth_failed() -> psycopg2.OperationalError:
    return psycopg2.OperationalError(
        'connection to server at "db.example.com" (10.0.0.5), port 5432 failed: '
        'FATAL:  password authentication failed for user "records"'
    )


# ── Connections ───────────────────────────────────────────


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn
        self.description = None
        self._rows: list[dict] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        self.conn.statements.append((query, params))
        if self.conn.fail_with is not None:
            if self.conn.drop_on_failure:
                self.conn.closed = 2
            raise self.conn.fail_with
        self._rows = list(self.conn.rows)
        self.description = [("column",)] if self.conn.returns_rows else None

    def fetchall(self):
        return self._rows


class FakeConnection:
    def __init__(self, rows=None, fail_with=None, returns_rows=True, drop_on_failure=False):
        self.rows = rows or []
        self.fail_with = fail_with
        self.returns_rows = returns_rows
        self.drop_on_failure = drop_on_failure
        self.statements: list = []
        self.closed = 0
        self.commits = 0
        self.rollbacks = 0
        self.info = SimpleNamespace(transaction_status=extensions.TRANSACTION_STATUS_IDLE)

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = 1


class ConnectionFactory:
    """Stands in for ``psycopg2.connect``; records every connection it opens."""

    def __init__(self, make: Callable[[], FakeConnection] = FakeConnection, error=None):
        self.make = make
        self.error = error
        self.opened: list[FakeConnection] = []
        self.connect_args: list = []
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            self.connect_args.append((args, kwargs))
        if self.error is not None:
            raise self.error
        conn = self.make()
        with self._lock:
            self.opened.append(conn)
        return conn


# ── Backends ──────────────────────────────────────────────


class FakeBackend:
    """Stands in for a pooled PostgreSQL backend."""

    paramstyle = Convention.FORMAT

    def __init__(self, name: str, rows=None, error: Optional[BaseException] = None):
        self.name = name
        self.rows = rows if rows is not None else []
        self.error = error
        self.calls: list = []
        self.pings = 0
        self.closed = False

    def run(self, query, params=None):
        self.calls.append((query, list(params or [])))
        if self.error is not None:
            raise self.error
        return list(self.rows)

    def ping(self):
        self.pings += 1
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


class InMemoryRecords(FakeBackend):
    """
    Just enough of the records schema to drive the case workflow.

    Statements are matched on their (already normalized) text. The UNIQUE
    constraint on cases.fir_no is enforced under a lock, like the server does.
    """

    def __init__(self, stations=None, officers=None, now: Optional[datetime] = None):
        super().__init__("memory")
        self.stations: dict[int, str] = dict(stations or {})
        self.officers: dict[int, int] = dict(officers or {})
        self.cases: list[dict] = []
        self.track_records: list[dict] = []
        self.now = now or datetime(2026, 3, 14, 10, 30)
        self.on_count: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    def add_case(self, fir_no: str, station_id: int, registered: Optional[datetime] = None):
        with self._lock:
            self.cases.append({
                "case_id": len(self.cases) + 1,
                "fir_no": fir_no,
                "station_id": station_id,
                "fir_date_time": registered or self.now,
            })

    def run(self, query, params=None):
        params = list(params or [])
        self.calls.append((query, params))
        sql = " ".join(query.split())

        if sql.startswith("SELECT station_code FROM police_stations"):
            code = self.stations.get(params[0])
            return [{"station_code": code}] if code else []

        if sql.startswith("SELECT COUNT(*) AS count FROM cases"):
            station_id, year = params
            with self._lock:
                count = sum(
                    1 for c in self.cases
                    if c["station_id"] == station_id and c["fir_date_time"].year == year
                )
            if self.on_count is not None:
                self.on_count()
            return [{"count": count}]

        if sql.startswith("SELECT case_id FROM cases WHERE fir_no"):
            with self._lock:
                return [{"case_id": c["case_id"]} for c in self.cases if c["fir_no"] == params[0]]

        if sql.startswith("SELECT id FROM officers WHERE station_id"):
            ids = sorted(oid for oid, sid in self.officers.items() if sid == params[0])
            return [{"id": ids[0]}] if ids else []

        if sql.startswith("INSERT INTO cases"):
            fir_no, station_id = params[0], params[1]
            with self._lock:
                if any(c["fir_no"] == fir_no for c in self.cases):
                    raise FakePgError(
                        'duplicate key value violates unique constraint "cases_fir_no_key"',
                        "23505",
                    )
                case_id = len(self.cases) + 1
                self.cases.append({
                    "case_id": case_id,
                    "fir_no": fir_no,
                    "station_id": station_id,
                    "officer_id": params[2],
                    "fir_date_time": self.now,
                })
            return [{"case_id": case_id}]

        if sql.startswith("INSERT INTO fir_track_records"):
            self.track_records.append({"case_id": params[0], "description": params[2]})
            return []

        raise AssertionError(f"Unexpected statement: {sql}")


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def warnings_state():
    return WarningState()


@pytest.fixture
def records():
    return InMemoryRecords(stations={1: "KTM", 2: "PKR"}, officers={7: 1, 9: 2})


@pytest.fixture
def records_db(records):
    return Database(FailoverRouter(None, records, WarningState()))


@pytest.fixture
def officer():
    return SessionUser(id=11, username="officer.ram", role=Role.OFFICER, station_id=1, officer_id=7)


@pytest.fixture
def station_admin():
    return SessionUser(id=12, username="sadmin.sita", role=Role.STATION_ADMIN, station_id=1)


@pytest.fixture
def admin():
    return SessionUser(id=1, username="admin", role=Role.ADMIN)


@pytest.fixture
def factory(monkeypatch):
    """Route ``psycopg2.connect`` (as called by the pool) to fake connections."""
    fake = ConnectionFactory()
    monkeypatch.setattr(psycopg2, "connect", fake)
    return fake
