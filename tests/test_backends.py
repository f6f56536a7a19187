"""Tests for running statements on a pooled backend."""

import pytest

from conftest import FakeConnection, FakePgError
from db.backends import Backend, FallbackBackend, PrimaryBackend
from db.pool import ConnectionPool


@pytest.fixture
def make_backend(factory):
    backends = []

    def make(**conn_kwargs):
        factory.make = lambda: FakeConnection(**conn_kwargs)
        backend = Backend("test", ConnectionPool("test", max_size=2, idle_timeout_ms=60000))
        backends.append(backend)
        return backend

    yield make
    for backend in backends:
        backend.close()


def test_run_returns_rows_and_commits(make_backend, factory):
    backend = make_backend(rows=[{"case_id": 1, "fir_no": "KTM/2026/0001"}])
    rows = backend.run("SELECT case_id, fir_no FROM cases WHERE station_id = %s", [1])

    assert rows == [{"case_id": 1, "fir_no": "KTM/2026/0001"}]
    conn = factory.opened[0]
    assert conn.statements == [("SELECT case_id, fir_no FROM cases WHERE station_id = %s", (1,))]
    assert conn.commits == 1


def test_statement_without_result_set_returns_empty_list(make_backend):
    backend = make_backend(returns_rows=False)
    assert backend.run("UPDATE cases SET case_status = %s", ["Closed"]) == []


def test_no_params_are_passed_as_none(make_backend, factory):
    backend = make_backend(rows=[{"?column?": 1}])
    backend.ping()
    assert factory.opened[0].statements == [("SELECT 1", None)]


def test_failure_rolls_back_and_keeps_connection(make_backend, factory):
    backend = make_backend(fail_with=FakePgError('relation "casez" does not exist', "42P01"))

    with pytest.raises(FakePgError):
        backend.run("SELECT * FROM casez")

    conn = factory.opened[0]
    assert conn.rollbacks == 1
    assert conn.commits == 0
    assert backend.pool.idle_count == 1


def test_dropped_connection_is_discarded(make_backend, factory):
    error = FakePgError("terminating connection due to administrator command", "57P01")
    backend = make_backend(fail_with=error, drop_on_failure=True)

    with pytest.raises(FakePgError):
        backend.run("SELECT 1")

    assert backend.pool.idle_count == 0
    assert factory.opened[0].rollbacks == 0


def test_primary_requires_tls_when_asked(factory):
    backend = PrimaryBackend.from_dsn("postgresql://db.example.com/records", require_tls=True, connect_timeout=3)
    backend.ping()
    args, kwargs = factory.connect_args[0]
    assert args == ("postgresql://db.example.com/records",)
    assert kwargs == {"connect_timeout": 3, "sslmode": "require"}
    backend.close()


def test_fallback_connects_with_discrete_settings(factory):
    backend = FallbackBackend.from_params("localhost", 5432, "postgres", "admin", "national_crime_records")
    backend.ping()
    _, kwargs = factory.connect_args[0]
    assert kwargs["dbname"] == "national_crime_records"
    assert kwargs["host"] == "localhost"
    backend.close()
