"""Tests for the query execution facade."""

import pytest

from conftest import FakeBackend, FakePgError, auth_failed, connection_refused
from db import connection
from db.connection import Database
from db.router import FailoverRouter, WarningState
from errors import BackendUnavailable, QueryRejected


def make_db(primary=None, fallback=None):
    fallback = fallback or FakeBackend("fallback")
    return Database(FailoverRouter(primary, fallback, WarningState())), fallback


def test_execute_returns_all_rows():
    db, _ = make_db(fallback=FakeBackend("fallback", rows=[{"id": 1}, {"id": 2}]))
    assert db.execute("SELECT id FROM persons") == [{"id": 1}, {"id": 2}]


def test_query_one_returns_first_row():
    db, _ = make_db(fallback=FakeBackend("fallback", rows=[{"id": 1}, {"id": 2}]))
    assert db.query_one("SELECT id FROM persons WHERE station_id = ?", [1]) == {"id": 1}


def test_query_one_returns_none_on_zero_matches():
    db, _ = make_db()
    assert db.query_one("SELECT id FROM persons WHERE national_id = ?", ["X-1"]) is None


@pytest.mark.parametrize("query,params", [
    ("SELECT * FROM cases WHERE fir_no = ?", []),
    ("SELECT * FROM cases WHERE fir_no = ?", ["A", "B"]),
    ("SELECT * FROM cases", [1]),
])
def test_parameter_count_mismatch_is_rejected_before_the_backend(query, params):
    db, fallback = make_db()
    with pytest.raises(QueryRejected):
        db.execute(query, params)
    assert fallback.calls == []


def test_placeholder_inside_literal_is_not_a_parameter():
    db, fallback = make_db()
    db.execute("SELECT * FROM cases WHERE summary = 'who?' AND station_id = ?", [1])
    assert fallback.calls == [("SELECT * FROM cases WHERE summary = 'who?' AND station_id = %s", [1])]


def test_backend_rejection_carries_sqlstate():
    db, _ = make_db(fallback=FakeBackend("fallback", error=FakePgError("syntax error", "42601")))
    with pytest.raises(QueryRejected) as exc_info:
        db.execute("SELEC 1")
    assert exc_info.value.sqlstate == "42601"
    assert exc_info.value.to_result() == {
        "success": False,
        "kind": "query_rejected",
        "message": "syntax error",
    }


def test_misconfigured_primary_is_rejected_without_fallback():
    db, fallback = make_db(primary=FakeBackend("primary", error=auth_failed()))
    with pytest.raises(QueryRejected, match="password authentication failed"):
        db.execute("SELECT 1")
    assert fallback.calls == []


def test_both_backends_unreachable():
    db, _ = make_db(
        primary=FakeBackend("primary", error=connection_refused()),
        fallback=FakeBackend("fallback", error=connection_refused()),
    )
    with pytest.raises(BackendUnavailable):
        db.execute("SELECT 1")


def test_structured_errors_pass_through():
    error = BackendUnavailable("Database 'fallback' is unreachable")
    db, _ = make_db(fallback=FakeBackend("fallback", error=error))
    with pytest.raises(BackendUnavailable) as exc_info:
        db.execute("SELECT 1")
    assert exc_info.value is error


def test_get_database_before_init(monkeypatch):
    monkeypatch.setattr(connection, "_database", None)
    with pytest.raises(RuntimeError, match="init_pool"):
        connection.get_database()
