"""
repositories/base.py
--------------------
Shared plumbing: every repository talks to the database facade, never to a
pool or connection.
"""

from typing import Optional

from db.connection import Database, get_database


class BaseRepository:
    """Holds an optional injected facade; defaults to the process-wide one."""

    def __init__(self, db: Optional[Database] = None):
        self._db = db

    @property
    def db(self) -> Database:
        return self._db or get_database()
